"""Application configuration entity."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_RECV_WAIT_SECS = 10


class RuntimeMode(str, Enum):
    """Where the queue service lives."""
    LOCAL = "local"
    AWS = "aws"


class RuntimeConfig(BaseModel):
    """Runtime section."""
    model_config = ConfigDict(extra="ignore")

    mode: RuntimeMode
    region: str

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "remote":
                return RuntimeMode.AWS
        return value


class SqsConfig(BaseModel):
    """Queue section (``[sqs]`` in config files)."""
    model_config = ConfigDict(extra="ignore")

    queue_name: str | None = None
    endpoint_url: str | None = None
    visibility_timeout_secs: int | None = None
    fifo: bool | None = None
    """Unset means: infer from the ``.fifo`` name suffix."""
    content_based_dedup: bool | None = None


class RecvConfig(BaseModel):
    """Receive section."""
    model_config = ConfigDict(extra="ignore")

    wait_secs: int | None = None


class AppConfig(BaseModel):
    """Merged configuration for every command."""
    model_config = ConfigDict(extra="ignore")

    runtime: RuntimeConfig
    sqs: SqsConfig = Field(default_factory=SqsConfig)
    recv: RecvConfig = Field(default_factory=RecvConfig)

    def recv_wait_secs(self) -> int:
        """Long-poll wait for receive calls."""
        if self.recv.wait_secs is None:
            return DEFAULT_RECV_WAIT_SECS
        return self.recv.wait_secs

    @property
    def uses_local_endpoint(self) -> bool:
        """True when talking to LocalStack (local mode or explicit endpoint)."""
        return self.runtime.mode == RuntimeMode.LOCAL or self.sqs.endpoint_url is not None
