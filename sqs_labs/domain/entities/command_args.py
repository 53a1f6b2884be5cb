"""Command-line argument entities."""
from pydantic import BaseModel


DEFAULT_ROOT_CONFIG = "config.toml"


class CommonArgs(BaseModel):
    """Flags shared by every command."""
    config: str = DEFAULT_ROOT_CONFIG
    lab_config: str | None = None
    queue_name: str | None = None
