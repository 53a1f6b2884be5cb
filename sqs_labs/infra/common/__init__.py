"""Common infrastructure utilities."""
from sqs_labs.infra.common.config import (
    load_env_file,
    load_merged_config,
    merged_config,
)
from sqs_labs.infra.common.logger import setup_logging, get_logger
from sqs_labs.infra.common.errors import (
    SqsLabsError,
    ConfigError,
    MissingRootConfigError,
    InvalidConfigError,
    QueueNameRequiredError,
    QueueNotFoundError,
    FifoMismatchError,
    FifoGroupRequiredError,
    AttributeParseError,
    ExternalServiceError,
)

__all__ = [
    "load_env_file",
    "load_merged_config",
    "merged_config",
    "setup_logging",
    "get_logger",
    "SqsLabsError",
    "ConfigError",
    "MissingRootConfigError",
    "InvalidConfigError",
    "QueueNameRequiredError",
    "QueueNotFoundError",
    "FifoMismatchError",
    "FifoGroupRequiredError",
    "AttributeParseError",
    "ExternalServiceError",
]
