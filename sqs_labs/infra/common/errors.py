"""Centralized error types."""


class SqsLabsError(Exception):
    """Base exception for sqs-labs errors."""
    pass


class ConfigError(SqsLabsError):
    """Configuration error."""
    pass


class MissingRootConfigError(ConfigError):
    """Root config file does not exist."""
    pass


class InvalidConfigError(ConfigError):
    """Config could not be parsed or does not match the schema."""
    pass


class QueueNameRequiredError(SqsLabsError):
    """No queue name on the command line or in config."""
    pass


class QueueNotFoundError(SqsLabsError):
    """Queue does not exist in the queue service."""

    def __init__(self, queue_name: str):
        self.queue_name = queue_name
        super().__init__(f"Queue '{queue_name}' not found")


class FifoMismatchError(SqsLabsError):
    """Queue name suffix and FIFO flag disagree."""
    pass


class FifoGroupRequiredError(SqsLabsError):
    """FIFO send without a MessageGroupId."""
    pass


class AttributeParseError(SqsLabsError):
    """Malformed key=value attribute."""
    pass


class ExternalServiceError(SqsLabsError):
    """Queue service call failed."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
