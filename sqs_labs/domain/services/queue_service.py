"""Queue naming, FIFO and message-building rules."""
from typing import Optional

from sqs_labs.domain.entities.app_config import AppConfig, SqsConfig
from sqs_labs.infra.common.errors import (
    AttributeParseError,
    FifoGroupRequiredError,
    FifoMismatchError,
    QueueNameRequiredError,
)


FIFO_SUFFIX = ".fifo"


def require_queue_name(cli_override: Optional[str], cfg: AppConfig) -> str:
    """
    Resolve the queue name: CLI flag first, then config.

    Raises:
        QueueNameRequiredError: If neither is set
    """
    if cli_override is not None:
        return cli_override
    if cfg.sqs.queue_name:
        return cfg.sqs.queue_name
    raise QueueNameRequiredError(
        "Queue name is required. Pass --queue-name or set [sqs].queue_name in the lab config."
    )


def has_fifo_suffix(queue_name: str) -> bool:
    return queue_name.endswith(FIFO_SUFFIX)


def is_fifo_queue(queue_name: str, sqs_cfg: SqsConfig) -> bool:
    """A queue is FIFO if its name says so or config flags it."""
    return has_fifo_suffix(queue_name) or bool(sqs_cfg.fifo)


def ensure_fifo_name(queue_name: str, command: str = "send_fifo") -> None:
    """
    Guard for FIFO-only commands.

    Raises:
        FifoMismatchError: If the name lacks the .fifo suffix
    """
    if not has_fifo_suffix(queue_name):
        raise FifoMismatchError(
            f"{command} requires a FIFO queue (name must end with {FIFO_SUFFIX}). Current: {queue_name}"
        )


def create_queue_attributes(queue_name: str, sqs_cfg: SqsConfig) -> dict[str, str]:
    """
    Build CreateQueue attributes from config.

    The name suffix and the ``fifo`` flag must agree: ``fifo=true``
    needs a ``.fifo`` name and a ``.fifo`` name cannot have ``fifo=false``.
    An unset flag follows the name.

    Raises:
        FifoMismatchError: If name and flag disagree
    """
    name_is_fifo = has_fifo_suffix(queue_name)
    cfg_fifo = sqs_cfg.fifo if sqs_cfg.fifo is not None else name_is_fifo

    attributes: dict[str, str] = {}
    if cfg_fifo:
        if not name_is_fifo:
            raise FifoMismatchError(
                f"fifo=true requires the queue name to end with {FIFO_SUFFIX} (got: {queue_name})"
            )
        attributes["FifoQueue"] = "true"
        if sqs_cfg.content_based_dedup:
            attributes["ContentBasedDeduplication"] = "true"
    elif name_is_fifo:
        raise FifoMismatchError(
            f"Queue name ends with {FIFO_SUFFIX} but fifo=false in config. "
            f"Either set fifo=true or rename the queue."
        )

    if sqs_cfg.visibility_timeout_secs is not None:
        attributes["VisibilityTimeout"] = str(sqs_cfg.visibility_timeout_secs)

    return attributes


def parse_attr(kv: str) -> tuple[str, str]:
    """
    Parse a ``key=value`` attribute; the value may itself contain ``=``.

    Raises:
        AttributeParseError: If there is no ``=`` or the key is empty
    """
    key, sep, value = kv.partition("=")
    if not sep:
        raise AttributeParseError(f"Invalid --attr '{kv}'. Use key=value.")
    if not key:
        raise AttributeParseError("Attribute key cannot be empty")
    return key, value


def parse_attrs(pairs: list[str]) -> dict[str, dict[str, str]]:
    """Parse repeated --attr flags into SQS String message attributes."""
    attributes: dict[str, dict[str, str]] = {}
    for kv in pairs:
        key, value = parse_attr(kv)
        attributes[key] = {"DataType": "String", "StringValue": value}
    return attributes


def resolve_fifo_fields(
    is_fifo: bool,
    group: Optional[str],
    dedup: Optional[str],
) -> tuple[Optional[str], Optional[str], bool]:
    """
    Decide which FIFO fields go into a send.

    Returns:
        (group_id, dedup_id, ignored) where ``ignored`` is True when FIFO
        flags were supplied for a standard queue and dropped

    Raises:
        FifoGroupRequiredError: If the queue is FIFO and no group is given
    """
    if is_fifo:
        if not group:
            raise FifoGroupRequiredError(
                "This queue is FIFO; --group <MessageGroupId> is required."
            )
        return group, dedup, False

    ignored = group is not None or dedup is not None
    return None, None, ignored


def resolve_body(msg: Optional[str], message: Optional[str], default: str) -> str:
    """Body from --msg, else the positional argument, else ``default``."""
    if msg is not None:
        return msg
    if message is not None:
        return message
    return default
