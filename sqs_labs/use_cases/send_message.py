"""Single-shot send commands."""
from typing import Optional

from sqs_labs.domain.entities.message import SendResult
from sqs_labs.domain.services.queue_service import (
    ensure_fifo_name,
    is_fifo_queue,
    parse_attrs,
    resolve_fifo_fields,
)
from sqs_labs.use_cases.context import AppContext


def send_basic(ctx: AppContext, queue_name: str, body: str) -> SendResult:
    """Send a plain message and print its id and body MD5."""
    url = ctx.client.get_queue_url(queue_name)
    result = ctx.client.send_message(url, body)

    md5 = result.md5_of_body or "unknown"
    ctx.logger.info("sent message_id=%s md5=%s", result.message_id, md5)
    ctx.echo(f"[send] sent message_id={result.message_id} md5={md5}")
    return result


def send_fifo(
    ctx: AppContext,
    queue_name: str,
    body: str,
    group: str,
    dedup: Optional[str] = None,
) -> SendResult:
    """
    Send to a FIFO queue.

    The queue name is checked before any call to the service.

    Raises:
        FifoMismatchError: If the queue name lacks the .fifo suffix
    """
    ensure_fifo_name(queue_name, command="send_fifo")

    url = ctx.client.get_queue_url(queue_name)
    result = ctx.client.send_message(
        url,
        body,
        message_group_id=group,
        message_deduplication_id=dedup,
    )

    seq = result.sequence_number or "-"
    ctx.echo(f"[send_fifo] sent message_id={result.message_id} sequence={seq}")
    return result


def send_with_attributes(
    ctx: AppContext,
    queue_name: str,
    body: str,
    attrs: list[str],
    group: Optional[str] = None,
    dedup: Optional[str] = None,
) -> SendResult:
    """
    Send with String user attributes; FIFO fields only when the queue is FIFO.

    Group/dedup ids given for a standard queue are dropped with a warning.

    Raises:
        AttributeParseError: If an --attr is not key=value
        FifoGroupRequiredError: If the queue is FIFO and no group is given
    """
    message_attributes = parse_attrs(attrs)

    fifo = is_fifo_queue(queue_name, ctx.config.sqs)
    group_id, dedup_id, ignored = resolve_fifo_fields(fifo, group, dedup)
    if ignored:
        ctx.logger.warning(
            "--group/--dedup ignored because %s is a Standard queue", queue_name
        )

    url = ctx.client.get_queue_url(queue_name)
    result = ctx.client.send_message(
        url,
        body,
        message_attributes=message_attributes,
        message_group_id=group_id,
        message_deduplication_id=dedup_id,
    )

    line = f"[send_attrs] sent message_id={result.message_id}"
    if fifo:
        line += f" sequence={result.sequence_number or '-'}"
    ctx.echo(line)
    return result
