"""Long-poll receive loop."""
from typing import Optional

from sqs_labs.domain.entities.message import ReceivedMessage
from sqs_labs.infra.common.errors import ExternalServiceError
from sqs_labs.use_cases.context import AppContext


def _print_attributes(ctx: AppContext, tag: str, message: ReceivedMessage) -> None:
    if not message.attributes:
        ctx.echo(f"[{tag}] system: (none)")
    for key, value in message.attributes.items():
        ctx.echo(f"[{tag}] system: {key}={value}")

    if not message.message_attributes:
        ctx.echo(f"[{tag}] attrs: (none)")
    for key, attr in message.message_attributes.items():
        if attr.string_value is not None:
            ctx.echo(f"[{tag}] attrs: {key}({attr.data_type})={attr.string_value!r}")
        else:
            ctx.echo(f"[{tag}] attrs: {key}({attr.data_type})")


def _settle(ctx: AppContext, tag: str, queue_url: str, message: ReceivedMessage, no_delete: bool) -> bool:
    """Delete a handled message. Returns True if it was deleted."""
    if no_delete:
        ctx.logger.warning("--no-delete set; not deleting message_id=%s", message.message_id)
        return False

    if not message.receipt_handle:
        ctx.logger.warning("missing receipt_handle; cannot delete message_id=%s", message.message_id)
        return False

    ctx.echo(f"[{tag}] deleting...")
    try:
        ctx.client.delete_message(queue_url, message.receipt_handle)
    except ExternalServiceError as e:
        ctx.logger.warning("delete failed for message_id=%s: %s", message.message_id, e)
        return False

    ctx.echo(f"[{tag}] deleted message_id={message.message_id}")
    return True


def run_receive_loop(
    ctx: AppContext,
    queue_name: str,
    no_delete: bool = False,
    with_attributes: bool = False,
    max_polls: Optional[int] = None,
) -> int:
    """
    Poll one message at a time until interrupted.

    Args:
        ctx: Command context
        queue_name: Queue to read from
        no_delete: Leave messages on the queue (observe redelivery)
        with_attributes: Request and print system and user attributes
        max_polls: Stop after this many receive calls (None runs forever)

    Returns:
        Number of messages received

    Raises:
        ExternalServiceError: If a receive call fails
    """
    tag = "recv_attrs" if with_attributes else "recv"
    cfg = ctx.config
    url = ctx.client.get_queue_url(queue_name)
    wait_secs = cfg.recv_wait_secs()

    ctx.echo(
        f"[{tag}] region={cfg.runtime.region} queue={queue_name} mode={cfg.runtime.mode.value} "
        f"wait={wait_secs}s delete={str(not no_delete).lower()}"
    )
    ctx.echo(f"[{tag}] waiting for messages... (Ctrl+C to stop)")

    received = 0
    polls = 0
    while max_polls is None or polls < max_polls:
        polls += 1
        messages = ctx.client.receive_message(
            url,
            max_count=1,
            wait_secs=wait_secs,
            with_attributes=with_attributes,
        )
        if not messages:
            continue

        for message in messages:
            received += 1
            ctx.echo(f"[{tag}] received: message_id={message.message_id} body={message.body!r}")
            if with_attributes:
                _print_attributes(ctx, tag, message)
            _settle(ctx, tag, url, message, no_delete)

    return received
