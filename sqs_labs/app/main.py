"""CLI entry points."""
from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from sqs_labs.domain.entities.command_args import DEFAULT_ROOT_CONFIG, CommonArgs
from sqs_labs.domain.services.queue_service import require_queue_name, resolve_body
from sqs_labs.infra.common import (
    SqsLabsError,
    get_logger,
    load_env_file,
    merged_config,
    setup_logging,
)
from sqs_labs.infra.sqs_client import build_sqs_client
from sqs_labs.use_cases.context import AppContext
from sqs_labs.use_cases.maintenance import (
    bootstrap_queue,
    delete_queue as delete_queue_use_case,
    purge_queue,
    show_attributes,
)
from sqs_labs.use_cases.receive_loop import run_receive_loop
from sqs_labs.use_cases.send_message import send_basic, send_fifo as send_fifo_use_case, send_with_attributes

SHARED_LAB_CONFIG = "config/labs/shared.toml"
FIFO_LAB_CONFIG = "config/labs/lab2_message_attributes_fifo.toml"

logger = get_logger("sqs_labs")

app = typer.Typer(help="Small utilities for exercising SQS queues.", no_args_is_help=True)

CONFIG_OPTION = typer.Option(DEFAULT_ROOT_CONFIG, "--config", help="Path to the root config (required)")
LAB_CONFIG_OPTION = typer.Option(
    None, "--lab-config", help="Path to the lab-scoped config (defaults to the command's lab file)"
)
QUEUE_NAME_OPTION = typer.Option(None, "--queue-name", help="Ad-hoc override for the queue name")
MSG_OPTION = typer.Option(None, "--msg", help='Message body (use --msg "text") or provide as positional')
MESSAGE_ARGUMENT = typer.Argument(None, help="Positional message fallback")
NO_DELETE_OPTION = typer.Option(
    False, "--no-delete", help="Do not delete messages after receiving (observe redelivery)"
)


def _build_context(
    config: str,
    lab_config: Optional[str],
    queue_name: Optional[str],
    default_lab_config: str,
) -> tuple[AppContext, str]:
    """Startup sequence shared by all commands: logging, config, client, queue name."""
    load_env_file()
    setup_logging()

    common = CommonArgs(config=config, lab_config=lab_config, queue_name=queue_name)
    cfg = merged_config(common, default_lab_config)
    client = build_sqs_client(cfg)
    qname = require_queue_name(common.queue_name, cfg)

    ctx = AppContext(config=cfg, client=client, logger=logger, echo=typer.echo)
    return ctx, qname


@contextmanager
def _exit_on_error() -> Iterator[None]:
    try:
        yield
    except SqsLabsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command("send")
def send(
    msg: Optional[str] = MSG_OPTION,
    message: Optional[str] = MESSAGE_ARGUMENT,
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Send a single message."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        send_basic(ctx, qname, resolve_body(msg, message, "hello world"))


@app.command("recv")
def recv(
    no_delete: bool = NO_DELETE_OPTION,
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Receive messages until interrupted, deleting each one."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        run_receive_loop(ctx, qname, no_delete=no_delete)


@app.command("send-fifo")
def send_fifo(
    group: str = typer.Option(..., "--group", metavar="GROUP", help="FIFO MessageGroupId (required)"),
    dedup: Optional[str] = typer.Option(
        None, "--dedup", metavar="DEDUP_ID", help="Optional MessageDeduplicationId"
    ),
    msg: Optional[str] = MSG_OPTION,
    message: Optional[str] = MESSAGE_ARGUMENT,
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Send to a FIFO queue (name must end with .fifo)."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, FIFO_LAB_CONFIG)
        send_fifo_use_case(ctx, qname, resolve_body(msg, message, "hello"), group=group, dedup=dedup)


@app.command("send-attrs")
def send_attrs(
    attr: Optional[list[str]] = typer.Option(
        None,
        "--attr",
        help="Add attribute as key=value (repeatable), e.g. --attr event_type=user.created",
    ),
    group: Optional[str] = typer.Option(
        None, "--group", metavar="GROUP", help="For FIFO queues: MessageGroupId"
    ),
    dedup: Optional[str] = typer.Option(
        None, "--dedup", metavar="DEDUP_ID", help="For FIFO queues: MessageDeduplicationId (optional)"
    ),
    msg: Optional[str] = MSG_OPTION,
    message: Optional[str] = MESSAGE_ARGUMENT,
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Send a message with String attributes."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, FIFO_LAB_CONFIG)
        send_with_attributes(
            ctx,
            qname,
            resolve_body(msg, message, "hello"),
            attrs=attr or [],
            group=group,
            dedup=dedup,
        )


@app.command("recv-attrs")
def recv_attrs(
    no_delete: bool = NO_DELETE_OPTION,
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Receive messages and print system and user attributes."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, FIFO_LAB_CONFIG)
        run_receive_loop(ctx, qname, no_delete=no_delete, with_attributes=True)


@app.command("purge")
def purge(
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Purge all messages from the queue."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        purge_queue(ctx, qname)


@app.command("bootstrap")
def bootstrap(
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Create the queue if missing and print its attributes."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        bootstrap_queue(ctx, qname)


@app.command("attrs")
def attrs(
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Print all queue attributes."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        show_attributes(ctx, qname)


@app.command("delete-queue")
def delete_queue(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
    config: str = CONFIG_OPTION,
    lab_config: Optional[str] = LAB_CONFIG_OPTION,
    queue_name: Optional[str] = QUEUE_NAME_OPTION,
):
    """Delete the queue."""
    with _exit_on_error():
        ctx, qname = _build_context(config, lab_config, queue_name, SHARED_LAB_CONFIG)
        if not yes:
            typer.confirm(f"Delete queue {qname}?", abort=True)
        delete_queue_use_case(ctx, qname)


def send_main():
    typer.run(send)


def recv_main():
    typer.run(recv)


def send_fifo_main():
    typer.run(send_fifo)


def send_attrs_main():
    typer.run(send_attrs)


def recv_attrs_main():
    typer.run(recv_attrs)


def purge_main():
    typer.run(purge)


def bootstrap_main():
    typer.run(bootstrap)


def attrs_main():
    typer.run(attrs)


def delete_queue_main():
    typer.run(delete_queue)


if __name__ == "__main__":
    app()
