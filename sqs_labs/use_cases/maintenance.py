"""Queue bootstrap, inspection, purge and teardown."""
from sqs_labs.domain.services.queue_service import create_queue_attributes
from sqs_labs.infra.common.errors import ExternalServiceError, QueueNotFoundError
from sqs_labs.use_cases.context import AppContext


def print_queue_attributes(ctx: AppContext, queue_url: str) -> dict[str, str]:
    """Print every queue attribute as ``[attr] key = value``."""
    attributes = ctx.client.get_queue_attributes(queue_url)
    for key, value in attributes.items():
        ctx.echo(f"[attr] {key} = {value}")
    return attributes


def bootstrap_queue(ctx: AppContext, queue_name: str) -> str:
    """
    Ensure the queue exists, creating it from config when missing.

    Returns:
        Queue URL

    Raises:
        FifoMismatchError: If the queue must be created and name/flag disagree
    """
    try:
        url = ctx.client.get_queue_url(queue_name)
        ctx.logger.info("Queue already exists: %s", url)
    except QueueNotFoundError:
        ctx.logger.warning("Queue not found, creating: %s", queue_name)
        attributes = create_queue_attributes(queue_name, ctx.config.sqs)
        url = ctx.client.create_queue(queue_name, attributes)
        ctx.logger.info("Created queue: %s", url)

    try:
        print_queue_attributes(ctx, url)
    except ExternalServiceError as e:
        ctx.logger.warning("Could not read attributes for %s: %s", url, e)

    return url


def show_attributes(ctx: AppContext, queue_name: str) -> dict[str, str]:
    """Resolve a queue and print its attributes."""
    url = ctx.client.get_queue_url(queue_name)
    return print_queue_attributes(ctx, url)


def purge_queue(ctx: AppContext, queue_name: str) -> str:
    """
    Purge all messages from a queue.

    Raises:
        QueueNotFoundError: If the queue does not exist
    """
    url = ctx.client.get_queue_url(queue_name)
    ctx.client.purge_queue(url)
    ctx.logger.info("Purged queue: %s", url)
    ctx.echo(f"[purge] purged {url}")
    return url


def delete_queue(ctx: AppContext, queue_name: str) -> str:
    """
    Delete a queue.

    Raises:
        QueueNotFoundError: If the queue does not exist
    """
    url = ctx.client.get_queue_url(queue_name)
    ctx.client.delete_queue(url)
    ctx.logger.info("Deleted queue: %s", url)
    ctx.echo(f"[delete_queue] deleted {url}")
    return url
