"""SQS client adapter."""
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqs_labs.domain.entities.app_config import AppConfig
from sqs_labs.domain.entities.message import ReceivedMessage, SendResult
from sqs_labs.infra.common import get_logger
from sqs_labs.infra.common.errors import ExternalServiceError, QueueNotFoundError

logger = get_logger(__name__)

LOCALSTACK_ACCESS_KEY = "test"
LOCALSTACK_SECRET_KEY = "test"

_QUEUE_MISSING_CODES = {
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _wrap(operation: str, error: Exception) -> ExternalServiceError:
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message") or str(error)
        return ExternalServiceError(operation, f"{_error_code(error)}: {message}")
    return ExternalServiceError(operation, str(error))


class SQSClient:
    """SQS adapter."""

    def __init__(
        self,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        use_static_credentials: bool = False,
    ):
        """
        Initialize SQS client.

        Args:
            region: AWS region (defaults to boto3 default)
            endpoint_url: Custom endpoint (e.g., LocalStack)
            use_static_credentials: Use dummy credentials instead of the
                profile/SSO chain
        """
        client_kwargs = {"region_name": region}
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        if use_static_credentials:
            client_kwargs["aws_access_key_id"] = LOCALSTACK_ACCESS_KEY
            client_kwargs["aws_secret_access_key"] = LOCALSTACK_SECRET_KEY
        self.sqs_client = boto3.client("sqs", **client_kwargs)

    def get_queue_url(self, queue_name: str) -> str:
        """
        Look up a queue URL by name.

        Raises:
            QueueNotFoundError: If the queue does not exist
            ExternalServiceError: On any other failure
        """
        try:
            response = self.sqs_client.get_queue_url(QueueName=queue_name)
        except ClientError as e:
            if _error_code(e) in _QUEUE_MISSING_CODES:
                raise QueueNotFoundError(queue_name) from e
            raise _wrap(f"getting queue url for {queue_name}", e) from e
        except BotoCoreError as e:
            raise _wrap(f"getting queue url for {queue_name}", e) from e

        url = response.get("QueueUrl")
        if not url:
            raise ExternalServiceError("get_queue_url", "queue url missing in response")
        return url

    def create_queue(self, queue_name: str, attributes: Optional[dict[str, str]] = None) -> str:
        """
        Create a queue and return its URL.

        Args:
            queue_name: Queue name
            attributes: CreateQueue attributes (FifoQueue, VisibilityTimeout, ...)
        """
        params = {"QueueName": queue_name}
        if attributes:
            params["Attributes"] = attributes

        try:
            response = self.sqs_client.create_queue(**params)
        except (ClientError, BotoCoreError) as e:
            raise _wrap(f"creating queue {queue_name}", e) from e

        url = response.get("QueueUrl")
        if not url:
            raise ExternalServiceError("create_queue", "queue url missing after create")
        return url

    def send_message(
        self,
        queue_url: str,
        body: str,
        message_attributes: Optional[dict[str, dict[str, str]]] = None,
        message_group_id: Optional[str] = None,
        message_deduplication_id: Optional[str] = None,
    ) -> SendResult:
        """
        Send one message.

        Args:
            queue_url: Queue URL
            body: Message body
            message_attributes: User attributes in SQS wire shape
            message_group_id: MessageGroupId for FIFO queues (optional)
            message_deduplication_id: MessageDeduplicationId for FIFO queues (optional)

        Returns:
            SendResult with message id and, for FIFO, the sequence number
        """
        params = {
            "QueueUrl": queue_url,
            "MessageBody": body,
        }

        if message_attributes:
            params["MessageAttributes"] = message_attributes
        if message_group_id is not None:
            params["MessageGroupId"] = message_group_id
        if message_deduplication_id is not None:
            params["MessageDeduplicationId"] = message_deduplication_id

        try:
            response = self.sqs_client.send_message(**params)
        except (ClientError, BotoCoreError) as e:
            raise _wrap("sending message", e) from e

        return SendResult(
            message_id=response.get("MessageId", "unknown"),
            md5_of_body=response.get("MD5OfMessageBody"),
            sequence_number=response.get("SequenceNumber"),
        )

    def receive_message(
        self,
        queue_url: str,
        max_count: int = 1,
        wait_secs: int = 0,
        with_attributes: bool = False,
    ) -> list[ReceivedMessage]:
        """
        Long-poll for messages.

        Args:
            queue_url: Queue URL
            max_count: Maximum messages to return (1-10)
            wait_secs: Long-poll wait time in seconds
            with_attributes: Request all system and user attributes

        Returns:
            Received messages (possibly empty)
        """
        params = {
            "QueueUrl": queue_url,
            "MaxNumberOfMessages": max_count,
            "WaitTimeSeconds": wait_secs,
        }
        if with_attributes:
            params["AttributeNames"] = ["All"]
            params["MessageAttributeNames"] = ["All"]

        try:
            response = self.sqs_client.receive_message(**params)
        except (ClientError, BotoCoreError) as e:
            raise _wrap("receiving message", e) from e

        return [ReceivedMessage.from_response(raw) for raw in response.get("Messages", [])]

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete a received message by receipt handle."""
        try:
            self.sqs_client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)
        except (ClientError, BotoCoreError) as e:
            raise _wrap("deleting message", e) from e

    def purge_queue(self, queue_url: str) -> None:
        """Delete every message in the queue."""
        try:
            self.sqs_client.purge_queue(QueueUrl=queue_url)
        except (ClientError, BotoCoreError) as e:
            raise _wrap("purging queue", e) from e

    def delete_queue(self, queue_url: str) -> None:
        """Delete the queue itself."""
        try:
            self.sqs_client.delete_queue(QueueUrl=queue_url)
        except (ClientError, BotoCoreError) as e:
            raise _wrap("deleting queue", e) from e

    def get_queue_attributes(self, queue_url: str) -> dict[str, str]:
        """Fetch all queue attributes."""
        try:
            response = self.sqs_client.get_queue_attributes(
                QueueUrl=queue_url,
                AttributeNames=["All"],
            )
        except (ClientError, BotoCoreError) as e:
            raise _wrap("get_queue_attributes", e) from e
        return response.get("Attributes", {})


def build_sqs_client(cfg: AppConfig) -> SQSClient:
    """
    Build an SQS client from merged config.

    Local mode or an explicit endpoint switches to static dummy
    credentials so no profile/SSO resolution happens.
    """
    use_static = cfg.uses_local_endpoint
    logger.debug(
        "Building SQS client: region=%s endpoint=%s static_credentials=%s",
        cfg.runtime.region,
        cfg.sqs.endpoint_url,
        use_static,
    )
    return SQSClient(
        region=cfg.runtime.region,
        endpoint_url=cfg.sqs.endpoint_url,
        use_static_credentials=use_static,
    )
