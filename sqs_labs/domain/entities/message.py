"""Queue message entities."""
from pydantic import BaseModel, Field


class SendResult(BaseModel):
    """Result of a SendMessage call."""
    message_id: str
    md5_of_body: str | None = None
    sequence_number: str | None = None
    """Only set for FIFO queues."""


class MessageAttribute(BaseModel):
    """User-defined message attribute."""
    data_type: str
    string_value: str | None = None
    binary_value: bytes | None = None


class ReceivedMessage(BaseModel):
    """Message returned by ReceiveMessage."""
    message_id: str
    body: str = ""
    receipt_handle: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)
    """System attributes (SentTimestamp, SequenceNumber, MessageGroupId, ...)."""
    message_attributes: dict[str, MessageAttribute] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, raw: dict) -> "ReceivedMessage":
        """Build from one entry of a boto3 ``Messages`` list."""
        user_attrs = {
            name: MessageAttribute(
                data_type=value.get("DataType", "String"),
                string_value=value.get("StringValue"),
                binary_value=value.get("BinaryValue"),
            )
            for name, value in (raw.get("MessageAttributes") or {}).items()
        }
        return cls(
            message_id=raw.get("MessageId", "unknown"),
            body=raw.get("Body", ""),
            receipt_handle=raw.get("ReceiptHandle"),
            attributes=raw.get("Attributes") or {},
            message_attributes=user_attrs,
        )
