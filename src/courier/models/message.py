"""Message envelopes exchanged with pub-sub backends."""

from dataclasses import dataclass, field


@dataclass
class Message:
    """Message data container matching GCP Pub/Sub structure."""

    data: bytes
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class ReceivedMessage:
    """Pulled message together with the handle used to ack or nack it."""

    message: Message
    ack_id: str
