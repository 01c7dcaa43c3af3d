"""Publisher capability protocol."""

from typing import Protocol, runtime_checkable

from courier.models.message import Message
from courier.protocols.client import Topic


@runtime_checkable
class MessagePublisher(Protocol):
    """Strategy used by the adapter to hand serialized messages to a topic."""

    def publish(self, topic: Topic, message: Message) -> None:
        """
        Publish one message to a topic.

        Args:
            topic: Resolved topic handle
            message: Serialized message
        """
        ...

    def publish_batch(self, topic: Topic, messages: list[Message]) -> None:
        """
        Publish several messages to a topic, preserving their order.

        Args:
            topic: Resolved topic handle
            messages: Serialized messages
        """
        ...
