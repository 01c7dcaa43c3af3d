"""Protocols describing the external pub-sub service the adapter delegates to."""

from typing import Protocol, Optional, runtime_checkable

from courier.models.message import Message, ReceivedMessage
from courier.models.request import PullRequest


@runtime_checkable
class BatchPublisher(Protocol):
    """Background publisher owned by a topic; buffers and flushes on its own."""

    def publish(self, message: Message) -> None:
        """Enqueue a message without waiting for it to be sent."""
        ...


@runtime_checkable
class Subscription(Protocol):
    """A named subscription attached to a topic."""

    name: str

    def exists(self) -> bool:
        """Return whether the subscription exists on the service."""
        ...

    def create(self) -> None:
        """Create the subscription on the service."""
        ...

    def pull(self, request: PullRequest, timeout: Optional[float] = None) -> list[ReceivedMessage]:
        """
        Pull messages from the subscription.

        Args:
            request: Pull request with max_messages
            timeout: Timeout in seconds, or None to wait according to the
                service's own pull semantics

        Returns:
            Received messages in delivery order (possibly empty)
        """
        ...

    def acknowledge(self, message: ReceivedMessage) -> None:
        """Acknowledge a single message."""
        ...

    def acknowledge_batch(self, messages: list[ReceivedMessage]) -> None:
        """Acknowledge several messages in one request."""
        ...

    def modify_ack_deadline(self, message: ReceivedMessage, seconds: int) -> None:
        """
        Change the acknowledgement deadline of a message.

        A deadline of 0 is a negative acknowledgement: the service redelivers
        the message immediately.
        """
        ...


@runtime_checkable
class Topic(Protocol):
    """A named topic on the pub-sub service."""

    name: str

    def exists(self) -> bool:
        """Return whether the topic exists on the service."""
        ...

    def create(self) -> None:
        """Create the topic on the service."""
        ...

    def publish(self, message: Message) -> None:
        """Publish one message synchronously."""
        ...

    def publish_batch(self, messages: list[Message]) -> None:
        """Publish several messages as one request, preserving order."""
        ...

    def batch_publisher(self) -> BatchPublisher:
        """Return the topic's background batch publisher."""
        ...

    def subscription(self, name: str) -> Subscription:
        """Return a handle to the named subscription on this topic."""
        ...


@runtime_checkable
class PubSubClient(Protocol):
    """Entry point of a pub-sub backend."""

    def topic(self, name: str) -> Topic:
        """Return a handle to the named topic. Does not contact the service."""
        ...

    def close(self) -> None:
        """Flush pending publishes and release connections to the service."""
        ...
