"""RabbitMQ subscription: a durable queue bound to the topic exchange."""

from typing import TYPE_CHECKING, Optional

from courier.models.message import Message, ReceivedMessage
from courier.models.request import PullRequest

if TYPE_CHECKING:
    from courier.adapters.rabbitmq.client import RabbitMQPubSubClient

# Seconds without a new delivery after which a non-empty pull returns.
IDLE_TIMEOUT = 1.0

# basic.qos prefetch-count is a 16-bit field.
MAX_PREFETCH_COUNT = 65535


class RabbitMQSubscription:
    """
    RabbitMQ subscription implementing the Subscription protocol.

    Maps delivery_tag to ack_id for acknowledge() calls.
    """

    def __init__(self, client: "RabbitMQPubSubClient", name: str, exchange: str):
        self.name = name
        self._client = client
        self._exchange = exchange
        # Map ack_id (str) -> delivery_tag (int) for acknowledge
        self._pending_acks: dict[str, int] = {}

    def exists(self) -> bool:
        return self._client.passive_declare_succeeds(
            lambda channel: channel.queue_declare(queue=self.name, passive=True)
        )

    def create(self) -> None:
        channel = self._client.channel
        channel.queue_declare(queue=self.name, durable=True)
        channel.queue_bind(queue=self.name, exchange=self._exchange)

    def pull(self, request: PullRequest, timeout: Optional[float] = None) -> list[ReceivedMessage]:
        """
        Pull up to max_messages messages from the queue.

        Args:
            request: PullRequest with max_messages
            timeout: Seconds to wait for the first message; None waits
                indefinitely

        Returns:
            Received messages, possibly empty when a timeout is given
        """
        max_messages = request["max_messages"]
        channel = self._client.channel
        channel.basic_qos(prefetch_count=min(max_messages, MAX_PREFETCH_COUNT))

        received_messages: list[ReceivedMessage] = []

        for method, properties, body in channel.consume(
            queue=self.name,
            auto_ack=False,
            inactivity_timeout=timeout if timeout is not None else IDLE_TIMEOUT,
        ):
            if method is None:
                # Idle: return what we have, or keep blocking for the first message
                if received_messages or timeout is not None:
                    break
                continue

            ack_id = str(method.delivery_tag)
            self._pending_acks[ack_id] = method.delivery_tag

            received_messages.append(
                ReceivedMessage(
                    message=Message(data=body, attributes=dict(properties.headers or {})),
                    ack_id=ack_id,
                )
            )
            if len(received_messages) >= max_messages:
                break

        # Cancel consumer to allow reuse; unyielded prefetched messages are requeued
        channel.cancel()

        return received_messages

    def acknowledge(self, message: ReceivedMessage) -> None:
        delivery_tag = self._pending_acks.pop(message.ack_id, None)
        if delivery_tag is not None:
            self._client.channel.basic_ack(delivery_tag=delivery_tag)

    def acknowledge_batch(self, messages: list[ReceivedMessage]) -> None:
        for message in messages:
            self.acknowledge(message)

    def modify_ack_deadline(self, message: ReceivedMessage, seconds: int) -> None:
        """
        Nack the message when ``seconds`` is 0.

        RabbitMQ has no ack deadlines, so other values leave the message as is.
        """
        if seconds != 0:
            return
        delivery_tag = self._pending_acks.pop(message.ack_id, None)
        if delivery_tag is not None:
            self._client.channel.basic_nack(delivery_tag=delivery_tag, requeue=True)
