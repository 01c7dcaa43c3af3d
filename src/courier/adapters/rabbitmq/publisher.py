"""RabbitMQ topic: a durable fanout exchange."""

from typing import TYPE_CHECKING

import pika

from courier.adapters.rabbitmq.subscriber import RabbitMQSubscription
from courier.models.message import Message

if TYPE_CHECKING:
    from courier.adapters.rabbitmq.client import RabbitMQPubSubClient

EXCHANGE_TYPE = "fanout"


class RabbitMQTopic:
    """
    RabbitMQ topic implementing the Topic protocol.

    RabbitMQ has no background batcher, so ``batch_publisher()`` returns the
    topic itself and batched messages are published inline.
    """

    def __init__(self, client: "RabbitMQPubSubClient", name: str):
        self.name = name
        self._client = client

    def exists(self) -> bool:
        return self._client.passive_declare_succeeds(
            lambda channel: channel.exchange_declare(exchange=self.name, passive=True)
        )

    def create(self) -> None:
        self._client.channel.exchange_declare(
            exchange=self.name,
            exchange_type=EXCHANGE_TYPE,
            durable=True,
        )

    def publish(self, message: Message) -> None:
        self._client.channel.basic_publish(
            exchange=self.name,
            routing_key="",
            body=message.data,
            properties=pika.BasicProperties(
                delivery_mode=2,  # Persistent
                headers=message.attributes or None,
            ),
        )

    def publish_batch(self, messages: list[Message]) -> None:
        for message in messages:
            self.publish(message)

    def batch_publisher(self) -> "RabbitMQTopic":
        return self

    def subscription(self, name: str) -> RabbitMQSubscription:
        return RabbitMQSubscription(self._client, name=name, exchange=self.name)
