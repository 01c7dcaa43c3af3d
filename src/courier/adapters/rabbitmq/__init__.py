"""RabbitMQ backend for courier."""

from courier.adapters.rabbitmq.client import RabbitMQPubSubClient
from courier.adapters.rabbitmq.publisher import RabbitMQTopic
from courier.adapters.rabbitmq.subscriber import RabbitMQSubscription

__all__ = ["RabbitMQPubSubClient", "RabbitMQSubscription", "RabbitMQTopic"]
