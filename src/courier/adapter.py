"""Channel-based publish/subscribe adapter over a managed pub-sub service."""

import logging
from typing import Any, Optional

from courier.consumer.message_consumer import MessageConsumer
from courier.models.message import Message
from courier.models.settings import DEFAULT_MAX_MESSAGES, AdapterSettings
from courier.naming import subscription_name
from courier.protocols.client import PubSubClient, Subscription, Topic
from courier.protocols.handler import MessageHandler
from courier.protocols.publisher import MessagePublisher
from courier.publishers import BufferedPublisher, ImmediatePublisher
from courier.serialization import serialize_message


class PubSubAdapter:
    """
    Publish and consume messages on named channels.

    Each channel maps to one topic on the backing service. Subscribers read
    from the subscription ``"{client_identifier}.{channel}"``: subscribers
    sharing a client identifier load-balance messages between them, while
    subscribers with different identifiers each receive every message.

    Topics and subscriptions are resolved on every call and created on demand
    unless auto-creation is disabled.
    """

    def __init__(
        self,
        client: PubSubClient,
        logger: Optional[logging.Logger] = None,
        client_identifier: Optional[str] = None,
        auto_create_topics: bool = True,
        auto_create_subscriptions: bool = True,
        background_batching: bool = False,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        always_ack: bool = True,
    ):
        """
        Initialize the adapter.

        Args:
            client: Backend client (Google Cloud, RabbitMQ, in-memory, ...)
            logger: Logger for handler failures; defaults to this module's logger
            client_identifier: Subscriber group name; ``"default"`` when unset
            auto_create_topics: Create missing topics on resolution
            auto_create_subscriptions: Create missing subscriptions on resolution
            background_batching: Publish through the topic's background batch
                publisher instead of waiting for each publish
            max_messages: Maximum messages pulled per iteration; must be positive
            always_ack: Acknowledge every message regardless of handler outcome

        Raises:
            pydantic.ValidationError: If a setting is invalid
        """
        self._client = client
        self._logger = logger or logging.getLogger(__name__)
        self._settings = AdapterSettings(
            client_identifier=client_identifier,
            auto_create_topics=auto_create_topics,
            auto_create_subscriptions=auto_create_subscriptions,
            background_batching=background_batching,
            max_messages=max_messages,
            always_ack=always_ack,
        )
        self._immediate_publisher = ImmediatePublisher()
        self._buffered_publisher = BufferedPublisher()

    @classmethod
    def from_settings(
        cls,
        client: PubSubClient,
        settings: AdapterSettings,
        logger: Optional[logging.Logger] = None,
    ) -> "PubSubAdapter":
        """Build an adapter from an ``AdapterSettings`` instance."""
        return cls(client, logger=logger, **settings.model_dump())

    @property
    def client(self) -> PubSubClient:
        """The backend client."""
        return self._client

    @property
    def settings(self) -> AdapterSettings:
        """The validated settings model backing the configuration properties."""
        return self._settings

    @property
    def client_identifier(self) -> Optional[str]:
        """
        Unique client identifier used when naming subscriptions.

        If all subscribers of a channel use the same identifier, messages
        load-balance across them. If they use different identifiers, every
        subscriber receives every message.
        """
        return self._settings.client_identifier

    @client_identifier.setter
    def client_identifier(self, value: Optional[str]) -> None:
        self._settings.client_identifier = value

    @property
    def auto_create_topics(self) -> bool:
        """Whether missing topics are created on resolution."""
        return self._settings.auto_create_topics

    @auto_create_topics.setter
    def auto_create_topics(self, value: bool) -> None:
        self._settings.auto_create_topics = value

    @property
    def auto_create_subscriptions(self) -> bool:
        """Whether missing subscriptions are created on resolution."""
        return self._settings.auto_create_subscriptions

    @auto_create_subscriptions.setter
    def auto_create_subscriptions(self, value: bool) -> None:
        self._settings.auto_create_subscriptions = value

    @property
    def background_batching(self) -> bool:
        """
        Whether publishes go through the backend's background batch publisher.

        Batched messages are buffered by the backend client and flushed
        asynchronously; the adapter does not wait for or observe their
        completion.
        """
        return self._settings.background_batching

    @background_batching.setter
    def background_batching(self, value: bool) -> None:
        self._settings.background_batching = value

    @property
    def max_messages(self) -> int:
        """Maximum number of messages pulled per iteration."""
        return self._settings.max_messages

    @max_messages.setter
    def max_messages(self, value: int) -> None:
        self._settings.max_messages = value

    @property
    def always_ack(self) -> bool:
        """Default ack policy for ``subscribe`` when ``check_response`` is not given."""
        return self._settings.always_ack

    @always_ack.setter
    def always_ack(self, value: bool) -> None:
        self._settings.always_ack = value

    def subscribe(
        self,
        channel: str,
        handler: MessageHandler,
        check_response: Optional[bool] = None,
    ) -> None:
        """
        Subscribe a handler to a channel.

        Blocks the calling thread, invoking ``handler`` with each decoded
        payload, until the ``"unsubscribe"`` sentinel is received.

        Args:
            channel: Channel name
            handler: Callable receiving each payload
            check_response: True to acknowledge only truthy handler responses
                (nacking the rest), False to always acknowledge, None to use
                the adapter's ``always_ack`` setting
        """
        subscription = self.resolve_subscription(channel)
        always_ack = self.always_ack if check_response is None else not check_response

        consumer = MessageConsumer(
            subscription=subscription,
            handler=handler,
            max_messages=self.max_messages,
            always_ack=always_ack,
            logger=self._logger,
        )
        consumer.run()

    def publish(self, channel: str, message: Any) -> None:
        """
        Publish a message to a channel.

        Args:
            channel: Channel name
            message: Payload; strings are sent as-is, anything else as JSON
        """
        topic = self.resolve_topic(channel)
        self._publisher().publish(topic, self._to_message(message))

    def publish_batch(self, channel: str, messages: list[Any]) -> None:
        """
        Publish multiple messages to a channel, preserving their order.

        Args:
            channel: Channel name
            messages: Payloads, each serialized independently
        """
        topic = self.resolve_topic(channel)
        self._publisher().publish_batch(topic, [self._to_message(m) for m in messages])

    def resolve_topic(self, channel: str) -> Topic:
        """
        Return the topic for a channel.

        If auto-creation is enabled and the topic does not exist, it is
        created first. With auto-creation disabled no existence check is made.
        """
        topic = self._client.topic(channel)
        if self.auto_create_topics and not topic.exists():
            topic.create()
            self._logger.info("Created topic %s", channel)
        return topic

    def resolve_subscription(self, channel: str) -> Subscription:
        """
        Return this client's subscription for a channel.

        If auto-creation is enabled and the subscription does not exist, it
        is created first.
        """
        topic = self.resolve_topic(channel)
        name = subscription_name(self.client_identifier, channel)
        subscription = topic.subscription(name)
        if self.auto_create_subscriptions and not subscription.exists():
            subscription.create()
            self._logger.info("Created subscription %s on topic %s", name, channel)
        return subscription

    def _publisher(self) -> MessagePublisher:
        if self.background_batching:
            return self._buffered_publisher
        return self._immediate_publisher

    @staticmethod
    def _to_message(message: Any) -> Message:
        return Message(data=serialize_message(message).encode("utf-8"))
