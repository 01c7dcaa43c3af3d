"""Google Cloud Pub/Sub backend implementing the PubSubClient protocol."""

import logging
from typing import Any, Optional

from google.api_core.exceptions import NotFound
from google.cloud import pubsub_v1
from google.oauth2 import service_account

from courier.models.message import Message, ReceivedMessage
from courier.models.request import PullRequest

logger = logging.getLogger(__name__)


class GoogleCloudBatchPublisher:
    """
    Background publisher for one topic.

    ``PublisherClient`` already batches publishes on its own threads, so this
    only submits the message and drops the returned future.
    """

    def __init__(self, publisher: pubsub_v1.PublisherClient, topic_path: str):
        self._publisher = publisher
        self._topic_path = topic_path

    def publish(self, message: Message) -> None:
        self._publisher.publish(self._topic_path, data=message.data, **message.attributes)


class GoogleCloudSubscription:
    """Subscription handle backed by ``SubscriberClient`` synchronous pull."""

    def __init__(
        self,
        subscriber: pubsub_v1.SubscriberClient,
        name: str,
        subscription_path: str,
        topic_path: str,
    ):
        self.name = name
        self.path = subscription_path
        self._subscriber = subscriber
        self._topic_path = topic_path

    def exists(self) -> bool:
        try:
            self._subscriber.get_subscription(request={"subscription": self.path})
        except NotFound:
            return False
        return True

    def create(self) -> None:
        self._subscriber.create_subscription(
            request={"name": self.path, "topic": self._topic_path}
        )

    def pull(self, request: PullRequest, timeout: Optional[float] = None) -> list[ReceivedMessage]:
        """
        Pull messages synchronously.

        Args:
            request: Pull request with max_messages
            timeout: RPC timeout in seconds; None applies no client-side timeout

        Returns:
            Received messages in delivery order
        """
        response = self._subscriber.pull(
            request={
                "subscription": self.path,
                "max_messages": request["max_messages"],
            },
            timeout=timeout,
        )
        return [
            ReceivedMessage(
                message=Message(
                    data=received.message.data,
                    attributes=dict(received.message.attributes),
                ),
                ack_id=received.ack_id,
            )
            for received in response.received_messages
        ]

    def acknowledge(self, message: ReceivedMessage) -> None:
        self.acknowledge_batch([message])

    def acknowledge_batch(self, messages: list[ReceivedMessage]) -> None:
        if not messages:
            return
        self._subscriber.acknowledge(
            request={
                "subscription": self.path,
                "ack_ids": [m.ack_id for m in messages],
            }
        )

    def modify_ack_deadline(self, message: ReceivedMessage, seconds: int) -> None:
        self._subscriber.modify_ack_deadline(
            request={
                "subscription": self.path,
                "ack_ids": [message.ack_id],
                "ack_deadline_seconds": seconds,
            }
        )


class GoogleCloudTopic:
    """Topic handle backed by ``PublisherClient``."""

    def __init__(self, client: "GoogleCloudPubSubClient", name: str):
        self.name = name
        self._client = client
        self.path = client.publisher.topic_path(client.project_id, name)

    def exists(self) -> bool:
        try:
            self._client.publisher.get_topic(request={"topic": self.path})
        except NotFound:
            return False
        return True

    def create(self) -> None:
        self._client.publisher.create_topic(request={"name": self.path})

    def publish(self, message: Message) -> None:
        """Publish one message and block until the service accepts it."""
        future = self._client.publisher.publish(
            self.path, data=message.data, **message.attributes
        )
        future.result()

    def publish_batch(self, messages: list[Message]) -> None:
        """Submit every message, then block until all of them are accepted."""
        futures = [
            self._client.publisher.publish(self.path, data=m.data, **m.attributes)
            for m in messages
        ]
        for future in futures:
            future.result()

    def batch_publisher(self) -> GoogleCloudBatchPublisher:
        return GoogleCloudBatchPublisher(self._client.publisher, self.path)

    def subscription(self, name: str) -> GoogleCloudSubscription:
        subscriber = self._client.subscriber
        return GoogleCloudSubscription(
            subscriber,
            name=name,
            subscription_path=subscriber.subscription_path(self._client.project_id, name),
            topic_path=self.path,
        )


class GoogleCloudPubSubClient:
    """
    Google Cloud Pub/Sub client implementing the PubSubClient protocol.

    Credentials come from ``credentials_file`` when given, otherwise from
    Application Default Credentials (e.g. ``GOOGLE_APPLICATION_CREDENTIALS``).
    Pre-built ``publisher``/``subscriber`` clients may be passed instead.
    """

    def __init__(
        self,
        project_id: str,
        publisher: Optional[pubsub_v1.PublisherClient] = None,
        subscriber: Optional[pubsub_v1.SubscriberClient] = None,
        credentials_file: Optional[str] = None,
    ):
        self.project_id = project_id
        self._credentials_file = credentials_file
        self._publisher = publisher
        self._subscriber = subscriber

    def _client_kwargs(self) -> dict[str, Any]:
        client_kwargs: dict[str, Any] = {}
        if self._credentials_file:
            client_kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                self._credentials_file
            )
        return client_kwargs

    @property
    def publisher(self) -> pubsub_v1.PublisherClient:
        if self._publisher is None:
            self._publisher = pubsub_v1.PublisherClient(**self._client_kwargs())
        return self._publisher

    @property
    def subscriber(self) -> pubsub_v1.SubscriberClient:
        if self._subscriber is None:
            self._subscriber = pubsub_v1.SubscriberClient(**self._client_kwargs())
        return self._subscriber

    def topic(self, name: str) -> GoogleCloudTopic:
        return GoogleCloudTopic(self, name)

    def close(self) -> None:
        """Flush pending background publishes and close both transports."""
        if self._publisher is not None:
            self._publisher.stop()
            self._publisher = None
            logger.debug("Google Pub/Sub publisher stopped")
        if self._subscriber is not None:
            self._subscriber.close()
            self._subscriber = None
