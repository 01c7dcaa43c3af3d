"""Publisher capability implementations."""

from __future__ import annotations

import logging

from courier.models.message import Message
from courier.protocols.client import Topic

logger = logging.getLogger(__name__)


class ImmediatePublisher:
    """Publishes synchronously through the topic."""

    def publish(self, topic: Topic, message: Message) -> None:
        topic.publish(message)

    def publish_batch(self, topic: Topic, messages: list[Message]) -> None:
        if messages:
            topic.publish_batch(messages)


class BufferedPublisher:
    """
    Enqueues messages on the topic's background batch publisher.

    Fire-and-forget: completion of the eventual publish is not observed.
    """

    def publish(self, topic: Topic, message: Message) -> None:
        topic.batch_publisher().publish(message)

    def publish_batch(self, topic: Topic, messages: list[Message]) -> None:
        if not messages:
            return
        batch_publisher = topic.batch_publisher()
        for message in messages:
            batch_publisher.publish(message)
        logger.debug("Queued %d messages for background publish to %s", len(messages), topic.name)
