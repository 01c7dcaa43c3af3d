"""In-memory backend used for testing and local development."""

from __future__ import annotations

import itertools
from collections import deque
from typing import Deque, Dict, List, Optional

from courier.models.message import Message, ReceivedMessage
from courier.models.request import PullRequest

DEFAULT_HISTORY_LIMIT = 1000


class InMemorySubscription:
    """
    Subscription backed by an in-memory queue.

    Receives a copy of every message published to its topic after it was
    created. Pulled messages stay in flight until acknowledged; a nack puts
    them back at the head of the queue. ``pull`` never blocks.
    """

    def __init__(self, client: "InMemoryPubSubClient", topic: str, name: str) -> None:
        self.name = name
        self.topic = topic
        self._client = client

    def _state(self) -> "_SubscriptionState":
        state = self._client._subscriptions.get(self.name)
        if state is None:
            raise LookupError(f"Subscription {self.name!r} does not exist")
        return state

    def exists(self) -> bool:
        return self.name in self._client._subscriptions

    def create(self) -> None:
        if self.topic not in self._client._topics:
            raise LookupError(f"Topic {self.topic!r} does not exist")
        self._client._subscriptions.setdefault(self.name, _SubscriptionState(self.topic))

    def pull(self, request: PullRequest, timeout: Optional[float] = None) -> List[ReceivedMessage]:
        state = self._state()
        received = []
        while state.queue and len(received) < request["max_messages"]:
            message = state.queue.popleft()
            ack_id = str(next(self._client._ack_ids))
            state.in_flight[ack_id] = message
            received.append(ReceivedMessage(message=message, ack_id=ack_id))
        return received

    def acknowledge(self, message: ReceivedMessage) -> None:
        self._state().in_flight.pop(message.ack_id, None)

    def acknowledge_batch(self, messages: List[ReceivedMessage]) -> None:
        for message in messages:
            self.acknowledge(message)

    def modify_ack_deadline(self, message: ReceivedMessage, seconds: int) -> None:
        if seconds != 0:
            return
        state = self._state()
        original = state.in_flight.pop(message.ack_id, None)
        if original is not None:
            state.queue.appendleft(original)

    @property
    def pending(self) -> List[Message]:
        """Messages waiting to be pulled."""
        return list(self._state().queue)

    @property
    def in_flight(self) -> List[Message]:
        """Messages pulled but neither acknowledged nor nacked."""
        return list(self._state().in_flight.values())


class InMemoryTopic:
    """Topic that fans each published message out to its subscriptions."""

    def __init__(self, client: "InMemoryPubSubClient", name: str) -> None:
        self.name = name
        self._client = client

    def exists(self) -> bool:
        return self.name in self._client._topics

    def create(self) -> None:
        self._client._topics.setdefault(self.name, self._client._new_history())

    def publish(self, message: Message) -> None:
        if self.name not in self._client._topics:
            raise LookupError(f"Topic {self.name!r} does not exist")
        self._client._topics[self.name].append(message)
        for state in self._client._subscriptions.values():
            if state.topic == self.name:
                state.queue.append(message)

    def publish_batch(self, messages: List[Message]) -> None:
        for message in messages:
            self.publish(message)

    def batch_publisher(self) -> "InMemoryTopic":
        return self

    def subscription(self, name: str) -> InMemorySubscription:
        return InMemorySubscription(self._client, self.name, name)

    @property
    def messages(self) -> List[Message]:
        """The most recent messages published to this topic, oldest first.

        Bounded by the client's ``history_limit``; subscriptions keep their own
        queues, so trimming the history never drops undelivered messages.
        """
        return list(self._client._topics.get(self.name, []))


class _SubscriptionState:
    def __init__(self, topic: str) -> None:
        self.topic = topic
        self.queue: deque = deque()
        self.in_flight: Dict[str, Message] = {}


class InMemoryPubSubClient:
    """
    PubSubClient keeping all state in process memory.

    Publishing to a topic that was never created raises ``LookupError``, as
    does pulling from a missing subscription.

    Args:
        topics: Optional topic names to create up front.
        history_limit: Published messages remembered per topic for inspection.
    """

    def __init__(
        self,
        topics: Optional[List[str]] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._history_limit = history_limit
        self._topics: Dict[str, Deque[Message]] = {
            name: self._new_history() for name in topics or []
        }
        self._subscriptions: Dict[str, _SubscriptionState] = {}
        self._ack_ids = itertools.count(1)

    def topic(self, name: str) -> InMemoryTopic:
        return InMemoryTopic(self, name)

    def close(self) -> None:
        """Nothing to release; state lives as long as the client."""

    def _new_history(self) -> Deque[Message]:
        return deque(maxlen=self._history_limit)
