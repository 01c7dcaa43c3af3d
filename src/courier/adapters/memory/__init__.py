"""In-memory backend for courier."""

from courier.adapters.memory.client import (
    InMemoryPubSubClient,
    InMemorySubscription,
    InMemoryTopic,
)

__all__ = ["InMemoryPubSubClient", "InMemorySubscription", "InMemoryTopic"]
