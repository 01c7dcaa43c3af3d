"""Google Cloud Pub/Sub backend for courier."""

from courier.adapters.google_cloud.client import (
    GoogleCloudBatchPublisher,
    GoogleCloudPubSubClient,
    GoogleCloudSubscription,
    GoogleCloudTopic,
)

__all__ = [
    "GoogleCloudBatchPublisher",
    "GoogleCloudPubSubClient",
    "GoogleCloudSubscription",
    "GoogleCloudTopic",
]
