"""Unit tests for the RabbitMQ subscription with a mocked pika channel."""

from unittest.mock import Mock

import pytest

from courier.adapters.rabbitmq import RabbitMQPubSubClient
from courier.adapters.rabbitmq.subscriber import MAX_PREFETCH_COUNT


@pytest.fixture
def mock_channel():
    """Create a mock pika channel whose consume() yields nothing."""
    channel = Mock()
    channel.consume.return_value = iter([(None, None, None)])
    return channel


@pytest.fixture
def subscription(mock_channel):
    connection = Mock()
    connection.channel.return_value = mock_channel
    return RabbitMQPubSubClient(connection).topic("jobs").subscription("default.jobs")


class TestRabbitMQSubscriptionPull:
    """Test RabbitMQSubscription.pull()."""

    def test_prefetch_matches_max_messages(self, subscription, mock_channel):
        """The prefetch count is the requested page size."""
        subscription.pull({"max_messages": 10}, timeout=0.1)

        mock_channel.basic_qos.assert_called_once_with(prefetch_count=10)

    def test_prefetch_is_clamped_to_sixteen_bits(self, subscription, mock_channel):
        """Page sizes beyond the AMQP prefetch field are capped."""
        subscription.pull({"max_messages": 100_000}, timeout=0.1)

        mock_channel.basic_qos.assert_called_once_with(prefetch_count=MAX_PREFETCH_COUNT)
        assert MAX_PREFETCH_COUNT == 65535

    def test_idle_pull_with_timeout_returns_empty_page(self, subscription, mock_channel):
        """An idle queue yields an empty page and the consumer is cancelled."""
        assert subscription.pull({"max_messages": 10}, timeout=0.1) == []
        mock_channel.cancel.assert_called_once()
