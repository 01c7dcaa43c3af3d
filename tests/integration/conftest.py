"""Fixtures for RabbitMQ integration tests."""

import subprocess
import time
import uuid

import pika
import pytest

from courier.adapters.rabbitmq import RabbitMQPubSubClient

RABBITMQ_PORT = 5673  # Non-default port to avoid conflicts


@pytest.fixture(scope="session")
def rabbitmq_container():
    """Start RabbitMQ Docker container for test session."""
    container_name = "courier-rabbitmq-test"

    # Clean up any existing container
    subprocess.run(["docker", "rm", "-f", container_name], capture_output=True)

    subprocess.run(
        [
            "docker",
            "run",
            "-d",
            "--name",
            container_name,
            "-p",
            f"{RABBITMQ_PORT}:5672",
            "rabbitmq:3-management",
        ],
        check=True,
        capture_output=True,
    )

    # Wait for RabbitMQ to be ready
    time.sleep(10)

    yield

    subprocess.run(["docker", "stop", container_name], capture_output=True)
    subprocess.run(["docker", "rm", container_name], capture_output=True)


@pytest.fixture(scope="session")
def rabbitmq_connection(rabbitmq_container) -> pika.BlockingConnection:
    """Provide RabbitMQ connection."""
    return pika.BlockingConnection(pika.ConnectionParameters(host="localhost", port=RABBITMQ_PORT))


@pytest.fixture
def rabbitmq_client(rabbitmq_connection) -> RabbitMQPubSubClient:
    return RabbitMQPubSubClient(rabbitmq_connection)


@pytest.fixture
def channel_name(rabbitmq_connection) -> str:
    """Unique channel name; its exchange and queues are deleted after the test."""
    name = f"test-channel-{uuid.uuid4()}"

    yield name

    cleanup = rabbitmq_connection.channel()
    for identifier in ("default", "workers", "audit"):
        cleanup.queue_delete(queue=f"{identifier}.{name}")
    cleanup.exchange_delete(exchange=name)
