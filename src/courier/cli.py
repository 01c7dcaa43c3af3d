"""Command-line entry point for courier."""

from __future__ import annotations

import json
import logging
from typing import Optional, Tuple

import click

from courier.adapter import PubSubAdapter
from courier.consumer.message_consumer import UNSUBSCRIBE_SENTINEL
from courier.models.settings import DEFAULT_MAX_MESSAGES
from courier.protocols.client import PubSubClient

BACKENDS = ("google", "rabbitmq")


def build_client(
    backend: str,
    project_id: Optional[str],
    credentials_file: Optional[str],
    amqp_url: Optional[str],
) -> PubSubClient:
    """Create the backend client selected on the command line."""
    if backend == "google":
        if not project_id:
            raise click.UsageError("--project-id (or GOOGLE_CLOUD_PROJECT) is required for google")
        from courier.adapters.google_cloud import GoogleCloudPubSubClient

        return GoogleCloudPubSubClient(project_id, credentials_file=credentials_file)

    if not amqp_url:
        raise click.UsageError("--amqp-url (or COURIER_AMQP_URL) is required for rabbitmq")
    from courier.adapters.rabbitmq import RabbitMQPubSubClient

    return RabbitMQPubSubClient.from_url(amqp_url)


def parse_json_message(message: str):
    """Parse a --json MESSAGE, reporting bad input as a usage error."""
    try:
        return json.loads(message)
    except ValueError as exc:
        raise click.BadParameter(
            f"{message!r} is not valid JSON: {exc}", param_hint="MESSAGE"
        ) from exc


@click.group()
@click.option(
    "--backend",
    default="google",
    envvar="COURIER_BACKEND",
    type=click.Choice(BACKENDS, case_sensitive=False),
    show_default=True,
    help="Pub/sub service to talk to.",
)
@click.option("--project-id", envvar="GOOGLE_CLOUD_PROJECT", help="Google Cloud project ID.")
@click.option(
    "--credentials-file",
    envvar="GOOGLE_APPLICATION_CREDENTIALS",
    type=click.Path(dir_okay=False),
    help="Service-account key file; Application Default Credentials when omitted.",
)
@click.option("--amqp-url", envvar="COURIER_AMQP_URL", help="RabbitMQ connection URL.")
@click.option(
    "--client-identifier",
    envvar="COURIER_CLIENT_IDENTIFIER",
    help="Subscriber group name; subscribers sharing it compete for messages.",
)
@click.option(
    "-l",
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    show_default=True,
    help="Logging verbosity level.",
)
@click.pass_context
def main(
    ctx: click.Context,
    backend: str,
    project_id: Optional[str],
    credentials_file: Optional[str],
    amqp_url: Optional[str],
    client_identifier: Optional[str],
    log_level: str,
) -> None:
    """courier: publish to and consume from pub/sub channels.

    Example:

        courier --project-id my-project publish my_channel '{"lorem": "ipsum"}'
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    def make_adapter(**settings) -> PubSubAdapter:
        client = build_client(backend.lower(), project_id, credentials_file, amqp_url)
        ctx.call_on_close(client.close)
        return PubSubAdapter(client, client_identifier=client_identifier, **settings)

    ctx.obj = make_adapter


@main.command()
@click.argument("channel")
@click.argument("messages", nargs=-1, required=True)
@click.option(
    "--json/--raw",
    "as_json",
    default=False,
    show_default=True,
    help="Parse each MESSAGE as JSON before publishing instead of sending the text as-is.",
)
@click.option(
    "--background-batching",
    is_flag=True,
    default=False,
    help="Hand messages to the backend's background batch publisher.",
)
@click.pass_obj
def publish(
    make_adapter, channel: str, messages: Tuple[str, ...], as_json: bool, background_batching: bool
) -> None:
    """Publish one or more MESSAGES to CHANNEL."""
    payloads = [parse_json_message(m) for m in messages] if as_json else list(messages)
    adapter = make_adapter(background_batching=background_batching)
    if len(payloads) == 1:
        adapter.publish(channel, payloads[0])
    else:
        adapter.publish_batch(channel, payloads)


@main.command()
@click.argument("channel")
@click.option(
    "--max-messages",
    default=DEFAULT_MAX_MESSAGES,
    type=click.IntRange(min=1),
    show_default=True,
    help="Maximum messages pulled per request.",
)
@click.pass_obj
def subscribe(make_adapter, channel: str, max_messages: int) -> None:
    """Print messages received on CHANNEL until an unsubscribe message arrives."""
    adapter = make_adapter(max_messages=max_messages)

    def echo(payload) -> bool:
        click.echo(payload if isinstance(payload, str) else json.dumps(payload))
        return True

    adapter.subscribe(channel, echo)


@main.command()
@click.argument("channel")
@click.pass_obj
def unsubscribe(make_adapter, channel: str) -> None:
    """Publish the unsubscribe sentinel, stopping one consumer of each subscription on CHANNEL."""
    make_adapter().publish(channel, UNSUBSCRIBE_SENTINEL)


if __name__ == "__main__":
    main()
