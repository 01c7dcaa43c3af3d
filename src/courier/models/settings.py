"""Adapter settings."""

from typing import Optional

from pydantic import PositiveInt

from courier.models.base import CamelCaseModel

DEFAULT_MAX_MESSAGES = 1000


class AdapterSettings(CamelCaseModel):
    """
    Mutable adapter configuration.

    Assignments are validated, so ``settings.max_messages = 0`` raises
    ``pydantic.ValidationError`` just like passing it to the constructor.
    Loadable from camelCase JSON, e.g. ``{"autoCreateTopics": false}``.
    """

    client_identifier: Optional[str] = None
    auto_create_topics: bool = True
    auto_create_subscriptions: bool = True
    background_batching: bool = False
    max_messages: PositiveInt = DEFAULT_MAX_MESSAGES
    always_ack: bool = True
