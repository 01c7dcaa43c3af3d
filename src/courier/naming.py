"""Subscription naming conventions."""

from __future__ import annotations

from typing import Optional

DEFAULT_CLIENT_IDENTIFIER = "default"


def subscription_name(client_identifier: Optional[str], channel: str) -> str:
    """Build the subscription name for a client identifier and channel.

    Subscribers sharing an identifier share a subscription and compete for
    messages; distinct identifiers each receive every message.
    """
    return f"{client_identifier or DEFAULT_CLIENT_IDENTIFIER}.{channel}"
