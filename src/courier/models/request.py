"""Request models for subscription operations."""

from typing import TypedDict


class PullRequest(TypedDict):
    """Request for pulling messages from a subscription."""

    max_messages: int
