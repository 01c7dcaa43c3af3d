"""Payload serialization.

Wire format: UTF-8 text.

  - ``str`` payloads are sent as-is, so pre-encoded JSON or plain text can be
    published untouched.
  - Any other value is encoded as compact JSON; pydantic models use their
    camelCase JSON representation.

Decoding is best-effort: text that parses as JSON yields the decoded value,
anything else is returned as the raw string. Bytes that are not valid UTF-8
decode with replacement characters rather than raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel

_JSON_SEPARATORS = (",", ":")


@dataclass(frozen=True)
class RawPayload:
    """Text payload sent over the wire unchanged."""

    text: str


@dataclass(frozen=True)
class StructuredPayload:
    """Arbitrary value sent over the wire as JSON."""

    value: Any


Payload = Union[RawPayload, StructuredPayload]


def to_payload(message: Any) -> Payload:
    """Classify an application value for encoding."""
    if isinstance(message, str):
        return RawPayload(message)
    return StructuredPayload(message)


def encode_payload(payload: Payload) -> str:
    """Encode a payload to its wire text.

    Raises:
        TypeError: The structured value cannot be represented as JSON.
    """
    if isinstance(payload, RawPayload):
        return payload.text
    value = payload.value
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True)
    return json.dumps(value, separators=_JSON_SEPARATORS)


def decode_payload(data: Union[bytes, str]) -> Payload:
    """Decode wire data, falling back to raw text when it is not JSON.

    Bytes that are not valid UTF-8 are returned as raw text with the invalid
    sequences replaced by U+FFFD.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return RawPayload(data.decode("utf-8", errors="replace"))
    else:
        text = data
    try:
        return StructuredPayload(json.loads(text))
    except ValueError:
        return RawPayload(text)


def serialize_message(message: Any) -> str:
    """Serialize an application value to wire text."""
    return encode_payload(to_payload(message))


def unserialize_message_payload(data: Union[bytes, str]) -> Any:
    """Deserialize wire data back to an application value."""
    payload = decode_payload(data)
    if isinstance(payload, RawPayload):
        return payload.text
    return payload.value
