# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Result-type classification and response body decoding.

The requested result type alone decides how a successful body is handled:

- ``str`` (and subclasses) is passed through as text,
- ``bytes``/``bytearray`` (and subclasses) is passed through as raw bytes,
- everything else is Structured and decoded from JSON with pydantic.

Classification only inspects the type object, never a live value.
"""

from __future__ import annotations

import collections.abc
import typing
from enum import Enum
from functools import lru_cache
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic_core import to_json


class TargetKind(str, Enum):
    TEXT = "text"
    BYTES = "bytes"
    STRUCTURED = "structured"


_BYTES_TYPES = (bytes, bytearray)
_LIST_ORIGINS = {list, collections.abc.Sequence, collections.abc.MutableSequence, collections.abc.Iterable}
_SET_ORIGINS = {set, collections.abc.Set, collections.abc.MutableSet}
_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


def _unwrap(tp: Any) -> Any:
    """Strip Annotated[...] and NewType wrappers down to the underlying type."""
    while True:
        if typing.get_origin(tp) is typing.Annotated:
            tp = typing.get_args(tp)[0]
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            tp = supertype
            continue
        return tp


def target_kind_of(tp: Any) -> TargetKind:
    """Classify a result type as Text, Bytes or Structured."""
    tp = _unwrap(tp)
    # list[int] is JSON even though bytes is also a sequence of ints; raw bytes
    # are recognised by their own type, never by container shape.
    if typing.get_origin(tp) is not None or not isinstance(tp, type):
        return TargetKind.STRUCTURED
    if issubclass(tp, str):
        return TargetKind.TEXT
    if issubclass(tp, _BYTES_TYPES):
        return TargetKind.BYTES
    return TargetKind.STRUCTURED


def response_bytes(response: httpx.Response) -> bytes:
    """Return the buffered body, or b"" when it was streamed elsewhere."""
    try:
        return response.content
    except httpx.ResponseNotRead:
        return b""


def is_empty_body(response: httpx.Response | None) -> bool:
    if response is None:
        return False
    return not response_bytes(response).strip()


def decode_raw(tp: Any, response: httpx.Response) -> str | bytes:
    """Pass the raw body through as the requested Text or Bytes type."""
    tp = _unwrap(tp)
    content = response_bytes(response)
    if target_kind_of(tp) is TargetKind.TEXT:
        text = content.decode(response.encoding or "utf-8", errors="replace")
        return text if tp is str else tp(text)
    return content if tp is bytes else tp(content)


@lru_cache(maxsize=256)
def _cached_adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _adapter(tp: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(tp)
    except TypeError:
        # Unhashable annotations cannot be cached.
        return TypeAdapter(tp)


def decode_structured(tp: Any, content: bytes) -> Any:
    """Decode a JSON body into the requested structure."""
    return _adapter(tp).validate_json(content)


def encode_json(value: Any) -> bytes:
    """Serialize a request body value (dicts, dataclasses, models, ...) to JSON bytes."""
    return to_json(value)


def empty_value(tp: Any) -> Any:
    """Return the empty collection for a collection type, else None."""
    tp = _unwrap(tp)
    origin = typing.get_origin(tp) or tp
    if origin in _LIST_ORIGINS:
        return []
    if origin is tuple:
        return ()
    if origin is frozenset:
        return frozenset()
    if origin in _SET_ORIGINS:
        return set()
    if origin in _MAPPING_ORIGINS:
        return {}
    if isinstance(origin, type) and issubclass(origin, (list, tuple, set, frozenset, dict)):
        # NamedTuple records have required fields and no empty form.
        if hasattr(origin, "_fields"):
            return None
        try:
            return origin()
        except TypeError:
            return None
    return None


def ensure_non_nil(tp: Any, value: Any) -> Any:
    """Normalize a missing Structured value to its empty collection."""
    if value is None:
        return empty_value(tp)
    return value


__all__ = [
    "TargetKind",
    "decode_raw",
    "decode_structured",
    "empty_value",
    "encode_json",
    "ensure_non_nil",
    "is_empty_body",
    "response_bytes",
    "target_kind_of",
]
