# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, NamedTuple, NewType, TypedDict

import httpx
import pytest
from pydantic import BaseModel

from typedhttp.decode import (
    TargetKind,
    decode_raw,
    decode_structured,
    empty_value,
    encode_json,
    ensure_non_nil,
    is_empty_body,
    target_kind_of,
)


class Label(str):
    pass


class Blob(bytes):
    pass


@dataclass
class User:
    name: str


class Account(BaseModel):
    id: int
    tags: list[str] = []


class Point(NamedTuple):
    x: int
    y: int


class Payload(TypedDict):
    name: str


UserId = NewType("UserId", str)


@pytest.mark.parametrize("tp", [str, Label, UserId, Annotated[str, "meta"]])
def test_text_types(tp):
    assert target_kind_of(tp) is TargetKind.TEXT


@pytest.mark.parametrize("tp", [bytes, bytearray, Blob])
def test_byte_types(tp):
    assert target_kind_of(tp) is TargetKind.BYTES


@pytest.mark.parametrize(
    "tp",
    [list[int], list[bytes], dict[str, Any], User, Account, Any, int, Payload, tuple[int, ...], Sequence[int]],
)
def test_structured_types(tp):
    assert target_kind_of(tp) is TargetKind.STRUCTURED


def test_decode_structured_targets():
    assert decode_structured(User, b'{"name": "roc"}') == User(name="roc")
    assert decode_structured(Account, b'{"id": 1}') == Account(id=1)
    assert decode_structured(list[int], b"[1, 2, 3]") == [1, 2, 3]
    assert decode_structured(dict[str, Any], b'{"a": {"b": null}}') == {"a": {"b": None}}


def test_decode_raw_text_and_bytes():
    response = httpx.Response(200, content="héllo".encode("utf-8"), headers={"Content-Type": "text/plain; charset=utf-8"})
    assert decode_raw(str, response) == "héllo"
    assert decode_raw(bytes, response) == "héllo".encode("utf-8")
    labelled = decode_raw(Label, response)
    assert isinstance(labelled, Label)
    assert decode_raw(bytearray, response) == bytearray("héllo".encode("utf-8"))


def test_is_empty_body():
    assert is_empty_body(None) is False
    assert is_empty_body(httpx.Response(204)) is True
    assert is_empty_body(httpx.Response(200, content=b" \r\n\t")) is True
    assert is_empty_body(httpx.Response(200, content=b"{}")) is False


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (list[int], []),
        (Sequence[User], []),
        (dict[str, Any], {}),
        (Mapping[str, int], {}),
        (set[int], set()),
        (frozenset[int], frozenset()),
        (tuple[int, ...], ()),
        (dict, {}),
        (list, []),
    ],
)
def test_empty_value_for_collections(tp, expected):
    value = empty_value(tp)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("tp", [User, Account, Point, int, Any])
def test_empty_value_for_non_collections_is_none(tp):
    assert empty_value(tp) is None


def test_ensure_non_nil_keeps_values():
    assert ensure_non_nil(list[int], None) == []
    assert ensure_non_nil(list[int], [1]) == [1]
    assert ensure_non_nil(User, None) is None


def test_encode_json_handles_models_and_dataclasses():
    assert encode_json({"a": 1}) == b'{"a":1}'
    assert encode_json(User(name="roc")) == b'{"name":"roc"}'
    assert encode_json(Account(id=2)) == b'{"id":2,"tags":[]}'
