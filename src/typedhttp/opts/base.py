# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Option values and the persistent option set they are collected into.

An Option carries up to two closures: one that mutates a client's defaults
and one that mutates a single request. Option sets are tuple-backed and
never mutated; every chaining call returns a new set.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from ..client import Client
    from ..request import Request

ClientFn = Callable[["Client"], None]
RequestFn = Callable[["Request"], None]

S = TypeVar("S", bound="OptionSet")


@dataclass(frozen=True)
class Option:
    on_client: ClientFn | None = None
    on_request: RequestFn | None = None

    def apply_client(self, client: Client) -> None:
        if self.on_client is not None:
            self.on_client(client)

    def apply_request(self, request: Request) -> None:
        if self.on_request is not None:
            self.on_request(request)


def client_only(fn: ClientFn) -> Option:
    return Option(on_client=fn)


def request_only(fn: RequestFn) -> Option:
    return Option(on_request=fn)


def both(client_fn: ClientFn, request_fn: RequestFn) -> Option:
    return Option(on_client=client_fn, on_request=request_fn)


class OptionSet:
    """Ordered, immutable sequence of Options applied in insertion order."""

    __slots__ = ("_options",)

    def __init__(self, options: Iterable[Option | None] = ()) -> None:
        self._options: tuple[Option | None, ...] = tuple(options)

    @property
    def options(self) -> tuple[Option | None, ...]:
        return self._options

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._options)} options)"

    def add(self: S, option: Option | None) -> S:
        return type(self)((*self._options, option))

    def merge(self: S, *others: OptionSet | None) -> S:
        """Return a set holding these options followed by each of `others`."""
        combined = list(self._options)
        for other in others:
            if other is not None:
                combined.extend(other.options)
        return type(self)(combined)

    def apply_client(self, client: Client) -> None:
        for option in self._options:
            if option is None:
                continue
            option.apply_client(client)

    def apply_request(self, request: Request) -> None:
        for option in self._options:
            if option is None:
                continue
            option.apply_request(request)


__all__ = [
    "ClientFn",
    "Option",
    "OptionSet",
    "RequestFn",
    "both",
    "client_only",
    "request_only",
]
