# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Typed call results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx

from .errors import ErrorCategory, categorize_exception

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Outcome of a typed call.

    `response` is set whenever a response was received, including when
    `error` is set, so status and headers stay inspectable on failure.
    """

    body: T | None = None
    response: httpx.Response | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    @property
    def category(self) -> ErrorCategory:
        return categorize_exception(self.error)

    def unwrap(self) -> T:
        """Return the body or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.body  # type: ignore[return-value]


__all__ = ["Result"]
