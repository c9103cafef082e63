# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request composition options: headers, query, path, body, timeouts."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from ..context import with_timeout
from .base import S, OptionSet, both, request_only

if TYPE_CHECKING:
    from ..request import Request


class RequestOptions(OptionSet):
    __slots__ = ()

    def header(self: S, key: str, value: str) -> S:
        """Set a header on the client defaults or on one request."""
        return self.add(
            both(
                lambda client: client.set_header(key, value),
                lambda request: request.set_header(key, value),
            )
        )

    def headers(self: S, values: Mapping[str, str]) -> S:
        values = dict(values)
        return self.add(
            both(
                lambda client: client.set_headers(values),
                lambda request: request.set_headers(values),
            )
        )

    def user_agent(self: S, value: str) -> S:
        return self.add(
            both(
                lambda client: client.set_user_agent(value),
                lambda request: request.set_header("User-Agent", value),
            )
        )

    def timeout(self: S, seconds: float) -> S:
        """
        Bound the call to `seconds`.

        On a client this becomes the default httpx timeout; on a request it
        becomes a deadline derived from the request's current context.
        """
        return self.add(
            both(
                lambda client: client.set_timeout(seconds),
                lambda request: request.set_context(with_timeout(seconds, request.context)),
            )
        )

    def query(self: S, *kv: str) -> S:
        """Add query parameters given as alternating keys and values."""
        if len(kv) % 2 != 0:
            raise ValueError("query requires key/value pairs")
        pairs = [(kv[i], kv[i + 1]) for i in range(0, len(kv), 2)]

        def apply(request: Request) -> None:
            for key, value in pairs:
                request.add_query_param(key, value)

        return self.add(request_only(apply))

    def queries(self: S, values: Mapping[str, str]) -> S:
        pairs = list(values.items())

        def apply(request: Request) -> None:
            for key, value in pairs:
                request.add_query_param(key, value)

        return self.add(request_only(apply))

    def path(self: S, key: str, value: Any) -> S:
        """Fill the `{key}` placeholder of the request URL."""
        return self.add(request_only(lambda request: request.set_path_param(key, value)))

    def paths(self: S, values: Mapping[str, Any]) -> S:
        values = dict(values)
        return self.add(request_only(lambda request: request.set_path_params(values)))

    def body(self: S, value: Any) -> S:
        return self.add(request_only(lambda request: request.set_body(value)))

    def json(self: S, value: Any) -> S:
        return self.add(request_only(lambda request: request.set_json(value)))

    def form(self: S, values: Mapping[str, str]) -> S:
        values = dict(values)
        return self.add(request_only(lambda request: request.set_form_data(values)))

    def before(self: S, fn: Callable[[Request], None] | None) -> S:
        """Run `fn` against the request just before it is sent."""
        if fn is None:
            return self
        return self.add(request_only(fn))
