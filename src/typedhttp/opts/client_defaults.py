# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client-default options; they have no effect on a single request."""

from __future__ import annotations

from collections.abc import Mapping
from http.cookiejar import CookieJar
from typing import TYPE_CHECKING

import httpx

from .base import S, OptionSet, client_only

if TYPE_CHECKING:
    from ..client import ErrorMapper, Middleware


class ClientOptions(OptionSet):
    __slots__ = ()

    def base_url(self: S, url: str) -> S:
        return self.add(client_only(lambda client: client.set_base_url(url)))

    def transport(self: S, transport: httpx.BaseTransport) -> S:
        """Send through `transport` instead of the default connection pool."""
        return self.add(client_only(lambda client: client.set_transport(transport)))

    def proxy(self: S, url: str) -> S:
        return self.add(client_only(lambda client: client.set_proxy(url)))

    def cookie_jar(self: S, jar: CookieJar | Mapping[str, str] | httpx.Cookies | None) -> S:
        return self.add(client_only(lambda client: client.set_cookies(jar)))

    def redirect(self: S, follow: bool = True, max_redirects: int | None = None) -> S:
        return self.add(client_only(lambda client: client.set_redirect(follow, max_redirects)))

    def middleware(self: S, *middlewares: Middleware) -> S:
        """Run each middleware, in order, before every request the client sends."""

        def apply(client):
            for middleware in middlewares:
                client.use(middleware)

        return self.add(client_only(apply))

    def error_mapper(self: S, mapper: ErrorMapper) -> S:
        """Build the error returned for non-2xx responses."""
        return self.add(client_only(lambda client: client.set_error_mapper(mapper)))

    def retry_count(self: S, count: int) -> S:
        """Retry failed connection attempts up to `count` times."""
        return self.add(client_only(lambda client: client.set_retries(count)))
