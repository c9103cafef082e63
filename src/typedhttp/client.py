# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Client with clone-on-write defaults and a process-wide default."""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Mapping
from http.cookiejar import CookieJar
from typing import TYPE_CHECKING, TextIO

import httpx

from .config import ClientSettings, load_client_settings
from .errors import HttpError
from .request import AfterResponseHook, Request

if TYPE_CHECKING:
    from .opts import OptionBuilder

logger = logging.getLogger(__name__)

Middleware = Callable[["Client", Request], None]
ErrorMapper = Callable[[httpx.Response], "BaseException | None"]


class Client:
    """
    Long-lived wrapper around an ``httpx.Client``.

    The transport (and with it the connection pool) and the cookie jar are
    shared by every clone; headers, params, timeouts and hook lists are copied
    so a clone can be reconfigured without touching the client it came from.
    A client closes only a transport it built itself.
    """

    def __init__(self, settings: ClientSettings | None = None, *, transport: httpx.BaseTransport | None = None):
        self.settings = settings or load_client_settings()
        self._custom_transport = transport is not None
        self._proxy: str | None = None
        self._retries = 0
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else self._build_transport()
        self.middlewares: list[Middleware] = []
        self.after_response: list[AfterResponseHook] = []
        self.error_mapper: ErrorMapper | None = None
        self.dump_enabled = False
        self.dump_output: TextIO | None = None
        self.http = httpx.Client(
            transport=self._transport,
            timeout=self.settings.timeout,
            follow_redirects=self.settings.follow_redirects,
            max_redirects=self.settings.max_redirects,
            headers={"User-Agent": self.settings.user_agent},
        )
        if self.settings.trace:
            logger.debug("HTTP_TRACE set; dumping all traffic")
            self.enable_dump_all()

    def _build_transport(self) -> httpx.BaseTransport:
        return httpx.HTTPTransport(
            verify=self.settings.verify_ssl,
            retries=self._retries,
            proxy=self._proxy,
        )

    @property
    def owns_transport(self) -> bool:
        """True when close() releases the transport this client built."""
        return self._owns_transport

    def _rebind(self, transport: httpx.BaseTransport, *, owned: bool) -> None:
        """Point this client at `transport`, keeping every default it carries."""
        source = self.http
        release = self._owns_transport and transport is not self._transport
        self._transport = transport
        self._owns_transport = owned
        self.http = httpx.Client(
            transport=transport,
            base_url=source.base_url,
            headers=source.headers,
            params=source.params,
            cookies=source.cookies.jar,
            timeout=source.timeout,
            follow_redirects=source.follow_redirects,
            max_redirects=source.max_redirects,
            event_hooks=source.event_hooks,
        )
        if release:
            logger.debug("Closing transport replaced by %s", type(transport).__name__)
            source.close()

    def clone(self) -> Client:
        twin = copy.copy(self)
        twin.settings = copy.copy(self.settings)
        twin.middlewares = list(self.middlewares)
        twin.after_response = list(self.after_response)
        twin._owns_transport = False
        twin._rebind(self._transport, owned=False)
        return twin

    def request(self) -> Request:
        """Return a fresh request bound to this client."""
        return Request(self)

    def raw(self) -> httpx.Client:
        return self.http

    def map_error(self, response: httpx.Response) -> BaseException:
        if self.error_mapper is not None:
            mapped = self.error_mapper(response)
            if mapped is not None:
                return mapped
        return HttpError.from_response(response)

    def set_base_url(self, url: str) -> Client:
        self.http.base_url = url
        return self

    def set_timeout(self, seconds: float) -> Client:
        self.settings.timeout = seconds
        self.http.timeout = seconds
        return self

    def set_header(self, key: str, value: str) -> Client:
        self.http.headers[key] = value
        return self

    def set_headers(self, values: Mapping[str, str]) -> Client:
        self.http.headers.update(values)
        return self

    def set_user_agent(self, user_agent: str) -> Client:
        self.settings.user_agent = user_agent
        return self.set_header("User-Agent", user_agent)

    def set_transport(self, transport: httpx.BaseTransport) -> Client:
        self._custom_transport = True
        self._rebind(transport, owned=False)
        return self

    def set_proxy(self, url: str | None) -> Client:
        self._proxy = url
        if not self._custom_transport:
            self._rebind(self._build_transport(), owned=True)
        return self

    def set_retries(self, count: int) -> Client:
        """Retry failed connection attempts `count` times (httpx transport retries)."""
        self._retries = max(count, 0)
        if not self._custom_transport:
            self._rebind(self._build_transport(), owned=True)
        return self

    def set_cookies(self, cookies: CookieJar | Mapping[str, str] | httpx.Cookies | None) -> Client:
        self.http.cookies = cookies
        return self

    def set_redirect(self, follow: bool, max_redirects: int | None = None) -> Client:
        self.http.follow_redirects = follow
        if max_redirects is not None:
            self.http.max_redirects = max_redirects
        return self

    def use(self, middleware: Middleware) -> Client:
        """Run `middleware(client, request)` before every send."""
        self.middlewares.append(middleware)
        return self

    def on_after_response(self, hook: AfterResponseHook) -> Client:
        self.after_response.append(hook)
        return self

    def set_error_mapper(self, mapper: ErrorMapper | None) -> Client:
        self.error_mapper = mapper
        return self

    def enable_dump_all(self, output: TextIO | None = None) -> Client:
        self.dump_enabled = True
        self.dump_output = output
        return self

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new(*options: OptionBuilder | None) -> Client:
    """Build a client from fresh settings and apply each option's client side in order."""
    client = Client()
    for option in options:
        if option is not None:
            option.apply_client(client)
    return client


_default_client: Client | None = None
_default_lock = threading.Lock()


def default() -> Client:
    """Return the process-wide client, constructing it on first use."""
    global _default_client
    client = _default_client
    if client is not None:
        return client
    with _default_lock:
        if _default_client is None:
            _default_client = new()
        return _default_client


__all__ = [
    "Client",
    "ErrorMapper",
    "Middleware",
    "default",
    "new",
]
