# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Options for clients and requests.

Every option is available both as a module function that starts a new
builder and as a same-named OptionBuilder method that extends one:

    opts = header("X-Trace", "1").query("q", "search")
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from http.cookiejar import CookieJar
from typing import IO, TYPE_CHECKING, Any, TextIO

import httpx

from ..progress import UploadCallback
from .base import Option, OptionSet, both, client_only, request_only
from .builder import OptionBuilder

if TYPE_CHECKING:
    from ..client import ErrorMapper, Middleware
    from ..request import Request


def merge(*builders: OptionSet | None) -> OptionBuilder:
    """Concatenate option sets, preserving their order."""
    return OptionBuilder().merge(*builders)


def header(key: str, value: str) -> OptionBuilder:
    return OptionBuilder().header(key, value)


def headers(values: Mapping[str, str]) -> OptionBuilder:
    return OptionBuilder().headers(values)


def user_agent(value: str) -> OptionBuilder:
    return OptionBuilder().user_agent(value)


def timeout(seconds: float) -> OptionBuilder:
    return OptionBuilder().timeout(seconds)


def query(*kv: str) -> OptionBuilder:
    return OptionBuilder().query(*kv)


def queries(values: Mapping[str, str]) -> OptionBuilder:
    return OptionBuilder().queries(values)


def path(key: str, value: Any) -> OptionBuilder:
    return OptionBuilder().path(key, value)


def paths(values: Mapping[str, Any]) -> OptionBuilder:
    return OptionBuilder().paths(values)


def body(value: Any) -> OptionBuilder:
    return OptionBuilder().body(value)


def json(value: Any) -> OptionBuilder:
    return OptionBuilder().json(value)


def form(values: Mapping[str, str]) -> OptionBuilder:
    return OptionBuilder().form(values)


def before(fn: Callable[[Request], None] | None) -> OptionBuilder:
    return OptionBuilder().before(fn)


def auth(scheme: str, token: str) -> OptionBuilder:
    return OptionBuilder().auth(scheme, token)


def bearer(token: str) -> OptionBuilder:
    return OptionBuilder().bearer(token)


def basic(username: str, password: str) -> OptionBuilder:
    return OptionBuilder().basic(username, password)


def file(param_name: str, file_path: str) -> OptionBuilder:
    return OptionBuilder().file(param_name, file_path)


def files(values: Mapping[str, str]) -> OptionBuilder:
    return OptionBuilder().files(values)


def file_bytes(param_name: str, file_name: str, content: bytes) -> OptionBuilder:
    return OptionBuilder().file_bytes(param_name, file_name, content)


def file_reader(param_name: str, file_name: str, reader: IO[bytes]) -> OptionBuilder:
    return OptionBuilder().file_reader(param_name, file_name, reader)


def upload_callback(callback: UploadCallback | None) -> OptionBuilder:
    return OptionBuilder().upload_callback(callback)


def upload_callback_with_interval(callback: UploadCallback | None, min_interval: float) -> OptionBuilder:
    return OptionBuilder().upload_callback_with_interval(callback, min_interval)


def upload_progress() -> OptionBuilder:
    return OptionBuilder().upload_progress()


def output_file(file_path: str) -> OptionBuilder:
    return OptionBuilder().output_file(file_path)


def dump() -> OptionBuilder:
    return OptionBuilder().dump()


def dump_to(output: TextIO) -> OptionBuilder:
    return OptionBuilder().dump_to(output)


def dump_to_file(file_path: str) -> OptionBuilder:
    return OptionBuilder().dump_to_file(file_path)


def dump_all(output: TextIO | None = None) -> OptionBuilder:
    return OptionBuilder().dump_all(output)


def base_url(url: str) -> OptionBuilder:
    return OptionBuilder().base_url(url)


def transport(value: httpx.BaseTransport) -> OptionBuilder:
    return OptionBuilder().transport(value)


def proxy(url: str) -> OptionBuilder:
    return OptionBuilder().proxy(url)


def cookie_jar(jar: CookieJar | Mapping[str, str] | httpx.Cookies | None) -> OptionBuilder:
    return OptionBuilder().cookie_jar(jar)


def redirect(follow: bool = True, max_redirects: int | None = None) -> OptionBuilder:
    return OptionBuilder().redirect(follow, max_redirects)


def middleware(*middlewares: Middleware) -> OptionBuilder:
    return OptionBuilder().middleware(*middlewares)


def error_mapper(mapper: ErrorMapper) -> OptionBuilder:
    return OptionBuilder().error_mapper(mapper)


def retry_count(count: int) -> OptionBuilder:
    return OptionBuilder().retry_count(count)


__all__ = [
    "Option",
    "OptionBuilder",
    "OptionSet",
    "auth",
    "base_url",
    "basic",
    "bearer",
    "before",
    "body",
    "both",
    "client_only",
    "cookie_jar",
    "dump",
    "dump_all",
    "dump_to",
    "dump_to_file",
    "error_mapper",
    "file",
    "file_bytes",
    "file_reader",
    "files",
    "form",
    "header",
    "headers",
    "json",
    "merge",
    "middleware",
    "output_file",
    "path",
    "paths",
    "proxy",
    "queries",
    "query",
    "redirect",
    "request_only",
    "retry_count",
    "timeout",
    "transport",
    "upload_callback",
    "upload_callback_with_interval",
    "upload_progress",
    "user_agent",
]
