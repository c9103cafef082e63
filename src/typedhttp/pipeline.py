# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Typed execution pipeline.

`do` and the verb helpers resolve the client, apply options (cloning the
client first when any are present), send the request and turn the outcome
into a Result whose body shape is decided by the requested result type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from .client import Client, default
from .context import CallContext, get_call_context
from .decode import TargetKind, decode_raw, empty_value, ensure_non_nil, is_empty_body, target_kind_of
from .errors import MissingRequestError, UnsupportedMethodError, categorize_exception
from .models import Result
from .opts import OptionBuilder
from .request import Request

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


def send(request: Request, method: str, url: str) -> httpx.Response:
    """Send `request` with `method`; unknown verbs fail before any I/O."""
    if method not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(method)
    return request.send(method, url)


def _complete(request: Request, method: str, url: str, result: Any) -> Result[Any]:
    kind = target_kind_of(result)
    if kind is TargetKind.STRUCTURED:
        request.set_success_result(result)

    try:
        response = send(request, method, url)
    except Exception as exc:  # noqa: BLE001
        response = request.response
        # A hook failing after an empty 2xx must not turn the call into an error.
        if response is not None and response.is_success and kind is TargetKind.STRUCTURED and is_empty_body(response):
            logger.debug("%s %s -> %s (empty body, ignoring %r)", method, url, response.status_code, exc)
            return Result(body=empty_value(result), response=response)
        logger.debug("%s %s failed [%s]: %s", method, url, categorize_exception(exc).value, exc)
        return Result(response=response, error=exc)

    logger.debug("%s %s -> %s", method, url, response.status_code)
    if not response.is_success:
        return Result(response=response, error=request.client.map_error(response))
    if kind is TargetKind.STRUCTURED:
        return Result(body=ensure_non_nil(result, request.result), response=response)
    return Result(body=decode_raw(result, response), response=response)


def do(
    client: Client | None,
    method: str,
    url: str,
    body: Any = None,
    options: Iterable[OptionBuilder | None] = (),
    *,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    """
    Execute one typed call.

    `result` selects how a 2xx body is returned: ``str`` as text, ``bytes`` as
    raw bytes, any other annotation decoded from JSON (empty bodies become
    empty collections). Failures never raise; they land in ``Result.error``.
    """
    if client is None:
        client = default()
    applied = [option for option in options if option is not None]
    if not applied:
        return _prepare_and_complete(client, applied, method, url, body, result, context)

    twin = client.clone()
    try:
        return _prepare_and_complete(twin, applied, method, url, body, result, context)
    finally:
        # Options such as retry_count or proxy give the clone a transport of its own.
        if twin.owns_transport:
            twin.close()


def _prepare_and_complete(
    client: Client,
    applied: list[OptionBuilder],
    method: str,
    url: str,
    body: Any,
    result: Any,
    context: CallContext | None,
) -> Result[Any]:
    try:
        for option in applied:
            option.apply_client(client)
        request = client.request()
        request.set_context(context if context is not None else get_call_context())
        request.set_body(body)
        for option in applied:
            option.apply_request(request)
    except Exception as exc:  # noqa: BLE001
        logger.debug("%s %s not sent [%s]: %s", method, url, categorize_exception(exc).value, exc)
        return Result(error=exc)
    return _complete(request, method, url, result)


def execute(request: Request | None, *, result: Any = Any) -> Result[Any]:
    """Run a caller-built request using its own method and URL."""
    if request is None:
        return Result(error=MissingRequestError())
    return _complete(request, request.method, request.url, result)


def get(
    client: Client | None,
    url: str,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "GET", url, None, options, result=result, context=context)


def head(
    client: Client | None,
    url: str,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "HEAD", url, None, options, result=result, context=context)


def delete(
    client: Client | None,
    url: str,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "DELETE", url, None, options, result=result, context=context)


def options(
    client: Client | None,
    url: str,
    *opts: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "OPTIONS", url, None, opts, result=result, context=context)


def post(
    client: Client | None,
    url: str,
    body: Any = None,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "POST", url, body, options, result=result, context=context)


def put(
    client: Client | None,
    url: str,
    body: Any = None,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "PUT", url, body, options, result=result, context=context)


def patch(
    client: Client | None,
    url: str,
    body: Any = None,
    *options: OptionBuilder | None,
    result: Any = Any,
    context: CallContext | None = None,
) -> Result[Any]:
    return do(client, "PATCH", url, body, options, result=result, context=context)


__all__ = [
    "SUPPORTED_METHODS",
    "delete",
    "do",
    "execute",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "send",
]
