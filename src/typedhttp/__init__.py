# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
typedhttp package entrypoint.

A typed convenience layer over httpx: verb helpers return a Result whose body
shape follows the requested result type, and options configure either a
client's defaults, a single request, or both.

    client = new(base_url("https://api.example.com"))
    res = get(client, "/users/{id}", path("id", 7), result=User)
"""

from .client import Client, ErrorMapper, Middleware, default, new
from .config import ClientSettings, load_client_settings
from .context import CallContext, background, call_context, get_call_context, with_cancel, with_timeout
from .decode import TargetKind, target_kind_of
from .errors import (
    DeadlineExceededError,
    ErrorCategory,
    HttpError,
    MissingRequestError,
    RequestCancelledError,
    TypedHttpError,
    UnsupportedMethodError,
    categorize_exception,
)
from .log import setup_logging
from .models import Result
from .opts import (
    Option,
    OptionBuilder,
    auth,
    base_url,
    basic,
    bearer,
    before,
    body,
    both,
    client_only,
    cookie_jar,
    dump,
    dump_all,
    dump_to,
    dump_to_file,
    error_mapper,
    file,
    file_bytes,
    file_reader,
    files,
    form,
    header,
    headers,
    json,
    merge,
    middleware,
    output_file,
    path,
    paths,
    proxy,
    queries,
    query,
    redirect,
    request_only,
    retry_count,
    timeout,
    transport,
    upload_callback,
    upload_callback_with_interval,
    upload_progress,
    user_agent,
)
from .pipeline import SUPPORTED_METHODS, delete, do, execute, get, head, options, patch, post, put, send
from .progress import ProgressBar, ProgressInstrumentor, UploadInfo
from .request import FileUpload, Request
from .version import __version__

__all__ = [
    "CallContext",
    "Client",
    "ClientSettings",
    "DeadlineExceededError",
    "ErrorCategory",
    "ErrorMapper",
    "FileUpload",
    "HttpError",
    "Middleware",
    "MissingRequestError",
    "Option",
    "OptionBuilder",
    "ProgressBar",
    "ProgressInstrumentor",
    "Request",
    "RequestCancelledError",
    "Result",
    "SUPPORTED_METHODS",
    "TargetKind",
    "TypedHttpError",
    "UnsupportedMethodError",
    "UploadInfo",
    "auth",
    "background",
    "base_url",
    "basic",
    "bearer",
    "before",
    "body",
    "both",
    "call_context",
    "categorize_exception",
    "client_only",
    "cookie_jar",
    "default",
    "delete",
    "do",
    "dump",
    "dump_all",
    "dump_to",
    "dump_to_file",
    "error_mapper",
    "execute",
    "file",
    "file_bytes",
    "file_reader",
    "files",
    "form",
    "get",
    "get_call_context",
    "head",
    "header",
    "headers",
    "json",
    "load_client_settings",
    "merge",
    "middleware",
    "new",
    "options",
    "output_file",
    "patch",
    "path",
    "paths",
    "post",
    "proxy",
    "put",
    "queries",
    "query",
    "redirect",
    "request_only",
    "retry_count",
    "send",
    "setup_logging",
    "target_kind_of",
    "timeout",
    "transport",
    "upload_callback",
    "upload_callback_with_interval",
    "upload_progress",
    "user_agent",
    "with_cancel",
    "with_timeout",
    "__version__",
]
