# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-call request builder bound to a Client."""

from __future__ import annotations

import collections.abc
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Any, TextIO
from urllib.parse import quote

import httpx

from .context import CallContext
from .decode import decode_structured, encode_json, is_empty_body, response_bytes
from .dump import format_exchange, write_dump
from .progress import ProgressByteStream, ProgressInstrumentor, UploadCallback

if TYPE_CHECKING:
    from .client import Client

AfterResponseHook = Callable[["Client", httpx.Response], None]

_PATH_PARAM_RE = re.compile(r"\{([^{}/]+)\}")
_UNSET: Any = object()
_OUTPUT_CHUNK_SIZE = 64 * 1024


@dataclass
class FileUpload:
    """One multipart file part; content is produced lazily at send time."""

    param_name: str
    file_name: str
    get_content: Callable[[], IO[bytes] | bytes]
    file_size: int = 0
    content_type: str | None = None
    close_after: bool = False


def detect_reader_size(reader: Any) -> int:
    """Best-effort size of a reader; 0 when it cannot be known up front."""
    if isinstance(reader, (bytes, bytearray, memoryview)):
        return len(reader)
    size = getattr(reader, "size", None)
    if callable(size):
        try:
            return int(size())
        except (TypeError, ValueError, OSError):
            pass
    elif isinstance(size, int):
        return size
    if hasattr(reader, "__len__"):
        return len(reader)
    seekable = getattr(reader, "seekable", None)
    if callable(seekable) and seekable():
        try:
            current = reader.tell()
            end = reader.seek(0, os.SEEK_END)
            reader.seek(current, os.SEEK_SET)
            return int(end)
        except OSError:
            return 0
    return 0


def _is_verbatim_body(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return True
    if hasattr(value, "read"):
        return True
    return isinstance(value, collections.abc.Iterator)


class Request:
    """
    Mutable request state for a single call.

    Setters return the request so they can be chained. send() merges the
    owning client's defaults, performs I/O and stores the response on
    `request.response` as soon as one exists, even if a later step fails.
    """

    def __init__(self, client: Client) -> None:
        self.client = client
        self.method = "GET"
        self.url = ""
        self.headers = httpx.Headers()
        self.query: list[tuple[str, str]] = []
        self.path_params: dict[str, str] = {}
        self.context: CallContext | None = None
        self.response: httpx.Response | None = None
        self.raw_request: httpx.Request | None = None
        self.result: Any = None
        self._content: Any = None
        self._form: dict[str, str] | None = None
        self._uploads: list[FileUpload] = []
        self._after_response: list[AfterResponseHook] = []
        self._upload_progress: ProgressInstrumentor | None = None
        self._upload_interval = 0.0
        self._output_file: str | None = None
        self._dump_outputs: list[TextIO | None] = []
        self._dump_files: list[str] = []
        self._success_type: Any = _UNSET

    def set_url(self, url: str) -> Request:
        self.url = url
        return self

    def set_header(self, key: str, value: str) -> Request:
        self.headers[key] = value
        return self

    def set_headers(self, values: Mapping[str, str]) -> Request:
        for key, value in values.items():
            self.headers[key] = value
        return self

    def add_query_param(self, key: str, value: str) -> Request:
        self.query.append((key, value))
        return self

    def set_path_param(self, key: str, value: Any) -> Request:
        self.path_params[key] = str(value)
        return self

    def set_path_params(self, values: Mapping[str, Any]) -> Request:
        for key, value in values.items():
            self.set_path_param(key, value)
        return self

    def set_body(self, value: Any) -> Request:
        """Attach strings, bytes and readers verbatim; JSON-encode anything else."""
        if value is None:
            return self
        if _is_verbatim_body(value):
            self._content = value
            return self
        return self.set_json(value)

    def set_json(self, value: Any) -> Request:
        self._content = encode_json(value)
        self.headers["Content-Type"] = "application/json"
        return self

    def set_form_data(self, values: Mapping[str, str]) -> Request:
        self._form = dict(values)
        return self

    def set_file(self, param_name: str, file_path: str) -> Request:
        return self.set_file_upload(
            FileUpload(
                param_name=param_name,
                file_name=os.path.basename(file_path),
                get_content=lambda: open(file_path, "rb"),
                close_after=True,
            )
        )

    def set_files(self, files: Mapping[str, str]) -> Request:
        for param_name, file_path in files.items():
            self.set_file(param_name, file_path)
        return self

    def set_file_upload(self, upload: FileUpload) -> Request:
        self._uploads.append(upload)
        return self

    def set_context(self, context: CallContext | None) -> Request:
        self.context = context
        return self

    def on_after_response(self, hook: AfterResponseHook) -> Request:
        self._after_response.append(hook)
        return self

    def set_upload_callback(self, callback: UploadCallback, min_interval: float = 0.0) -> Request:
        self._upload_progress = ProgressInstrumentor(callback)
        self._upload_interval = min_interval
        return self

    def set_output_file(self, path: str) -> Request:
        self._output_file = path
        return self

    def enable_dump_to(self, output: TextIO | None = None) -> Request:
        """Dump the exchange to `output` (stdout at write time when None)."""
        self._dump_outputs.append(output)
        return self

    def enable_dump_to_file(self, path: str) -> Request:
        self._dump_files.append(path)
        return self

    def set_success_result(self, result_type: Any) -> Request:
        """Decode 2xx bodies into `result_type` as part of send()."""
        self._success_type = result_type
        return self

    def send(self, method: str, url: str) -> httpx.Response:
        self.method = method
        self.url = url
        self.response = None
        self.raw_request = None
        self.result = None

        if self.context is not None:
            self.context.check()
        for middleware in self.client.middlewares:
            middleware(self.client, self)

        try:
            response = self._transmit()
        finally:
            if self._upload_progress is not None and self.response is not None:
                self._upload_progress.finalize()

        self._dump(response)
        if self._success_type is not _UNSET and response.is_success and not is_empty_body(response):
            self.result = decode_structured(self._success_type, response_bytes(response))
        for hook in (*self.client.after_response, *self._after_response):
            hook(self.client, response)
        return response

    def _expand_path(self, url: str) -> str:
        if not self.path_params:
            return url

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in self.path_params:
                return match.group(0)
            return quote(self.path_params[name], safe="")

        return _PATH_PARAM_RE.sub(substitute, url)

    def _transmit(self) -> httpx.Response:
        http = self.client.http
        opened: list[Any] = []
        try:
            kwargs: dict[str, Any] = {"headers": self.headers}
            if self.query:
                kwargs["params"] = self.query
            upload_sizes: list[int] = []
            if self._uploads:
                files = []
                for upload in self._uploads:
                    content = upload.get_content()
                    if upload.close_after:
                        opened.append(content)
                    upload_sizes.append(upload.file_size or detect_reader_size(content))
                    files.append(
                        (upload.param_name, (upload.file_name, content, upload.content_type or "application/octet-stream"))
                    )
                kwargs["files"] = files
                if self._form is not None:
                    kwargs["data"] = self._form
            elif self._form is not None:
                kwargs["data"] = self._form
            elif self._content is not None:
                kwargs["content"] = self._content

            remaining = self.context.remaining() if self.context is not None else None
            if remaining is not None:
                kwargs["timeout"] = max(remaining, 0.0)

            request = http.build_request(self.method, self._expand_path(self.url), **kwargs)
            if self._upload_progress is not None:
                total = int(request.headers.get("Content-Length") or 0)
                if not total and upload_sizes and all(upload_sizes):
                    total = sum(upload_sizes)
                stream = ProgressByteStream(
                    request.stream,
                    total,
                    self._upload_progress.tick,
                    min_interval=self._upload_interval,
                    context=self.context,
                )
                request = httpx.Request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    stream=stream,
                    extensions=request.extensions,
                )
            self.raw_request = request

            streaming = self._output_file is not None
            response = http.send(request, stream=streaming)
            self.response = response
            if streaming:
                try:
                    if response.is_success:
                        self._write_output(response)
                    else:
                        response.read()
                finally:
                    response.close()
            return response
        finally:
            for handle in opened:
                close = getattr(handle, "close", None)
                if callable(close):
                    close()

    def _write_output(self, response: httpx.Response) -> None:
        assert self._output_file is not None
        with open(self._output_file, "wb") as handle:
            for chunk in response.iter_bytes(chunk_size=_OUTPUT_CHUNK_SIZE):
                if self.context is not None:
                    self.context.check()
                handle.write(chunk)

    def _dump(self, response: httpx.Response) -> None:
        outputs = list(self._dump_outputs)
        if self.client.dump_enabled:
            outputs.append(self.client.dump_output)
        if not outputs and not self._dump_files:
            return
        assert self.raw_request is not None
        text = format_exchange(self.raw_request, response)
        for output in outputs:
            write_dump(text, output)
        for path in self._dump_files:
            with open(path, "a", encoding="utf-8") as handle:
                handle.write(text)


__all__ = [
    "AfterResponseHook",
    "FileUpload",
    "Request",
    "detect_reader_size",
]
