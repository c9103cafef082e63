# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Plain-text dumps of request/response exchanges for debugging."""

from __future__ import annotations

import sys
from typing import TextIO

import httpx

DUMP_BODY_LIMIT_BYTES = 4096


def _format_body(content: bytes | None, placeholder: str) -> str:
    if content is None:
        return placeholder
    if not content:
        return ""
    text = content[:DUMP_BODY_LIMIT_BYTES].decode("utf-8", errors="replace")
    if len(content) > DUMP_BODY_LIMIT_BYTES:
        text += f"\n... ({len(content) - DUMP_BODY_LIMIT_BYTES} more bytes)"
    return text


def _format_headers(headers: httpx.Headers) -> list[str]:
    return [f"{name}: {value}" for name, value in headers.multi_items()]


def format_request(request: httpx.Request) -> str:
    try:
        content: bytes | None = request.content
    except httpx.RequestNotRead:
        content = None
    target = request.url.raw_path.decode("ascii", errors="replace")
    lines = [f"{request.method} {target} HTTP/1.1", f"host: {request.url.netloc.decode('ascii', errors='replace')}"]
    lines.extend(line for line in _format_headers(request.headers) if not line.lower().startswith("host:"))
    lines.append("")
    lines.append(_format_body(content, "<streamed body>"))
    return "\n".join(lines)


def format_response(response: httpx.Response) -> str:
    try:
        content: bytes | None = response.content
    except httpx.ResponseNotRead:
        content = None
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(_format_headers(response.headers))
    lines.append("")
    lines.append(_format_body(content, "<body streamed to output>"))
    return "\n".join(lines)


def format_exchange(request: httpx.Request, response: httpx.Response) -> str:
    return f"{format_request(request)}\n\n{format_response(response)}\n"


def write_dump(text: str, output: TextIO | None) -> None:
    """Write a dump to `output`, defaulting to the current stdout."""
    target = output if output is not None else sys.stdout
    target.write(text)
    target.flush()


__all__ = [
    "DUMP_BODY_LIMIT_BYTES",
    "format_exchange",
    "format_request",
    "format_response",
    "write_dump",
]
