# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io
import time

import httpx
import pytest

from typedhttp import Client, ClientSettings, get, post
from typedhttp import opts
from typedhttp.context import (
    CallContext,
    background,
    call_context,
    get_call_context,
    with_cancel,
    with_timeout,
)
from typedhttp.dump import DUMP_BODY_LIMIT_BYTES, format_exchange, format_request, format_response
from typedhttp.errors import DeadlineExceededError, RequestCancelledError
from typedhttp.request import detect_reader_size


def make_client(handler) -> Client:
    return Client(ClientSettings(), transport=httpx.MockTransport(handler))


def test_background_context_never_expires():
    context = background()
    assert context.cancelled is False
    assert context.remaining() is None
    context.check()


def test_child_inherits_parent_cancellation_and_earlier_deadline():
    parent = with_timeout(1)
    child = with_timeout(60, parent=parent)
    assert child.effective_deadline() == parent.deadline
    assert child.remaining() <= 1

    cancellable = with_cancel(child)
    parent_cancel = with_cancel()
    grandchild = with_cancel(parent_cancel)
    parent_cancel.cancel()
    assert grandchild.cancelled is True
    assert cancellable.cancelled is False
    with pytest.raises(RequestCancelledError):
        grandchild.check()


def test_expired_deadline_raises():
    context = CallContext(deadline=time.monotonic() - 1)
    with pytest.raises(DeadlineExceededError):
        context.check()


def test_call_context_installs_and_restores():
    assert get_call_context() is None
    with call_context(timeout=5) as outer:
        assert get_call_context() is outer
        with call_context(timeout=1) as inner:
            assert inner.parent is outer
            assert get_call_context() is inner
        assert get_call_context() is outer
    assert get_call_context() is None


def test_explicit_context_wins_over_ambient():
    client = make_client(lambda request: httpx.Response(200, text="ok"))
    with call_context(with_timeout(-1)):
        res = get(client, "https://api.test/", context=background(), result=str)
    assert res.body == "ok"


class Sized:
    size = 42

    def read(self, n=-1):
        return b""


class SizedMethod:
    def size(self):
        return 7


class Unsized:
    def read(self, n=-1):
        return b""


def test_detect_reader_size():
    buffer = io.BytesIO(b"0123456789")
    buffer.seek(4)
    assert detect_reader_size(buffer) == 10
    assert buffer.tell() == 4
    assert detect_reader_size(b"abc") == 3
    assert detect_reader_size(Sized()) == 42
    assert detect_reader_size(SizedMethod()) == 7
    assert detect_reader_size(Unsized()) == 0


def test_format_exchange_renders_both_sides():
    request = httpx.Request("POST", "https://api.test/items?q=1", content=b'{"a":1}', headers={"X-Trace": "1"})
    response = httpx.Response(201, content=b"created", request=request)
    text = format_exchange(request, response)
    assert "POST /items?q=1 HTTP/1.1" in text
    assert "host: api.test" in text
    assert "X-Trace: 1" in text or "x-trace: 1" in text
    assert '{"a":1}' in text
    assert "HTTP/1.1 201 Created" in text
    assert "created" in text


def test_dump_truncates_large_bodies():
    body = b"x" * (DUMP_BODY_LIMIT_BYTES + 10)
    text = format_response(httpx.Response(200, content=body))
    assert "... (10 more bytes)" in text
    assert text.count("x") >= DUMP_BODY_LIMIT_BYTES


def test_dump_uses_placeholders_for_streamed_bodies():
    def body():
        yield b"chunk"

    request = httpx.Request("PUT", "https://api.test/", content=body())
    assert "<streamed body>" in format_request(request)
    response = httpx.Response(200, stream=httpx.ByteStream(b"later"))
    assert "<body streamed to output>" in format_response(response)


def test_dump_to_option_writes_exchange():
    output = io.StringIO()
    client = make_client(lambda request: httpx.Response(200, text="pong"))
    res = post(client, "https://api.test/ping", "ping", opts.dump_to(output), result=str)
    assert res.body == "pong"
    text = output.getvalue()
    assert "POST /ping HTTP/1.1" in text
    assert "ping" in text
    assert "HTTP/1.1 200 OK" in text
    assert "pong" in text


def test_dump_option_defaults_to_stdout(capsys):
    client = make_client(lambda request: httpx.Response(200, text="pong"))
    get(client, "https://api.test/ping", opts.dump(), result=str)
    assert "GET /ping HTTP/1.1" in capsys.readouterr().out


def test_dump_to_file_appends(tmp_path):
    target = tmp_path / "exchange.dump"
    client = make_client(lambda request: httpx.Response(200, text="pong"))
    get(client, "https://api.test/a", opts.dump_to_file(str(target)), result=str)
    get(client, "https://api.test/b", opts.dump_to_file(str(target)), result=str)
    text = target.read_text(encoding="utf-8")
    assert "GET /a HTTP/1.1" in text
    assert "GET /b HTTP/1.1" in text


def test_dump_is_written_for_error_responses():
    output = io.StringIO()
    client = make_client(lambda request: httpx.Response(404, text="nope"))
    res = get(client, "https://api.test/missing", opts.dump_to(output))
    assert res.error is not None
    assert "HTTP/1.1 404 Not Found" in output.getvalue()
