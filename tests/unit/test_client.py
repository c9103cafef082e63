# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io
import threading

import httpx
import pytest

import typedhttp.client as client_module
from typedhttp import Client, ClientSettings, HttpError, default, get, new
from typedhttp import opts


def make_client(handler) -> Client:
    return Client(ClientSettings(), transport=httpx.MockTransport(handler))


def test_client_applies_settings():
    client = Client(ClientSettings(timeout=3.5, user_agent="UA/1.0", follow_redirects=False, max_redirects=4))
    assert client.http.timeout.read == 3.5
    assert client.http.headers["user-agent"] == "UA/1.0"
    assert client.http.follow_redirects is False
    assert client.http.max_redirects == 4
    assert client.raw() is client.http
    client.close()


def test_clone_isolates_defaults_and_shares_transport_cookie_jar_and_mapper():
    mapper = lambda response: RuntimeError("mapped")  # noqa: E731
    original = make_client(lambda request: httpx.Response(200))
    original.set_header("X-Base", "1").set_base_url("https://api.test").set_error_mapper(mapper)
    original.use(lambda client, request: None)

    twin = original.clone()
    twin.set_header("X-Twin", "1").set_timeout(1).set_base_url("https://other.test")
    twin.use(lambda client, request: None)
    twin.on_after_response(lambda client, response: None)
    twin.http.cookies.set("session", "abc")

    assert twin._transport is original._transport
    assert twin.error_mapper is original.error_mapper
    assert twin.http is not original.http
    assert twin.http.headers["x-base"] == "1"
    assert "x-twin" not in original.http.headers
    assert original.http.base_url.host == "api.test"
    assert original.http.timeout.read == ClientSettings().timeout
    assert original.settings.timeout == ClientSettings().timeout
    assert len(original.middlewares) == 1
    assert len(twin.middlewares) == 2
    assert original.after_response == []
    assert twin.http.cookies.jar is original.http.cookies.jar
    assert original.http.cookies.get("session") == "abc"


def test_new_applies_client_options_in_order(monkeypatch):
    monkeypatch.delenv("HTTP_TRACE", raising=False)
    client = new(opts.header("X", "1"), None, opts.header("X", "2").user_agent("app/2"))
    assert client.http.headers["x"] == "2"
    assert client.http.headers["user-agent"] == "app/2"
    assert client.dump_enabled is False
    client.close()


def test_new_enables_dump_all_when_trace_present(monkeypatch):
    monkeypatch.setenv("HTTP_TRACE", "")
    client = new()
    assert client.settings.trace is True
    assert client.dump_enabled is True
    client.close()


def test_default_is_a_singleton_under_concurrent_first_use(monkeypatch):
    monkeypatch.setattr(client_module, "_default_client", None)
    built = []
    real_new = client_module.new

    def counting_new(*options):
        built.append(1)
        return real_new(*options)

    monkeypatch.setattr(client_module, "new", counting_new)
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(default())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(built) == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)
    assert default() is results[0]


def test_map_error_falls_back_when_mapper_returns_none():
    client = make_client(lambda request: httpx.Response(418))
    client.set_error_mapper(lambda response: None)
    res = get(client, "https://api.test/")
    assert isinstance(res.error, HttpError)
    assert res.error.status_code == 418


def test_client_after_response_hooks_run_before_request_hooks():
    order = []
    client = make_client(lambda request: httpx.Response(200, text="ok"))
    client.on_after_response(lambda c, response: order.append("client"))
    get(
        client,
        "https://api.test/",
        opts.before(lambda request: request.on_after_response(lambda c, response: order.append("request"))),
        result=str,
    )
    assert order == ["client", "request"]


def test_enable_dump_all_writes_every_exchange():
    output = io.StringIO()
    client = make_client(lambda request: httpx.Response(200, text="pong"))
    client.enable_dump_all(output)
    get(client, "https://api.test/ping", result=str)
    get(client, "https://api.test/ping", opts.header("X", "1"), result=str)
    assert output.getvalue().count("GET /ping HTTP/1.1") == 2


def test_client_context_manager_closes_http():
    with Client(ClientSettings()) as client:
        http = client.http
    assert http.is_closed


@pytest.mark.parametrize("count", [-1, 0, 5])
def test_set_retries_clamps_negative(count):
    client = Client(ClientSettings())
    client.set_retries(count)
    assert client._retries == max(count, 0)
    client.close()


class CountingTransport(httpx.MockTransport):
    def __init__(self, handler) -> None:
        super().__init__(handler)
        self.closed = 0

    def close(self) -> None:
        self.closed += 1


def counting_builder(monkeypatch, handler) -> list[CountingTransport]:
    built: list[CountingTransport] = []

    def build(self):
        transport = CountingTransport(handler)
        built.append(transport)
        return transport

    monkeypatch.setattr(Client, "_build_transport", build)
    return built


def test_cookies_set_during_a_call_with_options_reach_the_client():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login":
            return httpx.Response(200, headers={"Set-Cookie": "sid=abc; Path=/"}, text="ok")
        return httpx.Response(200, text=request.headers.get("cookie", ""))

    client = make_client(handler)
    login = get(client, "https://api.test/login", opts.header("X-Trace", "1"), result=str)
    assert login.error is None

    me = get(client, "https://api.test/me", result=str)
    assert me.body == "sid=abc"
    assert client.http.cookies.get("sid") == "abc"


def test_call_closes_transport_built_by_its_clone(monkeypatch):
    built = counting_builder(monkeypatch, lambda request: httpx.Response(200, text="ok"))
    client = Client(ClientSettings())
    assert client.owns_transport

    for _ in range(3):
        result = get(client, "https://api.test/ping", opts.retry_count(2), result=str)
        assert result.body == "ok"

    assert len(built) == 4
    assert [transport.closed for transport in built[1:]] == [1, 1, 1]
    assert built[0].closed == 0
    assert not client.http.is_closed


def test_call_leaves_shared_transport_open(monkeypatch):
    built = counting_builder(monkeypatch, lambda request: httpx.Response(200))
    client = Client(ClientSettings())
    twin = client.clone()
    assert not twin.owns_transport

    get(client, "https://api.test/ping", opts.header("X", "1"))
    assert built[0].closed == 0
    assert not client.http.is_closed


def test_replacing_an_owned_transport_closes_the_old_one(monkeypatch):
    built = counting_builder(monkeypatch, lambda request: httpx.Response(200))
    custom = CountingTransport(lambda request: httpx.Response(204))

    client = new(opts.transport(custom))
    assert built[0].closed == 1
    assert custom.closed == 0
    assert not client.owns_transport

    client.set_proxy("http://proxy.test:8080")
    assert len(built) == 1


def test_rebuilding_transport_closes_the_previous_build(monkeypatch):
    built = counting_builder(monkeypatch, lambda request: httpx.Response(200))
    client = Client(ClientSettings())
    client.set_retries(3)
    assert built[0].closed == 1
    assert built[1].closed == 0
    assert client.owns_transport
    client.close()
    assert built[1].closed == 1


def test_twin_rebuild_does_not_close_shared_transport(monkeypatch):
    built = counting_builder(monkeypatch, lambda request: httpx.Response(200))
    client = Client(ClientSettings())
    twin = client.clone()
    twin.set_retries(1)
    assert built[0].closed == 0
    assert twin.owns_transport
    assert not client.http.is_closed
