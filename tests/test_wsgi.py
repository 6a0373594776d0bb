"""Tests for the WSGI transport."""

import io
import json

from smartdispatch import Controller, Dispatcher, action
from smartdispatch.http.wsgi import DispatchApp, environ_headers, request_from_environ


class Notes(Controller):
    controller_name = "Note"

    def __init__(self):
        super().__init__()
        self.seen = []

    @action()
    def show(self, ctx):
        self.seen.append(ctx)
        return {"id": ctx.url_params["id"], "agent": ctx.headers.get("User-Agent")}

    @action()
    def text(self, ctx):
        return "plain text"

    @action()
    def clear(self, ctx):
        return None

    @action()
    def create(self, ctx):
        self.seen.append(ctx)
        return ctx.data


def environ(method="GET", path="/", query="", body=b"", **extra):
    env = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "QUERY_STRING": query,
        "CONTENT_LENGTH": str(len(body)) if body else "",
        "CONTENT_TYPE": "application/json" if body else "",
        "wsgi.input": io.BytesIO(body),
    }
    env.update(extra)
    return env


def call(app, env):
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(env, start_response))
    return captured["status"], captured["headers"], body


def make_app():
    notes = Notes()
    dispatcher = Dispatcher(controllers=[notes])
    dispatcher.get("/notes/show/:id")
    dispatcher.get("/notes/text")
    dispatcher.delete("/notes/clear")
    dispatcher.post("/notes/create")
    return DispatchApp(dispatcher), notes


def test_environ_headers():
    env = environ(HTTP_USER_AGENT="pytest", HTTP_X_REQUEST_ID="abc", CONTENT_TYPE="text/plain")
    headers = environ_headers(env)
    assert headers["User-Agent"] == "pytest"
    assert headers["X-Request-Id"] == "abc"
    assert headers["Content-Type"] == "text/plain"


def test_request_from_environ_keeps_query_and_body():
    request = request_from_environ(environ("POST", "/notes/create", "a=1", b'{"x": 1}'))
    assert request.method == "POST"
    assert request.uri == "/notes/create?a=1"
    assert request.path == "/notes/create"
    assert request.query == {"a": ["1"]}
    assert request.body == b'{"x": 1}'


def test_json_response():
    app, notes = make_app()
    status, headers, body = call(app, environ("GET", "/notes/show/7", HTTP_USER_AGENT="ua"))
    assert status == "200 OK"
    assert headers["Content-Type"] == "application/json"
    assert json.loads(body) == {"id": "7", "agent": "ua"}
    assert notes.seen[0].headers["User-Agent"] == "ua"


def test_text_response():
    app, _ = make_app()
    status, headers, body = call(app, environ("GET", "/notes/text"))
    assert status == "200 OK"
    assert headers["Content-Type"].startswith("text/plain")
    assert body == b"plain text"


def test_empty_response():
    app, _ = make_app()
    status, headers, body = call(app, environ("delete", "/notes/clear"))
    assert status == "204 No Content"
    assert body == b""


def test_post_body_reaches_action():
    app, notes = make_app()
    status, _, body = call(app, environ("POST", "/notes/create", body=b'{"title": "hi"}'))
    assert status == "200 OK"
    assert json.loads(body) == {"title": "hi"}
    assert notes.seen[0].data == {"title": "hi"}


def test_not_found_response():
    app, _ = make_app()
    status, headers, body = call(app, environ("GET", "/orders"))
    assert status == "404 Not Found"
    assert body == b"404 Not Found"
    assert headers["Content-Length"] == str(len(body))


def test_not_found_custom_status():
    dispatcher = Dispatcher(not_found_status=599, not_found_body="nope")
    status, _, body = call(DispatchApp(dispatcher), environ("GET", "/x"))
    assert status == "599"
    assert body == b"nope"
