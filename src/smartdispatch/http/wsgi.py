"""WSGI transport for a Dispatcher.

``DispatchApp`` builds a ``RequestView`` from the environ, dispatches it and
writes the response:

- not found: the configured status (404) with the fixed text body;
- action returned ``bytes``/``str``: sent as ``text/plain``;
- action returned ``None``: ``204 No Content``;
- anything else: JSON-encoded as ``application/json``.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, Iterable, List, Tuple

from .dispatcher import Dispatcher, DispatchOutcome
from .request import RequestView

__all__ = ["DispatchApp", "request_from_environ"]

logger = logging.getLogger("smartdispatch.wsgi")

_UNPREFIXED_HEADERS = {"CONTENT_TYPE": "Content-Type", "CONTENT_LENGTH": "Content-Length"}


def _header_name(key: str) -> str:
    return "-".join(part.capitalize() for part in key.split("_"))


def environ_headers(environ: Dict[str, Any]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[_header_name(key[5:])] = value
        elif key in _UNPREFIXED_HEADERS and value:
            headers[_UNPREFIXED_HEADERS[key]] = value
    return headers


def _read_body(environ: Dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    return environ["wsgi.input"].read(length)


def request_from_environ(environ: Dict[str, Any]) -> RequestView:
    uri = environ.get("PATH_INFO") or "/"
    query = environ.get("QUERY_STRING")
    if query:
        uri = f"{uri}?{query}"
    return RequestView(
        method=environ.get("REQUEST_METHOD", "GET"),
        uri=uri,
        headers=environ_headers(environ),
        body=_read_body(environ),
    )


def _status_line(code: int) -> str:
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


class DispatchApp:
    """WSGI application serving a Dispatcher."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    def __call__(self, environ: Dict[str, Any], start_response: Callable) -> Iterable[bytes]:
        request = request_from_environ(environ)
        outcome = self.dispatcher.dispatch(request)
        status, headers, body = self.render(outcome)
        logger.debug("%s %s -> %s", request.method, request.uri, status)
        start_response(status, headers)
        return [body]

    def render(self, outcome: DispatchOutcome) -> Tuple[str, List[Tuple[str, str]], bytes]:
        if not outcome:
            return self._text(outcome.status, outcome.body)
        result = outcome.result
        if result is None:
            return _status_line(204), [("Content-Length", "0")], b""
        if isinstance(result, (bytes, str)):
            return self._text(200, result)
        payload = json.dumps(result).encode("utf-8")
        return (
            _status_line(200),
            [("Content-Type", "application/json"), ("Content-Length", str(len(payload)))],
            payload,
        )

    def _text(self, code: int, body: Any) -> Tuple[str, List[Tuple[str, str]], bytes]:
        payload = body if isinstance(body, bytes) else str(body).encode("utf-8")
        return (
            _status_line(code),
            [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", str(len(payload)))],
            payload,
        )
