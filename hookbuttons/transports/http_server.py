"""Threaded HTTP listener that feeds webhook requests into the button router."""

from __future__ import annotations

import json
import logging
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlsplit

from hookbuttons.core.errors import ListenerError
from hookbuttons.core.model import InboundRequest, RouteResponse
from hookbuttons.core.routing import ButtonRouter

DEFAULT_MAX_BODY_BYTES = 64 * 1024
LOGGER = logging.getLogger(__name__)

_SECURITY_HEADERS = (
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "SAMEORIGIN"),
    ("Referrer-Policy", "no-referrer"),
    ("X-DNS-Prefetch-Control", "off"),
)


class _BodyTooLarge(Exception):
    pass


class _BadChunkedBody(Exception):
    pass


def _flatten_params(params: dict[str, list[str]]) -> dict[str, Any]:
    return {key: values[0] if len(values) == 1 else values for key, values in params.items()}


def _parse_body(raw: bytes, content_type: str) -> tuple[dict[str, Any], str | None]:
    if not raw:
        return {}, None
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime == "application/json" or mime.endswith("+json"):
        try:
            loaded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return {}, "Malformed JSON body"
        return (loaded if isinstance(loaded, dict) else {}), None
    if mime == "application/x-www-form-urlencoded":
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return {}, "Malformed form body"
        return _flatten_params(parse_qs(text, keep_blank_values=True)), None
    return {}, None


class _ButtonRequestHandler(BaseHTTPRequestHandler):
    """Translates raw HTTP requests into router dispatches, one thread per request."""

    router: ButtonRouter | None = None
    max_request_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    server_version = "hookbuttons/0.1"

    def do_GET(self) -> None:  # noqa: N802
        self._handle()

    def do_POST(self) -> None:  # noqa: N802
        self._handle()

    def do_PUT(self) -> None:  # noqa: N802
        self._handle()

    def do_PATCH(self) -> None:  # noqa: N802
        self._handle()

    def do_DELETE(self) -> None:  # noqa: N802
        self._handle()

    def do_OPTIONS(self) -> None:  # noqa: N802
        self._handle()

    def do_HEAD(self) -> None:  # noqa: N802
        self._handle(include_body=False)

    def log_message(self, fmt: str, *args: Any) -> None:
        LOGGER.debug("webhook " + fmt, *args)

    def _handle(self, *, include_body: bool = True) -> None:
        try:
            if self.router is None:
                self._send(RouteResponse(status=HTTPStatus.SERVICE_UNAVAILABLE, body=b"Not ready."), include_body)
                return
            try:
                request = self._build_request()
            except _BadChunkedBody:
                self.close_connection = True
                self._send(RouteResponse(status=HTTPStatus.BAD_REQUEST, body=b"Malformed chunked body."), include_body)
                return
            except _BodyTooLarge:
                self._send(
                    RouteResponse(status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE, body=b"Request body too large."),
                    include_body,
                )
                return
            self._send(self.router.dispatch(request), include_body)
        except Exception:
            LOGGER.exception("Unhandled error while serving %s %s", self.command, self.path)
            self._send(
                RouteResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR, body=b"Server error."),
                include_body,
            )

    def _build_request(self) -> InboundRequest:
        parsed = urlsplit(self.path)
        body, body_error = _parse_body(self._read_body(), self.headers.get("Content-Type", ""))
        return InboundRequest(
            method=self.command,
            path=parsed.path or "/",
            query=_flatten_params(parse_qs(parsed.query, keep_blank_values=True)),
            body=body,
            headers={key.lower(): value for key, value in self.headers.items()},
            body_error=body_error,
        )

    def _read_body(self) -> bytes:
        if "chunked" in self.headers.get("Transfer-Encoding", "").lower():
            return self._read_chunked()
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = 0
        if length > self.max_request_body_bytes:
            self._discard(length)
            raise _BodyTooLarge()
        return self.rfile.read(length) if length > 0 else b""

    def _read_chunked(self) -> bytes:
        """Decode a chunked body, draining it fully before rejecting an oversized one."""
        body = bytearray()
        too_large = False
        while True:
            size_line = self.rfile.readline(1024)
            try:
                size = int(size_line.split(b";", 1)[0].strip(), 16)
            except ValueError as exc:
                raise _BadChunkedBody() from exc
            if size < 0:
                raise _BadChunkedBody()
            if size == 0:
                break
            if too_large or len(body) + size > self.max_request_body_bytes:
                too_large = True
                body.clear()
                self._discard(size)
            else:
                chunk = self.rfile.read(size)
                if len(chunk) != size:
                    raise _BadChunkedBody()
                body.extend(chunk)
            if self.rfile.readline(1024) not in (b"\r\n", b"\n"):
                raise _BadChunkedBody()
        # Trailer section ends with an empty line.
        while self.rfile.readline(1024) not in (b"\r\n", b"\n", b""):
            pass
        if too_large:
            raise _BodyTooLarge()
        return bytes(body)

    def _discard(self, length: int) -> None:
        remaining = length
        while remaining > 0:
            chunk = self.rfile.read(min(remaining, 65536))
            if not chunk:
                break
            remaining -= len(chunk)

    def _send(self, response: RouteResponse, include_body: bool) -> None:
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(response.body)))
        for header, value in _SECURITY_HEADERS:
            self.send_header(header, value)
        self.end_headers()
        if include_body:
            self.wfile.write(response.body)


class ButtonWebhookServer:
    """Threaded HTTP endpoint for inbound button push events."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        router: ButtonRouter,
        max_request_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ) -> None:
        self.host = host
        self.port = port
        self.router = router
        self.max_request_body_bytes = max(1024, int(max_request_body_bytes))
        self._thread: threading.Thread | None = None
        self._server: ThreadingHTTPServer | None = None

    def start(self) -> None:
        handler_cls = type("BoundButtonRequestHandler", (_ButtonRequestHandler,), {})
        handler_cls.router = self.router
        handler_cls.max_request_body_bytes = self.max_request_body_bytes
        try:
            self._server = ThreadingHTTPServer((self.host, self.port), handler_cls)
        except OSError as exc:
            LOGGER.error("HTTP server error: %s", exc)
            raise ListenerError(f"Could not listen on {self.host}:{self.port}: {exc}") from exc
        self.port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        LOGGER.info("Listening on port %s for inbound button push event notifications", self.port)

    def wait(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2)
        self._thread = None
