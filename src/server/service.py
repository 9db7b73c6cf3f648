"""Websocket server that streams clock events to the browser UI."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from http import HTTPStatus
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlsplit

from websockets.asyncio.server import Server, ServerConnection, broadcast, serve
from websockets.datastructures import Headers
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO
from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, make_event, parse_command

CommandHandler = Callable[[str], None]

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


def _http_response(status: HTTPStatus, body: bytes, content_type: str) -> Response:
    headers = Headers(
        [
            ("Content-Type", content_type),
            ("Content-Length", str(len(body))),
            ("Cache-Control", "no-store"),
        ]
    )
    return Response(status.value, status.phrase, headers, body)


class UIServer:
    """Serves the UI page and pushes events to websocket clients.

    The server owns an event loop on a daemon thread. ``publish`` and
    ``stop`` may be called from any thread. The command handler runs on the
    server thread, so it has to hand work over to the runtime loop
    (``RuntimeEngine.submit_command`` does).
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")

        index_html = Path(config.index_file).read_bytes()
        self._pages: dict[str, tuple[bytes, str]] = {
            ROOT_PATH: (index_html, _HTML),
            INDEX_PATH: (index_html, _HTML),
            HEALTHZ_PATH: (b"ok\n", _TEXT),
        }
        self._sticky_events = StickyEventStore()
        self._clients: set[ServerConnection] = set()
        self._command_handler: Optional[CommandHandler] = None

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._server: Optional[Server] = None
        self._ready = threading.Event()
        self._startup_error: Optional[BaseException] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._server is not None
            and self._thread is not None
            and self._thread.is_alive()
        )

    def set_command_handler(self, handler: Optional[CommandHandler]) -> None:
        self._command_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._ready.clear()
        self._startup_error = None
        self._thread = threading.Thread(
            target=self._thread_main,
            name="ui-server",
            daemon=True,
        )
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")

        error = self._startup_error
        if error is not None:
            self._thread.join(timeout_seconds)
            self._thread = None
            raise RuntimeError(f"UI server startup failed: {error}") from error

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        loop, server = self._loop, self._server
        if loop is not None and server is not None:
            # Closing the server also closes every client with 1001.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(server.close)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def publish(self, event_type: str, **payload) -> None:
        """Thread-safe: remember sticky state and broadcast to connected clients."""
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._broadcast, message)
        except RuntimeError:
            # Server loop is already closed.
            return

    def _thread_main(self) -> None:
        try:
            asyncio.run(self._serve())
        except Exception as error:
            if not self._ready.is_set():
                self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
        finally:
            self._server = None
            self._loop = None
            self._ready.set()

    async def _serve(self) -> None:
        async with serve(
            self._on_connection,
            self._config.host,
            self._config.port,
            process_request=self._route_request,
            logger=self._logger,
        ) as server:
            self._loop = asyncio.get_running_loop()
            self._server = server
            self._logger.info(
                "UI server listening on %s (websocket: %s)",
                self._config.base_url,
                self._config.websocket_path,
            )
            self._ready.set()
            await server.wait_closed()

    def _route_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Optional[Response]:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        page = self._pages.get(path)
        if page is None:
            return _http_response(HTTPStatus.NOT_FOUND, b"not found\n", _TEXT)
        body, content_type = page
        return _http_response(HTTPStatus.OK, body, content_type)

    async def _on_connection(self, websocket: ServerConnection) -> None:
        peer = websocket.remote_address
        self._logger.info("Client connected: %s", peer)

        # Greeting and replay are written without awaiting, so no broadcast
        # can slip in before the client is registered.
        broadcast([websocket], make_event(EVENT_HELLO, message="UI websocket connected"))
        for message in self._sticky_events.snapshot():
            broadcast([websocket], message)
        self._clients.add(websocket)

        try:
            async for message in websocket:
                self._dispatch_message(message)
        except ConnectionClosed as error:
            self._logger.debug("Connection to %s closed: %s", peer, error)
        finally:
            self._clients.discard(websocket)
            self._logger.info("Client disconnected: %s", peer)

    def _broadcast(self, message: str) -> None:
        if self._clients:
            broadcast(self._clients, message)

    def _dispatch_message(self, message: str | bytes) -> None:
        action = parse_command(message)
        if action is None:
            self._logger.debug("Ignoring message from UI: %s", message)
            return

        handler = self._command_handler
        if handler is None:
            self._logger.warning("No command handler registered; dropping %s", action)
            return

        try:
            handler(action)
        except Exception as error:
            self._logger.error("Command handler failed for %s: %s", action, error)
