"""Validated settings for the websocket UI server."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"

_BUNDLED_INDEX = Path("web_ui") / "index.html"
_MIN_PORT = 1
_MAX_PORT = 65535


class ServerConfigurationError(Exception):
    """Raised when `[ui_server]` settings cannot be used to start the server."""


def default_index_file() -> Path:
    """Locate the bundled page; frozen builds unpack it under ``sys._MEIPASS``."""
    bundle_root = getattr(sys, "_MEIPASS", None)
    root = Path(bundle_root) if bundle_root else Path(__file__).resolve().parents[2]
    return root / _BUNDLED_INDEX


def _require_index_page(index_file: str) -> None:
    if not index_file:
        raise ServerConfigurationError("ui_server.index_file cannot be empty")

    path = Path(index_file)
    if not path.is_file():
        problem = "is not a file" if path.exists() else "was not found"
        raise ServerConfigurationError(f"ui_server.index_file {problem}: {path}")


@dataclass(frozen=True)
class UIServerConfig:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not _MIN_PORT <= self.port <= _MAX_PORT:
            raise ServerConfigurationError(
                f"ui_server.port must be between {_MIN_PORT} and {_MAX_PORT}, "
                f"got: {self.port}"
            )
        # A disabled server never reads the page.
        if self.enabled:
            _require_index_page(self.index_file)

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        """Build from `UIServerSettings`, defaulting to the bundled page."""
        index_file = (settings.index_file or "").strip() or str(default_index_file())
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            index_file=index_file,
        )
