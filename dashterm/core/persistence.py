"""Dashboard snapshot storage on disk and over HTTP."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import httpx
from dashterm.config import HTTP_TIMEOUT_SECONDS, STATE_PATH
from textual import log


class RemoteLoader(Protocol):
    async def fetch_json(self, url: str) -> Any: ...


class HttpLoader:
    """Fetches a JSON document with httpx."""

    def __init__(self, timeout: float = HTTP_TIMEOUT_SECONDS, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch_json(self, url: str) -> Any:
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self.transport) as client:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.json()


class SnapshotStore:
    """Keeps the latest dashboard snapshot in a JSON file."""

    def __init__(self, path: str | Path = STATE_PATH):
        self.path = Path(path).expanduser()
        self._last_saved: str | None = None

    def load(self) -> Any | None:
        if not self.path.is_file():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = json.loads(raw)
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"Could not read dashboard state from {self.path}: {e}")
            return None
        self._last_saved = json.dumps(snapshot, sort_keys=True)
        return snapshot

    def save(self, snapshot: dict[str, Any]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            log.error(f"Could not save dashboard state to {self.path}: {e}")
            return False
        self._last_saved = json.dumps(snapshot, sort_keys=True)
        return True

    def save_if_changed(self, snapshot: dict[str, Any]) -> bool:
        """Writes only when the snapshot differs from the last one written or read."""
        try:
            current = json.dumps(snapshot, sort_keys=True)
        except (TypeError, ValueError) as e:
            log.error(f"Dashboard state is not serializable: {e}")
            return False
        if current == self._last_saved:
            return False
        return self.save(snapshot)
