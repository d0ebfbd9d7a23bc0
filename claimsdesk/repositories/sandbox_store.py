from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from claimsdesk.core.config import get_settings
from claimsdesk.schemas.sandbox import SandboxState

logger = logging.getLogger(__name__)

SANDBOX_KEY = "hypothetical-deals-sandbox"


class SandboxStore:
    """Key-value JSON file holding the what-if sandbox state."""

    # Shared by every store so request threads serialize read-modify-write cycles.
    _lock: RLock = RLock()

    def __init__(self, path: str | None = None) -> None:
        self.path = Path(path or get_settings().sandbox_store_path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read sandbox store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self) -> SandboxState:
        with self._lock:
            raw = self._read_all().get(SANDBOX_KEY)
        if raw is None:
            return SandboxState()
        try:
            return SandboxState.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Discarding malformed sandbox state: %s", exc)
            return SandboxState()

    def save(self, state: SandboxState) -> None:
        with self._lock:
            data = self._read_all()
            data[SANDBOX_KEY] = state.model_dump(mode="json", by_alias=True)
            try:
                self._write_all(data)
            except OSError as exc:
                logger.warning("Failed to write sandbox store %s: %s", self.path, exc)

    def update(self, change: Callable[[SandboxState], Optional[SandboxState]]) -> SandboxState:
        """Load, change and save the state while holding the store lock.

        ``change`` may mutate the state in place or return a replacement. If it
        raises, nothing is written.
        """
        with self._lock:
            state = self.load()
            state = change(state) or state
            self.save(state)
            return state
