"""Key-value settings store holding the OpenAI credential."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """Async string key-value store. Values are a string or absent."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a non-empty value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""


def _require_value(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Please enter a key.")
    return value


class MemorySettingsStore(SettingsStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key) or None

    async def set(self, key: str, value: str) -> None:
        self._data[key] = _require_value(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSettingsStore(SettingsStore):
    """Settings persisted as a flat JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            logger.warning("Ignoring unreadable or corrupt settings file %s: %s", self.path, exc)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)} if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        self.path.chmod(0o600)

    async def get(self, key: str) -> str | None:
        return self._read().get(key) or None

    async def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = _require_value(value)
        self._write(data)

    async def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
