# rideshare_recon/utilities/flags.py
"""
Persisted boolean flags (one-time migrations and similar).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict

from typing_extensions import Protocol, runtime_checkable

log = logging.getLogger(__name__)


@runtime_checkable
class IFlagStore(Protocol):
    def get_flag(self, name: str) -> bool: ...
    def set_flag(self, name: str, value: bool = True) -> None: ...


class InMemoryFlagStore:
    """Flags that live as long as the process."""

    def __init__(self, initial: Dict[str, bool] | None = None) -> None:
        self._flags: Dict[str, bool] = dict(initial or {})

    def get_flag(self, name: str) -> bool:
        return self._flags.get(name, False)

    def set_flag(self, name: str, value: bool = True) -> None:
        self._flags[name] = bool(value)


class JsonFlagStore:
    """
    Flags persisted as a flat JSON object of ``{"name": true}`` pairs.

    A missing file reads as "no flags set"; the file is created on the first
    write.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, bool]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Flag file {self.path} does not hold a JSON object")
        return {str(k): bool(v) for k, v in data.items()}

    def get_flag(self, name: str) -> bool:
        return self._load().get(name, False)

    def set_flag(self, name: str, value: bool = True) -> None:
        data = self._load()
        data[name] = bool(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        log.debug("Flag %s=%s written to %s", name, value, self.path)


if TYPE_CHECKING:
    _mem: IFlagStore = InMemoryFlagStore()
    _json: IFlagStore = JsonFlagStore("flags.json")
