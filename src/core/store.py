"""
Persistence for time-sheet state.

Callers receive a store and never reach into global storage. A store holds
one JSON-serializable state document.
"""

import json
from pathlib import Path
from typing import Protocol


class StateStore(Protocol):
    def load(self) -> dict: ...

    def save(self, state: dict) -> None: ...


class MemoryStore:
    """Keeps state in memory (tests, single request handling)."""

    def __init__(self, state: dict | None = None):
        self._state = json.loads(json.dumps(state)) if state else {}

    def load(self) -> dict:
        return json.loads(json.dumps(self._state))

    def save(self, state: dict) -> None:
        self._state = json.loads(json.dumps(state))


class JsonFileStore:
    """Keeps state in a JSON file; a missing file loads as empty state."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def save(self, state: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2)
        tmp_path.replace(self.path)
