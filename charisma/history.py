"""
Charisma — history.py
Append-only generation history kept as one indented JSON array on disk.

Every call reloads the file, so the log survives across runs and nothing is
cached between menu actions. Writes go through a temporary file in the same
directory followed by os.replace, so a reader never sees half a file.
"""
from __future__ import annotations

import json, os, tempfile
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

from charisma.errors import PersistenceError
from charisma.log import get_logger

log = get_logger("history")

_FIELDS = ("timestamp", "prompt", "language", "file_path")
# keys written by the first releases of the tool
_LEGACY_KEYS = {"lang": "language", "file": "file_path"}


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: str
    prompt: str
    language: str
    file_path: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "HistoryEntry":
        if not isinstance(raw, dict):
            raise PersistenceError(f"history entry is not an object: {raw!r}")
        data = {_LEGACY_KEYS.get(k, k): v for k, v in raw.items()}
        missing = [f for f in _FIELDS if f not in data]
        if missing:
            raise PersistenceError(f"history entry missing {', '.join(missing)}: {raw!r}")
        return cls(**{f: str(data[f]) for f in _FIELDS})


class HistoryStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def entries(self) -> List[HistoryEntry]:
        """Load the whole log. A missing file is an empty log."""
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"history file {self.path} is corrupt: {exc}") from exc
        except OSError as exc:
            raise PersistenceError(f"cannot read history file {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise PersistenceError(f"history file {self.path} does not hold a JSON array")
        return [HistoryEntry.from_dict(item) for item in raw]

    def recent(self, n: int) -> List[HistoryEntry]:
        if n <= 0:
            return []
        return self.entries()[-n:]

    def append(self, entry: HistoryEntry) -> None:
        current = self.entries()
        current.append(entry)
        self._write(current)
        log.info("history: %d entries, appended %s", len(current), entry.file_path)

    def record(self, prompt: str, language: str, file_path: Union[str, Path]) -> HistoryEntry:
        entry = HistoryEntry(timestamp=utc_timestamp(), prompt=prompt,
                             language=language, file_path=str(file_path))
        self.append(entry)
        return entry

    def _write(self, entries: List[HistoryEntry]) -> None:
        payload = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=self.path.parent,
                                             prefix=f".{self.path.name}.", suffix=".tmp",
                                             delete=False) as fh:
                tmp = fh.name
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path)
        except OSError as exc:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise PersistenceError(f"cannot write history file {self.path}: {exc}") from exc
