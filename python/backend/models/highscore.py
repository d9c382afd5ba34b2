"""Best-score and aggregate-stats persistence.

Persistence is best-effort: every storage failure is logged and
replaced with a safe default so gameplay never stops on a bad disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "best score"
STATS_KEY = "stats"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store; the default when no data directory is given."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Keeps every key in a single JSON object on disk."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath

    def _read(self) -> dict[str, str]:
        if not self.filepath.exists():
            return {}
        try:
            data = json.loads(self.filepath.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read %s: %s", self.filepath, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            self.filepath.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write %s: %s", self.filepath, e)


@dataclass
class Stats:
    total_fixed: int = 0
    games_played: int = 0
    max_combo: int = 0

    def to_json(self) -> str:
        return json.dumps(
            {
                "totalFixed": self.total_fixed,
                "gamesPlayed": self.games_played,
                "maxCombo": self.max_combo,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> Stats:
        data = json.loads(raw)
        return cls(
            total_fixed=int(data.get("totalFixed", 0)),
            games_played=int(data.get("gamesPlayed", 0)),
            max_combo=int(data.get("maxCombo", 0)),
        )


class HighScoreManager:
    """Reads and writes the best score and cumulative stats."""

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self.store: KeyValueStore = store if store is not None else MemoryStore()

    # -- best score -----------------------------------------------------------

    def get_best(self) -> int:
        try:
            raw = self.store.get(BEST_SCORE_KEY)
            return int(raw) if raw else 0
        except Exception as e:  # collaborator failures are never fatal
            logger.warning("Could not load best score: %s", e)
            return 0

    def submit_score(self, score: int) -> bool:
        """Store *score* if it beats the current best.  Returns True if it did."""
        if score <= self.get_best():
            return False
        try:
            self.store.set(BEST_SCORE_KEY, str(score))
        except Exception as e:
            logger.warning("Could not save best score: %s", e)
            return False
        return True

    # -- stats ----------------------------------------------------------------

    def get_stats(self) -> Stats:
        try:
            raw = self.store.get(STATS_KEY)
            return Stats.from_json(raw) if raw else Stats()
        except Exception as e:
            logger.warning("Could not load stats: %s", e)
            return Stats()

    def record_game(self, fixed: int, max_combo: int) -> Stats:
        stats = self.get_stats()
        stats.total_fixed += fixed
        stats.games_played += 1
        stats.max_combo = max(stats.max_combo, max_combo)
        try:
            self.store.set(STATS_KEY, stats.to_json())
        except Exception as e:
            logger.warning("Could not save stats: %s", e)
        return stats
