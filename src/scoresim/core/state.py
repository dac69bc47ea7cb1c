from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import msgspec

from scoresim.core.types import LogCategory, PlayerName

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class GameRules:
    """Fixed constants of the game. Not exposed as user configuration."""

    player_count: int = 4
    updates_per_player: int = 10
    penalty_chance: int = 15  # percent
    penalty_min: int = 1
    penalty_max: int = 5
    gain_min: int = 0
    gain_max: int = 9
    bonus_threshold: int = 50
    bonus_band: int = 10
    bonus_band_points: int = 10
    high_bonus_points: int = 15
    min_interval: float = 0.5  # seconds
    max_interval: float = 1.5
    log_capacity: int = 50

    @property
    def max_updates(self) -> int:
        return self.player_count * self.updates_per_player


class PlayerSnapshot(msgspec.Struct, frozen=True):
    """Read-only copy of a player handed to display adapters and summaries."""

    idx: int
    name: str
    color: str
    score: int
    total_attempts: int
    successful_scores: int
    penalties: int
    bonuses: int
    avg_score: float

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.successful_scores / self.total_attempts * 100


@dataclass(slots=True)
class PlayerState:
    idx: int
    name: PlayerName | str
    color: str = "#ffffff"
    score: int = 0
    total_attempts: int = 0
    successful_scores: int = 0
    penalties: int = 0
    bonuses: int = 0
    avg_score: float = 0.0

    @property
    def repr(self) -> str:
        return f"{self.idx}:{self.name}"

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.successful_scores / self.total_attempts * 100

    def recompute_average(self) -> None:
        self.avg_score = (
            self.score / self.total_attempts if self.total_attempts > 0 else 0.0
        )

    def reset(self) -> None:
        self.score = 0
        self.total_attempts = 0
        self.successful_scores = 0
        self.penalties = 0
        self.bonuses = 0
        self.avg_score = 0.0

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            idx=self.idx,
            name=str(self.name),
            color=self.color,
            score=self.score,
            total_attempts=self.total_attempts,
            successful_scores=self.successful_scores,
            penalties=self.penalties,
            bonuses=self.bonuses,
            avg_score=self.avg_score,
        )


class LogEntry(msgspec.Struct, frozen=True):
    timestamp: float
    message: str
    category: LogCategory = "info"


@dataclass(slots=True)
class LogBuffer:
    """Bounded activity log. Oldest entries are evicted first once full."""

    capacity: int = 50
    _entries: deque[LogEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            msg = f"Log capacity must be positive, got {self.capacity}"
            raise ValueError(msg)
        self._entries = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> tuple[LogEntry, ...]:
        """Insertion order, oldest first."""
        return tuple(self._entries)

    def newest_first(self) -> tuple[LogEntry, ...]:
        return tuple(reversed(self._entries))


@dataclass(slots=True)
class LogContext:
    """Per-engine logging state."""

    engine_id: int = 0
    game_number: int = 0
    update_number: int = 0
    current_player_repr: str = "_"

    def new_game(self):
        self.game_number += 1
        self.update_number = 0
        self.current_player_repr = "_"

    def start_update_log(self, player_repr: str):
        self.update_number += 1
        self.current_player_repr = player_repr

    def clear_player(self):
        self.current_player_repr = "_"
