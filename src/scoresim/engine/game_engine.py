import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from scoresim.core.display import DisplayAdapter, NullDisplay
from scoresim.core.state import (
    GameRules,
    LogBuffer,
    LogContext,
    LogEntry,
    PlayerState,
)
from scoresim.core.types import GameStatus, LogCategory
from scoresim.engine import ENGINE_ID_COUNTER
from scoresim.engine.flow import check_game_over, end_game
from scoresim.engine.logging import LOGGER_NAME, ContextFilter
from scoresim.engine.scheduler import Scheduler, TimerHandle
from scoresim.engine.scoring import UpdateOutcome, apply_update, describe_outcome
from scoresim.engine.summary import GameSummary, progress_percent

UpdateCallback = Callable[["GameEngine", PlayerState, UpdateOutcome], None]


@dataclass
class GameEngine:
    players: list[PlayerState]
    rng: random.Random
    scheduler: Scheduler
    display: DisplayAdapter = field(default_factory=NullDisplay)
    rules: GameRules = field(default_factory=GameRules)
    log_context: LogContext = field(default_factory=LogContext)

    # Callbacks for external observers
    on_update_applied: UpdateCallback | None = None
    on_game_over: Callable[["GameEngine"], None] | None = None
    verbose: bool = True

    status: GameStatus = field(default=GameStatus.IDLE, init=False)
    total_updates: int = field(default=0, init=False)
    start_time: float | None = field(default=None, init=False)
    end_time: float | None = field(default=None, init=False)
    summary: GameSummary | None = field(default=None, init=False)
    logs: LogBuffer = field(init=False)

    # The single outstanding advance() call, if any.
    _pending: TimerHandle | None = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.log_context.engine_id = next(ENGINE_ID_COUNTER)
        base = logging.getLogger(LOGGER_NAME).getChild("engine")

        # Quiet engines never log and share the base logger.
        if self.verbose:
            self._logger = base.getChild(str(id(self)))
            # Names follow id(self); a filter left here belongs to a dead engine.
            self._logger.filters.clear()
            self._logger.addFilter(ContextFilter(self))
        else:
            self._logger = base

        self.logs = LogBuffer(capacity=self.rules.log_capacity)

    # --- Lifecycle ---
    def start(self) -> None:
        if self.status is GameStatus.RUNNING:
            self.log_debug("start() ignored, game already running.")
            return

        self._cancel_pending()
        self.log_context.new_game()

        for player in self.players:
            player.reset()
        self.total_updates = 0
        self.end_time = None
        self.summary = None
        self.logs.clear()

        self.start_time = self.scheduler.time()
        self.status = GameStatus.RUNNING
        self.display.on_game_started()
        self.add_log("GAME STARTED - All players initialized", "start")
        self._notify_players()
        self._notify_progress()

        if not self.players:
            self.log_warning("No players on the roster. Finishing immediately.")
            end_game(self)
            return

        self._schedule_next()

    def reset(self) -> None:
        self._cancel_pending()

        self.status = GameStatus.IDLE
        self.total_updates = 0
        self.start_time = None
        self.end_time = None
        self.summary = None
        self.logs.clear()
        for player in self.players:
            player.reset()

        self.log_context.clear_player()
        self.log_info("GAME RESET")
        self.display.on_game_reset()
        self._notify_players()
        self.display.on_log_appended(self.logs.newest_first())
        self._notify_progress()

    # --- Main Loop ---
    def advance(self) -> None:
        """
        Scheduler callback: apply one update to one eligible player.

        The next update is armed before any display call, so an adapter that
        raises leaves the game RUNNING with its timer still pending.
        """
        self._pending = None
        if self.status is not GameStatus.RUNNING:
            # A callback that outlived its game. Nothing to do.
            return

        eligible = self.eligible_players()
        if not eligible:
            end_game(self)
            return

        player = self.rng.choice(eligible)
        self.log_context.start_update_log(player.repr)

        outcome = apply_update(player, self.rng, self.rules)
        self.total_updates += 1
        if self.eligible_players():
            self._schedule_next()

        self.add_log(describe_outcome(player, outcome), outcome.kind)
        self._notify_players()
        self._notify_progress()

        if self.on_update_applied:
            self.on_update_applied(self, player, outcome)

        _ = check_game_over(self)

    def _schedule_next(self) -> None:
        self._cancel_pending()
        delay = self.rules.min_interval + self.rng.random() * (
            self.rules.max_interval - self.rules.min_interval
        )
        self._pending = self.scheduler.call_later(delay, self.advance)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # --- Activity Log ---
    def add_log(self, message: str, category: LogCategory = "info") -> LogEntry:
        entry = LogEntry(
            timestamp=self.scheduler.time(),
            message=message,
            category=category,
        )
        self.logs.append(entry)
        self.log_info(message)
        self.display.on_log_appended(self.logs.newest_first())
        return entry

    # --- Display Notifications ---
    def _notify_players(self) -> None:
        self.display.on_players_changed([p.snapshot() for p in self.players])

    def _notify_progress(self) -> None:
        self.display.on_progress(self.total_updates, self.max_updates)

    # -- Getters for convenience --
    @property
    def max_updates(self) -> int:
        return len(self.players) * self.rules.updates_per_player

    @property
    def has_pending_update(self) -> bool:
        return self._pending is not None

    @property
    def progress_percent(self) -> float:
        return progress_percent(self.total_updates, self.max_updates)

    def eligible_players(self) -> list[PlayerState]:
        quota = self.rules.updates_per_player
        return [p for p in self.players if p.total_attempts < quota]

    def get_player(self, idx: int) -> PlayerState:
        return self.players[idx]

    # -- Logging --
    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Core logging helper; respects engine verbosity."""
        if not self.verbose:
            return
        self._logger.log(level, msg, *args, **kwargs)

    def log_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def log_info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def log_warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)
