from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, override, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoresim.core.state import LogEntry, PlayerSnapshot
    from scoresim.engine.summary import GameSummary


@runtime_checkable
class DisplayAdapter(Protocol):
    """
    Presentation collaborator of the GameEngine.

    The engine only ever hands out immutable snapshots; adapters must not
    reach back into engine state.
    """

    def on_players_changed(self, players: Sequence[PlayerSnapshot]) -> None: ...

    def on_log_appended(self, entries: Sequence[LogEntry]) -> None: ...

    def on_progress(self, current: int, maximum: int) -> None: ...

    def on_game_started(self) -> None: ...

    def on_game_finished(self, summary: GameSummary) -> None: ...

    def on_game_reset(self) -> None: ...


class NullDisplay(DisplayAdapter):
    """Display that renders nothing. Used for headless and batch runs."""

    @override
    def on_players_changed(self, players: Sequence[PlayerSnapshot]) -> None:
        pass

    @override
    def on_log_appended(self, entries: Sequence[LogEntry]) -> None:
        pass

    @override
    def on_progress(self, current: int, maximum: int) -> None:
        pass

    @override
    def on_game_started(self) -> None:
        pass

    @override
    def on_game_finished(self, summary: GameSummary) -> None:
        pass

    @override
    def on_game_reset(self) -> None:
        pass
