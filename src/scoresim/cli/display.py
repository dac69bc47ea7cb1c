"""Terminal rendering of a running game using rich."""

from __future__ import annotations

from typing import TYPE_CHECKING, override

from rich import get_console
from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from scoresim.core.display import DisplayAdapter
from scoresim.engine.summary import compute_live_stats, progress_percent, rank_players

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from scoresim.core.state import LogEntry, PlayerSnapshot
    from scoresim.engine.summary import GameSummary

LOG_TAIL = 8

CATEGORY_STYLE = {
    "info": "white",
    "score": "#23d18b",
    "bonus": "bold #f5f543",
    "penalty": "bold bright_red",
    "start": "bold #29b8db",
    "end": "bold #29b8db",
}


def build_player_table(players: Sequence[PlayerSnapshot]) -> Table:
    table = Table(title="Leaderboard", expand=True)
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Score", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Bonuses", justify="right")
    table.add_column("Penalties", justify="right")
    table.add_column("Rate", justify="right")

    for rank, p in enumerate(rank_players(players), start=1):
        table.add_row(
            str(rank),
            Text(p.name, style=f"bold {p.color}"),
            str(p.score),
            f"{p.avg_score:.2f}",
            f"{p.total_attempts} ({p.successful_scores} ok)",
            str(p.bonuses),
            str(p.penalties),
            f"{p.success_rate:.0f}%",
        )
    return table


def build_stats_line(players: Sequence[PlayerSnapshot]) -> Text:
    stats = compute_live_stats(players)
    return Text(
        f"Total: {stats.total_score}  Avg: {stats.mean_score:.2f}  "
        f"High: {stats.max_score}  Low: {stats.min_score}",
    )


def build_log_panel(entries: Sequence[LogEntry], start: float | None) -> Panel:
    if not entries:
        body = Text("No activity yet. Start the simulation!", style="grey50")
    else:
        body = Text()
        for entry in entries[:LOG_TAIL]:
            offset = entry.timestamp - start if start is not None else entry.timestamp
            body.append(f"[{offset:7.3f}s] ", style="grey50")
            body.append(entry.message, style=CATEGORY_STYLE[entry.category])
            body.append("\n")
    return Panel(body, title="Activity")


class ConsoleDisplay(DisplayAdapter):
    """Live leaderboard, progress bar and newest-first activity log."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or get_console()
        self.players: Sequence[PlayerSnapshot] = ()
        self.entries: Sequence[LogEntry] = ()
        self.current: int = 0
        self.maximum: int = 0
        self._live: Live | None = None
        self._start: float | None = None

    def render(self) -> Group:
        percent = progress_percent(self.current, self.maximum)
        progress = Group(
            ProgressBar(total=max(self.maximum, 1), completed=self.current),
            Text(f"{self.current}/{self.maximum} updates ({percent:.1f}%)"),
        )
        return Group(
            build_player_table(self.players),
            build_stats_line(self.players),
            progress,
            build_log_panel(self.entries, self._start),
        )

    def _refresh(self) -> None:
        if self._live is not None:
            self._live.update(self.render(), refresh=True)

    @override
    def on_players_changed(self, players: Sequence[PlayerSnapshot]) -> None:
        self.players = players
        self._refresh()

    @override
    def on_log_appended(self, entries: Sequence[LogEntry]) -> None:
        self.entries = entries
        if entries and entries[-1].category == "start":
            self._start = entries[-1].timestamp
        self._refresh()

    @override
    def on_progress(self, current: int, maximum: int) -> None:
        self.current = current
        self.maximum = maximum
        self._refresh()

    @override
    def on_game_started(self) -> None:
        if self._live is None:
            self._live = Live(self.render(), console=self.console, auto_refresh=False)
            self._live.start()

    @override
    def on_game_finished(self, summary: GameSummary) -> None:
        self._refresh()
        self._stop()
        winner = summary.winner
        if winner is not None:
            banner = Text.assemble(
                ("WINNER: ", "bold"),
                (winner.name, f"bold {winner.color}"),
                f" with {winner.score} points!",
            )
        else:
            banner = Text("No players took part.", style="bold")
        self.console.print(Panel(banner, subtitle=f"Duration: {summary.duration:.2f}s"))

    @override
    def on_game_reset(self) -> None:
        self._stop()
        self._start = None

    def _stop(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
