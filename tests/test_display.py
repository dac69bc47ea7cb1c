import io
import logging

from rich.console import Console
from rich.text import Text

from scoresim.cli.display import ConsoleDisplay, build_log_panel, build_player_table
from scoresim.core.state import LogEntry, PlayerState
from scoresim.engine.logging import GameLogHighlighter, RichMarkupFormatter
from scoresim.engine.scenario import GameScenario


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, force_terminal=False, record=True)


def test_console_display_renders_winner_banner():
    console = make_console()
    scenario = GameScenario(seed=8, display=ConsoleDisplay(console), verbose=False)
    summary = scenario.run_to_completion()

    output = console.export_text()
    assert "WINNER:" in output
    assert summary.winner_name in output
    assert "Duration:" in output


def test_player_table_is_ranked():
    players = [
        PlayerState(0, "Alpha", score=5).snapshot(),
        PlayerState(1, "Beta", score=50).snapshot(),
    ]
    console = make_console()
    console.print(build_player_table(players))
    output = console.export_text()
    assert output.index("Beta") < output.index("Alpha")


def test_empty_log_panel_placeholder():
    console = make_console()
    console.print(build_log_panel((), None))
    assert "No activity yet" in console.export_text()


def test_log_panel_shows_relative_time():
    console = make_console()
    entries = (LogEntry(12.5, "GAME OVER - All updates completed", "end"),)
    console.print(build_log_panel(entries, start=10.0))
    assert "2.500s" in console.export_text()


def test_formatter_prefix_and_highlighter():
    record = logging.LogRecord(
        "scoresim.engine.0", logging.INFO, __file__, 1, "BONUS EARNED - Player Beta", None, None
    )
    record.engine_id = 3
    record.game_number = 2
    record.update_number = 7
    record.player_repr = "1:Beta"

    formatted = RichMarkupFormatter().format(record)
    assert "3:2  7.1:Beta" in formatted
    assert formatted.endswith("BONUS EARNED - Player Beta")

    text = Text("BONUS EARNED - Player Beta: +10 points (Total: 64)")
    GameLogHighlighter().highlight(text)
    assert text.spans


def test_render_shows_progress_percent():
    display = ConsoleDisplay(make_console())
    display.on_progress(10, 40)

    display.console.print(display.render())
    assert "10/40 updates (25.0%)" in display.console.export_text()
