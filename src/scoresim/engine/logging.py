from __future__ import annotations

import logging
import re
import weakref
from typing import TYPE_CHECKING, get_args, override

from rich.highlighter import Highlighter
from rich.logging import RichHandler

from scoresim.core.palettes import get_player_color
from scoresim.core.types import PlayerName

if TYPE_CHECKING:
    from rich.text import Text

    from scoresim.engine.game_engine import GameEngine

LOGGER_NAME = "scoresim"

PLAYER_NAMES = set(get_args(PlayerName))

# Captures "2:Gamma" or "Player Gamma"
# Group 1 (prefix): "2:" or "Player "
# Group 2 (name): "Gamma"
PLAYER_COMPOSITE_PATTERN = re.compile(
    rf"(?P<prefix>\d+:|Player )(?P<name>{'|'.join(map(re.escape, PLAYER_NAMES))})\b",
)

COLOR = {
    "score": "bold #23d18b",  # light green
    "bonus": "bold #f5f543",  # yellow
    "penalty": "bold bright_red",
    "lifecycle": "bold #29b8db",  # cyan
    "prefix": "grey50",
    "total": "bold",
}


class ContextFilter(logging.Filter):
    """Inject per-engine runtime context into every log record."""

    def __init__(self, engine: GameEngine, name: str = "") -> None:
        super().__init__(name)
        # The logger registry outlives engines; hold the engine weakly.
        self._engine: weakref.ref[GameEngine] = weakref.ref(engine)

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        engine = self._engine()
        if engine is None:
            return True
        logctx = engine.log_context
        record.engine_id = logctx.engine_id
        record.game_number = logctx.game_number
        record.update_number = logctx.update_number
        record.player_repr = logctx.current_player_repr
        return True


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        engine_id = getattr(record, "engine_id", 0)
        game_number = getattr(record, "game_number", 0)
        update_number = getattr(record, "update_number", 0)
        player_repr = getattr(record, "player_repr", "_")

        prefix = f"{engine_id}:{game_number} {update_number:>2}.{player_repr}"
        message = record.getMessage()

        # The Highlighter applies stronger colors on top of the grey prefix.
        return f"[{COLOR['prefix']}]{prefix:<16}[/{COLOR['prefix']}]  {message}"


class GameLogHighlighter(Highlighter):
    @override
    def highlight(self, text: Text) -> None:
        text.highlight_regex(r"\bSCORE UPDATE\b", COLOR["score"])
        text.highlight_regex(r"\bBONUS EARNED\b", COLOR["bonus"])
        text.highlight_regex(r"\bPENALTY\b", COLOR["penalty"])
        text.highlight_regex(r"\bGAME (STARTED|OVER|RESET)\b", COLOR["lifecycle"])
        text.highlight_regex(r"\+\d+ points", COLOR["score"])
        text.highlight_regex(r"-\d+ points", COLOR["penalty"])
        text.highlight_regex(r"\(Total: \d+\)", COLOR["total"])

        for match in PLAYER_COMPOSITE_PATTERN.finditer(text.plain):
            prefix_span = match.span("prefix")
            name_span = match.span("name")
            hex_color = get_player_color(match.group("name"))

            if prefix_span[0] != -1:
                text.stylize(hex_color, start=prefix_span[0], end=prefix_span[1])
            text.stylize(f"bold {hex_color}", start=name_span[0], end=name_span[1])


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    handler = RichHandler(
        markup=True,
        show_path=False,
        show_time=False,
        highlighter=GameLogHighlighter(),
    )
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
