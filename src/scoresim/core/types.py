from __future__ import annotations

from enum import StrEnum
from typing import Literal

PlayerName = Literal[
    "Alpha",
    "Beta",
    "Gamma",
    "Delta",
]

LogCategory = Literal[
    "info",
    "score",
    "bonus",
    "penalty",
    "start",
    "end",
]

OutcomeKind = Literal[
    "score",
    "bonus",
    "penalty",
]


class GameStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
