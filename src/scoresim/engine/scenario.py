from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, get_args

from scoresim.core.display import NullDisplay
from scoresim.core.palettes import get_player_color
from scoresim.core.state import GameRules, PlayerState
from scoresim.core.types import GameStatus, PlayerName
from scoresim.engine.game_engine import GameEngine
from scoresim.engine.scheduler import VirtualClock

if TYPE_CHECKING:
    from scoresim.core.display import DisplayAdapter
    from scoresim.engine.scheduler import Scheduler
    from scoresim.engine.summary import GameSummary

DEFAULT_ROSTER: tuple[PlayerName, ...] = get_args(PlayerName)


@dataclass
class PlayerConfig:
    idx: int
    name: PlayerName | str
    color: str | None = None

    def build(self) -> PlayerState:
        return PlayerState(
            idx=self.idx,
            name=self.name,
            color=self.color or get_player_color(str(self.name)),
        )


def default_player_configs() -> list[PlayerConfig]:
    return [PlayerConfig(idx=i, name=name) for i, name in enumerate(DEFAULT_ROSTER)]


class GameScenario:
    """
    Wires a GameEngine to its collaborators.

    Defaults to the standard four-player roster on a VirtualClock, so a whole
    game can be played out instantly and reproducibly from a seed.
    """

    def __init__(
        self,
        players_config: list[PlayerConfig] | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        display: DisplayAdapter | None = None,
        rules: GameRules | None = None,
        verbose: bool = True,
    ):
        if players_config is None:
            players_config = default_player_configs()

        ids = [cfg.idx for cfg in players_config]
        if len(set(ids)) != len(ids):
            msg = f"Duplicate player ids in roster: {ids}"
            raise ValueError(msg)

        self.players: list[PlayerState] = [cfg.build() for cfg in players_config]
        self.rng: random.Random = rng if rng is not None else random.Random(seed)
        self.clock: VirtualClock | None = None
        if scheduler is None:
            self.clock = VirtualClock()
            scheduler = self.clock

        self.engine: GameEngine = GameEngine(
            players=self.players,
            rng=self.rng,
            scheduler=scheduler,
            display=display if display is not None else NullDisplay(),
            rules=rules if rules is not None else GameRules(),
            verbose=verbose,
        )

    @property
    def status(self) -> GameStatus:
        return self.engine.status

    def _require_clock(self) -> VirtualClock:
        if self.clock is None:
            msg = "Scenario is driven by an external scheduler"
            raise RuntimeError(msg)
        return self.clock

    def start(self) -> None:
        self.engine.start()

    def step(self) -> bool:
        """Fire the next scheduled update. False when nothing is pending."""
        return self._require_clock().step()

    def advance_time(self, seconds: float) -> int:
        return self._require_clock().advance(seconds)

    def run_to_completion(self) -> GameSummary:
        if self.engine.status is not GameStatus.RUNNING:
            self.engine.start()
        self._require_clock().run_until_idle()
        if self.engine.summary is None:
            msg = f"Game stopped in state {self.engine.status} without a summary"
            raise RuntimeError(msg)
        return self.engine.summary

    def get_player(self, idx: int) -> PlayerState:
        return self.engine.get_player(idx)
