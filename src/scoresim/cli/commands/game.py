"""CLI command for running a single live game."""

from __future__ import annotations

import asyncio
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import TYPE_CHECKING, Annotated

import cappa
import msgspec

from scoresim.cli.display import ConsoleDisplay
from scoresim.engine.logging import configure_logging
from scoresim.engine.scenario import GameScenario
from scoresim.engine.scheduler import ScaledScheduler
from scoresim.simulation.config import GameConfig, PartialGameConfig

if TYPE_CHECKING:
    from scoresim.core.display import DisplayAdapter
    from scoresim.engine.summary import GameSummary

logger = logging.getLogger(__name__)


async def play_game(
    config: GameConfig,
    display: DisplayAdapter | None = None,
) -> GameSummary:
    """Run one game on the running asyncio loop and wait for it to finish."""
    loop = asyncio.get_running_loop()
    finished: asyncio.Future[GameSummary] = loop.create_future()

    scenario = GameScenario(
        seed=config.seed,
        scheduler=ScaledScheduler(loop, speed=config.speed),
        display=display,
    )
    engine = scenario.engine

    def _on_game_over(_: object) -> None:
        if engine.summary is not None and not finished.done():
            finished.set_result(engine.summary)

    engine.on_game_over = _on_game_over
    engine.start()
    try:
        return await finished
    finally:
        # Cancelled or interrupted: drop the pending timer with the game.
        if not finished.done():
            engine.reset()


def run_console_game(config: GameConfig, *, as_json: bool = False) -> GameSummary:
    """Execute the game in the terminal and print the result."""
    logger.info(config.repr)
    display = None if as_json else ConsoleDisplay()
    try:
        summary = asyncio.run(play_game(config, display))
    except Exception:
        logger.exception("Game Error")
        raise

    if as_json:
        sys.stdout.write(msgspec.json.encode(summary).decode("utf-8") + "\n")
    return summary


@cappa.command(
    name="game",
    help="Run a single live game. Picks a random seed if none is given.",
)
@dataclass
class GameCommand:
    seed: Annotated[
        int | None,
        cappa.Arg(short="-s", long="--seed", help="RNG seed."),
    ] = None
    speed: Annotated[
        float | None,
        cappa.Arg(long="--speed", help="Time scale, 2.0 plays twice as fast."),
    ] = None
    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    encoding: Annotated[
        str | None,
        cappa.Arg(short="-e", long="--encoding", help="Base64 encoded configuration."),
    ] = None
    as_json: Annotated[
        bool,
        cappa.Arg(long="--json", help="Print the final summary as JSON only."),
    ] = False
    verbose: Annotated[
        bool,
        cappa.Arg(short="-v", long="--verbose", help="Show debug logging."),
    ] = False

    def __call__(self):
        final_seed: int = random.randint(0, 1000000)
        final_speed: float = 1.0

        # 1. Load File (Middle Priority)
        if self.config_file:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise cappa.Exit(msg, code=1)
            try:
                with Path.open(self.config_file, "rb") as f:
                    file_conf = msgspec.toml.decode(f.read(), type=PartialGameConfig)
            except msgspec.DecodeError as e:
                msg = f"Invalid TOML config: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904

            if file_conf.seed is not None:
                final_seed = file_conf.seed
            if file_conf.speed is not None:
                final_speed = file_conf.speed

        # 2. Load Encoding (High Priority - Overrides File)
        if self.encoding:
            try:
                decoded = GameConfig.from_encoded(self.encoding)
            except Exception as e:  # noqa: BLE001
                msg = f"Invalid encoding: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904
            final_seed = decoded.seed
            final_speed = decoded.speed

        # 3. CLI Args (Highest Priority - Overrides Everything)
        if self.seed is not None:
            final_seed = self.seed
        if self.speed is not None:
            final_speed = self.speed

        if final_speed <= 0:
            msg = f"Speed must be positive, got {final_speed}"
            raise cappa.Exit(msg, code=1)

        if self.as_json:
            logging.getLogger("scoresim").setLevel(logging.CRITICAL)
        else:
            configure_logging(logging.DEBUG if self.verbose else logging.INFO)

        run_console_game(
            GameConfig(seed=final_seed, speed=final_speed),
            as_json=self.as_json,
        )
