"""CLI command for running many games instantly and aggregating the results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import TYPE_CHECKING, Annotated

import cappa
import msgspec
from rich import get_console
from rich.table import Table
from tqdm import tqdm

from scoresim.simulation.config import BatchConfig
from scoresim.simulation.metrics import (
    calculate_aggregated_player_stats,
    results_to_frame,
)
from scoresim.simulation.runner import run_single_simulation

if TYPE_CHECKING:
    import polars as pl

    from scoresim.simulation.runner import PlayerResult


def run_batch(config: BatchConfig) -> pl.DataFrame:
    results: list[PlayerResult] = []
    game_configs = config.game_configs()

    with tqdm(
        desc="Simulating",
        unit="game",
        total=len(game_configs),
        dynamic_ncols=True,
    ) as pbar:
        for game_config in game_configs:
            result = run_single_simulation(game_config)
            results.extend(result.metrics)
            pbar.update(1)

    return calculate_aggregated_player_stats(results_to_frame(results))


def build_stats_table(df_stats: pl.DataFrame) -> Table:
    table = Table(title="Player statistics")
    for column in df_stats.columns:
        if column == "player_idx":
            continue
        table.add_column(column, justify="left" if column == "player_name" else "right")
    for row in df_stats.iter_rows(named=True):
        table.add_row(
            *(str(value) for key, value in row.items() if key != "player_idx"),
        )
    return table


@cappa.command(
    name="batch",
    help="Run many seeded games on a virtual clock and summarise per-player stats.",
)
@dataclass
class BatchCommand:
    runs: Annotated[
        int | None,
        cappa.Arg(short="-n", long="--runs", help="Number of games to simulate."),
    ] = None
    seed_offset: Annotated[
        int | None,
        cappa.Arg(long="--seed-offset", help="First seed (for resuming runs)."),
    ] = None
    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    output: Annotated[
        Path | None,
        cappa.Arg(short="-o", long="--output", help="Write the stats as CSV."),
    ] = None

    def __call__(self) -> int:
        config = BatchConfig()
        if self.config_file:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise cappa.Exit(msg, code=1)
            try:
                config = BatchConfig.from_toml(self.config_file)
            except msgspec.DecodeError as e:
                msg = f"Invalid TOML config: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904

        # CLI overrides
        if self.runs is not None:
            config.runs = self.runs
        if self.seed_offset is not None:
            config.seed_offset = self.seed_offset

        if config.runs <= 0:
            msg = f"Number of runs must be positive, got {config.runs}"
            raise cappa.Exit(msg, code=1)

        # Suppress game engine logs during batch runs
        logging.getLogger("scoresim").setLevel(logging.CRITICAL)
        tqdm.write(f"Runs: {config.runs} (seeds {config.seed_offset}..)")
        df_stats = run_batch(config)

        get_console().print(build_stats_table(df_stats))
        if self.output is not None:
            df_stats.write_csv(self.output)
            tqdm.write(f"Stats written to {self.output}")
        return 0
