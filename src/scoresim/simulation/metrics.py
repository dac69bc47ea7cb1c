"""
Aggregate statistics over many simulated games.
Uses Polars for the group-by work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import polars as pl

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scoresim.simulation.runner import PlayerResult

RESULT_SCHEMA = {
    "config_hash": pl.String,
    "seed": pl.Int64,
    "player_idx": pl.Int64,
    "player_name": pl.String,
    "rank": pl.Int64,
    "final_score": pl.Int64,
    "successful_scores": pl.Int64,
    "penalties": pl.Int64,
    "bonuses": pl.Int64,
}


def results_to_frame(results: Iterable[PlayerResult]) -> pl.DataFrame:
    rows = [
        {
            "config_hash": r.config_hash,
            "seed": r.seed,
            "player_idx": r.player_idx,
            "player_name": r.player_name,
            "rank": r.rank,
            "final_score": r.final_score,
            "successful_scores": r.successful_scores,
            "penalties": r.penalties,
            "bonuses": r.bonuses,
        }
        for r in results
    ]
    return pl.DataFrame(rows, schema=RESULT_SCHEMA)


def calculate_aggregated_player_stats(df_results: pl.DataFrame) -> pl.DataFrame:
    """
    Aggregates per-game results into global statistics for each player.

    Returns one row per player sorted by win rate, then mean score.
    """
    return (
        df_results.group_by(["player_idx", "player_name"])
        .agg(
            [
                pl.len().alias("games"),
                pl.col("rank").eq(1).sum().alias("wins"),
                (pl.col("rank").eq(1).sum() / pl.len()).round(3).alias("winrate"),
                pl.col("final_score").mean().round(2).alias("avg_score"),
                pl.col("final_score").max().alias("max_score"),
                pl.col("bonuses").mean().round(2).alias("avg_bonuses"),
                pl.col("penalties").mean().round(2).alias("avg_penalties"),
            ]
        )
        .sort(
            ["winrate", "avg_score", "player_idx"],
            descending=[True, True, False],
        )
    )
