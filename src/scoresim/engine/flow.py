from __future__ import annotations

from typing import TYPE_CHECKING

from scoresim.core.types import GameStatus
from scoresim.engine.summary import compute_summary

if TYPE_CHECKING:
    from scoresim.engine.game_engine import GameEngine


def log_final_standings(engine: GameEngine):
    if not engine.verbose or engine.summary is None:
        return
    summary = engine.summary
    engine.log_info(f"{'':>15}=== FINAL STANDINGS ===")
    for rank, player in enumerate(summary.ranking, start=1):
        status = "🏆" if rank == 1 else ""
        engine.log_info(
            f"Rank {rank} {player.idx}:{player.name:<6} Score: {player.score:<4} "
            f"Bonuses: {player.bonuses:<2} Penalties: {player.penalties:<2} {status}",
        )
    engine.log_info(
        f"Total: {summary.total_score} Avg: {summary.mean_score:.2f} "
        f"High: {summary.max_score} Low: {summary.min_score} "
        f"Duration: {summary.duration:.2f}s",
    )


def check_game_over(engine: GameEngine) -> bool:
    """
    Ends the game once every player has used up their quota.
    Returns True if the game is (now) over.
    """
    if engine.status is not GameStatus.RUNNING:
        return True

    if engine.eligible_players():
        return False

    end_game(engine)
    return True


def end_game(engine: GameEngine) -> None:
    """Moves a running game to FINISHED and publishes the summary once."""
    if engine.status is not GameStatus.RUNNING:
        return

    engine._cancel_pending()  # noqa: SLF001
    engine.status = GameStatus.FINISHED
    engine.end_time = engine.scheduler.time()
    engine.log_context.clear_player()
    engine.add_log("GAME OVER - All updates completed", "end")

    engine.summary = compute_summary(
        engine.players,
        engine.start_time,
        engine.end_time,
    )
    log_final_standings(engine)

    engine.display.on_players_changed(list(engine.summary.ranking))
    engine.display.on_progress(engine.total_updates, engine.max_updates)
    engine.display.on_game_finished(engine.summary)

    if engine.on_game_over:
        engine.on_game_over(engine)
