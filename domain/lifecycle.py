# domain/lifecycle.py
from __future__ import annotations

from domain.errors import SnapshotError
from domain.models import GameContext
from logger import setup_logger

logger = setup_logger(__name__)


def reset_game(ctx: GameContext):
    """
    Restore market, portfolio, events, history and log to their defaults.

    The epoch moves on, so re-mints scheduled before the reset find a
    mismatch when they fire and leave the fresh game alone.
    """
    ctx.epoch += 1
    ctx.init_state()
    ctx.seed_history()
    logger.info("[%s] game reset (epoch %d)", ctx.game_id, ctx.epoch)
    ctx.commit()


def load_game(ctx: GameContext) -> bool:
    """Resume from the context's store. Falls back to a fresh game.

    Returns True if a saved snapshot was restored.
    """
    snapshot = ctx.store.load(ctx.snapshot_key) if ctx.store is not None else None
    if snapshot is not None:
        try:
            ctx.restore(snapshot)
            logger.info("[%s] resumed from snapshot %s", ctx.game_id, ctx.snapshot_key)
            return True
        except SnapshotError as exc:
            logger.warning("[%s] ignoring saved state: %s", ctx.game_id, exc)
    ctx.seed_history()
    return False
