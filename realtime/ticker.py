from __future__ import annotations

import asyncio
from typing import Optional

from config import Config
from domain.models import GameContext
from domain.pricing import tick
from logger import setup_logger
from realtime.utils import schedule_push
from state import create_game, games, sockets_by_game, tickers, transient_games

logger = setup_logger(__name__)


async def game_ticker(ctx: GameContext):
    interval = Config.TICK_INTERVAL_MS / 1000.0
    logger.info("[%s] ticker started (every %.1fs)", ctx.game_id, interval)
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                tick(ctx)
            except Exception:
                # one bad step (e.g. a failed snapshot write) must not stop the market
                logger.exception("[%s] tick failed", ctx.game_id)
    finally:
        if tickers.get(ctx.game_id) is asyncio.current_task():
            tickers.pop(ctx.game_id, None)
        logger.info("[%s] ticker stopped", ctx.game_id)


def start_ticker(ctx: GameContext) -> asyncio.Task:
    task = tickers.get(ctx.game_id)
    if task is None or task.done():
        task = asyncio.create_task(game_ticker(ctx))
        tickers[ctx.game_id] = task
    return task


async def stop_tickers():
    tasks = list(tickers.values())
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def launch_game(game_id: Optional[str] = None, seed: Optional[int] = None,
                autostart: bool = True) -> GameContext:
    """Create a game wired for live clients, optionally ticking right away."""
    ctx = create_game(game_id, seed=seed)
    ctx.listeners.append(schedule_push)
    if autostart:
        start_ticker(ctx)
    return ctx


def close_game(game_id: str):
    """Stop a game's ticker and forget it. The saved snapshot is kept."""
    task = tickers.pop(game_id, None)
    if task is not None:
        task.cancel()
    games.pop(game_id, None)
    sockets_by_game.pop(game_id, None)
    transient_games.discard(game_id)
    logger.info("[%s] game closed", game_id)
