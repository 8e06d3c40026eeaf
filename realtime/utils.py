from __future__ import annotations

import asyncio
from typing import Set

from fastapi import WebSocket

from domain.models import GameContext
from domain.portfolio import log_payload, market_payload, snapshot_portfolio
from logger import setup_logger
from state import sockets_by_game

logger = setup_logger(__name__)

# the loop only keeps weak references to tasks
_pushes: Set[asyncio.Task] = set()


async def send_json_safe(ws: WebSocket, payload: dict):
    try:
        await ws.send_json(payload)
    except Exception as exc:
        # a dead socket is cleaned up by its own endpoint
        logger.debug("send failed: %s", exc)


async def broadcast_game(ctx: GameContext, payload: dict):
    for ws in list(sockets_by_game.get(ctx.game_id, ())):
        await send_json_safe(ws, payload)


async def push_state(ctx: GameContext, ws: WebSocket = None):
    """Send market, portfolio and log to one socket, or to the whole game."""
    for payload in (market_payload(ctx), snapshot_portfolio(ctx), log_payload(ctx)):
        if ws is not None:
            await send_json_safe(ws, payload)
        else:
            await broadcast_game(ctx, payload)


def schedule_push(ctx: GameContext):
    """GameContext listener: refresh connected clients after every commit."""
    if not sockets_by_game.get(ctx.game_id):
        return
    task = asyncio.get_running_loop().create_task(push_state(ctx))
    _pushes.add(task)
    task.add_done_callback(_pushes.discard)
