from __future__ import annotations

import asyncio
import random
import string
from typing import Dict, Optional, Set

from fastapi import WebSocket

from config import Config
from domain.lifecycle import load_game
from domain.models import GameContext
from storage import JsonFileStore, SnapshotStore


# ---- Games ----
games: Dict[str, GameContext] = {}                 # gameId -> GameContext
tickers: Dict[str, asyncio.Task] = {}              # gameId -> ticker task
store: SnapshotStore = JsonFileStore(Config.SNAPSHOT_DIR)
# games launched by a bare /ws connection, dropped with their last socket
transient_games: Set[str] = set()

# ---- Connections ----
sockets_by_game: Dict[str, Set[WebSocket]] = {}    # gameId -> sockets


# ---- ID generators ----
def gen_game_id() -> str:
    """Generate a 6-char game code, e.g. 'AB3Z9Q'."""
    alphabet = string.ascii_uppercase + "23456789"  # avoid 0/1 for readability
    while True:
        game_id = "".join(random.choices(alphabet, k=6))
        if game_id not in games:
            return game_id


def create_game(game_id: Optional[str] = None, seed: Optional[int] = None) -> GameContext:
    """Register a game, resuming its saved snapshot when one exists."""
    ctx = GameContext(game_id or gen_game_id(), seed=seed, store=store)
    load_game(ctx)
    games[ctx.game_id] = ctx
    return ctx
