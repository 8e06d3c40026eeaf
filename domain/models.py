# domain/models.py
from __future__ import annotations

import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional

from config import Config
from domain.assets import ASSETS, AssetConfig
from domain.errors import SnapshotError
from domain.scheduler import AsyncioScheduler, Scheduler
from logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class AssetState:
    price: float
    circulation: float


@dataclass
class PricePoint:
    timestamp: float
    price: float


@dataclass
class LogEntry:
    timestamp: float
    message: str


class PlayerState:

    def __init__(self, starting_cash: float, symbols):
        self.cash = float(starting_cash)
        # portfolio[a] = owned quantity, never negative
        self.portfolio: Dict[str, float] = {a: 0.0 for a in symbols}


class EventState:

    def __init__(self, symbols):
        self.hype_cooldown = 0
        self.crash_cooldown = 0
        # set by a depletion pump, cleared by the matching dump
        self.pump_flag: Dict[str, bool] = {a: False for a in symbols}
        # decremented every tick but not consulted anywhere yet
        self.dump_cooldown: Dict[str, int] = {a: 0 for a in symbols}


class GameContext:
    """
    All mutable state of one game plus the collaborators the engine needs.

    Engine functions take the context explicitly; nothing is kept at module
    scope, so several games can run side by side in one process.
    """

    def __init__(
        self,
        game_id: str = "default",
        *,
        assets: Optional[Dict[str, AssetConfig]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        scheduler: Optional[Scheduler] = None,
        store=None,
        snapshot_key: Optional[str] = None,
    ):
        self.game_id = game_id
        self.assets: Dict[str, AssetConfig] = dict(assets or ASSETS)
        self.seed = seed if seed is not None else random.randint(1, 10_000)
        self.rng = rng or random.Random(self.seed)
        self.scheduler = scheduler or AsyncioScheduler()
        self.clock = clock or time.time
        self.store = store
        self.snapshot_key = snapshot_key or f"{Config.SNAPSHOT_KEY}:{game_id}"
        # bumped on reset so stale deferred callbacks can tell
        self.epoch = 0
        self.listeners: List[Callable[["GameContext"], None]] = []
        self.init_state()

    def init_state(self):
        symbols = list(self.assets)
        self.market: Dict[str, AssetState] = {
            a: AssetState(cfg.initial_price, cfg.initial_circulation)
            for a, cfg in self.assets.items()
        }
        self.player = PlayerState(Config.START_BALANCE, symbols)
        self.events = EventState(symbols)
        self.history: Dict[str, Deque[PricePoint]] = {
            a: deque(maxlen=Config.HISTORY_CAPACITY) for a in symbols
        }
        self.log_entries: Deque[LogEntry] = deque(maxlen=Config.LOG_CAPACITY)

    def now(self) -> float:
        return self.clock()

    def log(self, message: str):
        """Add an entry to the in-game feed, newest first."""
        self.log_entries.appendleft(LogEntry(self.now(), message))
        logger.info("[%s] %s", self.game_id, message)

    def seed_history(self):
        ts = self.now()
        for a, st in self.market.items():
            self.history[a].clear()
            self.history[a].append(PricePoint(ts, st.price))

    def commit(self):
        """Persist the snapshot and notify listeners (UI refresh)."""
        if self.store is not None:
            self.store.save(self.snapshot_key, self.to_snapshot())
        for listener in list(self.listeners):
            listener(self)

    # ---------- Serialization ----------
    def to_snapshot(self) -> dict:
        return {
            "gameId": self.game_id,
            "seed": self.seed,
            "usd": self.player.cash,
            "portfolio": dict(self.player.portfolio),
            "coins": {
                a: {"price": st.price, "circulation": st.circulation}
                for a, st in self.market.items()
            },
            "history": {
                a: [[p.timestamp, p.price] for p in pts]
                for a, pts in self.history.items()
            },
            "log": [[e.timestamp, e.message] for e in self.log_entries],
            "events": {
                "hypeCooldown": self.events.hype_cooldown,
                "crashCooldown": self.events.crash_cooldown,
                "pumpFlag": dict(self.events.pump_flag),
                "dumpCooldown": dict(self.events.dump_cooldown),
            },
        }

    def restore(self, snapshot: dict):
        """Load a snapshot produced by `to_snapshot` into this context.

        The snapshot is parsed in full before anything is assigned, so a
        malformed one leaves the context untouched.
        """
        try:
            cash = float(snapshot["usd"])
            portfolio = {a: float(snapshot["portfolio"][a]) for a in self.assets}
            market = {
                a: AssetState(float(snapshot["coins"][a]["price"]),
                              float(snapshot["coins"][a]["circulation"]))
                for a in self.assets
            }
            raw_history = snapshot.get("history") or {}
            history = {
                a: [PricePoint(float(ts), float(price))
                    for ts, price in raw_history.get(a) or []]
                for a in self.assets
            }
            entries = [LogEntry(float(ts), str(message))
                       for ts, message in snapshot.get("log") or []]
            ev = snapshot.get("events") or {}
            pump_flag = ev.get("pumpFlag") or {}
            dump_cooldown = ev.get("dumpCooldown") or {}
            events = EventState(list(self.assets))
            events.hype_cooldown = int(ev.get("hypeCooldown", 0))
            events.crash_cooldown = int(ev.get("crashCooldown", 0))
            for a in self.assets:
                events.pump_flag[a] = bool(pump_flag.get(a, False))
                events.dump_cooldown[a] = int(dump_cooldown.get(a, 0))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SnapshotError(f"malformed snapshot for {self.game_id}: {exc}") from exc

        self.player.cash = cash
        self.player.portfolio = portfolio
        self.market = market
        self.events = events
        for a, pts in history.items():
            self.history[a].clear()
            self.history[a].extend(pts)
        self.log_entries.clear()
        self.log_entries.extend(entries)

        if any(not pts for pts in self.history.values()):
            self.seed_history()
