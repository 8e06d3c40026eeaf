# domain/depletion.py
"""
Supply squeeze handling: pump on depletion, delayed re-mint, then dump.
"""
from __future__ import annotations

import math

from config import Config
from domain.models import GameContext
from logger import setup_logger

logger = setup_logger(__name__)


def check_circulation(ctx: GameContext, asset: str) -> bool:
    """Spike the price and schedule a re-mint if `asset` ran out.

    Returns True when a depletion was handled.
    """
    coin = ctx.market[asset]
    if coin.circulation > 0:
        return False

    cfg = ctx.assets[asset]
    coin.circulation = 0.0
    ctx.log(f"!! All {asset} have been bought out! Bots will drive prices up "
            f"sharply until new coins are mined.")

    lo, hi = Config.SPIKE_RANGE
    coin.price = min(coin.price * ctx.rng.uniform(lo, hi), cfg.price_ceiling)
    ctx.events.pump_flag[asset] = True

    lo, hi = Config.REMINT_DELAY_MS
    delay_ms = ctx.rng.uniform(lo, hi)
    epoch = ctx.epoch
    ctx.scheduler.call_later(delay_ms, lambda: remint(ctx, asset, epoch))
    logger.debug("[%s] re-mint of %s scheduled in %.0f ms",
                 ctx.game_id, asset, delay_ms)
    return True


def remint(ctx: GameContext, asset: str, epoch: int):
    """Deferred half of a depletion: release new supply, dump if pumped."""
    if epoch != ctx.epoch:
        logger.debug("[%s] dropping stale re-mint of %s (epoch %d != %d)",
                     ctx.game_id, asset, epoch, ctx.epoch)
        return

    cfg = ctx.assets[asset]
    coin = ctx.market[asset]
    mint = math.floor(cfg.max_circulation * Config.REMINT_FRACTION * ctx.rng.random())
    coin.circulation = min(cfg.max_circulation, coin.circulation + mint)
    ctx.log(f"Miners released {mint} new {asset} into circulation.")

    if ctx.events.pump_flag[asset]:
        lo, hi = Config.DUMP_RANGE
        dump_percent = ctx.rng.uniform(lo, hi)
        coin.price = max(coin.price * (1 - dump_percent), cfg.min_price)
        ctx.log(f"Pump & Dump! {asset} price crashes by "
                f"{dump_percent * 100:.1f}% after new coins hit the market!")
        ctx.events.pump_flag[asset] = False

    ctx.commit()
