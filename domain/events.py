# domain/events.py
from __future__ import annotations

from typing import List

from config import Config
from domain.models import GameContext


def draw_int(ctx: GameContext, lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi] from the single [0, 1) source."""
    return lo + int(ctx.rng.random() * (hi - lo + 1))


def decay_cooldowns(ctx: GameContext):
    ev = ctx.events
    ev.hype_cooldown = max(0, ev.hype_cooldown - 1)
    ev.crash_cooldown = max(0, ev.crash_cooldown - 1)
    for a in ev.dump_cooldown:
        ev.dump_cooldown[a] = max(0, ev.dump_cooldown[a] - 1)


def maybe_hype(ctx: GameContext) -> List[str]:
    if ctx.events.hype_cooldown != 0 or ctx.rng.random() >= Config.HYPE_PROBABILITY:
        return []
    symbols = list(ctx.market)
    asset = symbols[int(ctx.rng.random() * len(symbols))]
    lo, hi = Config.HYPE_RANGE
    percent = ctx.rng.uniform(lo, hi)
    coin = ctx.market[asset]
    coin.price = min(coin.price * (1 + percent), ctx.assets[asset].price_ceiling)
    ctx.log(f"Hype event! {asset} is trending (+{percent * 100:.1f}%)")
    ctx.events.hype_cooldown = draw_int(ctx, *Config.HYPE_COOLDOWN)
    return [asset]


def maybe_crash(ctx: GameContext) -> List[str]:
    if ctx.events.crash_cooldown != 0 or ctx.rng.random() >= Config.CRASH_PROBABILITY:
        return []
    symbols = list(ctx.market)
    # half the time only the lead asset, otherwise the whole market
    targets = symbols[:1] if ctx.rng.random() < 0.5 else symbols
    lo, hi = Config.CRASH_RANGE
    percent = ctx.rng.uniform(lo, hi)
    for asset in targets:
        coin = ctx.market[asset]
        coin.price = max(coin.price * (1 - percent), ctx.assets[asset].min_price)
        ctx.log(f"Market crash! {asset} price plummets by {percent * 100:.1f}%!")
    ctx.events.crash_cooldown = draw_int(ctx, *Config.CRASH_COOLDOWN)
    return targets


def maybe_trigger_events(ctx: GameContext) -> dict:
    """
    Per-tick macro events. Cooldowns decay first; hype and crash are then
    drawn independently, so both may fire in the same tick.

    Returns the assets hit by each event kind.
    """
    decay_cooldowns(ctx)
    return {"hype": maybe_hype(ctx), "crash": maybe_crash(ctx)}
