# domain/pricing.py
from __future__ import annotations

from config import Config
from domain.events import maybe_trigger_events
from domain.models import GameContext, PricePoint


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def run_bots(ctx: GameContext, asset: str):
    """Apply BOT_COUNT synthetic orders to one asset, then clamp its price."""
    rng = ctx.rng
    cfg = ctx.assets[asset]
    coin = ctx.market[asset]
    price = coin.price
    circulation = coin.circulation

    for _ in range(Config.BOT_COUNT):
        is_buy = rng.random() > Config.BOT_BUY_THRESHOLD
        amount = max(0.1, rng.random() * cfg.bot_order_scale)
        if is_buy and circulation > amount:
            circulation -= amount
            price *= 1 + cfg.volatility * rng.random()
        elif not is_buy and circulation + amount <= cfg.max_circulation:
            circulation += amount
            price *= 1 - cfg.volatility * rng.random()
        # infeasible orders are skipped

    # routine trading stays inside the normal band even after an event spike
    coin.price = clamp(price, cfg.min_price, cfg.max_price)
    coin.circulation = circulation


def tick(ctx: GameContext):
    """One market step: events, bot flow per asset, history, persist."""
    maybe_trigger_events(ctx)
    ts = ctx.now()
    for asset in ctx.market:
        run_bots(ctx, asset)
        ctx.history[asset].append(PricePoint(ts, ctx.market[asset].price))
    ctx.commit()
