# domain/portfolio.py
from __future__ import annotations

from domain.models import GameContext


def market_payload(ctx: GameContext) -> dict:
    return {
        "type": "TICK",
        "ts": ctx.now(),
        "prices": {a: round(st.price, 2) for a, st in ctx.market.items()},
        "circulation": {
            a: {
                "current": round(st.circulation, 6),
                "max": ctx.assets[a].max_circulation,
            }
            for a, st in ctx.market.items()
        },
    }


def snapshot_portfolio(ctx: GameContext) -> dict:
    mkt_value_total = 0.0
    rows = []
    for a, qty in ctx.player.portfolio.items():
        price = ctx.market[a].price
        mkt_value = qty * price
        mkt_value_total += mkt_value
        rows.append({
            "asset": a,
            "qty": round(qty, 6),
            "price": round(price, 2),
            "mktValue": round(mkt_value, 2),
        })
    return {
        "type": "PORTFOLIO",
        "cash": round(ctx.player.cash, 2),
        "equity": round(ctx.player.cash + mkt_value_total, 2),
        "positions": rows,
    }


def history_payload(ctx: GameContext, asset: str) -> dict:
    return {
        "type": "HISTORY",
        "asset": asset,
        "points": [{"ts": p.timestamp, "price": p.price} for p in ctx.history[asset]],
    }


def log_payload(ctx: GameContext, limit: int = 14) -> dict:
    """Newest entries first, as the feed is rendered."""
    entries = list(ctx.log_entries)[:limit]
    return {
        "type": "LOG",
        "entries": [{"ts": e.timestamp, "message": e.message} for e in entries],
    }
