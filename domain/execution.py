# domain/execution.py
from __future__ import annotations

import math
from typing import Optional, Tuple

from domain.depletion import check_circulation
from domain.errors import TradeError
from domain.models import GameContext

TradeResult = Tuple[bool, Optional[TradeError]]


def parse_amount(raw) -> Optional[float]:
    """Return `raw` as a positive finite float, or None if it is not one."""
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def fmt(n: float, decimals: int = 2) -> str:
    return f"{n:,.{decimals}f}"


def _reject(ctx: GameContext, reason: TradeError, message: str) -> TradeResult:
    ctx.log(message)
    ctx.commit()
    return False, reason


def buy(ctx: GameContext, asset: str, requested) -> TradeResult:
    """
    Buy `requested` units of `asset` at the current price.

    - An order larger than the remaining circulation is filled partially with
      whatever is left; that is a notice, not a failure.
    - There is no partial fill on the cash side.
    - A fill that empties circulation runs the depletion handler.

    Returns:
        (ok, reason) where reason is None on success.
    """
    if asset not in ctx.market:
        return _reject(ctx, TradeError.UNKNOWN_ASSET, f"Unknown asset: {asset}")
    amount = parse_amount(requested)
    if amount is None:
        return _reject(ctx, TradeError.INVALID_AMOUNT,
                       f"Invalid amount to buy: {requested}")

    coin = ctx.market[asset]
    price = coin.price
    cost = amount * price

    if amount > coin.circulation:
        amount = coin.circulation
        cost = amount * price
        ctx.log(f"Requested more than circulation; buying remaining "
                f"{fmt(amount, 6)} {asset}.")
    if amount <= 0:
        return _reject(ctx, TradeError.NO_SUPPLY, f"No {asset} left to buy.")
    if cost > ctx.player.cash:
        return _reject(ctx, TradeError.INSUFFICIENT_FUNDS,
                       f"Insufficient USD to buy {fmt(amount, 6)} {asset}.")

    ctx.player.cash -= cost
    ctx.player.portfolio[asset] += amount
    coin.circulation -= amount

    ctx.log(f"You bought {fmt(amount, 6)} {asset} for ${fmt(cost)}.")
    check_circulation(ctx, asset)
    ctx.commit()
    return True, None


def sell(ctx: GameContext, asset: str, requested) -> TradeResult:
    """Sell owned units back into circulation. No partial fills."""
    if asset not in ctx.market:
        return _reject(ctx, TradeError.UNKNOWN_ASSET, f"Unknown asset: {asset}")
    amount = parse_amount(requested)
    if amount is None:
        return _reject(ctx, TradeError.INVALID_AMOUNT,
                       f"Invalid amount to sell: {requested}")
    if amount > ctx.player.portfolio[asset]:
        return _reject(ctx, TradeError.INSUFFICIENT_HOLDINGS,
                       f"You do not own enough {asset} to sell.")

    coin = ctx.market[asset]
    proceeds = amount * coin.price

    ctx.player.cash += proceeds
    ctx.player.portfolio[asset] -= amount
    # sold units return to float, never past the supply cap
    coin.circulation = min(ctx.assets[asset].max_circulation,
                           coin.circulation + amount)

    ctx.log(f"You sold {fmt(amount, 6)} {asset} for ${fmt(proceeds)}.")
    ctx.commit()
    return True, None


def credit_cash(ctx: GameContext, requested) -> TradeResult:
    """Admin grant: add cash outside the normal trade flow."""
    amount = parse_amount(requested)
    if amount is None:
        return _reject(ctx, TradeError.INVALID_AMOUNT,
                       f"Invalid admin credit: {requested}")
    ctx.player.cash += amount
    ctx.log(f"Admin gave the player ${fmt(amount)}.")
    ctx.commit()
    return True, None
