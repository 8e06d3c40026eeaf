# domain/assets.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class AssetConfig:
    """Immutable per-asset market parameters."""

    symbol: str
    initial_price: float
    initial_circulation: float
    max_circulation: float
    volatility: float  # max fractional price move per bot order
    min_price: float
    max_price: float
    bot_order_scale: float  # typical bot order size in units

    def __post_init__(self):
        if not self.min_price < self.initial_price < self.max_price:
            raise ValueError(
                f"{self.symbol}: initial price must lie strictly inside "
                f"({self.min_price}, {self.max_price})"
            )
        if not 0 <= self.initial_circulation <= self.max_circulation:
            raise ValueError(
                f"{self.symbol}: initial circulation must be within "
                f"[0, {self.max_circulation}]"
            )

    @property
    def price_ceiling(self) -> float:
        # events may push past max_price, never past this
        return self.max_price * 2


ASSETS: Dict[str, AssetConfig] = {
    "BTC": AssetConfig(
        symbol="BTC",
        initial_price=27000.0,
        initial_circulation=1700.0,
        max_circulation=2100.0,
        volatility=0.019,
        min_price=5000.0,
        max_price=72000.0,
        bot_order_scale=4.0,
    ),
    "LTC": AssetConfig(
        symbol="LTC",
        initial_price=70.0,
        initial_circulation=6600.0,
        max_circulation=8400.0,
        volatility=0.025,
        min_price=20.0,
        max_price=350.0,
        bot_order_scale=80.0,
    ),
}
