# domain/errors.py
from enum import Enum


class TradeError(str, Enum):
    """Reason codes for rejected trades and admin credits."""

    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_HOLDINGS = "insufficient_holdings"
    NO_SUPPLY = "no_supply"
    UNKNOWN_ASSET = "unknown_asset"


class SnapshotError(ValueError):
    """A persisted snapshot could not be mapped back onto a game."""
