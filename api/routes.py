# api/routes.py
from __future__ import annotations

import secrets
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from config import Config
from domain.execution import buy, credit_cash, sell
from domain.lifecycle import reset_game
from domain.models import GameContext
from domain.portfolio import (history_payload, log_payload, market_payload,
                              snapshot_portfolio)
from domain.pricing import tick
from realtime.ticker import close_game, launch_game
from state import games

router = APIRouter()

# Amounts are passed through untouched (no coercion of true to 1.0); the
# engine reports anything unusable as invalid_amount instead of a 422.
Amount = Any


class CreateGameRequest(BaseModel):
    seed: Optional[int] = None
    autostart: bool = True


class TradeRequest(BaseModel):
    asset: str
    amount: Amount = None


class AdminCreditRequest(BaseModel):
    password: str
    amount: Amount = None


def get_game(game_id: str) -> GameContext:
    ctx = games.get(game_id.upper())
    if ctx is None:
        raise HTTPException(status_code=404, detail="game_not_found")
    return ctx


def game_payload(ctx: GameContext) -> dict:
    return {
        "gameId": ctx.game_id,
        "seed": ctx.seed,
        "market": market_payload(ctx),
        "portfolio": snapshot_portfolio(ctx),
        "log": log_payload(ctx),
    }


def trade_payload(ctx: GameContext, ok: bool, reason) -> dict:
    return {
        "ok": ok,
        "reason": reason.value if reason else None,
        "market": market_payload(ctx),
        "portfolio": snapshot_portfolio(ctx),
    }


@router.post("/games")
async def create(req: Optional[CreateGameRequest] = None):
    req = req or CreateGameRequest()
    ctx = launch_game(seed=req.seed, autostart=req.autostart)
    return game_payload(ctx)


@router.get("/games/{game_id}")
async def read_game(game_id: str):
    return game_payload(get_game(game_id))


@router.get("/games/{game_id}/history/{asset}")
async def read_history(game_id: str, asset: str):
    ctx = get_game(game_id)
    if asset not in ctx.history:
        raise HTTPException(status_code=404, detail="asset_not_found")
    return history_payload(ctx, asset)


@router.get("/games/{game_id}/log")
async def read_log(game_id: str,
                   limit: int = Query(Config.LOG_CAPACITY, ge=0, le=Config.LOG_CAPACITY)):
    return log_payload(get_game(game_id), limit=limit)


@router.post("/games/{game_id}/buy")
async def place_buy(game_id: str, req: TradeRequest):
    ctx = get_game(game_id)
    ok, reason = buy(ctx, req.asset, req.amount)
    return trade_payload(ctx, ok, reason)


@router.post("/games/{game_id}/sell")
async def place_sell(game_id: str, req: TradeRequest):
    ctx = get_game(game_id)
    ok, reason = sell(ctx, req.asset, req.amount)
    return trade_payload(ctx, ok, reason)


@router.post("/games/{game_id}/tick")
async def step(game_id: str):
    """Run one market step by hand, e.g. for a game created without autostart."""
    ctx = get_game(game_id)
    tick(ctx)
    return market_payload(ctx)


@router.post("/games/{game_id}/reset")
async def reset(game_id: str):
    ctx = get_game(game_id)
    reset_game(ctx)
    return game_payload(ctx)


@router.delete("/games/{game_id}")
async def delete_game(game_id: str):
    ctx = get_game(game_id)
    if ctx.game_id == Config.DEFAULT_GAME_ID:
        raise HTTPException(status_code=409, detail="default_game")
    close_game(ctx.game_id)
    return {"gameId": ctx.game_id, "closed": True}


@router.post("/games/{game_id}/admin/credit")
async def admin_credit(game_id: str, req: AdminCreditRequest):
    ctx = get_game(game_id)
    if not secrets.compare_digest(req.password.encode(),
                                   Config.ADMIN_PASSWORD.encode()):
        raise HTTPException(status_code=403, detail="incorrect_password")
    ok, reason = credit_cash(ctx, req.amount)
    return trade_payload(ctx, ok, reason)
