from __future__ import annotations

import time
from typing import Optional

from fastapi import Query, WebSocket, WebSocketDisconnect

from domain.execution import buy, sell
from domain.lifecycle import reset_game
from logger import setup_logger
from realtime.ticker import close_game, launch_game
from realtime.utils import push_state, send_json_safe
from state import games, sockets_by_game, transient_games

logger = setup_logger(__name__)


async def ws_endpoint(ws: WebSocket,
                      gameId: Optional[str] = Query(default=None)):
    await ws.accept()

    # join an existing game or start a fresh one
    if gameId:
        ctx = games.get(gameId.upper())
        if ctx is None:
            await send_json_safe(ws, {"type": "ERROR", "code": "game_not_found"})
            await ws.close()
            return
    else:
        ctx = launch_game()
        transient_games.add(ctx.game_id)

    sockets_by_game.setdefault(ctx.game_id, set()).add(ws)

    try:
        await send_json_safe(ws, {"type": "HELLO", "gameId": ctx.game_id})
        await push_state(ctx, ws)

        while True:
            msg = await ws.receive_json()
            mtype = msg.get("type")

            if mtype in ("BUY", "SELL"):
                asset = msg.get("asset")
                amount = msg.get("amount")
                if not isinstance(asset, str):
                    await send_json_safe(ws, {
                        "type": "ORDER_REJECT",
                        "reason": "invalid"
                    })
                    continue
                trade = buy if mtype == "BUY" else sell
                ok, reason = trade(ctx, asset, amount)
                if ok:
                    await send_json_safe(ws, {
                        "type": "ORDER_ACCEPTED",
                        "asset": asset,
                        "side": mtype,
                        "price": round(ctx.market[asset].price, 2),
                    })
                else:
                    await send_json_safe(ws, {
                        "type": "ORDER_REJECT",
                        "reason": reason.value,
                    })

            elif mtype == "RESET":
                reset_game(ctx)

            elif mtype == "PING":
                await send_json_safe(ws, {"type": "PONG", "ts": time.time()})

            else:
                # ignore unknown
                pass

    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("[%s] websocket handler failed", ctx.game_id)
    finally:
        peers = sockets_by_game.get(ctx.game_id, set())
        peers.discard(ws)
        if not peers and ctx.game_id in transient_games:
            close_game(ctx.game_id)
