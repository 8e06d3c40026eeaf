# main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# REST routes
from api.routes import router as api_router
from config import Config
from logger import setup_logger
from realtime.endpoints import ws_endpoint
from realtime.ticker import launch_game, stop_tickers

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # the single-player game the UI opens by default
    ctx = launch_game(Config.DEFAULT_GAME_ID,
                      autostart=Config.AUTOSTART_DEFAULT_GAME)
    logger.info("Default game %s ready", ctx.game_id)
    yield
    await stop_tickers()


app = FastAPI(title="Crypto Market Simulator", version="1.0", lifespan=lifespan)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- REST API ---
app.include_router(api_router)

# --- WebSockets ---
app.add_api_websocket_route("/ws", ws_endpoint)


# --- Healthcheck ---
@app.get("/health")
async def health():
    return {"status": "ok"}


# --- Dev runner ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=Config.HOST, port=Config.PORT, reload=True)
