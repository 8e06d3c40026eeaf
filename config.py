"""Configuration settings for the crypto market simulator."""
import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    # Server settings
    HOST = os.getenv("SIM_HOST", "0.0.0.0")
    PORT = int(os.getenv("SIM_PORT", "8000"))

    DEFAULT_GAME_ID = "MAIN"
    AUTOSTART_DEFAULT_GAME = os.getenv("SIM_AUTOSTART", "1") == "1"

    # Market settings
    TICK_INTERVAL_MS = int(os.getenv("SIM_TICK_INTERVAL_MS", "3500"))
    BOT_COUNT = 6  # bots trading per tick
    BOT_BUY_THRESHOLD = 0.47  # draw above this is a bot buy
    START_BALANCE = 100_000.0

    # Bounded feeds
    LOG_CAPACITY = 32
    HISTORY_CAPACITY = 100

    # Random events (probabilities are per tick)
    HYPE_PROBABILITY = 0.015
    HYPE_RANGE = (0.10, 0.25)
    HYPE_COOLDOWN = (15, 24)
    CRASH_PROBABILITY = 0.015
    CRASH_RANGE = (0.20, 0.40)
    CRASH_COOLDOWN = (17, 26)

    # Depletion pump & dump
    SPIKE_RANGE = (1.05, 1.13)
    REMINT_DELAY_MS = (4000, 9000)
    REMINT_FRACTION = 0.01
    DUMP_RANGE = (0.30, 0.50)

    # Admin
    ADMIN_PASSWORD = os.getenv("SIM_ADMIN_PASSWORD", "RealybyIsEpic")

    # Persistence
    SNAPSHOT_DIR = os.getenv("SIM_SNAPSHOT_DIR", ".snapshots")
    SNAPSHOT_KEY = "cryptoSimState"

    # Logging settings
    LOG_LEVEL = os.getenv("SIM_LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
