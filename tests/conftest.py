import random

import pytest

from domain.models import GameContext
from domain.scheduler import ManualScheduler
from storage import MemoryStore


class ScriptedRandom(random.Random):
    """Random source that replays fixed draws, then repeats `fallback`."""

    def __init__(self, values=(), fallback=0.99):
        self.values = list(values)
        self.fallback = fallback
        super().__init__(0)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.fallback


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler(start=1_700_000_000.0)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_ctx(scheduler, store):
    """Build a context on simulated time; pass `values` for scripted draws."""

    def _make(values=None, fallback=0.99, seed=1234):
        rng = ScriptedRandom(values or (), fallback) if values is not None else None
        ctx = GameContext("TEST", seed=seed, rng=rng, clock=scheduler.now,
                          scheduler=scheduler, store=store)
        ctx.seed_history()
        return ctx

    return _make


@pytest.fixture
def ctx(make_ctx) -> GameContext:
    return make_ctx()
