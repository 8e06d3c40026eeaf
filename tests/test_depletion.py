"""
Tests for the supply squeeze: spike on depletion, deferred re-mint and dump.
"""
import asyncio

import pytest

from config import Config
from domain.depletion import check_circulation, remint
from domain.execution import buy, credit_cash
from domain.lifecycle import reset_game
from domain.models import GameContext
from domain.scheduler import AsyncioScheduler
from storage import MemoryStore


@pytest.fixture
def depleted(ctx):
    credit_cash(ctx, 1e9)
    assert buy(ctx, "BTC", 1700)[0]
    return ctx


class TestDepletion:

    def test_spike_and_exactly_one_remint_scheduled(self, depleted, scheduler):
        coin = depleted.market["BTC"]
        assert coin.circulation == 0
        assert 27_000 * 1.05 <= coin.price <= 27_000 * 1.13
        assert depleted.events.pump_flag["BTC"]
        assert scheduler.pending == 1

    def test_remint_waits_at_least_four_seconds(self, depleted, scheduler):
        assert scheduler.advance(3_999) == 0
        assert depleted.market["BTC"].circulation == 0
        assert scheduler.advance(5_001) == 1
        assert scheduler.pending == 0

    def test_remint_releases_supply_and_dumps_once(self, depleted, scheduler):
        spiked = depleted.market["BTC"].price

        scheduler.advance(9_000)

        coin = depleted.market["BTC"]
        # floor(2100 * 0.01 * u) for u in [0, 1)
        assert 0 <= coin.circulation <= 20
        assert coin.circulation == int(coin.circulation)
        assert spiked * 0.50 <= coin.price <= spiked * 0.70
        assert depleted.events.pump_flag["BTC"] is False
        messages = [e.message for e in depleted.log_entries]
        assert sum("Pump & Dump!" in m for m in messages) == 1
        assert any(m.startswith("Miners released") for m in messages)

    def test_remint_without_pump_only_mints(self, depleted, scheduler):
        depleted.events.pump_flag["BTC"] = False
        price = depleted.market["BTC"].price

        scheduler.advance(9_000)

        assert depleted.market["BTC"].price == price
        assert not any("Pump & Dump!" in e.message for e in depleted.log_entries)

    def test_dump_is_floored_at_min_price(self, ctx):
        ctx.market["BTC"].price = 6_000
        ctx.events.pump_flag["BTC"] = True

        remint(ctx, "BTC", ctx.epoch)

        assert ctx.market["BTC"].price == 5_000

    def test_spike_is_capped_at_twice_max_price(self, ctx, scheduler):
        ctx.market["BTC"].price = 140_000
        ctx.market["BTC"].circulation = 0

        assert check_circulation(ctx, "BTC")

        assert ctx.market["BTC"].price == 144_000
        assert scheduler.pending == 1

    def test_no_depletion_when_supply_remains(self, ctx, scheduler):
        assert not check_circulation(ctx, "BTC")
        assert ctx.market["BTC"].price == 27_000
        assert scheduler.pending == 0

    def test_remint_fires_even_after_later_trades_and_ticks(self, depleted, scheduler):
        from domain.pricing import tick

        for _ in range(3):
            tick(depleted)
        scheduler.advance(9_000)

        assert depleted.events.pump_flag["BTC"] is False
        assert scheduler.pending == 0

    def test_stale_remint_after_reset_is_ignored(self, depleted, scheduler):
        reset_game(depleted)

        scheduler.advance(9_000)

        coin = depleted.market["BTC"]
        assert coin.price == 27_000
        assert coin.circulation == 1700
        assert list(depleted.log_entries) == []


class TestRemintOnEventLoop:

    def test_remint_and_dump_fire_on_the_running_loop(self, monkeypatch):
        monkeypatch.setattr(Config, "REMINT_DELAY_MS", (5, 10))

        async def main():
            ctx = GameContext("LIVE", seed=11, scheduler=AsyncioScheduler(),
                              store=MemoryStore())
            ctx.seed_history()
            credit_cash(ctx, 1e9)
            assert buy(ctx, "BTC", 1700)[0]
            spiked = ctx.market["BTC"].price
            assert ctx.events.pump_flag["BTC"]

            await asyncio.sleep(0.2)
            return ctx, spiked

        ctx, spiked = asyncio.run(main())

        coin = ctx.market["BTC"]
        assert ctx.events.pump_flag["BTC"] is False
        assert 0 <= coin.circulation <= 21
        assert coin.price <= spiked * 0.70
        assert ctx.log_entries[1].message.startswith("Miners released")
        assert ctx.store.load(ctx.snapshot_key)["events"]["pumpFlag"]["BTC"] is False
