"""
Tests for the bot tick driver.
"""
import pytest

from config import Config
from domain.pricing import clamp, tick


class TestTick:

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_bounds_hold_after_every_tick(self, make_ctx, seed):
        ctx = make_ctx(seed=seed)

        for _ in range(400):
            tick(ctx)
            for a, st in ctx.market.items():
                cfg = ctx.assets[a]
                assert cfg.min_price <= st.price <= cfg.max_price
                assert 0 <= st.circulation <= cfg.max_circulation
                assert len(ctx.history[a]) <= Config.HISTORY_CAPACITY

    def test_history_keeps_the_newest_points(self, ctx, scheduler):
        for _ in range(150):
            scheduler.advance(Config.TICK_INTERVAL_MS)
            tick(ctx)

        for a, pts in ctx.history.items():
            assert len(pts) == 100
            assert pts[-1].price == ctx.market[a].price
            assert pts[-1].timestamp == scheduler.now()
            assert pts[0].timestamp < pts[-1].timestamp

    def test_event_spike_is_pulled_back_into_band(self, make_ctx):
        # every draw 0.99: no events, every bot order is a buy
        ctx = make_ctx(values=[])
        ctx.market["BTC"].price = 144_000
        ctx.market["LTC"].price = 700

        tick(ctx)

        assert ctx.market["BTC"].price == 72_000
        assert ctx.market["LTC"].price == 350

    def test_bot_buys_drain_circulation_and_lift_price(self, make_ctx):
        ctx = make_ctx(values=[])

        tick(ctx)

        # six buys of 0.99 * scale each
        assert ctx.market["BTC"].circulation == pytest.approx(1700 - 6 * 0.99 * 4)
        assert ctx.market["LTC"].circulation == pytest.approx(6600 - 6 * 0.99 * 80)
        assert ctx.market["BTC"].price == pytest.approx(27_000 * (1 + 0.019 * 0.99) ** 6)

    def test_infeasible_bot_sells_are_skipped(self, make_ctx):
        # every draw 0.2: no events, every order is a sell that would overflow
        ctx = make_ctx(values=[], fallback=0.2)
        ctx.market["BTC"].circulation = 2100
        ctx.market["LTC"].circulation = 8400

        tick(ctx)

        assert ctx.market["BTC"].circulation == 2100
        assert ctx.market["BTC"].price == 27_000
        assert ctx.market["LTC"].price == 70

    def test_infeasible_bot_buys_are_skipped(self, make_ctx):
        ctx = make_ctx(values=[])
        ctx.market["BTC"].circulation = 0.5

        tick(ctx)

        assert ctx.market["BTC"].circulation == 0.5
        assert ctx.market["BTC"].price == 27_000

    def test_minimum_bot_order_size(self, make_ctx):
        # sells of max(0.1, 0.0 * scale) = 0.1 each; 0.0 also fires events,
        # so park them on cooldown first
        ctx = make_ctx(values=[], fallback=0.0)
        ctx.events.hype_cooldown = 10
        ctx.events.crash_cooldown = 10

        tick(ctx)

        assert ctx.market["BTC"].circulation == pytest.approx(1700 + 6 * 0.1)
        assert ctx.market["BTC"].price == 27_000

    def test_tick_persists_and_notifies(self, ctx, store):
        seen = []
        ctx.listeners.append(seen.append)

        tick(ctx)

        assert seen == [ctx]
        snap = store.load(ctx.snapshot_key)
        assert len(snap["history"]["BTC"]) == 2


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10
