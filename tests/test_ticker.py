"""Tests for the session ticker."""
from __future__ import annotations

import asyncio

import pytest

from okapiflow.core.ticker import SessionTicker


@pytest.mark.asyncio
async def test_ticks_until_stopped() -> None:
    ticks = 0

    async def on_tick() -> None:
        nonlocal ticks
        ticks += 1

    ticker = SessionTicker(0.01, on_tick)
    ticker.start()
    assert ticker.running
    await asyncio.sleep(0.1)
    await ticker.stop()

    assert not ticker.running
    assert ticks >= 2
    seen = ticks
    await asyncio.sleep(0.05)
    assert ticks == seen


@pytest.mark.asyncio
async def test_start_is_idempotent_and_stop_without_start_is_safe() -> None:
    async def on_tick() -> None:
        pass

    ticker = SessionTicker(0.01, on_tick)
    await ticker.stop()

    ticker.start()
    task = ticker._task
    ticker.start()
    assert ticker._task is task
    await ticker.stop()


@pytest.mark.asyncio
async def test_failing_callback_keeps_ticking() -> None:
    calls = 0

    async def on_tick() -> None:
        nonlocal calls
        calls += 1
        raise RuntimeError("render failed")

    ticker = SessionTicker(0.01, on_tick)
    ticker.start()
    await asyncio.sleep(0.1)
    assert ticker.running
    await ticker.stop()
    assert calls >= 2


def test_interval_must_be_positive() -> None:
    async def on_tick() -> None:
        pass

    with pytest.raises(ValueError):
        SessionTicker(0, on_tick)
