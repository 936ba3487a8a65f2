"""Tests for the countdown timer."""

import asyncio

from mock_interview.core.timer import CountdownTimer


async def test_ticks_until_stopped():
    ticks = []

    async def on_tick():
        ticks.append(1)

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    await asyncio.sleep(0.1)
    timer.stop()
    count = len(ticks)
    await asyncio.sleep(0.05)

    assert count >= 2
    assert len(ticks) == count
    assert not timer.is_running


async def test_callback_can_restart_its_own_timer():
    ticks = []

    async def on_tick():
        ticks.append(1)
        timer.stop()
        if len(ticks) < 3:
            timer.start()

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    await asyncio.sleep(0.15)

    assert len(ticks) == 3
    assert not timer.is_running


async def test_failing_callback_keeps_ticking():
    ticks = []

    async def on_tick():
        ticks.append(1)
        raise RuntimeError("boom")

    timer = CountdownTimer(on_tick, interval=0.01)
    timer.start()
    await asyncio.sleep(0.1)
    timer.stop()

    assert len(ticks) >= 2
