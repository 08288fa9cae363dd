"""
Tests for run_async inside and outside a running event loop.
"""

import asyncio
import gc
import weakref

import pytest

from utils import async_runner
from utils.async_runner import run_async

pytestmark = pytest.mark.unit


async def _answer(value):
    await asyncio.sleep(0)
    return value


def test_run_async_without_running_loop():
    assert run_async(_answer(42)) == 42


def test_run_async_propagates_exceptions():
    async def _fail():
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        run_async(_fail())


@pytest.mark.asyncio
async def test_run_async_inside_running_loop():
    # Handlers called from async code re-enter the current loop
    assert run_async(_answer("nested")) == "nested"
    assert run_async(_answer("again")) == "again"


def test_each_loop_is_patched_once(monkeypatch):
    applied = []
    monkeypatch.setattr(async_runner.nest_asyncio, "apply", lambda loop: applied.append(id(loop)))
    loop = asyncio.new_event_loop()
    try:
        async_runner._ensure_nest_asyncio(loop)
        async_runner._ensure_nest_asyncio(loop)

        assert loop in async_runner._patched_loops
        assert applied == [id(loop)]
    finally:
        loop.close()


def test_collected_loops_are_forgotten(monkeypatch):
    monkeypatch.setattr(async_runner.nest_asyncio, "apply", lambda loop: None)
    before = len(async_runner._patched_loops)
    loop = asyncio.new_event_loop()
    async_runner._ensure_nest_asyncio(loop)
    assert len(async_runner._patched_loops) == before + 1

    loop_ref = weakref.ref(loop)
    loop.close()
    del loop
    gc.collect()

    assert loop_ref() is None
    assert len(async_runner._patched_loops) <= before


def test_new_loop_after_collected_ones_is_patched(monkeypatch):
    applied = []
    monkeypatch.setattr(async_runner.nest_asyncio, "apply", lambda loop: applied.append(loop))
    for _ in range(3):
        loop = asyncio.new_event_loop()
        async_runner._ensure_nest_asyncio(loop)
        loop.close()
        applied.clear()
        del loop
        gc.collect()

    loop = asyncio.new_event_loop()
    try:
        async_runner._ensure_nest_asyncio(loop)
        assert applied == [loop]
    finally:
        applied.clear()
        loop.close()
