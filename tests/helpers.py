"""Transformations and async helpers shared by the test modules."""

import asyncio

from timeline.core import TransformationError


def run_async(coro):
    """Drive a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


def add(state: int, amount: int) -> int:
    return state + amount


def scale(state: int, factor: int) -> int:
    return state * factor


def reject_above(state: int, limit: int) -> int:
    if state > limit:
        raise TransformationError(f"{state} exceeds {limit}")
    return state


async def add_later(state: int, amount: int) -> int:
    await asyncio.sleep(0)
    return state + amount


ARITHMETIC = {
    "add": add,
    "scale": scale,
    "reject_above": reject_above,
    "add_later": add_later,
}
