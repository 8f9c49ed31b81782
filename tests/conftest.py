"""Shared fixtures: a query whose results the test settles by hand."""

import asyncio

import pytest


class FakeQuery:
    """Async query stand-in. Each call records its args and returns a fresh Future."""

    def __init__(self):
        self.calls = []
        self.futures = []

    def __call__(self, *args):
        self.calls.append(args)
        future = asyncio.get_running_loop().create_future()
        self.futures.append(future)
        return future

    @property
    def call_count(self):
        return len(self.calls)

    def resolve(self, index, value):
        self.futures[index].set_result(value)

    def reject(self, index, error):
        self.futures[index].set_exception(error)


async def _settle():
    """Let pending settlement tasks run to completion."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def fake_query():
    return FakeQuery()


@pytest.fixture
def settle():
    return _settle
