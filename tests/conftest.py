"""Pytest configuration and fixtures."""

import pytest

from dex.amm.pool import Pool
from dex.models.events import PoolEvent
from tests.helpers import ALICE, INITIAL_BALANCE, OWNER, fund, make_pool


@pytest.fixture
def empty_pool() -> Pool:
    """Unseeded pool with no funded accounts."""
    return make_pool()


@pytest.fixture
def pool() -> Pool:
    """Unseeded pool; OWNER and ALICE each hold 1000 of both tokens and approved the pool."""
    pool = make_pool()
    fund(pool, OWNER, INITIAL_BALANCE, INITIAL_BALANCE)
    fund(pool, ALICE, INITIAL_BALANCE, INITIAL_BALANCE)
    return pool


@pytest.fixture
def recorded_events(pool: Pool) -> list[PoolEvent]:
    """Events delivered to a listener subscribed on the `pool` fixture."""
    received: list[PoolEvent] = []
    pool.subscribe(received.append)
    return received
