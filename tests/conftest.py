"""
Pytest fixtures for Registry Client tests. Ledgers are in-memory FakeLedger
instances; nothing talks to a node.
"""

from __future__ import annotations

import pytest

from tests.fake_ledger import ACCOUNT_A, ACCOUNT_B, FakeLedger


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def populated_ledger() -> FakeLedger:
    """A owns assets 1 (older) and 2 (newer) and is registered; B owns asset 3."""
    fake = FakeLedger()
    fake.set_profile(ACCOUNT_A)
    fake.add_asset(1, ACCOUNT_A, 1_000_000, name="Bike")
    fake.add_asset(2, ACCOUNT_A, 2_000_000, name="Car")
    fake.add_asset(3, ACCOUNT_B, 3_000_000, name="Boat")
    fake.sender = ACCOUNT_A
    return fake
