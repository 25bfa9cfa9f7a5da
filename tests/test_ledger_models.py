"""
Tests for contract tuple shaping: seconds become milliseconds exactly once.
"""

from __future__ import annotations

from registry_client.ledger.models import (
    Asset,
    HistoryRecord,
    Profile,
    seconds_to_millis,
)

OWNER = "0x" + "aa" * 20
OTHER = "0x" + "bb" * 20


def test_seconds_to_millis_exact():
    assert seconds_to_millis(0) == 0
    assert seconds_to_millis(1_700_000_000) == 1_700_000_000_000
    # uint256 values can exceed 2**53; conversion stays exact
    big = 2**60 + 1
    assert seconds_to_millis(big) == big * 1000


def test_profile_from_contract():
    profile = Profile.from_contract((OWNER, "Alice", "alice@example.com", 1_700_000_000, True))
    assert profile.address == OWNER
    assert profile.name == "Alice"
    assert profile.registered_at_millis == 1_700_000_000_000
    assert profile.is_registered is True


def test_unregistered_profile_flag():
    profile = Profile.from_contract(("0x" + "00" * 20, "", "", 0, False))
    assert profile.is_registered is False


def test_asset_from_contract():
    asset = Asset.from_contract((7, "Car", "Blue sedan", OWNER, 1_600_000_000))
    assert asset == Asset(7, "Car", "Blue sedan", OWNER, 1_600_000_000_000)


def test_history_record_from_contract():
    record = HistoryRecord.from_contract((7, OWNER, OTHER, 1_650_000_000, "TRANSFER"))
    assert record.asset_id == 7
    assert record.from_address == OWNER
    assert record.to_address == OTHER
    assert record.timestamp_millis == 1_650_000_000_000
    assert record.transaction_type == "TRANSFER"
