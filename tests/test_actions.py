"""
Tests for write actions: validation, confirmation, and refresh after writes.
"""

from __future__ import annotations

import asyncio

import pytest

from registry_client.core.exceptions import (
    InvalidInput,
    LedgerWriteFailed,
    NotConnected,
    NotOwned,
)
from registry_client.ledger.models import TX_TRANSFER
from registry_client.reconciliation.actions import (
    AssetInput,
    ProfileInput,
    RegistryActions,
    TransferInput,
)
from registry_client.reconciliation.session import ReconciliationSession
from tests.fake_ledger import ACCOUNT_A, ACCOUNT_C


def _wire(ledger, account=ACCOUNT_A):
    ledger.sender = account
    session = ReconciliationSession(ledger, account)
    return session, RegistryActions(session, ledger)


def test_register_asset_visible_after_confirmation(populated_ledger):
    session, actions = _wire(populated_ledger)

    async def scenario():
        await session.start()
        return await actions.register_asset(AssetInput(name="  Laptop ", description="work"))

    result = asyncio.run(scenario())
    assert result.operation == "register_asset"
    assert result.tx_hash.startswith("0x")
    assert result.snapshot is session.snapshot
    latest = result.snapshot.latest_asset
    assert latest.name == "Laptop"
    assert latest.description == "work"
    assert latest.id == 4


def test_blank_name_rejected_before_submission(populated_ledger):
    session, actions = _wire(populated_ledger)
    with pytest.raises(InvalidInput):
        asyncio.run(actions.register_asset(AssetInput(name="   ")))
    with pytest.raises(InvalidInput):
        asyncio.run(actions.register_profile(ProfileInput(name="")))
    assert populated_ledger.calls["register_asset"] == 0
    assert populated_ledger.calls["register_profile"] == 0


def test_failed_write_leaves_snapshot_untouched(populated_ledger):
    session, actions = _wire(populated_ledger)
    previous = asyncio.run(session.start())
    populated_ledger.fail_write = "Asset name required"
    with pytest.raises(LedgerWriteFailed, match="Asset name required"):
        asyncio.run(actions.register_asset(AssetInput(name="Laptop")))
    assert session.snapshot is previous
    assert len(populated_ledger.assets) == 3


def test_register_profile_for_new_account(populated_ledger):
    session, actions = _wire(populated_ledger, ACCOUNT_C)

    async def scenario():
        await session.start()
        assert session.snapshot.profile is None
        return await actions.register_profile(ProfileInput(name="Carol", email="carol@example.com"))

    result = asyncio.run(scenario())
    assert result.snapshot.profile.name == "Carol"
    assert result.snapshot.profile.email == "carol@example.com"


def test_update_profile(populated_ledger):
    session, actions = _wire(populated_ledger)
    result = asyncio.run(actions.update_profile(ProfileInput(name="Alice B.", email="ab@example.com")))
    assert result.snapshot.profile.name == "Alice B."


def test_transfer_of_unowned_asset_never_submitted(populated_ledger):
    session, actions = _wire(populated_ledger)
    asyncio.run(session.start())
    with pytest.raises(NotOwned):
        asyncio.run(actions.transfer_asset(TransferInput(asset_id=3, to=ACCOUNT_C)))
    assert populated_ledger.calls["transfer_asset"] == 0


def test_transfer_invalid_recipient(populated_ledger):
    session, actions = _wire(populated_ledger)
    asyncio.run(session.start())
    with pytest.raises(InvalidInput):
        asyncio.run(actions.transfer_asset(TransferInput(asset_id=1, to="0x1234")))
    with pytest.raises(InvalidInput):
        asyncio.run(actions.transfer_asset(TransferInput(asset_id=-1, to=ACCOUNT_C)))
    assert populated_ledger.calls["transfer_asset"] == 0


def test_transfer_removes_asset_from_snapshot(populated_ledger):
    session, actions = _wire(populated_ledger)

    async def scenario():
        await session.start()
        return await actions.transfer_asset(TransferInput(asset_id=1, to=ACCOUNT_C))

    result = asyncio.run(scenario())
    assert [a.id for a in result.snapshot.assets] == [2]
    # asset 1 is no longer sampled for the feed
    assert all(r.asset_id == 2 for r in result.snapshot.recent_feed)
    assert populated_ledger.assets[1].owner == ACCOUNT_C
    assert populated_ledger.histories[1][-1].transaction_type == TX_TRANSFER


def test_write_without_account(populated_ledger):
    session = ReconciliationSession(populated_ledger)
    actions = RegistryActions(session, populated_ledger)
    with pytest.raises(NotConnected):
        asyncio.run(actions.register_asset(AssetInput(name="Laptop")))
    with pytest.raises(NotConnected):
        asyncio.run(actions.transfer_asset(TransferInput(asset_id=1, to=ACCOUNT_C)))


def test_write_waits_for_inflight_reconciliation(populated_ledger):
    """A reconciliation started before confirmation is not taken as the post-write snapshot."""
    session, actions = _wire(populated_ledger)

    async def scenario():
        gate = asyncio.Event()
        populated_ledger.gates[ACCOUNT_A] = gate
        session.schedule_refresh()
        write = asyncio.ensure_future(actions.register_asset(AssetInput(name="Laptop")))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not write.done()
        gate.set()
        return await write

    result = asyncio.run(scenario())
    assert result.snapshot.latest_asset.name == "Laptop"
    assert populated_ledger.calls["get_profile"] == 2


def test_refresh_failure_after_confirmed_write(populated_ledger):
    session, actions = _wire(populated_ledger)
    populated_ledger.fail_ids = True
    result = asyncio.run(actions.register_asset(AssetInput(name="Laptop")))
    assert result.snapshot is None
    assert any(a.name == "Laptop" for a in populated_ledger.assets.values())
