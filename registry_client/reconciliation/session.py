"""
Per-connection reconciliation session.

Owns the current account, the published snapshot (profile, owned assets,
recent feed) and the loading state. The session is the only writer of the
snapshot.

State machine:
    IDLE -> LOADING     start(), refresh(), or an account change
    LOADING -> READY    profile, assets and feed all loaded (profile may be None)
    LOADING -> FAILED   profile or asset loading raised; error goes to the caller,
                        then back to IDLE so a retry can be requested

Every account change (including a disconnect) starts a new session
generation. At most one reconciliation is in flight per account and
generation: a refresh while one is loading awaits the running one instead of
starting another. Every run is tagged with the account and generation it
started for; when it finishes for a session that is no longer current, its
result (or error) is dropped.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from registry_client.core.exceptions import NotConnected
from registry_client.ledger.interface import Ledger, Signer
from registry_client.ledger.models import Asset, HistoryRecord, Profile
from registry_client.reconciliation.asset_loader import load_assets
from registry_client.reconciliation.history import (
    DEFAULT_FEED_SIZE,
    DEFAULT_SAMPLE_SIZE,
    aggregate_history,
)
from registry_client.reconciliation.ownership import authorize, authorized_history
from registry_client.reconciliation.profile_loader import load_profile
from registry_client.registry_logging import account_context, get_logger
from registry_client.utils.address_utils import (
    addresses_equal,
    display_address,
    normalize_address,
)

logger = get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of one account, rebuilt wholesale on every reconciliation."""

    account: str
    profile: Profile | None
    assets: tuple[Asset, ...]
    recent_feed: tuple[HistoryRecord, ...]
    reconciled_at_millis: int

    @property
    def latest_asset(self) -> Asset | None:
        return self.assets[0] if self.assets else None


class ReconciliationSession:
    """Keeps one account's snapshot in sync with the ledger."""

    def __init__(
        self,
        ledger: Ledger,
        account: str | None = None,
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        feed_size: int = DEFAULT_FEED_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ledger = ledger
        self._account = account or None
        self._sample_size = sample_size
        self._feed_size = feed_size
        self._clock = clock
        self._state = SessionState.IDLE
        self._snapshot: SessionSnapshot | None = None
        self._last_error: Exception | None = None
        # bumped on every account change; runs from older generations are stale
        self._generation = 0
        # (normalized account, generation) -> running reconciliation
        self._inflight: dict[tuple[str, int], asyncio.Task[SessionSnapshot | None]] = {}

    @property
    def account(self) -> str | None:
        return self._account

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def snapshot(self) -> SessionSnapshot | None:
        return self._snapshot

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def is_loading(self) -> bool:
        return self._state is SessionState.LOADING

    @property
    def inflight(self) -> list[asyncio.Task[SessionSnapshot | None]]:
        """Reconciliation tasks that have not finished yet."""
        return [t for t in self._inflight.values() if not t.done()]

    def _is_current(self, account: str, generation: int | None = None) -> bool:
        if generation is not None and generation != self._generation:
            return False
        return addresses_equal(account, self._account)

    def _key(self, account: str) -> tuple[str, int]:
        return normalize_address(account), self._generation

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def start(self) -> SessionSnapshot | None:
        """Initial reconciliation once account and ledger are available."""
        return await self.refresh()

    async def refresh(self) -> SessionSnapshot | None:
        """
        Reconcile the current account and return the new snapshot.

        Coalesces with a reconciliation already running for the same account.
        Returns None when the account changed before the run finished.
        Raises NotConnected without an account, and the loader error when the
        run fails for the still-current account.
        """
        if not self._account:
            raise NotConnected()
        task = self._ensure_task(self._account)
        return await asyncio.shield(task)

    def schedule_refresh(self) -> asyncio.Task[SessionSnapshot | None] | None:
        """
        Start (or join) a reconciliation without awaiting it.

        Errors are recorded on the session and logged rather than raised.
        Returns None when there is no account or no running event loop.
        """
        if not self._account:
            return None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("reconciliation_schedule_skipped", reason="no_running_loop")
            return None
        return self._ensure_task(self._account)

    async def wait_idle(self) -> None:
        """Wait for the current account's in-flight reconciliation, ignoring its outcome."""
        if not self._account:
            return
        task = self._inflight.get(self._key(self._account))
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except Exception:
            # already recorded and logged by the run itself
            pass

    def _ensure_task(self, account: str) -> asyncio.Task[SessionSnapshot | None]:
        key = self._key(account)
        task = self._inflight.get(key)
        if task is not None and not task.done():
            logger.debug("reconciliation_coalesced", account=display_address(account))
            self._state = SessionState.LOADING
            return task
        task = asyncio.ensure_future(self._reconcile(account, self._generation))
        self._inflight[key] = task
        task.add_done_callback(self._forget(key))
        self._state = SessionState.LOADING
        logger.info(
            "reconciliation_started",
            account=display_address(account),
            generation=self._generation,
        )
        return task

    def _forget(self, key: tuple[str, int]) -> Callable[[asyncio.Task[Any]], None]:
        def _done(task: asyncio.Task[Any]) -> None:
            if self._inflight.get(key) is task:
                del self._inflight[key]
            if not task.cancelled():
                # mark retrieved; callers that awaited it already saw the error
                task.exception()

        return _done

    async def _reconcile(self, account: str, generation: int) -> SessionSnapshot | None:
        with account_context(display_address(account)):
            started = time.monotonic()
            try:
                profile = await load_profile(self._ledger, account)
                assets = await load_assets(self._ledger, account)
                feed = await aggregate_history(
                    self._ledger,
                    assets,
                    sample_size=self._sample_size,
                    feed_size=self._feed_size,
                )
            except Exception as e:
                if not self._is_current(account, generation):
                    logger.info("reconciliation_stale_error_dropped", generation=generation, error=str(e))
                    return None
                self._state = SessionState.FAILED
                self._last_error = e
                logger.warning(
                    "reconciliation_failed",
                    error_code=getattr(e, "error_code", type(e).__name__),
                    error=str(e),
                    kept_previous_snapshot=self._snapshot is not None,
                )
                self._state = SessionState.IDLE
                raise

            if not self._is_current(account, generation):
                logger.info("reconciliation_stale_result_dropped", generation=generation)
                return None

            snapshot = SessionSnapshot(
                account=account,
                profile=profile,
                assets=assets,
                recent_feed=feed,
                reconciled_at_millis=int(self._clock() * 1000),
            )
            self._snapshot = snapshot
            self._last_error = None
            self._state = SessionState.READY
            logger.info(
                "reconciliation_ready",
                registered=profile is not None,
                asset_count=len(assets),
                feed_size=len(feed),
                elapsed_ms=round((time.monotonic() - started) * 1000, 2),
            )
            return snapshot

    # ------------------------------------------------------------------
    # Account changes
    # ------------------------------------------------------------------

    def switch_account(self, account: str | None) -> asyncio.Task[SessionSnapshot | None] | None:
        """
        Make account current as a new session.

        The previous account's snapshot is cleared immediately so it can never
        be shown for the new account; a reconciliation for the new account is
        scheduled when an event loop is running. Switching back to an account
        whose earlier run is still in flight starts a fresh run.
        """
        if not account:
            self.disconnect()
            return None
        if addresses_equal(account, self._account):
            return self.schedule_refresh()
        previous = self._account
        self._account = account
        self._generation += 1
        self._snapshot = None
        self._last_error = None
        self._state = SessionState.IDLE
        logger.info(
            "session_account_switched",
            previous=display_address(previous),
            account=display_address(account),
            generation=self._generation,
        )
        return self.schedule_refresh()

    def disconnect(self) -> None:
        """Drop the account and its snapshot; in-flight results will be discarded."""
        if self._account is None and self._snapshot is None:
            return
        logger.info("session_disconnected", account=display_address(self._account))
        self._account = None
        self._generation += 1
        self._snapshot = None
        self._last_error = None
        self._state = SessionState.IDLE

    async def close(self) -> None:
        """Disconnect, then cancel and await every unfinished reconciliation."""
        self.disconnect()
        pending = self.inflight
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info("session_reconciliations_cancelled", count=len(pending))

    def bind_signer(self, signer: Signer) -> None:
        """Follow the signer: every account change is a new session."""
        signer.on_account_changed(self.switch_account)

    # ------------------------------------------------------------------
    # Guarded views
    # ------------------------------------------------------------------

    def _cached_assets(self) -> tuple[Asset, ...]:
        snapshot = self._snapshot
        if snapshot is None or not self._is_current(snapshot.account):
            return ()
        return snapshot.assets

    async def authorize(self, asset_id: int) -> Asset:
        """Ownership-guarded detail read for the current account."""
        if not self._account:
            raise NotConnected()
        return await authorize(self._account, asset_id, self._cached_assets(), self._ledger)

    async def asset_history(self, asset_id: int) -> tuple[HistoryRecord, ...]:
        """Ownership-guarded history read for the current account."""
        if not self._account:
            raise NotConnected()
        return await authorized_history(self._account, asset_id, self._cached_assets(), self._ledger)
