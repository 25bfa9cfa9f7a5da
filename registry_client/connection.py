"""
Connection — everything one wallet connection needs, built explicitly.

connect() creates the web3 client, signer, ledger, reconciliation session and
write actions for a single connection and hands them back together; callers
pass the Connection to whatever needs it. Nothing here is module-global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from registry_client.config import Settings, get_settings
from registry_client.config.env import mask_rpc_url
from registry_client.core.exceptions import LedgerReadFailed
from registry_client.ledger.interface import Ledger
from registry_client.ledger.signer import NodeSigner
from registry_client.ledger.web3_ledger import Web3Ledger, build_web3
from registry_client.reconciliation.actions import RegistryActions
from registry_client.reconciliation.session import ReconciliationSession
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import display_address

logger = get_logger(__name__)


@dataclass
class Connection:
    settings: Settings
    signer: NodeSigner
    ledger: Ledger
    session: ReconciliationSession
    actions: RegistryActions
    w3: Any = None

    @classmethod
    def from_parts(cls, settings: Settings, signer: NodeSigner, ledger: Ledger, w3: Any = None) -> "Connection":
        """Wire a session and actions around an existing signer and ledger."""
        session = ReconciliationSession(
            ledger,
            signer.current_account(),
            sample_size=settings.recent_sample_size,
            feed_size=settings.recent_feed_size,
        )
        session.bind_signer(signer)
        actions = RegistryActions(session, ledger)
        return cls(settings=settings, signer=signer, ledger=ledger, session=session, actions=actions, w3=w3)

    async def close(self) -> None:
        """Disconnect the session, cancel its unfinished runs and release the provider."""
        self.signer.clear()
        await self.session.close()
        provider = getattr(self.w3, "provider", None)
        disconnect = getattr(provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
        logger.info("connection_closed")


async def connect(settings: Settings | None = None) -> Connection:
    """Open a connection to the configured node and registry contract."""
    settings = settings or get_settings()
    try:
        signer = await NodeSigner.from_node(
            settings.rpc_url,
            settings.account_index,
            settings.request_timeout_sec,
        )
    except Exception as e:
        logger.error("connection_failed", rpc_url=mask_rpc_url(settings.rpc_url), error=str(e))
        raise LedgerReadFailed("eth_accounts", str(e) or type(e).__name__) from e

    w3 = build_web3(settings.rpc_url, settings.request_timeout_sec)
    ledger = Web3Ledger(w3, settings.contract_address, signer)
    connection = Connection.from_parts(settings, signer, ledger, w3=w3)
    logger.info(
        "connection_opened",
        rpc_url=mask_rpc_url(settings.rpc_url),
        contract=display_address(settings.contract_address),
        account=display_address(signer.current_account()),
    )
    return connection
