"""Profile loading: one getUser read shaped into a Profile, or None when unregistered."""

from __future__ import annotations

from registry_client.core.exceptions import LedgerReadFailed
from registry_client.ledger.interface import Ledger
from registry_client.ledger.models import Profile
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import display_address

logger = get_logger(__name__)


async def load_profile(ledger: Ledger, account: str) -> Profile | None:
    """
    Return the account's profile, or None if the contract reports it as not registered.

    Read failures propagate as LedgerReadFailed; the caller decides whether to
    surface or suppress them.
    """
    try:
        profile = await ledger.get_profile(account)
    except LedgerReadFailed:
        raise
    except Exception as e:
        raise LedgerReadFailed("getUser", str(e) or type(e).__name__) from e
    if not profile.is_registered:
        logger.debug("profile_not_registered", account=display_address(account))
        return None
    return profile
