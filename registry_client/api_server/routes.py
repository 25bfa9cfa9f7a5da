"""
API route definitions — REST endpoints.

Session control, overview, ownership-guarded asset views and write actions.
Every handler resolves the per-app Connection through get_connection();
domain errors are mapped to HTTP responses by the server's exception handlers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from registry_client.api_server.schemas import (
    AccountRequest,
    AssetHistoryResponse,
    AssetOut,
    AssetRequest,
    HistoryRecordOut,
    OverviewResponse,
    ProfileOut,
    ProfileRequest,
    SessionResponse,
    StatsResponse,
    TransferRequest,
    WriteResponse,
)
from registry_client.connection import Connection
from registry_client.core.exceptions import LedgerReadFailed
from registry_client.reconciliation.actions import (
    AssetInput,
    ProfileInput,
    TransferInput,
    WriteResult,
)
from registry_client.registry_logging import get_logger
from registry_client.utils.address_utils import display_address

logger = get_logger(__name__)

router = APIRouter()


def get_connection(request: Request) -> Connection:
    """Dependency: the Connection opened in the app lifespan."""
    return request.app.state.connection


def _session_response(connection: Connection) -> SessionResponse:
    session = connection.session
    snapshot = session.snapshot
    return SessionResponse(
        state=session.state.value,
        account=session.account,
        account_display=display_address(session.account),
        last_error=str(session.last_error) if session.last_error else None,
        reconciled_at_millis=snapshot.reconciled_at_millis if snapshot else None,
    )


def _write_response(result: WriteResult) -> JSONResponse:
    body = WriteResponse(
        operation=result.operation,
        tx_hash=result.tx_hash,
        refreshed=result.snapshot is not None,
    )
    return JSONResponse(status_code=201, content=body.model_dump())


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------


@router.get("/session", response_model=SessionResponse)
async def get_session(connection: Connection = Depends(get_connection)) -> SessionResponse:
    return _session_response(connection)


@router.post("/session/account", response_model=SessionResponse)
async def switch_account(
    body: AccountRequest,
    connection: Connection = Depends(get_connection),
) -> SessionResponse:
    """Make another node account active. The previous account's data is dropped immediately."""
    connection.signer.select_account(body.account)
    return _session_response(connection)


@router.post("/session/disconnect", response_model=SessionResponse)
async def disconnect(connection: Connection = Depends(get_connection)) -> SessionResponse:
    connection.signer.clear()
    connection.session.disconnect()
    return _session_response(connection)


@router.post("/session/refresh", response_model=SessionResponse)
async def refresh(connection: Connection = Depends(get_connection)) -> SessionResponse:
    """Reconcile now; joins a reconciliation already running for the account."""
    await connection.session.refresh()
    return _session_response(connection)


# -----------------------------------------------------------------------------
# Read views
# -----------------------------------------------------------------------------


@router.get("/overview", response_model=OverviewResponse)
async def overview(connection: Connection = Depends(get_connection)) -> OverviewResponse:
    """
    Current snapshot: profile, owned assets (newest first), latest asset and
    recent activity. Served from the cache; POST /session/refresh to reload.
    """
    session = connection.session
    snapshot = session.snapshot
    response = OverviewResponse(
        state=session.state.value,
        account=session.account,
        account_display=display_address(session.account),
    )
    if snapshot is None:
        return response
    assets = [AssetOut.from_model(a) for a in snapshot.assets]
    response.registered = snapshot.profile is not None
    response.profile = ProfileOut.from_model(snapshot.profile) if snapshot.profile else None
    response.asset_count = len(assets)
    response.assets = assets
    response.latest_asset = assets[0] if assets else None
    response.recent_activity = [HistoryRecordOut.from_model(r) for r in snapshot.recent_feed]
    response.reconciled_at_millis = snapshot.reconciled_at_millis
    return response


@router.get("/stats", response_model=StatsResponse)
async def stats(connection: Connection = Depends(get_connection)) -> StatsResponse:
    """Contract-wide user and asset counts."""
    try:
        totals = await connection.ledger.get_totals()
    except LedgerReadFailed:
        raise
    except Exception as e:
        raise LedgerReadFailed("getTotals", str(e) or type(e).__name__) from e
    return StatsResponse(total_users=totals.total_users, total_assets=totals.total_assets)


@router.get("/assets/{asset_id}", response_model=AssetOut)
async def asset_detail(asset_id: int, connection: Connection = Depends(get_connection)) -> AssetOut:
    """Ownership-guarded asset detail with fresh on-chain fields."""
    asset = await connection.session.authorize(asset_id)
    return AssetOut.from_model(asset)


@router.get("/assets/{asset_id}/history", response_model=AssetHistoryResponse)
async def asset_history(
    asset_id: int,
    connection: Connection = Depends(get_connection),
) -> AssetHistoryResponse:
    """Ownership-guarded full history of one asset, newest first."""
    records = await connection.session.asset_history(asset_id)
    return AssetHistoryResponse(
        asset_id=asset_id,
        records=[HistoryRecordOut.from_model(r) for r in records],
    )


# -----------------------------------------------------------------------------
# Writes
# -----------------------------------------------------------------------------


@router.post("/profile", response_model=WriteResponse, status_code=201)
async def register_profile(
    body: ProfileRequest,
    connection: Connection = Depends(get_connection),
) -> JSONResponse:
    result = await connection.actions.register_profile(ProfileInput(name=body.name, email=body.email))
    return _write_response(result)


@router.put("/profile", response_model=WriteResponse, status_code=201)
async def update_profile(
    body: ProfileRequest,
    connection: Connection = Depends(get_connection),
) -> JSONResponse:
    result = await connection.actions.update_profile(ProfileInput(name=body.name, email=body.email))
    return _write_response(result)


@router.post("/assets", response_model=WriteResponse, status_code=201)
async def register_asset(
    body: AssetRequest,
    connection: Connection = Depends(get_connection),
) -> JSONResponse:
    result = await connection.actions.register_asset(
        AssetInput(name=body.name, description=body.description)
    )
    return _write_response(result)


@router.post("/assets/{asset_id}/transfer", response_model=WriteResponse, status_code=201)
async def transfer_asset(
    asset_id: int,
    body: TransferRequest,
    connection: Connection = Depends(get_connection),
) -> JSONResponse:
    logger.info("transfer_requested", asset_id=asset_id, to=display_address(body.to))
    result = await connection.actions.transfer_asset(TransferInput(asset_id=asset_id, to=body.to))
    return _write_response(result)
