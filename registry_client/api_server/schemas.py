"""Request and response models for the HTTP surface."""

from __future__ import annotations

from pydantic import BaseModel, Field

from registry_client.ledger.models import Asset, HistoryRecord, Profile
from registry_client.utils.address_utils import display_address, format_timestamp


class AccountRequest(BaseModel):
    """POST /session/account body."""

    account: str = Field(..., min_length=42, max_length=42, description="0x-prefixed account address")


class ProfileRequest(BaseModel):
    """POST/PUT /profile body."""

    name: str = Field(..., max_length=256, description="Display name")
    email: str = Field("", max_length=256, description="Contact email")


class AssetRequest(BaseModel):
    """POST /assets body."""

    name: str = Field(..., max_length=256, description="Asset name")
    description: str = Field("", max_length=4096, description="Free-form description")


class TransferRequest(BaseModel):
    """POST /assets/{asset_id}/transfer body."""

    to: str = Field(..., min_length=42, max_length=42, description="Recipient account address")


class ProfileOut(BaseModel):
    address: str
    address_display: str
    name: str
    email: str
    registered_at_millis: int
    registered_at: str

    @classmethod
    def from_model(cls, profile: Profile) -> "ProfileOut":
        return cls(
            address=profile.address,
            address_display=display_address(profile.address),
            name=profile.name,
            email=profile.email,
            registered_at_millis=profile.registered_at_millis,
            registered_at=format_timestamp(profile.registered_at_millis),
        )


class AssetOut(BaseModel):
    id: int
    name: str
    description: str
    owner: str
    owner_display: str
    created_at_millis: int
    created_at: str

    @classmethod
    def from_model(cls, asset: Asset) -> "AssetOut":
        return cls(
            id=asset.id,
            name=asset.name,
            description=asset.description,
            owner=asset.owner,
            owner_display=display_address(asset.owner),
            created_at_millis=asset.created_at_millis,
            created_at=format_timestamp(asset.created_at_millis),
        )


class HistoryRecordOut(BaseModel):
    asset_id: int
    from_address: str
    from_display: str
    to_address: str
    to_display: str
    timestamp_millis: int
    timestamp: str
    transaction_type: str

    @classmethod
    def from_model(cls, record: HistoryRecord) -> "HistoryRecordOut":
        return cls(
            asset_id=record.asset_id,
            from_address=record.from_address,
            from_display=display_address(record.from_address),
            to_address=record.to_address,
            to_display=display_address(record.to_address),
            timestamp_millis=record.timestamp_millis,
            timestamp=format_timestamp(record.timestamp_millis),
            transaction_type=record.transaction_type,
        )


class SessionResponse(BaseModel):
    """GET /session response."""

    state: str
    account: str | None = None
    account_display: str = ""
    last_error: str | None = None
    reconciled_at_millis: int | None = None


class OverviewResponse(BaseModel):
    """GET /overview response: the current snapshot."""

    state: str
    account: str | None = None
    account_display: str = ""
    registered: bool = False
    profile: ProfileOut | None = None
    asset_count: int = 0
    assets: list[AssetOut] = Field(default_factory=list)
    latest_asset: AssetOut | None = None
    recent_activity: list[HistoryRecordOut] = Field(default_factory=list)
    reconciled_at_millis: int | None = None


class AssetHistoryResponse(BaseModel):
    asset_id: int
    records: list[HistoryRecordOut]


class StatsResponse(BaseModel):
    total_users: int
    total_assets: int


class WriteResponse(BaseModel):
    operation: str
    tx_hash: str
    refreshed: bool
