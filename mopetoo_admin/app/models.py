from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, field_validator

Record = dict[str, Any]


class RecordIdentity(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: StrictInt | StrictStr


class ListingEnvelope(BaseModel):
    items: list[Record]
    total: int = Field(ge=0)

    @field_validator("items")
    @classmethod
    def _items_have_ids(cls, items: list[Record]) -> list[Record]:
        for index, item in enumerate(items):
            try:
                RecordIdentity.model_validate(item)
            except ValidationError as exc:
                raise ValueError(f"item {index} has no valid id") from exc
        return items


class AdminStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_users: int = 0
    total_pets: int = 0
    total_shelters: int = 0
    total_clinics: int = 0
    total_stores: int = 0
    total_adoptions: int = 0
    total_pro_subscriptions: int = 0
    total_donations: int = 0
    revenue_total: int = 0
    revenue_month: int = 0


def parse_listing(payload: Any, envelope_key: str) -> ListingEnvelope:
    """Accept ``{<envelope_key>|items: [...], total}`` or a bare list."""
    if isinstance(payload, list):
        payload = {"items": payload, "total": len(payload)}
    elif isinstance(payload, dict) and envelope_key in payload:
        payload = {"items": payload[envelope_key], "total": payload.get("total")}
    return ListingEnvelope.model_validate(payload)


def parse_stats(payload: Any) -> AdminStats:
    if isinstance(payload, dict) and isinstance(payload.get("stats"), dict):
        payload = payload["stats"]
    return AdminStats.model_validate(payload)
