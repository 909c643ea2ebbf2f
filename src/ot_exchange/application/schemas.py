"""Pydantic schemas for the USD amount cron response (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UsdAmountUpdateResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str
    updated_bounties: int = 0
    updated_grants: int = 0
    total_count: int = 0
    exchange_rates: dict[str, float] | None = None
    tokens_processed: list[str] | None = None
    token_mapping: dict[str, str] | None = None
