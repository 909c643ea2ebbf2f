# src/ot_exchange/domain/repository.py
"""Repository Protocol for USD amount maintenance.

Unit tests inject a mock that conforms to this Protocol.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class UsdAmountRepositoryProtocol(Protocol):
    async def list_bounty_tokens(self, db: AsyncSession) -> list[str | None]: ...

    async def list_grant_tokens(self, db: AsyncSession) -> list[str | None]: ...

    async def update_bounty_usd(self, db: AsyncSession, token: str, rate: float) -> int: ...

    async def update_grant_usd(self, db: AsyncSession, token: str, rate: float) -> int: ...
