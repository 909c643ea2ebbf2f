# src/ot_stats/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
All queries are read-only and implicitly restricted to PUBLISHED rows
where the entity has a visibility column.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ot_stats.domain.models import (
    ActivityRecord,
    GrantFunds,
    Organization,
    OrganizationBountyTotals,
)


class StatsRepositoryProtocol(Protocol):
    async def count_bounties(
        self, db: AsyncSession, statuses: Sequence[str] | None = None
    ) -> int: ...

    async def sum_bounty_amount_usd(
        self,
        db: AsyncSession,
        statuses: Sequence[str],
        winners_announced_only: bool = False,
    ) -> Decimal | None: ...

    async def count_grants(
        self, db: AsyncSession, status: str | None = None
    ) -> int: ...

    async def sum_grant_funds_usd(
        self, db: AsyncSession, status: str
    ) -> Decimal | None: ...

    async def count_rfps(self, db: AsyncSession) -> int: ...

    async def list_submitter_ids(self, db: AsyncSession) -> list[str]: ...

    async def list_applicant_ids(self, db: AsyncSession) -> list[str]: ...

    async def bounty_totals_by_organization(
        self, db: AsyncSession, statuses: Sequence[str]
    ) -> list[OrganizationBountyTotals]: ...

    async def list_grant_funds(
        self, db: AsyncSession, status: str
    ) -> list[GrantFunds]: ...

    async def list_organizations(self, db: AsyncSession) -> list[Organization]: ...

    async def list_bounty_skills(
        self, db: AsyncSession, statuses: Sequence[str]
    ) -> list[list[str] | None]: ...

    async def list_grant_skills(
        self, db: AsyncSession, status: str
    ) -> list[list[str] | None]: ...

    async def list_recent_submissions(
        self, db: AsyncSession, limit: int
    ) -> list[ActivityRecord]: ...

    async def list_recent_applications(
        self, db: AsyncSession, limit: int
    ) -> list[ActivityRecord]: ...
