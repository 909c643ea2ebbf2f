"""UsdAmountRepository — concrete implementation of UsdAmountRepositoryProtocol.

Raw text() SQL; USD columns are recomputed in the database as
<token amount> * <rate> so no row data round-trips through Python.
"""

from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_BOUNTY_TOKENS_SQL = text("""
    SELECT DISTINCT token FROM "bounty" WHERE amount IS NOT NULL
""")

_GRANT_TOKENS_SQL = text("""
    SELECT DISTINCT token FROM "grant"
    WHERE "totalFunds" IS NOT NULL OR "minAmount" IS NOT NULL OR "maxAmount" IS NOT NULL
""")

_UPDATE_BOUNTY_USD_SQL = text("""
    UPDATE "bounty"
    SET "amountUSD" = amount * :rate
    WHERE token = :token AND amount IS NOT NULL
""")

_UPDATE_GRANT_USD_SQL = text("""
    UPDATE "grant"
    SET "totalFundsUSD" = "totalFunds" * :rate,
        "minAmountUSD" = "minAmount" * :rate,
        "maxAmountUSD" = "maxAmount" * :rate
    WHERE token = :token
      AND ("totalFunds" IS NOT NULL OR "minAmount" IS NOT NULL OR "maxAmount" IS NOT NULL)
""")


class UsdAmountRepository:
    async def list_bounty_tokens(self, db: AsyncSession) -> list[str | None]:
        result = await db.execute(_BOUNTY_TOKENS_SQL)
        return [row.token for row in result.fetchall()]

    async def list_grant_tokens(self, db: AsyncSession) -> list[str | None]:
        result = await db.execute(_GRANT_TOKENS_SQL)
        return [row.token for row in result.fetchall()]

    async def update_bounty_usd(self, db: AsyncSession, token: str, rate: float) -> int:
        params = {"token": token, "rate": Decimal(str(rate))}
        result = await db.execute(_UPDATE_BOUNTY_USD_SQL, params)
        return result.rowcount  # type: ignore[attr-defined]

    async def update_grant_usd(self, db: AsyncSession, token: str, rate: float) -> int:
        params = {"token": token, "rate": Decimal(str(rate))}
        result = await db.execute(_UPDATE_GRANT_USD_SQL, params)
        return result.rowcount  # type: ignore[attr-defined]
