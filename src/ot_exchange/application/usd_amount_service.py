"""UsdAmountService — refresh bounty/grant USD columns from live exchange rates.

Transactions are managed by the caller (router) via `async with db.begin()`.
Rates <= 0 (unknown or delisted tokens) leave the USD columns untouched.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ot_exchange.application.exchange_rate_service import ExchangeRateService
from src.ot_exchange.application.schemas import UsdAmountUpdateResult
from src.ot_exchange.domain.repository import UsdAmountRepositoryProtocol
from src.ot_exchange.infrastructure.persistence import UsdAmountRepository

logger = logging.getLogger(__name__)


class UsdAmountService:
    def __init__(
        self,
        rates: ExchangeRateService,
        repo: UsdAmountRepositoryProtocol | None = None,
    ) -> None:
        self._rates = rates
        self._repo: UsdAmountRepositoryProtocol = repo or UsdAmountRepository()

    async def update_usd_amounts(
        self, db: AsyncSession, refresh: bool = False
    ) -> UsdAmountUpdateResult:
        logger.info("Running USD amount update%s", " (force refresh)" if refresh else "")
        if refresh:
            await self._rates.clear_cache()

        bounty_tokens = await self._repo.list_bounty_tokens(db)
        grant_tokens = await self._repo.list_grant_tokens(db)
        # Ordered de-duplication; tokens keep their DB spelling
        all_tokens = list(
            dict.fromkeys(t for t in [*bounty_tokens, *grant_tokens] if t is not None)
        )
        if not all_tokens:
            logger.info("No tokens found to update")
            return UsdAmountUpdateResult(message="No tokens found to update")

        # API symbol (upper case) -> spelling stored in the DB
        token_mapping = {token.upper(): token for token in all_tokens}
        rates = await self._rates.get_exchange_rates(all_tokens)
        logger.info("Exchange rates fetched: %s", rates)

        priced = [
            (token_mapping[symbol], rate)
            for symbol, rate in rates.items()
            if rate > 0 and symbol in token_mapping
        ]

        updated_bounties = 0
        for token, rate in priced:
            count = await self._repo.update_bounty_usd(db, token, rate)
            logger.info("Updated %d bounties for token %s with rate %s", count, token, rate)
            updated_bounties += count

        updated_grants = 0
        for token, rate in priced:
            count = await self._repo.update_grant_usd(db, token, rate)
            logger.info("Updated %d grants for token %s with rate %s", count, token, rate)
            updated_grants += count

        total = updated_bounties + updated_grants
        return UsdAmountUpdateResult(
            message=f"Successfully updated USD amounts for {total} records",
            updated_bounties=updated_bounties,
            updated_grants=updated_grants,
            total_count=total,
            exchange_rates=rates,
            tokens_processed=all_tokens,
            token_mapping=token_mapping,
        )
