"""CoinMarketCap quotes client (async, httpx).

GET {api_url}/v1/cryptocurrency/quotes/latest?symbol=DOT,KSM&convert=USDC
Header: X-CMC_PRO_API_KEY

Only the USDC price of each symbol is extracted. Non-2xx responses and
payloads with status.error_code != 0 raise ExchangeRateApiError; no retries.
"""

from collections.abc import Sequence
from typing import Any, Final

import httpx

from src.ot_common.errors import ExchangeRateApiError

_QUOTES_PATH: Final[str] = "/v1/cryptocurrency/quotes/latest"
_CONVERT: Final[str] = "USDC"


class CoinMarketCapClient:
    def __init__(
        self,
        api_key: str,
        api_url: str,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = api_url.rstrip("/")
        # Injected clients are owned by the caller
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_usdc_prices(self, symbols: Sequence[str]) -> dict[str, float]:
        """Latest USDC price per upper-cased symbol."""
        if not symbols:
            return {}

        response = await self._client.get(
            f"{self._base_url}{_QUOTES_PATH}",
            params={"symbol": ",".join(symbols), "convert": _CONVERT},
            headers={
                "X-CMC_PRO_API_KEY": self._api_key,
                "Accept": "application/json",
            },
        )
        if response.is_error:
            raise ExchangeRateApiError(f"{response.status_code} {response.reason_phrase}")

        payload: dict[str, Any] = response.json()
        status = payload.get("status") or {}
        if status.get("error_code", 0) != 0:
            raise ExchangeRateApiError(str(status.get("error_message")))

        rates: dict[str, float] = {}
        for symbol, token_data in (payload.get("data") or {}).items():
            rates[symbol.upper()] = float(token_data["quote"][_CONVERT]["price"])
        return rates
