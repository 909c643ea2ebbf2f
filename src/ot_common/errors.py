"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Statistics
  3xxx: Exchange rates / USD amounts

Every AppError is rendered by the handler in src/main.py as
    {"error": <message>, "details": <details or null>}
"""

UNKNOWN_ERROR = "Unknown error"


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        self.headers = headers
        super().__init__(message)


def error_details(exc: BaseException) -> str:
    """Detail string for an error response.

    Exceptions raised without a message map to "Unknown error".
    """
    if isinstance(exc, AppError):
        return exc.message or UNKNOWN_ERROR
    return str(exc) or UNKNOWN_ERROR


# --- 1xxx: Auth ---

class CronUnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Unauthorized", 401)


# --- 2xxx: Statistics ---

class StatsComputeError(AppError):
    def __init__(self, label: str, detail: str, cache_control: str | None = None) -> None:
        super().__init__(
            2001,
            f"Failed to fetch {label} statistics",
            500,
            details=detail,
            headers={"Cache-Control": cache_control} if cache_control else None,
        )


# --- 3xxx: Exchange rates ---

class ExchangeRateApiError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3001, f"CoinMarketCap API error: {detail}", 502)
