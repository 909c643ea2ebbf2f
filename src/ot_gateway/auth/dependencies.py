"""Auth dependencies.

Cron endpoints are called by the scheduler with a shared secret:
    Authorization: Bearer <CRON_SECRET>
"""

import hmac
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.settings import settings
from src.ot_common.errors import CronUnauthorizedError

_bearer = HTTPBearer(auto_error=False)


async def verify_cron_secret(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> None:
    """FastAPI dependency: reject the request unless it carries the cron secret."""
    expected = settings.CRON_SECRET
    if not expected or credentials is None:
        raise CronUnauthorizedError()
    if not hmac.compare_digest(credentials.credentials.encode(), expected.encode()):
        raise CronUnauthorizedError()
