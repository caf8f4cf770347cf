import hmac
from typing import Annotated, Optional
from fastapi import HTTPException, status, Header

from common.core.config import settings
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)


async def require_internal_api_key(
    x_api_key: Annotated[Optional[str], Header()] = None,
) -> None:
    """
    Authenticate a calling service by the shared internal API key.

    An unset key on the server rejects every request.
    """
    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required",
        )

    expected = settings.internal_api_key
    if not expected or not hmac.compare_digest(x_api_key, expected):
        logger.warning("Rejected request with invalid API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
