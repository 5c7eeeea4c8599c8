import logging
import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_api_key(
    request: Request,
    api_key: str = Security(api_key_header),
) -> None:
    """Reject the request unless it carries the configured shared key."""
    expected = request.app.state.settings.api_key
    if not expected:
        return
    if not api_key:
        raise HTTPException(status_code=401, detail="Missing API key")
    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        logger.warning("Rejected notification request with invalid API key")
        raise HTTPException(status_code=401, detail="Invalid API key")
