import logging
from typing import Optional
from fastapi import Header, Request
from app.core.exceptions import AuthError
from app.core.security import verify_api_key

logger = logging.getLogger("auth")

async def require_api_key(request: Request, x_api_key: Optional[str] = Header(None)) -> None:
    """
    Dependency rejecting requests whose x-api-key header does not match the shared secret.
    """
    settings = request.app.state.settings
    if not verify_api_key(x_api_key, settings.API_KEY):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected request to {request.url.path} from {client}: invalid API key")
        raise AuthError()
