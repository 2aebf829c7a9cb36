from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """Dependency returning the verified JWT claims, or None when absent/invalid."""
    if credentials is None or not credentials.credentials:
        return None

    settings = request.app.state.settings
    payload = verify_access_token(credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm)
    if payload is None or not payload.get("sub"):
        return None
    return payload
