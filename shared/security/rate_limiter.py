from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from .jwt_handler import verify_access_token


def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Extracts the identity directly from the Authorization header if available.
    Falls back to the client's IP address if unauthenticated.
    """
    auth_header = request.headers.get("Authorization")

    if auth_header and auth_header.startswith("Bearer "):
        settings = request.app.state.settings
        token = auth_header.split(" ", 1)[1]
        payload = verify_access_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
        if payload and "sub" in payload:
            return f"user:{payload['sub']}"

    return f"ip:{get_remote_address(request)}"


# Route decorators bind to this instance at import time; create_app toggles
# `enabled` from settings.
limiter = Limiter(key_func=user_id_or_ip)


class ConfiguredLimit:
    """Limit string that create_app fills in from settings.

    slowapi calls it on every checked request, so the value the running app
    was built with applies even though the decorator is bound at import.
    """

    def __init__(self, default: str):
        self.value = default

    def __call__(self) -> str:
        return self.value


order_rate_limit = ConfiguredLimit("30/minute")
