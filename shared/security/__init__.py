from .jwt_handler import create_access_token, verify_access_token
from .dependencies import get_token_claims
from .rate_limiter import limiter, order_rate_limit, user_id_or_ip

__all__ = [
    "create_access_token",
    "verify_access_token",
    "get_token_claims",
    "limiter",
    "order_rate_limit",
    "user_id_or_ip"
]
