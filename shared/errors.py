"""Domain errors raised by the persistence gateway, services and routers.

Each error carries the HTTP status and a short machine code. A single
exception handler registered in ``services.app`` renders them as
``{"detail": ..., "code": ...}``.
"""
from fastapi import status


class MarketplaceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class StorageUnavailable(MarketplaceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "unavailable"
    default_detail = "Storage is not configured"


class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Resource not found"


class InsufficientStock(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    code = "insufficient_stock"
    default_detail = "Insufficient stock"


class Unauthorized(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_detail = "Authentication required"


class Forbidden(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "You do not have access to this resource"


class InvalidRequest(MarketplaceError):
    status_code = 422
    code = "invalid_request"
    default_detail = "Invalid request"
