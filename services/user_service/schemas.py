from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .models import UserRole


class UserResponse(BaseModel):
    id: int
    open_id: str
    name: Optional[str]
    email: Optional[str]
    login_method: Optional[str]
    role: UserRole
    created_at: datetime
    last_signed_in: datetime

    class Config:
        from_attributes = True
