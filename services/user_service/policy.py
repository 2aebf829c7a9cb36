from typing import Iterable, Optional

from .models import UserRole


class RolePolicy:
    """Decides which role an identity is granted when it is upserted.

    Built from configuration at startup. Identities not named by the policy
    get ``user`` on first insert and keep whatever role they already have on
    later logins.
    """

    def __init__(self, admin_open_ids: Iterable[str] = ()):
        self.admin_open_ids = frozenset(admin_open_ids)

    def role_for(self, open_id: str) -> Optional[UserRole]:
        if open_id in self.admin_open_ids:
            return UserRole.ADMIN
        return None
