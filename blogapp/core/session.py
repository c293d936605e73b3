# blogapp/core/session.py
from dataclasses import dataclass

from blogapp.core.errors import NotAuthenticatedError
from blogapp.schemas.user import UserRead


@dataclass(frozen=True)
class SessionContext:
    """Who is calling. Passed explicitly into every mutating data-access call."""

    user: UserRead | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    def require_user(self) -> UserRead:
        if self.user is None:
            raise NotAuthenticatedError()
        return self.user

    def can_modify(self, owner_id: int) -> bool:
        return self.user is not None and (self.user.id == owner_id or self.is_admin)


ANONYMOUS = SessionContext()
