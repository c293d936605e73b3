# blogapp/crud/user.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    store_call,
)
from blogapp.core.security import get_password_hash, verify_password
from blogapp.core.session import SessionContext
from blogapp.models.user import User
from blogapp.schemas.user import ProfileUpdate, UserCreate, UserRead

logger = logging.getLogger(__name__)


def to_user(row: User) -> UserRead:
    """Map a users row to the public profile view model."""
    return UserRead(
        id=row.id,
        name=row.name,
        email=row.email,
        role=row.role or "user",
        bio=row.bio or "",
        avatar=row.avatar_url,
        created_at=row.created_at,
    )


class CRUDUser:
    @store_call
    async def get_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        q = select(User).where(User.id == user_id)
        res = await db.execute(q)
        return res.scalars().first()

    @store_call
    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        q = select(User).where(User.email == email)
        res = await db.execute(q)
        return res.scalars().first()

    async def get_profile(self, db: AsyncSession, user_id: int) -> UserRead:
        row = await self.get_by_id(db, user_id)
        if row is None:
            raise NotFoundError("User not found")
        return to_user(row)

    @store_call
    async def create(self, db: AsyncSession, *, obj_in: UserCreate, role: str = "user") -> UserRead:
        if await self.get_by_email(db, obj_in.email):
            raise ValidationError("Email already registered")
        if not obj_in.name.strip():
            raise ValidationError("Name is required")
        row = User(
            email=obj_in.email,
            name=obj_in.name.strip(),
            role=role,
            bio=obj_in.bio,
            avatar_url=obj_in.avatar,
            hashed_password=get_password_hash(obj_in.password),
        )
        db.add(row)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise ValidationError("Email already registered") from exc
        await db.refresh(row)
        logger.info("created user %s", row.id)
        return to_user(row)

    @store_call
    async def create_google_user(self, db: AsyncSession, email: str, name: str, google_sub: str) -> User:
        row = User(email=email, name=name or email.split("@")[0], google_sub=google_sub)
        db.add(row)
        await db.commit()
        await db.refresh(row)
        logger.info("created user %s from google sign-in", row.id)
        return row

    @store_call
    async def update_profile(
        self, db: AsyncSession, session: SessionContext, user_id: int, changes: ProfileUpdate
    ) -> UserRead:
        session.require_user()
        if not session.can_modify(user_id):
            raise PermissionDeniedError()
        row = await self.get_by_id(db, user_id)
        if row is None:
            raise NotFoundError("User not found")

        data = changes.model_dump(exclude_unset=True)
        if "name" in data:
            if not (data["name"] or "").strip():
                raise ValidationError("Name is required")
            row.name = data["name"].strip()
        if "bio" in data:
            row.bio = data["bio"]
        if "avatar" in data:
            row.avatar_url = data["avatar"] or None
        await db.commit()
        await db.refresh(row)
        return to_user(row)

    async def authenticate(self, db: AsyncSession, email: str, plain_password: str) -> Optional[User]:
        row = await self.get_by_email(db, email=email)
        if not row or not row.hashed_password:
            return None
        if not verify_password(plain_password, row.hashed_password):
            return None
        return row

user = CRUDUser()
