"""
User and role repositories.

Users are upserted from identity provider data; roles are plain
``(user_id, role)`` rows.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.users import User, UserRole
from .base import AsyncBaseRepository


class UserRepository(AsyncBaseRepository[User]):
    """Repository for portal users."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert(
        self,
        user_id: str,
        *,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """Insert the user or refresh its profile fields.

        Fields passed as ``None`` keep their stored value on update.

        Args:
            user_id: Identity provider user id
            email: Email address
            first_name: Given name
            last_name: Family name
            profile_image_url: Avatar URL

        Returns:
            The persisted User
        """
        user = await self.get_by_id(user_id)
        if user is None:
            user = User(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                profile_image_url=profile_image_url,
            )
            return await self.create(user)

        for field, value in (
            ("email", email),
            ("first_name", first_name),
            ("last_name", last_name),
            ("profile_image_url", profile_image_url),
        ):
            if value is not None:
                setattr(user, field, value)
        user.updated_at = utc_now()
        return await self.update(user)


class UserRoleRepository(AsyncBaseRepository[UserRole]):
    """Repository for role assignments."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserRole)

    async def list_roles(self, user_id: str) -> List[str]:
        """Return the role names held by a user, sorted."""
        stmt = select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.role)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_assignment(self, user_id: str, role: str) -> Optional[UserRole]:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def assign(self, user_id: str, role: str) -> bool:
        """Give ``role`` to the user.

        Returns:
            True if a new assignment was stored, False if it already existed
        """
        if await self.get_assignment(user_id, role) is not None:
            return False
        await self.create(UserRole(user_id=user_id, role=role))
        return True

    async def revoke(self, user_id: str, role: str) -> bool:
        """Remove ``role`` from the user.

        Returns:
            True if an assignment was removed, False if none existed
        """
        assignment = await self.get_assignment(user_id, role)
        if assignment is None:
            return False
        await self.session.delete(assignment)
        await self.session.commit()
        return True
