"""Name + PIN authentication for family members.

PINs are a convenience gate, not real security: they are stored as entered.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fund_tracker.config import PIN_LENGTH
from fund_tracker.errors import AuthError
from fund_tracker.models.user import User


@dataclass(frozen=True)
class UserSession:
    """The signed-in user, passed explicitly to everything that stores data."""

    user_id: str
    name: str

    @property
    def key_prefix(self) -> str:
        return f"cg_{self.user_id}_"

    def storage_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    @classmethod
    def for_user(cls, user: User) -> "UserSession":
        return cls(user_id=user.id, name=user.name)


class AuthService:
    """Registers users and checks name/PIN pairs against the user table."""

    async def get_user(self, session: AsyncSession, user_id: str) -> User | None:
        return await session.get(User, user_id)

    async def list_users(self, session: AsyncSession) -> list[User]:
        result = await session.execute(select(User))
        return list(result.scalars().all())

    async def _find_by_name(self, session: AsyncSession, name: str) -> User | None:
        result = await session.execute(
            select(User).where(func.lower(User.name) == name.lower())
        )
        return result.scalars().first()

    async def register_user(self, session: AsyncSession, name: str, pin: str) -> User:
        """Create a user, or log in an existing one when the PIN matches."""
        name = name.strip()
        if not name:
            raise AuthError("Please enter your name")
        if len(pin) != PIN_LENGTH or not pin.isdigit():
            raise AuthError(f"PIN must be exactly {PIN_LENGTH} digits")

        existing = await self._find_by_name(session, name)
        if existing is not None:
            if existing.pin == pin:
                return existing
            raise AuthError(
                "A user with this name already exists. "
                "Please use a different name or enter the correct PIN."
            )

        user = User(id=str(uuid.uuid4()), name=name, pin=pin)
        session.add(user)
        await session.commit()
        return user

    async def login_user(self, session: AsyncSession, name: str, pin: str) -> User:
        user = await self._find_by_name(session, name.strip())
        if user is None or user.pin != pin:
            raise AuthError("Incorrect name or PIN. Please try again.")
        return user


auth_service = AuthService()
