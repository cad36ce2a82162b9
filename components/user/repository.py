"""Repository for user operations."""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import ValidationError
from components.core.security import get_password_hash, verify_password
from components.user.models import User
from components.user.schemas import UserCreate

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user."""
        if await self.exists(user.email):
            raise ValidationError("El correo ya está registrado")

        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password),
            registration_date=date.today(),
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        logger.info("Usuario %s registrado", db_user.id)
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        """Check if user with given email exists."""
        result = await self.session.execute(
            select(User.id).where(User.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match."""
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.warning("Intento de inicio de sesión fallido para %s", email)
            return None
        return user
