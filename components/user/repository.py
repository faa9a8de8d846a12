"""Repository for user operations."""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import DuplicateIdentifier, InvalidCredentials, StorageError
from components.core.security import get_password_hash, verify_password
from components.user.models import Login, User
from components.user.schemas import UserCreate

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user, rejecting an email that is already registered."""
        if await self.exists(user.email):
            raise DuplicateIdentifier()

        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password),
            role=user.role,
        )
        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration with the same email
            await self.session.rollback()
            raise DuplicateIdentifier()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("User registration failed for %s", user.email)
            raise StorageError("user registration failed", str(exc)) from exc

        await self.session.refresh(db_user)
        logger.info("Registered user %s with role %s", db_user.id, db_user.role.value)
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

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user matching the credentials and record the login."""
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()

        await self.record_login(user.id)
        return user

    async def record_login(self, user_id: int) -> Login:
        """Append a login record for the user."""
        login = Login(user_id=user_id)
        self.session.add(login)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Could not record login for user %s", user_id)
            raise StorageError("login failed", str(exc)) from exc
        await self.session.refresh(login)
        return login

    async def get_logins(self, user_id: int) -> List[Login]:
        """Get the login history of a user, oldest first."""
        result = await self.session.execute(
            select(Login).where(Login.user_id == user_id).order_by(Login.id)
        )
        return list(result.scalars().all())
