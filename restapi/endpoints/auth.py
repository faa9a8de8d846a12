"""Authentication endpoints for user login and registration, and the access gate."""

from typing import Any, Callable, Optional
from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.access.policy import Identity, Operation, authenticate, authorize
from components.core.init_db import get_db
from components.core.security import create_identity_token
from components.user.repository import UserRepository
from components.user import schemas

router = APIRouter(
    prefix="/users",
    tags=["authentication"],
)


async def get_current_identity(authorization: Optional[str] = Header(None)) -> Identity:
    """Resolve the caller from the bearer token."""
    return authenticate(authorization)


def require(operation: Operation) -> Callable[..., Any]:
    """Dependency that lets the request through only for roles permitted on ``operation``."""

    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        return authorize(identity, operation)

    return dependency


@router.post("/register", response_model=schemas.UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: schemas.UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Create a new user."""
    repo = UserRepository(db)
    return await repo.create(user_in)


@router.post("/login", response_model=schemas.Token)
async def login(
    credentials: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Login user and return JWT token."""
    repo = UserRepository(db)
    user = await repo.authenticate(credentials.email, credentials.password)
    return schemas.Token(token=create_identity_token(user.id, user.role.value))
