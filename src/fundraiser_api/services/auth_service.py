"""Authentication and admin user management service."""

from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.config import Settings
from fundraiser_api.core.security import create_access_token, hash_password, verify_password
from fundraiser_api.lib.consistency import ErrorCode, FieldError, FieldValidationError, UniquenessRaceError
from fundraiser_api.models.user import User
from fundraiser_api.schemas.auth import TokenResponse, UserCreateRequest


async def authenticate_user(session: AsyncSession, username: str, password: str) -> User | None:
    """Authenticate a user by username and password.

    Args:
        session: The database session.
        username: The username to authenticate.
        password: The plaintext password.

    Returns:
        The User if authentication succeeds, None otherwise.
    """
    result = await session.execute(select(User).where(func.lower(User.username) == username.lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    user.last_login_at = datetime.now(UTC)
    await session.commit()
    return user


async def _identity_conflicts(session: AsyncSession, username: str, email: str) -> list[FieldError]:
    """Return the identity fields already claimed by another user, ignoring case."""
    errors: list[FieldError] = []
    for field, column, value, code in (
        ("username", User.username, username, ErrorCode.USERNAME_TAKEN),
        ("email", User.email, email, ErrorCode.EMAIL_TAKEN),
    ):
        query = select(User.id).where(func.lower(column) == value.lower())
        if (await session.execute(query.limit(1))).first() is not None:
            errors.append(FieldError.of(field, code))
    return errors


async def create_user(session: AsyncSession, request: UserCreateRequest) -> User:
    """Create a new admin-backend user.

    Usernames and emails are unique regardless of case.

    Args:
        session: The database session.
        request: User creation request data.

    Returns:
        The created User.

    Raises:
        FieldValidationError: If the username or email is already in use.
        UniquenessRaceError: If a concurrent insert claimed either one first.
    """
    conflicts = await _identity_conflicts(session, request.username, request.email)
    if conflicts:
        raise FieldValidationError(conflicts)

    user = User(
        username=request.username,
        email=request.email,
        hashed_password=hash_password(request.password),
        role=request.role,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        conflicts = await _identity_conflicts(session, request.username, request.email)
        if not conflicts:
            raise
        logger.warning(f"User create for '{request.username}' lost a uniqueness race")
        raise UniquenessRaceError(conflicts) from None
    await session.refresh(user)
    logger.info(f"Created user {user.username} with role {user.role}")
    return user


async def list_users(session: AsyncSession, page: int = 1, page_size: int = 20) -> tuple[list[User], int]:
    """List users with pagination.

    Returns:
        Tuple of (users list, total count).
    """
    total = (await session.execute(select(func.count(User.id)))).scalar_one()
    offset = (page - 1) * page_size
    result = await session.execute(select(User).offset(offset).limit(page_size).order_by(User.created_at))
    return list(result.scalars().all()), total


def generate_token(user: User, settings: Settings) -> TokenResponse:
    """Issue an access token for an authenticated user."""
    access_token = create_access_token(
        subject=user.username,
        role=user.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_access_token_expire_minutes,
    )
    return TokenResponse(
        access_token=access_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )
