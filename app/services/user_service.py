import logging
from typing import Optional, Tuple
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.user import User
from app.core.security import get_password_hash, verify_password
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively and stored lower-cased."""
    return email.strip().lower()


class UserService:
    """Service for user lookup, credential checks and password seeding."""

    @staticmethod
    async def get_user_by_email(
        db: AsyncSession,
        email: str
    ) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_id(
        db: AsyncSession,
        user_id: str
    ) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate(
        db: AsyncSession,
        email: str,
        password: str
    ) -> Optional[User]:
        """
        Check email/password.

        Returns:
            The user when the password verifies, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)
        if not user or not verify_password(password, user.password):
            return None
        return user

    @staticmethod
    async def upsert_user_password(
        db: AsyncSession,
        email: str,
        password: str,
        name: Optional[str] = None,
        rounds: Optional[int] = None
    ) -> Tuple[User, bool]:
        """
        Set a user's password, creating the user if the email is unknown.

        The hash is computed before touching the database. An existing user
        keeps its name; only the hash changes.

        Args:
            db: Database session
            email: User email (upsert key)
            password: Plaintext password
            name: Display name for a new user (defaults to the email local part)
            rounds: bcrypt work factor (defaults to settings.BCRYPT_ROUNDS)

        Returns:
            Tuple of (User, created)

        Raises:
            ValueError if the password cannot be hashed with these settings
            SQLAlchemyError if the write fails (the session is rolled back)
        """
        if not password:
            raise ValueError("Password must not be empty")

        email = normalize_email(email)
        hashed_password = get_password_hash(password, rounds=rounds)

        try:
            user = await UserService.get_user_by_email(db, email)
            created = user is None

            if created:
                user = User(
                    email=email,
                    name=name or email.split("@")[0],
                    password=hashed_password
                )
                db.add(user)
            else:
                user.password = hashed_password
                user.touch()

            await db.commit()
            await db.refresh(user)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(sanitize_log_message("Failed to upsert user", Email=email))
            raise

        logger.info(
            sanitize_log_message(
                "User created" if created else "User password updated",
                UserID=user.id,
                Email=email
            )
        )

        return user, created
