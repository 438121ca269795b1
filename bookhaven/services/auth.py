"""
Identity Service

Registration, credential checks and token resolution.

Security Features:
=================
1. Passwords stored only as bcrypt hashes
2. Login failures return one generic error; the failing check is logged only
3. Token resolution fails closed: any problem yields None, never an exception

A new account is written in a single commit together with its profile,
favorite genres and the three default lists.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookhaven.config import Settings
from bookhaven.exceptions import ConflictError, UnauthorizedError
from bookhaven.models import BookList, FavoriteGenre, User, UserProfile
from bookhaven.models.book_list import DEFAULT_LIST_NAMES
from bookhaven.schemas.user import RegisterRequest
from bookhaven.services.security import (
    create_access_token,
    hash_password,
    read_access_token,
    verify_password,
)

logger = logging.getLogger(__name__)


def find_existing_account(db: Session, email: str, username: str) -> User | None:
    """A user already holding this email or username, if any."""
    return db.execute(
        select(User).where(or_(User.email == email, User.username == username))
    ).scalars().first()


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Create a user with profile, favorite genres and default lists.

    Raises:
        ConflictError: Email or username already registered, including when
            a concurrent registration wins the unique constraint. Nothing is
            written in that case.
    """
    existing = find_existing_account(db, data.email, data.username)
    if existing is not None:
        if existing.email == data.email:
            logger.info(f"Registration rejected, email in use: {data.email}")
            raise ConflictError("Email already registered")
        logger.info(f"Registration rejected, username taken: {data.username}")
        raise ConflictError("Username already taken")

    user = User(
        email=data.email,
        username=data.username,
        hashed_password=hash_password(data.password),
        birthdate=data.birthdate,
    )
    user.profile = UserProfile(bio=None)
    user.favorite_genres = [FavoriteGenre(name=name) for name in data.favorite_genres]
    user.book_lists = [BookList(name=name) for name in DEFAULT_LIST_NAMES]

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Registration lost a race for {data.email} / {data.username}")
        raise ConflictError("Email or username already registered")
    db.refresh(user)

    logger.info(f"New user registered: {user.username} (id={user.id})")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Check an email/password pair.

    Raises:
        UnauthorizedError: Same message whether the email is unknown or the
            password is wrong.
    """
    user = db.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()

    if user is None:
        logger.warning(f"Login failed: unknown email {email}")
        raise UnauthorizedError("Invalid credentials")

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: wrong password for user id={user.id}")
        raise UnauthorizedError("Invalid credentials")

    logger.info(f"User logged in: {user.username}")
    return user


def issue_token(user: User, settings: Settings) -> str:
    """Signed access token carrying the user id."""
    return create_access_token({"sub": str(user.id)}, settings)


def resolve_user(db: Session, token: str | None, settings: Settings) -> User | None:
    """
    Map a bearer token to its user.

    Returns None for a missing, malformed, expired or foreign-signed token,
    and for a token whose user no longer exists.
    """
    if not token:
        return None

    user_id = read_access_token(token, settings)
    if user_id is None:
        return None

    return db.get(User, user_id)
