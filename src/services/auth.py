"""Registration, login and token-to-user resolution."""

import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.auth import hash_password, verify_password, create_access_token
from src.errors import ConflictError, UnauthorizedError, ValidationError, service_errors
from src.models import User
from src.services import users as users_service

# Configure logging
logger = logging.getLogger(__name__)


@service_errors("Registration failed")
def register(
    db: Session,
    name: str,
    surname: str,
    username: str,
    email: str,
    password: str,
    profile_picture: Optional[str] = None,
) -> dict:
    """
    Register a new user and issue an access token.

    Args:
        db: Database session
        name: First name
        surname: Last name
        username: Unique username
        email: Unique email address
        password: Plain text password
        profile_picture: Optional public URL of the profile picture

    Returns:
        dict: {"user": User, "token": str}

    Raises:
        ConflictError: If the email or the username is taken (email reported first)
        ValidationError: If the user cannot be stored
    """
    logger.info(f"Registration attempt for email: {email}")

    existing_by_email = users_service.find_by_email(db, email)
    existing_by_username = users_service.find_by_username(db, username)

    if existing_by_email:
        logger.warning(f"Registration failed: Email already exists - {email}")
        raise ConflictError("User with this email already exists")
    if existing_by_username:
        logger.warning(f"Registration failed: Username already exists - {username}")
        raise ConflictError("User with this username already exists")

    new_user = User(
        name=name,
        surname=surname,
        username=username,
        email=email,
        password_hash=hash_password(password),
        profile_picture=profile_picture,
    )

    db.add(new_user)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create user {email}: {e}")
        raise ValidationError(f"Failed to create user: {e}") from e
    db.refresh(new_user)

    token = create_access_token(new_user.id, new_user.email)

    logger.info(f"User registered successfully: {email}")
    return {"user": new_user, "token": token}


@service_errors("Login failed")
def login(db: Session, email: str, password: str) -> dict:
    """
    Authenticate a user by email and password.

    Unknown email and wrong password raise the same error.

    Returns:
        dict: {"user": User, "token": str}

    Raises:
        UnauthorizedError: If the credentials do not match a user
    """
    logger.info(f"Login attempt for email: {email}")

    user = users_service.find_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Login failed for: {email}")
        raise UnauthorizedError("Invalid credentials")

    token = create_access_token(user.id, user.email)

    logger.info(f"User logged in successfully: {email}")
    return {"user": user, "token": token}


def validate_user(db: Session, claims: dict) -> Optional[User]:
    """
    Resolve token claims to a user.

    Never raises; any lookup failure is reported as None.
    """
    user_id = claims.get("sub")
    if not user_id:
        return None
    try:
        return users_service.get_by_id(db, str(user_id))
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed for {user_id}: {e}")
        return None


@service_errors("Profile update failed")
def update_profile_picture(db: Session, user_id: str, profile_picture: str) -> User:
    """Point the user's profile picture at a newly uploaded object."""
    logger.info(f"Updating profile picture for user {user_id}")
    return users_service.update_profile(db, user_id, {"profile_picture": profile_picture})
