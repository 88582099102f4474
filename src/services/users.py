"""User record access."""

import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.errors import NotFoundError, ValidationError, service_errors
from src.models import User

# Configure logging
logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "surname", "profile_picture")


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def find_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


@service_errors("Failed to fetch users")
def find_all(db: Session) -> List[User]:
    """List every user, newest first."""
    logger.info("Fetching all users")
    users = db.query(User).order_by(User.created_at.desc()).all()
    logger.info(f"Found {len(users)} users")
    return users


@service_errors("Failed to fetch user")
def find_one(db: Session, user_id: str) -> User:
    """
    Fetch a single user.

    Raises:
        NotFoundError: If no user has this id
    """
    user = get_by_id(db, user_id)
    if user is None:
        logger.warning(f"User not found: {user_id}")
        raise NotFoundError("User not found")
    return user


@service_errors("Failed to update user")
def update_profile(db: Session, user_id: str, fields: dict) -> User:
    """
    Apply a partial profile update.

    Args:
        db: Database session
        user_id: User to update
        fields: Any of name, surname, profile_picture; other keys are ignored

    Returns:
        User: The updated user

    Raises:
        NotFoundError: If no user has this id
        ValidationError: If the update cannot be stored
    """
    logger.info(f"Updating profile for user {user_id}")

    user = find_one(db, user_id)
    for field in PROFILE_FIELDS:
        if field not in fields:
            continue
        # Only the picture may be cleared
        if fields[field] is None and field != "profile_picture":
            continue
        setattr(user, field, fields[field])
        logger.debug(f"Updated {field} for user {user_id}")

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise ValidationError(f"Failed to update user: {e}") from e

    db.refresh(user)
    return user


@service_errors("Failed to delete user")
def remove(db: Session, user_id: str) -> dict:
    """
    Delete a user together with their posts and comments.

    Returns:
        dict: Confirmation message
    """
    logger.info(f"Deleting user {user_id}")

    user = find_one(db, user_id)
    db.delete(user)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise ValidationError(f"Failed to delete user: {e}") from e

    logger.info(f"User {user_id} deleted")
    return {"message": "User deleted successfully"}
