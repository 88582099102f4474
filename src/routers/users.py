"""Users router for listing users and managing the caller's profile."""

import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.auth import get_current_user
from src.database import get_db
from src.models import User
from src.schemas import UserPublic, UserUpdate, MessageResponse
from src.services import users as users_service

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserPublic])
def list_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List all users, newest first."""
    return users_service.find_all(db)


@router.get("/profile", response_model=UserPublic)
def get_profile(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return current_user


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get a user by ID.

    Raises:
        NotFoundError: If the user does not exist
    """
    return users_service.find_one(db, user_id)


@router.put("/profile", response_model=UserPublic)
def update_profile(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update name, surname or profile picture URL of the authenticated user.

    Args:
        update_data: Fields to update; omitted fields are left unchanged
        current_user: Authenticated user
        db: Database session

    Returns:
        UserPublic: The updated profile
    """
    fields = update_data.model_dump(exclude_unset=True)
    return users_service.update_profile(db, current_user.id, fields)


@router.delete("/profile", response_model=MessageResponse)
def delete_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the authenticated user's account with their posts and comments."""
    return users_service.remove(db, current_user.id)
