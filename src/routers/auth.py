"""Authentication router for user registration and login."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from src.auth import get_current_user
from src.database import get_db
from src.errors import ValidationError
from src.models import User
from src.schemas import UserRegister, UserLogin, UserPublic, AuthResponse
from src.services import auth as auth_service
from src.storage import MediaBucket, get_profile_bucket
from src.uploads import store_profile_picture

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(
    name: str = Form(...),
    surname: str = Form(...),
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    profilePicture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    bucket: MediaBucket = Depends(get_profile_bucket),
):
    """
    Register a new user and return the user with an access token.

    Args:
        name: First name
        surname: Last name
        username: Unique username
        email: Unique email address
        password: Password (min 6 characters)
        profilePicture: Optional profile picture file
        db: Database session
        bucket: Profile picture bucket

    Returns:
        AuthResponse: The new user (without password hash) and a JWT

    Raises:
        ValidationError: If the input is malformed or the user cannot be stored
        ConflictError: If the email or username is already registered
    """
    try:
        user_data = UserRegister(
            name=name, surname=surname, username=username, email=email, password=password
        )
    except SchemaValidationError as e:
        logger.warning(f"Registration rejected for {email}: {e.error_count()} invalid fields")
        raise ValidationError("; ".join(err["msg"] for err in e.errors())) from e

    profile_picture_url = None
    if profilePicture is not None and profilePicture.filename:
        profile_picture_url = store_profile_picture(bucket, profilePicture)

    return auth_service.register(
        db,
        name=user_data.name,
        surname=user_data.surname,
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        profile_picture=profile_picture_url,
    )


@router.post("/login", response_model=AuthResponse)
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """
    Authenticate user and return JWT token.

    Args:
        user_data: User login data (email, password)
        db: Database session

    Returns:
        AuthResponse: The user (without password hash) and a JWT

    Raises:
        UnauthorizedError: If credentials are invalid
    """
    return auth_service.login(db, user_data.email, user_data.password)


@router.put("/profile/picture", response_model=UserPublic)
def update_profile_picture(
    profilePicture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bucket: MediaBucket = Depends(get_profile_bucket),
):
    """
    Upload and set a new profile picture for the authenticated user.

    Raises:
        ValidationError: If no picture was sent or it is not an accepted image
    """
    if profilePicture is None or not profilePicture.filename:
        raise ValidationError("Profile picture is required")

    url = store_profile_picture(bucket, profilePicture)
    return auth_service.update_profile_picture(db, current_user.id, url)
