"""Pydantic schemas for request and response validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


def _not_blank(v: Optional[str], field: str) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(f'{field} cannot be empty')
    return v


# Auth Schemas
class UserRegister(BaseModel):
    """Schema for user registration request."""

    name: str
    surname: str
    username: str
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator('name', 'surname', 'username')
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        """Validate that identity fields are not empty."""
        return _not_blank(v, info.field_name.capitalize())


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: EmailStr
    password: str = Field(min_length=6)


# User Schemas
class AuthorSummary(BaseModel):
    """Reduced user projection joined onto posts and comments."""

    id: str
    name: str
    surname: str
    username: str
    email: str

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    """User record without the password hash."""

    id: str
    name: str
    surname: str
    username: str
    email: str
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Schema for register and login responses."""

    user: UserPublic
    token: str


class UserUpdate(BaseModel):
    """Schema for profile update request."""

    name: Optional[str] = None
    surname: Optional[str] = None
    profile_picture: Optional[str] = Field(None, alias='profilePicture')

    class Config:
        populate_by_name = True

    @field_validator('name', 'surname')
    @classmethod
    def not_empty(cls, v: Optional[str], info) -> Optional[str]:
        return _not_blank(v, info.field_name.capitalize())


class MessageResponse(BaseModel):
    message: str


# Blog Post Schemas
class BlogPostCreate(BaseModel):
    """Schema for blog post creation request."""

    title: str = Field(max_length=255)
    content: str
    image_urls: Optional[List[str]] = None
    video_urls: Optional[List[str]] = None

    @field_validator('title', 'content')
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        """Validate that title and content are not empty."""
        return _not_blank(v, info.field_name.capitalize())


class BlogPostUpdate(BaseModel):
    """Schema for blog post update request. Only fields sent are applied."""

    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    image_urls: Optional[List[str]] = None
    video_urls: Optional[List[str]] = None

    @field_validator('title', 'content')
    @classmethod
    def not_empty(cls, v: Optional[str], info) -> Optional[str]:
        return _not_blank(v, info.field_name.capitalize())


class MediaRemove(BaseModel):
    """Schema for removing media URLs from a blog post."""

    image_url: Optional[str] = Field(None, alias='imageUrl')
    video_url: Optional[str] = Field(None, alias='videoUrl')

    class Config:
        populate_by_name = True


class BlogPostOut(BaseModel):
    """Blog post joined with its author."""

    id: str
    title: str
    content: str
    author_id: str
    image_urls: List[str] = []
    video_urls: List[str] = []
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary

    class Config:
        from_attributes = True


class BlogPostListItem(BlogPostOut):
    """Blog post as listed, with the number of comments."""

    comment_count: int = 0


# Comment Schemas
class CommentCreate(BaseModel):
    """Schema for comment creation request."""

    content: str
    post_id: str

    @field_validator('content', 'post_id')
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name.capitalize())


class CommentUpdate(BaseModel):
    content: str

    @field_validator('content')
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _not_blank(v, 'Content')


class CommentOut(BaseModel):
    """Comment joined with its author."""

    id: str
    content: str
    post_id: str
    author_id: str
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary

    class Config:
        from_attributes = True


class BlogPostDetail(BlogPostOut):
    """Blog post with its full comment thread."""

    comments: List[CommentOut] = []
