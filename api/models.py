"""
API request and response models for the blog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
blog/models.py, which own the internal domain representation. Route handlers
map between the two through the from_* factory methods below.

Wire format uses camelCase keys (firstName, createdAt, ...). Fields are
declared in snake_case with aliases; FastAPI serializes response models by
alias, and populate_by_name lets request bodies use either form.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from blog.models import BlogPost, PostWithAuthor

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/register."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", min_length=1, max_length=255)
    last_name: str = Field(alias="lastName", min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /api/login.

    password is accepted but only checked when LOGIN_CHECKS_PASSWORD is set.
    """

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(default="", max_length=255)


class UserUpdate(BaseModel):
    """Request body for PUT /api/user. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName", min_length=1, max_length=255)
    last_name: Optional[str] = Field(default=None, alias="lastName", min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=1, max_length=255)
    password: Optional[str] = Field(default=None, min_length=1, max_length=255)


class BlogCreate(BaseModel):
    """Request body for POST /api/blogs.

    There is no author field: the author is always the authenticated caller.
    Emptiness of title/content is checked by the store, not here.
    """

    title: str = ""
    content: str = ""


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserRecord(BaseModel):
    """Full user record as stored, including the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    password: str

    @classmethod
    def from_user(cls, user: User) -> "UserRecord":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            password=user.password_hash,
        )


class AuthorProjection(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str


class BlogRecord(BaseModel):
    """A post as created; author is the author's user id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    content: str
    author: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_post(cls, post: BlogPost) -> "BlogRecord":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class BlogWithAuthor(BaseModel):
    """A post in a listing; author is the projection, or null for orphaned posts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    content: str
    author: Optional[AuthorProjection]
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_joined(cls, item: PostWithAuthor) -> "BlogWithAuthor":
        author = None
        if item.author is not None:
            author = AuthorProjection(
                first_name=item.author.first_name,
                last_name=item.author.last_name,
                email=item.author.email,
            )
        return cls(
            id=item.post.id,
            title=item.post.title,
            content=item.post.content,
            author=author,
            created_at=item.post.created_at,
            updated_at=item.post.updated_at,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class AuthResponse(BaseModel):
    """Response for POST /api/register and POST /api/login."""

    model_config = ConfigDict(frozen=True)

    user: UserRecord
    token: str
    message: str


class UserMessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: UserRecord


class BlogMessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    blog: BlogRecord


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on every failure."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail
