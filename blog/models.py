"""
blog/models.py -- Domain dataclasses for blog posts.

These are pure data containers with zero logic. Validation and persistence
live in blog/store.py.

author_id refers to a users.id in auth/store.py, but nothing enforces it: the
two stores have no foreign key between them, so a post can outlive its author.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BlogPost:
    """A post written by one user.

    id is None before the record is written to the database. created_at and
    updated_at are set by the store on insert; updated_at is never refreshed.
    """

    title: str
    content: str
    author_id: str
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601
    updated_at: str = ""  # ISO 8601


@dataclass
class AuthorSummary:
    """The public projection of a post's author shown in listings."""

    first_name: str
    last_name: str
    email: str


@dataclass
class PostWithAuthor:
    """A post joined with its author's projection (None for orphaned posts)."""

    post: BlogPost
    author: Optional[AuthorSummary] = None
