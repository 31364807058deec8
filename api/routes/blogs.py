"""
api/routes/blogs.py -- Blog post endpoints.

Routes (registration order matters: /blogs/user/{user_id} before any /blogs/{id}):
  POST   /api/blogs                   -- create a post as the caller (requires auth)
  GET    /api/blogs                   -- list every post with author projection
  GET    /api/blogs/user/{user_id}    -- list one author's posts; 404 if none
  DELETE /api/blogs/user/{user_id}    -- delete one author's posts (requires auth)
  DELETE /api/blogs                   -- delete the caller's own posts (requires auth)

Authorship:
  The author of a new post is always the resolved identity. The request body
  has no author field, so authorship cannot be spoofed.

Listings return the author as {firstName, lastName, email}. The projection is a
second lookup against the user store (no join across stores); posts whose
author has been deleted come back with author=null.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from api.models import BlogCreate, BlogMessageResponse, BlogRecord, BlogWithAuthor, MessageResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.policy import require_owner
from auth.store import UserStore
from blog.models import BlogPost
from blog.store import BlogStore, attach_authors
from core.config import Settings
from core.errors import InternalError

logger = logging.getLogger("blogapi.api.blogs")

# Auth policy:
# - POST   /api/blogs:                 requires auth; author = caller
# - GET    /api/blogs:                 public
# - GET    /api/blogs/user/{user_id}:  public
# - DELETE /api/blogs/user/{user_id}:  requires auth + require_owner (enforced only with ENFORCE_OWNERSHIP)
# - DELETE /api/blogs:                 requires auth; target = caller
router = APIRouter()


@router.post("/blogs", response_model=BlogMessageResponse, status_code=201)
def create_blog(
    request: Request,
    body: BlogCreate,
    current_user: User = Depends(get_current_user),
) -> BlogMessageResponse:
    blog_store: BlogStore = request.app.state.blog_store
    try:
        post_id = blog_store.create_post(
            BlogPost(title=body.title, content=body.content, author_id=current_user.id)
        )
        created = blog_store.get_post(post_id)
    except SQLAlchemyError as exc:
        logger.exception("Error creating blog for user %s", current_user.id)
        raise InternalError("Error creating blog") from exc
    if created is None:
        raise InternalError("Error creating blog")

    logger.info("User %s created blog %s", current_user.id, post_id)
    return BlogMessageResponse(message="Blog created successfully!", blog=BlogRecord.from_post(created))


@router.get("/blogs", response_model=list[BlogWithAuthor])
def list_blogs(request: Request) -> list[BlogWithAuthor]:
    blog_store: BlogStore = request.app.state.blog_store
    try:
        posts = blog_store.list_all()
        return _with_authors(request, posts)
    except SQLAlchemyError as exc:
        logger.exception("Error listing blogs")
        raise InternalError("Error fetching blogs") from exc


@router.get("/blogs/user/{user_id}", response_model=list[BlogWithAuthor])
def list_blogs_by_user(request: Request, user_id: str) -> list[BlogWithAuthor]:
    """Return the author's posts. An author with no posts is a 404, not []."""
    blog_store: BlogStore = request.app.state.blog_store
    try:
        posts = blog_store.list_by_author(user_id)
        return _with_authors(request, posts)
    except SQLAlchemyError as exc:
        logger.exception("Error listing blogs for user %s", user_id)
        raise InternalError("Error fetching blogs") from exc


@router.delete("/blogs/user/{user_id}", response_model=MessageResponse)
def delete_blogs_by_user(
    request: Request,
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    settings: Settings = request.app.state.settings
    require_owner(current_user, user_id, settings.enforce_ownership)
    removed = _delete_posts_of(request.app.state.blog_store, user_id)
    return MessageResponse(message=f"Deleted {removed} blog(s) for user {user_id}")


@router.delete("/blogs", response_model=MessageResponse)
def delete_own_blogs(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    removed = _delete_posts_of(request.app.state.blog_store, current_user.id)
    return MessageResponse(message=f"Deleted {removed} of your blog(s)")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _with_authors(request: Request, posts: list[BlogPost]) -> list[BlogWithAuthor]:
    user_store: UserStore = request.app.state.user_store
    authors = user_store.get_many([p.author_id for p in posts])
    return [BlogWithAuthor.from_joined(item) for item in attach_authors(posts, authors)]


def _delete_posts_of(blog_store: BlogStore, author_id: str) -> int:
    try:
        removed = blog_store.delete_by_author(author_id)
    except SQLAlchemyError as exc:
        logger.exception("Error deleting blogs for user %s", author_id)
        raise InternalError("Error deleting blogs") from exc
    logger.info("Deleted %d blog post(s) of user %s", removed, author_id)
    return removed
