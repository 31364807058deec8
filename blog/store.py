"""
blog/store.py -- SQLAlchemy-backed persistence layer for blog posts.

Uses SQLAlchemy Core (not ORM) so the dataclasses in blog/models.py remain the
authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. BlogStore is the repository; _row_to_post is
the mapper. Route handlers never touch SQL directly.

Result semantics:
  list_by_author() and delete_by_author() raise EmptyResult when nothing
  matches. A zero-row answer is reported as "not found", not as an empty list
  or a zero count.

  title and content are required and must be non-empty; create_post() raises
  ValidationFailed otherwise. The author id is never validated against the
  user store.

Usage:
    store = BlogStore()
    post_id = store.create_post(BlogPost(title="t", content="c", author_id=uid))
    posts = store.list_by_author(uid)
    removed = store.delete_by_author(uid)
    store.close()
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event

from blog.models import AuthorSummary, BlogPost, PostWithAuthor
from core.errors import EmptyResult, ValidationFailed

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'blogapi_blogs.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_posts = Table(
    "blog_posts",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("author_id", String(32), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BlogStore:
    """Repository for BlogPost entities.

    Posts reference their author by id only. The author projection is joined
    in by attach_authors() from a UserStore lookup, since the two stores do
    not share an engine.
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite") and ":memory:" not in db_url and "mode=memory" not in db_url:
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create_post(self, post: BlogPost) -> str:
        """Insert a post and return its id. Both timestamps are set to now."""
        if not post.title:
            raise ValidationFailed("title is required")
        if not post.content:
            raise ValidationFailed("content is required")
        if not post.author_id:
            raise ValidationFailed("author is required")

        post_id = uuid.uuid4().hex
        now = _now_iso()
        with self.engine.connect() as conn:
            conn.execute(
                _posts.insert().values(
                    id=post_id,
                    title=post.title,
                    content=post.content,
                    author_id=post.author_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return post_id

    def get_post(self, post_id: str) -> Optional[BlogPost]:
        with self.engine.connect() as conn:
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_all(self) -> list[BlogPost]:
        """Return every post, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_posts.select().order_by(_posts.c.created_at, _posts.c.id)).fetchall()
        return [_row_to_post(r) for r in rows]

    def list_by_author(self, author_id: str) -> list[BlogPost]:
        """Return the author's posts, oldest first. Raises EmptyResult if there are none."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _posts.select().where(_posts.c.author_id == author_id).order_by(_posts.c.created_at, _posts.c.id)
            ).fetchall()
        if not rows:
            raise EmptyResult("No blogs found for this user")
        return [_row_to_post(r) for r in rows]

    def delete_by_author(self, author_id: str) -> int:
        """Delete all of the author's posts and return how many were removed.

        Raises EmptyResult if the author had no posts.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_posts.delete().where(_posts.c.author_id == author_id))
            conn.commit()
        if result.rowcount == 0:
            raise EmptyResult("No blogs found for this user")
        return result.rowcount

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Author projection
# ---------------------------------------------------------------------------


def attach_authors(posts: list[BlogPost], authors: dict) -> list[PostWithAuthor]:
    """Join posts with {first_name, last_name, email} of their authors.

    authors maps user id -> auth.models.User (as returned by
    UserStore.get_many). Posts whose author no longer exists get author=None.
    """
    joined = []
    for post in posts:
        user = authors.get(post.author_id)
        summary = AuthorSummary(user.first_name, user.last_name, user.email) if user is not None else None
        joined.append(PostWithAuthor(post=post, author=summary))
    return joined


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_post(row) -> BlogPost:
    return BlogPost(
        id=row.id,
        title=row.title,
        content=row.content,
        author_id=row.author_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
