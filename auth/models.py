"""
auth/models.py -- Domain dataclass for user identities.

Pattern: Data class (pure data container, zero logic). Stores and routes do the
work; the API layer maps this to its own Pydantic response models.

Layer rule: no imports from api/ or blog/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered author.

    id is None before the record is written; the store assigns an opaque
    string id on insert and it never changes afterwards.

    password_hash is the bcrypt hash, never the plaintext. It is nevertheless
    part of the public user record returned by the API (see DESIGN.md).
    """

    first_name: str
    last_name: str
    email: str  # unique across users, compared case-sensitively
    password_hash: str
    id: str | None = None
