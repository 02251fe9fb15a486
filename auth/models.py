"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in portfolio/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or portfolio/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered credential principal.

    hashed_password is the bcrypt digest. The plaintext password is never
    stored, and route code never copies this field into a response model.
    """

    username: str
    email: str
    id: int | None = None
    hashed_password: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Principal:
    """The identity carried by a validated bearer token."""

    id: int
    username: str
