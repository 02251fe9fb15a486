"""
portfolio/models.py -- Domain dataclasses for the portfolio content.

These are pure data containers with zero logic. Ordering rules, view counting
and partial-update semantics live in portfolio/store.py.

No entity references another: projects, skills and posts are independent rows.

id is None on every entity before the record is written to the database.
Timestamps are ISO 8601 UTC strings set by the store.
"""

from dataclasses import dataclass, field
from typing import Optional

PROFILE_ID = 1


@dataclass
class Profile:
    """The site owner's profile. Singleton: always stored under PROFILE_ID."""

    name: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    resume_url: Optional[str] = None
    image_url: Optional[str] = None
    id: int = PROFILE_ID
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Project:
    """A showcased project.

    Listed by display_order ascending; among equal display_order values the
    most recently created project comes first.
    """

    title: str
    description: Optional[str] = None
    long_description: Optional[str] = None
    tech_stack: list[str] = field(default_factory=list)  # order preserved as entered
    image_url: Optional[str] = None  # relative path from MediaStore, or None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    featured: bool = False
    display_order: int = 0
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Skill:
    """A skill entry. category is a free-form grouping label."""

    name: str
    category: str
    proficiency: int = 0  # 0-100
    display_order: int = 0
    id: Optional[int] = None
    created_at: str = ""


@dataclass
class BlogPost:
    """A blog article addressed publicly by its unique slug.

    Unpublished posts are invisible to public reads. view_count only ever
    grows: each public read of a published post adds one.
    """

    title: str
    slug: str
    excerpt: Optional[str] = None
    content: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    published: bool = False
    published_at: Optional[str] = None  # stamped when first published
    read_time: int = 5  # minutes
    featured: bool = False
    view_count: int = 0
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ContactMessage:
    """A message left through the public contact form. Append-only."""

    name: str
    email: str
    message: str
    subject: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""
