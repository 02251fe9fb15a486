"""
portfolio/store.py -- SQLAlchemy-backed repositories for the portfolio content.

Uses SQLAlchemy Core (not ORM) so the domain dataclasses in
portfolio/models.py remain the authoritative domain representation.

Pattern: Repository + Data Mapper. One repository class per entity, each
constructed with the shared core.database.Database (the connection pool is
injected, never created here). The _row_to_* functions are the mappers.
Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL. Partial
updates only accept column names from a per-entity whitelist; anything else
raises ValueError before a statement is built.

Ordering:
  projects  -- display_order ASC, created_at DESC (id DESC breaks exact ties)
  skills    -- category ASC, display_order ASC
  blog      -- published_at DESC (public listing)
  contact   -- created_at DESC

Usage:
    db = Database("sqlite:///:memory:")
    projects = ProjectStore(db)
    project_id = projects.create_project(Project(title="Site"))
    projects.update_project(project_id, featured=True)
    projects.list_projects()
"""

import json
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, select

from core.database import Database
from portfolio.models import PROFILE_ID, BlogPost, ContactMessage, Profile, Project, Skill

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_profile = Table(
    "profile",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255)),
    Column("title", String(255)),
    Column("bio", Text),
    Column("email", String(255)),
    Column("github", String(500)),
    Column("linkedin", String(500)),
    Column("twitter", String(500)),
    Column("resume_url", String(500)),
    Column("image_url", String(500)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_projects = Table(
    "projects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("long_description", Text),
    Column("tech_stack", Text),  # JSON array serialized as text
    Column("image_url", String(500)),
    Column("github_url", String(500)),
    Column("live_url", String(500)),
    Column("featured", Integer, nullable=False, server_default="0"),  # boolean stored as 0/1
    Column("display_order", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_skills = Table(
    "skills",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("category", String(100), nullable=False),
    Column("proficiency", Integer, nullable=False, server_default="0"),
    Column("display_order", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
)

_blog_posts = Table(
    "blog_posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
    Column("excerpt", Text),
    Column("content", Text),
    Column("tags", Text),  # JSON array, like tech_stack
    Column("published", Integer, nullable=False, server_default="0"),
    Column("published_at", String(32)),
    Column("read_time", Integer, nullable=False, server_default="5"),
    Column("featured", Integer, nullable=False, server_default="0"),
    Column("view_count", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_contact_messages = Table(
    "contact_messages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False),
    Column("subject", String(255)),
    Column("message", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)

# Columns a caller may change through update_*(). id and timestamps are owned
# by the store; view_count only moves through BlogStore.read_published().
_PROFILE_FIELDS = {"name", "title", "bio", "email", "github", "linkedin", "twitter", "resume_url", "image_url"}
_PROJECT_FIELDS = {
    "title",
    "description",
    "long_description",
    "tech_stack",
    "image_url",
    "github_url",
    "live_url",
    "featured",
    "display_order",
}
_SKILL_FIELDS = {"name", "category", "proficiency", "display_order"}
_BLOG_FIELDS = {"title", "slug", "excerpt", "content", "tags", "published", "read_time", "featured"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_fields(fields: dict, allowed: set) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown fields: {sorted(unknown)!r}")


def _to_db(fields: dict) -> dict:
    """Convert domain values to their column representation (lists -> JSON, bool -> 0/1)."""
    out = {}
    for key, value in fields.items():
        if key in ("tech_stack", "tags"):
            value = json.dumps(list(value or []))
        elif key in ("featured", "published"):
            value = 1 if value else 0
        out[key] = value
    return out


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ProfileStore:
    """Repository for the singleton Profile row."""

    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine, tables=[_profile])

    def get_profile(self) -> Optional[Profile]:
        """Return the profile, or None if it has never been written."""
        with self.engine.connect() as conn:
            row = conn.execute(_profile.select().where(_profile.c.id == PROFILE_ID)).fetchone()
        return _row_to_profile(row) if row is not None else None

    def update_profile(self, **fields) -> Profile:
        """Apply the given fields to the profile, creating the row on first write.

        Fields not passed keep their stored value.
        """
        _check_fields(fields, _PROFILE_FIELDS)
        now = _now_iso()
        with self.engine.begin() as conn:
            exists = conn.execute(select(_profile.c.id).where(_profile.c.id == PROFILE_ID)).fetchone()
            if exists is None:
                conn.execute(_profile.insert().values(id=PROFILE_ID, created_at=now, updated_at=now, **fields))
            else:
                conn.execute(_profile.update().where(_profile.c.id == PROFILE_ID).values(updated_at=now, **fields))
            row = conn.execute(_profile.select().where(_profile.c.id == PROFILE_ID)).fetchone()
        return _row_to_profile(row)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class ProjectStore:
    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine, tables=[_projects])

    def list_projects(self) -> list[Project]:
        """Return all projects in display order (ties: newest first)."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _projects.select().order_by(
                    _projects.c.display_order.asc(),
                    _projects.c.created_at.desc(),
                    _projects.c.id.desc(),
                )
            ).fetchall()
        return [_row_to_project(r) for r in rows]

    def get_project(self, project_id: int) -> Optional[Project]:
        with self.engine.connect() as conn:
            row = conn.execute(_projects.select().where(_projects.c.id == project_id)).fetchone()
        return _row_to_project(row) if row is not None else None

    def create_project(self, project: Project) -> int:
        """Insert a project and return its ID."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _projects.insert().values(
                    title=project.title,
                    description=project.description,
                    long_description=project.long_description,
                    tech_stack=json.dumps(project.tech_stack),
                    image_url=project.image_url,
                    github_url=project.github_url,
                    live_url=project.live_url,
                    featured=1 if project.featured else 0,
                    display_order=project.display_order,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def update_project(self, project_id: int, **fields) -> bool:
        """Update only the given fields. Returns False if project_id was not found.

        Passing no image_url keeps the stored image -- replacing the image is
        an explicit image_url=... argument.
        """
        _check_fields(fields, _PROJECT_FIELDS)
        values = _to_db(fields)
        values["updated_at"] = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(_projects.update().where(_projects.c.id == project_id).values(**values))
            conn.commit()
        return result.rowcount > 0

    def delete_project(self, project_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_projects.delete().where(_projects.c.id == project_id))
            conn.commit()
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


class SkillStore:
    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine, tables=[_skills])

    def list_skills(self) -> list[Skill]:
        """Return skills grouped by category (lexical), then display_order."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _skills.select().order_by(_skills.c.category.asc(), _skills.c.display_order.asc(), _skills.c.id.asc())
            ).fetchall()
        return [_row_to_skill(r) for r in rows]

    def get_skill(self, skill_id: int) -> Optional[Skill]:
        with self.engine.connect() as conn:
            row = conn.execute(_skills.select().where(_skills.c.id == skill_id)).fetchone()
        return _row_to_skill(row) if row is not None else None

    def create_skill(self, skill: Skill) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _skills.insert().values(
                    name=skill.name,
                    category=skill.category,
                    proficiency=skill.proficiency,
                    display_order=skill.display_order,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def update_skill(self, skill_id: int, **fields) -> bool:
        _check_fields(fields, _SKILL_FIELDS)
        if not fields:
            return self.get_skill(skill_id) is not None
        with self.engine.connect() as conn:
            result = conn.execute(_skills.update().where(_skills.c.id == skill_id).values(**fields))
            conn.commit()
        return result.rowcount > 0

    def delete_skill(self, skill_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_skills.delete().where(_skills.c.id == skill_id))
            conn.commit()
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------


class BlogStore:
    """Repository for blog posts.

    Public reads (list_published, read_published) never return unpublished
    posts. get_post() is the unfiltered lookup used by authenticated edits.

    Raises sqlalchemy.exc.IntegrityError from create_post/update_post when the
    slug is already used by another post.
    """

    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine, tables=[_blog_posts])

    def list_published(self) -> list[BlogPost]:
        """Return published posts, newest publication first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _blog_posts.select()
                .where(_blog_posts.c.published == 1)
                .order_by(_blog_posts.c.published_at.desc(), _blog_posts.c.id.desc())
            ).fetchall()
        return [_row_to_post(r) for r in rows]

    def read_published(self, slug: str) -> Optional[BlogPost]:
        """Return the published post for slug after counting this read.

        The increment is a single UPDATE ... SET view_count = view_count + 1,
        so concurrent readers of the same slug never lose a count. Returns
        None (and counts nothing) if the slug is unknown or unpublished.
        """
        where = (_blog_posts.c.slug == slug) & (_blog_posts.c.published == 1)
        with self.engine.begin() as conn:
            result = conn.execute(_blog_posts.update().where(where).values(view_count=_blog_posts.c.view_count + 1))
            if result.rowcount == 0:
                return None
            row = conn.execute(_blog_posts.select().where(where)).fetchone()
        return _row_to_post(row) if row is not None else None

    def get_post(self, post_id: int) -> Optional[BlogPost]:
        with self.engine.connect() as conn:
            row = conn.execute(_blog_posts.select().where(_blog_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def create_post(self, post: BlogPost) -> int:
        """Insert a post and return its ID. published_at is stamped if published."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _blog_posts.insert().values(
                    title=post.title,
                    slug=post.slug,
                    excerpt=post.excerpt,
                    content=post.content,
                    tags=json.dumps(post.tags),
                    published=1 if post.published else 0,
                    published_at=now if post.published else None,
                    read_time=post.read_time,
                    featured=1 if post.featured else 0,
                    view_count=0,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def update_post(self, post_id: int, **fields) -> bool:
        """Update only the given fields. Returns False if post_id was not found.

        The first transition to published stamps published_at; unpublishing
        and republishing keeps the original publication instant.
        """
        _check_fields(fields, _BLOG_FIELDS)
        values = _to_db(fields)
        now = _now_iso()
        values["updated_at"] = now
        with self.engine.begin() as conn:
            current = conn.execute(
                select(_blog_posts.c.published_at).where(_blog_posts.c.id == post_id)
            ).fetchone()
            if current is None:
                return False
            if fields.get("published") and current.published_at is None:
                values["published_at"] = now
            conn.execute(_blog_posts.update().where(_blog_posts.c.id == post_id).values(**values))
        return True

    def delete_post(self, post_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_blog_posts.delete().where(_blog_posts.c.id == post_id))
            conn.commit()
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Contact messages
# ---------------------------------------------------------------------------


class ContactStore:
    """Append-only store for contact form submissions."""

    def __init__(self, db: Database) -> None:
        self.engine = db.engine
        metadata.create_all(self.engine, tables=[_contact_messages])

    def create_message(self, msg: ContactMessage) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _contact_messages.insert().values(
                    name=msg.name,
                    email=msg.email,
                    subject=msg.subject,
                    message=msg.message,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def list_messages(self) -> list[ContactMessage]:
        """Return every message, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _contact_messages.select().order_by(_contact_messages.c.created_at.desc(), _contact_messages.c.id.desc())
            ).fetchall()
        return [_row_to_message(r) for r in rows]


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_profile(row) -> Profile:
    return Profile(
        id=row.id,
        name=row.name,
        title=row.title,
        bio=row.bio,
        email=row.email,
        github=row.github,
        linkedin=row.linkedin,
        twitter=row.twitter,
        resume_url=row.resume_url,
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_project(row) -> Project:
    return Project(
        id=row.id,
        title=row.title,
        description=row.description,
        long_description=row.long_description,
        tech_stack=json.loads(row.tech_stack) if row.tech_stack else [],
        image_url=row.image_url,
        github_url=row.github_url,
        live_url=row.live_url,
        featured=bool(row.featured),
        display_order=row.display_order,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_skill(row) -> Skill:
    return Skill(
        id=row.id,
        name=row.name,
        category=row.category,
        proficiency=row.proficiency,
        display_order=row.display_order,
        created_at=row.created_at,
    )


def _row_to_post(row) -> BlogPost:
    return BlogPost(
        id=row.id,
        title=row.title,
        slug=row.slug,
        excerpt=row.excerpt,
        content=row.content,
        tags=json.loads(row.tags) if row.tags else [],
        published=bool(row.published),
        published_at=row.published_at,
        read_time=row.read_time,
        featured=bool(row.featured),
        view_count=row.view_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_message(row) -> ContactMessage:
    return ContactMessage(
        id=row.id,
        name=row.name,
        email=row.email,
        subject=row.subject,
        message=row.message,
        created_at=row.created_at,
    )
