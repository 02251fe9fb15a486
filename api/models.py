"""
API request and response models for the portfolio REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in portfolio/models.py
and auth/models.py, which own the internal domain representation. Route
handlers map between the two with the from_domain() factories below.

Every JSON body has an explicit model: optional members are named and
default to None, required members are required. A missing required field is
a 400 validation_error -- nothing is silently inserted as null.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from auth.tokens import MAX_PASSWORD_BYTES
from portfolio.models import BlogPost, ContactMessage, Profile, Project, Skill

# Lenient on purpose: one "@" with something on each side. Deliverability is
# not checked.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"

# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "OK"
    timestamp: str
    version: str
    components: dict[str, str]


class MessageResponse(BaseModel):
    """Plain confirmation body (deletes, contact submission)."""

    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return value


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register.

    username and email are trimmed. The password is taken exactly as sent,
    so the hash matches what the same client sends to /auth/login.
    """

    username: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("username", "email", mode="before")
    @classmethod
    def strip_identity(cls, value):
        return _strip(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login. username is trimmed like at registration."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        return _strip(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserResponse(BaseModel):
    """A registered principal. Never carries the password or its hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, email=user.email)


class LoginUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    username: str


class LoginResponse(BaseModel):
    """Response for POST /api/auth/login."""

    model_config = ConfigDict(frozen=True)

    token: str
    user: LoginUser


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ProfileUpdate(BaseModel):
    """Request body for PUT /api/profile. Omitted fields keep their stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=10000)
    email: Optional[str] = Field(default=None, max_length=255)
    github: Optional[str] = Field(default=None, max_length=500)
    linkedin: Optional[str] = Field(default=None, max_length=500)
    twitter: Optional[str] = Field(default=None, max_length=500)
    resume_url: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str]
    title: Optional[str]
    bio: Optional[str]
    email: Optional[str]
    github: Optional[str]
    linkedin: Optional[str]
    twitter: Optional[str]
    resume_url: Optional[str]
    image_url: Optional[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            name=profile.name,
            title=profile.title,
            bio=profile.bio,
            email=profile.email,
            github=profile.github,
            linkedin=profile.linkedin,
            twitter=profile.twitter,
            resume_url=profile.resume_url,
            image_url=profile.image_url,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


# ---------------------------------------------------------------------------
# Projects (request side is multipart form fields, declared on the route)
# ---------------------------------------------------------------------------


class ProjectResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: Optional[str]
    long_description: Optional[str]
    tech_stack: list[str]
    image_url: Optional[str]
    github_url: Optional[str]
    live_url: Optional[str]
    featured: bool
    display_order: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            title=project.title,
            description=project.description,
            long_description=project.long_description,
            tech_stack=project.tech_stack,
            image_url=project.image_url,
            github_url=project.github_url,
            live_url=project.live_url,
            featured=project.featured,
            display_order=project.display_order,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


class SkillCreate(BaseModel):
    """Request body for POST /api/skills."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=100)
    proficiency: int = Field(default=0, ge=0, le=100)
    display_order: int = 0


class SkillUpdate(BaseModel):
    """Request body for PUT /api/skills/{id}. Omitted fields keep their stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    proficiency: Optional[int] = Field(default=None, ge=0, le=100)
    display_order: Optional[int] = None


class SkillResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: str
    proficiency: int
    display_order: int
    created_at: str

    @classmethod
    def from_domain(cls, skill: Skill) -> "SkillResponse":
        return cls(
            id=skill.id,
            name=skill.name,
            category=skill.category,
            proficiency=skill.proficiency,
            display_order=skill.display_order,
            created_at=skill.created_at,
        )


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------

# URL-safe path segment: letters, digits, "-" and "_".
_SLUG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"


class BlogPostCreate(BaseModel):
    """Request body for POST /api/blog."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255, pattern=_SLUG_PATTERN)
    excerpt: Optional[str] = Field(default=None, max_length=1000)
    content: Optional[str] = None
    tags: list[str] = Field(default_factory=list, max_length=20)
    read_time: int = Field(default=5, ge=0)
    featured: bool = False
    published: bool = False


class BlogPostUpdate(BaseModel):
    """Request body for PUT /api/blog/{id}. Omitted fields keep their stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=_SLUG_PATTERN)
    excerpt: Optional[str] = Field(default=None, max_length=1000)
    content: Optional[str] = None
    tags: Optional[list[str]] = Field(default=None, max_length=20)
    read_time: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    published: Optional[bool] = None


class BlogPostSummary(BaseModel):
    """One row in GET /api/blog -- no content, no view count."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    slug: str
    excerpt: Optional[str]
    tags: list[str]
    published_at: Optional[str]
    read_time: int
    featured: bool

    @classmethod
    def from_domain(cls, post: BlogPost) -> "BlogPostSummary":
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            tags=post.tags,
            published_at=post.published_at,
            read_time=post.read_time,
            featured=post.featured,
        )


class BlogPostResponse(BaseModel):
    """The full post record."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    slug: str
    excerpt: Optional[str]
    content: Optional[str]
    tags: list[str]
    published: bool
    published_at: Optional[str]
    read_time: int
    featured: bool
    view_count: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, post: BlogPost) -> "BlogPostResponse":
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            content=post.content,
            tags=post.tags,
            published=post.published,
            published_at=post.published_at,
            read_time=post.read_time,
            featured=post.featured,
            view_count=post.view_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------


class ContactCreate(BaseModel):
    """Request body for POST /api/contact."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    subject: Optional[str] = Field(default=None, max_length=255)
    message: str = Field(min_length=1, max_length=5000)


class ContactResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str
    subject: Optional[str]
    message: str
    created_at: str

    @classmethod
    def from_domain(cls, msg: ContactMessage) -> "ContactResponse":
        return cls(
            id=msg.id,
            name=msg.name,
            email=msg.email,
            subject=msg.subject,
            message=msg.message,
            created_at=msg.created_at,
        )
