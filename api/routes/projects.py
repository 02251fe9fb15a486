"""
api/routes/projects.py -- Project showcase routes.

Routes:
  GET    /api/projects          -- public; display_order ASC, newest first on ties
  GET    /api/projects/{id}     -- public
  POST   /api/projects          -- auth; multipart form, optional "image" file
  PUT    /api/projects/{id}     -- auth; multipart form, partial update
  DELETE /api/projects/{id}     -- auth

File uploads:
  The image is read (capped at max_bytes + 1) and handed to MediaStore, which
  validates type and size and writes it BEFORE the project row is written.
  A rejected upload therefore never produces a database write. If the
  database write then fails, the stored file is deleted again.

  On update, omitting the image keeps the stored image_url; sending one
  replaces it. The same partial rule applies to every other form field.

Clearing fields on update:
  An optional field sent with an empty value ("github_url=") is cleared:
  description, long_description, github_url and live_url become null and
  tech_stack becomes []. A field that is not sent at all is left alone.
  FastAPI hands both cases to the handler as None, so _blank_fields reads the
  parsed form to tell them apart.

tech_stack is a comma-separated form value ("FastAPI, SQLite") stored as an
ordered list with blank entries dropped.

Handlers are plain def functions, so FastAPI runs them in its thread pool and
the blocking upload read, disk write and database calls never stall the
event loop.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from api.models import MessageResponse, ProjectResponse
from auth.dependencies import get_current_principal
from core.errors import NotFound
from portfolio.media import MediaStore
from portfolio.models import Project
from portfolio.store import ProjectStore

# Auth policy:
# - GET    /projects, /projects/{id}:  public
# - POST   /projects:                 requires auth (get_current_principal)
# - PUT    /projects/{id}:            requires auth (get_current_principal)
# - DELETE /projects/{id}:            requires auth (get_current_principal)
router = APIRouter()

_CLEARABLE_FIELDS = ("description", "long_description", "tech_stack", "github_url", "live_url")


def _split_tech_stack(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _store_image(request: Request, image: Optional[UploadFile]) -> Optional[str]:
    """Validate and persist an uploaded image. Returns its path, or None if no file was sent."""
    if image is None or not image.filename:
        return None
    media: MediaStore = request.app.state.media
    data = image.file.read(media.max_bytes + 1)
    return media.save_image(image.filename, image.content_type, data)


async def _blank_fields(request: Request) -> set[str]:
    """Names of clearable form fields that were sent with an empty value."""
    form = await request.form()
    return {name for name in _CLEARABLE_FIELDS if form.get(name) == ""}


def _project_not_found(project_id: int) -> NotFound:
    return NotFound(f"Project {project_id} not found.", code="project_not_found")


# ---------------------------------------------------------------------------
# Public reads
# ---------------------------------------------------------------------------


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(request: Request) -> list[ProjectResponse]:
    projects: ProjectStore = request.app.state.projects
    return [ProjectResponse.from_domain(p) for p in projects.list_projects()]


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(request: Request, project_id: int) -> ProjectResponse:
    projects: ProjectStore = request.app.state.projects
    project = projects.get_project(project_id)
    if project is None:
        raise _project_not_found(project_id)
    return ProjectResponse.from_domain(project)


# ---------------------------------------------------------------------------
# Authenticated writes
# ---------------------------------------------------------------------------


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=201,
    dependencies=[Depends(get_current_principal)],
)
def create_project(
    request: Request,
    title: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    long_description: Optional[str] = Form(None),
    tech_stack: Optional[str] = Form(None),
    github_url: Optional[str] = Form(None, max_length=500),
    live_url: Optional[str] = Form(None, max_length=500),
    featured: bool = Form(False),
    display_order: int = Form(0),
    image: Optional[UploadFile] = File(None),
) -> ProjectResponse:
    """Create a project. image_url stays null when no image is uploaded."""
    image_url = _store_image(request, image)

    projects: ProjectStore = request.app.state.projects
    project = Project(
        title=title,
        description=description,
        long_description=long_description,
        tech_stack=_split_tech_stack(tech_stack or ""),
        image_url=image_url,
        github_url=github_url,
        live_url=live_url,
        featured=featured,
        display_order=display_order,
    )
    try:
        project_id = projects.create_project(project)
    except Exception:
        if image_url is not None:
            request.app.state.media.discard(image_url)
        raise
    return ProjectResponse.from_domain(projects.get_project(project_id))


@router.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    dependencies=[Depends(get_current_principal)],
)
def update_project(
    request: Request,
    project_id: int,
    title: Optional[str] = Form(None, min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    long_description: Optional[str] = Form(None),
    tech_stack: Optional[str] = Form(None),
    github_url: Optional[str] = Form(None, max_length=500),
    live_url: Optional[str] = Form(None, max_length=500),
    featured: Optional[bool] = Form(None),
    display_order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    blank: set[str] = Depends(_blank_fields),
) -> ProjectResponse:
    """Update the fields that were sent. Unsent fields, including the image, are kept."""
    projects: ProjectStore = request.app.state.projects
    if projects.get_project(project_id) is None:
        raise _project_not_found(project_id)

    updates: dict = {}
    for name in blank:
        updates[name] = [] if name == "tech_stack" else None
    for name, value in (
        ("title", title),
        ("description", description),
        ("long_description", long_description),
        ("github_url", github_url),
        ("live_url", live_url),
        ("featured", featured),
        ("display_order", display_order),
    ):
        if value is not None:
            updates[name] = value
    if tech_stack is not None:
        updates["tech_stack"] = _split_tech_stack(tech_stack)

    image_url = _store_image(request, image)
    if image_url is not None:
        updates["image_url"] = image_url

    try:
        updated = projects.update_project(project_id, **updates)
    except Exception:
        if image_url is not None:
            request.app.state.media.discard(image_url)
        raise
    if not updated:
        if image_url is not None:
            request.app.state.media.discard(image_url)
        raise _project_not_found(project_id)
    return ProjectResponse.from_domain(projects.get_project(project_id))


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    dependencies=[Depends(get_current_principal)],
)
def delete_project(request: Request, project_id: int) -> MessageResponse:
    projects: ProjectStore = request.app.state.projects
    if not projects.delete_project(project_id):
        raise _project_not_found(project_id)
    return MessageResponse(message="Project deleted successfully")
