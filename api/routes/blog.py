"""
api/routes/blog.py -- Blog routes.

Routes:
  GET    /api/blog           -- public; published posts only, summary fields
  GET    /api/blog/{slug}    -- public; published only, counts one view
  POST   /api/blog           -- auth
  PUT    /api/blog/{id}      -- auth; partial update
  DELETE /api/blog/{id}      -- auth

Public reads address posts by slug; authenticated edits address them by id.
The GET and PUT/DELETE paths share a shape but never a method, so the slug
and id parameters cannot capture each other's requests.

View counting:
  GET /blog/{slug} increments view_count with a single atomic UPDATE before
  the post is returned, so the response already includes this read. An
  unpublished or unknown slug is a 404 and counts nothing.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError

from api.models import BlogPostCreate, BlogPostResponse, BlogPostSummary, BlogPostUpdate, MessageResponse
from auth.dependencies import get_current_principal
from core.errors import Conflict, NotFound
from portfolio.models import BlogPost
from portfolio.store import BlogStore

router = APIRouter()

_POST_NOT_FOUND = "Blog post not found."


def _slug_conflict(slug: str) -> Conflict:
    return Conflict(f"A post with slug {slug!r} already exists.", code="slug_conflict")


@router.get("/blog", response_model=list[BlogPostSummary])
def list_posts(request: Request) -> list[BlogPostSummary]:
    blog: BlogStore = request.app.state.blog
    return [BlogPostSummary.from_domain(p) for p in blog.list_published()]


@router.get("/blog/{slug}", response_model=BlogPostResponse)
def read_post(request: Request, slug: str) -> BlogPostResponse:
    blog: BlogStore = request.app.state.blog
    post = blog.read_published(slug)
    if post is None:
        raise NotFound(_POST_NOT_FOUND)
    return BlogPostResponse.from_domain(post)


@router.post("/blog", response_model=BlogPostResponse, status_code=201, dependencies=[Depends(get_current_principal)])
def create_post(request: Request, body: BlogPostCreate) -> BlogPostResponse:
    blog: BlogStore = request.app.state.blog
    post = BlogPost(
        title=body.title,
        slug=body.slug,
        excerpt=body.excerpt,
        content=body.content,
        tags=body.tags,
        read_time=body.read_time,
        featured=body.featured,
        published=body.published,
    )
    try:
        post_id = blog.create_post(post)
    except IntegrityError as exc:
        raise _slug_conflict(body.slug) from exc
    return BlogPostResponse.from_domain(blog.get_post(post_id))


@router.put("/blog/{post_id}", response_model=BlogPostResponse, dependencies=[Depends(get_current_principal)])
def update_post(request: Request, post_id: int, body: BlogPostUpdate) -> BlogPostResponse:
    blog: BlogStore = request.app.state.blog
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    try:
        updated = blog.update_post(post_id, **updates)
    except IntegrityError as exc:
        raise _slug_conflict(updates.get("slug", "")) from exc
    if not updated:
        raise NotFound(_POST_NOT_FOUND)
    return BlogPostResponse.from_domain(blog.get_post(post_id))


@router.delete("/blog/{post_id}", response_model=MessageResponse, dependencies=[Depends(get_current_principal)])
def delete_post(request: Request, post_id: int) -> MessageResponse:
    blog: BlogStore = request.app.state.blog
    if not blog.delete_post(post_id):
        raise NotFound(_POST_NOT_FOUND)
    return MessageResponse(message="Blog post deleted successfully")
