"""
api/routes/profile.py -- The site owner's profile (singleton).

Routes:
  GET /api/profile   -- public; 404 until the profile has been written once
  PUT /api/profile   -- auth; partial update, creates the row on first write
"""

from fastapi import APIRouter, Depends, Request

from api.models import ProfileResponse, ProfileUpdate
from auth.dependencies import get_current_principal
from core.errors import NotFound
from portfolio.store import ProfileStore

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(request: Request) -> ProfileResponse:
    profiles: ProfileStore = request.app.state.profiles
    profile = profiles.get_profile()
    if profile is None:
        raise NotFound("Profile not found.")
    return ProfileResponse.from_domain(profile)


@router.put("/profile", response_model=ProfileResponse, dependencies=[Depends(get_current_principal)])
def update_profile(request: Request, body: ProfileUpdate) -> ProfileResponse:
    """Apply the supplied fields. Fields absent from the body are left unchanged."""
    profiles: ProfileStore = request.app.state.profiles
    profile = profiles.update_profile(**body.model_dump(exclude_unset=True))
    return ProfileResponse.from_domain(profile)
