"""
api/routes/skills.py -- Skill list routes.

Routes:
  GET    /api/skills        -- public; category ASC, display_order ASC
  POST   /api/skills        -- auth
  PUT    /api/skills/{id}   -- auth; partial update
  DELETE /api/skills/{id}   -- auth
"""

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, SkillCreate, SkillResponse, SkillUpdate
from auth.dependencies import get_current_principal
from core.errors import NotFound
from portfolio.models import Skill
from portfolio.store import SkillStore

router = APIRouter()


@router.get("/skills", response_model=list[SkillResponse])
def list_skills(request: Request) -> list[SkillResponse]:
    skills: SkillStore = request.app.state.skills
    return [SkillResponse.from_domain(s) for s in skills.list_skills()]


@router.post("/skills", response_model=SkillResponse, status_code=201, dependencies=[Depends(get_current_principal)])
def create_skill(request: Request, body: SkillCreate) -> SkillResponse:
    skills: SkillStore = request.app.state.skills
    skill_id = skills.create_skill(
        Skill(
            name=body.name,
            category=body.category,
            proficiency=body.proficiency,
            display_order=body.display_order,
        )
    )
    return SkillResponse.from_domain(skills.get_skill(skill_id))


@router.put("/skills/{skill_id}", response_model=SkillResponse, dependencies=[Depends(get_current_principal)])
def update_skill(request: Request, skill_id: int, body: SkillUpdate) -> SkillResponse:
    skills: SkillStore = request.app.state.skills
    updates = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if not skills.update_skill(skill_id, **updates):
        raise NotFound(f"Skill {skill_id} not found.", code="skill_not_found")
    return SkillResponse.from_domain(skills.get_skill(skill_id))


@router.delete("/skills/{skill_id}", response_model=MessageResponse, dependencies=[Depends(get_current_principal)])
def delete_skill(request: Request, skill_id: int) -> MessageResponse:
    skills: SkillStore = request.app.state.skills
    if not skills.delete_skill(skill_id):
        raise NotFound(f"Skill {skill_id} not found.", code="skill_not_found")
    return MessageResponse(message="Skill deleted successfully")
