"""
api/routes/contact.py -- Contact form routes.

Routes:
  POST /api/contact  -- public, rate-limited; 201 confirmation, body not echoed
  GET  /api/contact  -- auth; all messages, newest first

POST /contact is the only unauthenticated write in the API.
"""

from fastapi import APIRouter, Depends, Request

from api.limiter import limiter
from api.models import ContactCreate, ContactResponse, MessageResponse
from auth.dependencies import get_current_principal
from core.config import get_settings
from portfolio.models import ContactMessage
from portfolio.store import ContactStore

router = APIRouter()


@limiter.limit(get_settings().contact_rate_limit)
@router.post("/contact", response_model=MessageResponse, status_code=201)
def submit_message(request: Request, body: ContactCreate) -> MessageResponse:
    contacts: ContactStore = request.app.state.contacts
    contacts.create_message(
        ContactMessage(name=body.name, email=body.email, subject=body.subject, message=body.message)
    )
    return MessageResponse(message="Message sent successfully")


@router.get("/contact", response_model=list[ContactResponse], dependencies=[Depends(get_current_principal)])
def list_messages(request: Request) -> list[ContactResponse]:
    contacts: ContactStore = request.app.state.contacts
    return [ContactResponse.from_domain(m) for m in contacts.list_messages()]
