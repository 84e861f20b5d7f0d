from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portfolio.dao import ContactDAO
from portfolio.deps import get_db, require_admin
from portfolio.schemas import (
    ContactRequest,
    ContactResponse,
    ContactStatusUpdate,
    MessageResponse,
)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def submit_message(
    body: ContactRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    ContactDAO(db).create(**body.model_dump())
    return MessageResponse(message="Message sent successfully")


@router.get(
    "",
    response_model=list[ContactResponse],
    dependencies=[Depends(require_admin)],
)
def list_messages(
    db: Annotated[Session, Depends(get_db)],
) -> list[ContactResponse]:
    return [ContactResponse.model_validate(c) for c in ContactDAO(db).list()]


@router.put(
    "/{contact_id}",
    response_model=ContactResponse,
    dependencies=[Depends(require_admin)],
)
def update_message_status(
    contact_id: int,
    body: ContactStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ContactResponse:
    contact = ContactDAO(db).update_status(contact_id, body.status)
    if contact is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Message not found"
        )
    return ContactResponse.model_validate(contact)
