"""Quick replies API: CRUD for canned operator replies."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.quick_reply import QuickReply
from app.routers.utils.dependencies import get_quick_reply_by_id
from app.schemas.quick_reply import QuickReplyCreate, QuickReplyRead, QuickReplyUpdate
from app.services.quick_reply_service import QuickReplyService

router = APIRouter(
    prefix="/quick-replies",
    tags=["quick-replies"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[QuickReplyRead])
def list_quick_replies(
    params: Params = Depends(),
    db: Session = Depends(get_db),
) -> Page[QuickReplyRead]:
    """List quick replies with pagination."""
    return paginate(QuickReplyService(db).get_quick_replies_query(), params=params)


@router.post("", response_model=QuickReplyRead, status_code=201)
def create_quick_reply(
    data: QuickReplyCreate,
    db: Session = Depends(get_db),
) -> QuickReplyRead:
    """Create a quick reply."""
    try:
        return QuickReplyService(db).create_quick_reply(data)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail="Quick reply key already exists") from e


@router.get("/{id}", response_model=QuickReplyRead)
def get_quick_reply(
    quick_reply: QuickReply = Depends(get_quick_reply_by_id),
) -> QuickReplyRead:
    """Get a quick reply by ID."""
    return quick_reply


@router.patch("/{id}", response_model=QuickReplyRead)
def update_quick_reply(
    data: QuickReplyUpdate,
    quick_reply: QuickReply = Depends(get_quick_reply_by_id),
    db: Session = Depends(get_db),
) -> QuickReplyRead:
    """Update a quick reply."""
    return QuickReplyService(db).update_quick_reply(quick_reply.id, data)


@router.delete("/{id}", status_code=204)
def delete_quick_reply(
    quick_reply: QuickReply = Depends(get_quick_reply_by_id),
    db: Session = Depends(get_db),
) -> None:
    """Delete a quick reply."""
    QuickReplyService(db).delete_quick_reply(quick_reply.id)
