from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.app_state import AppState
from app.db import get_db
from app.models.customer import Customer
from app.models.label import Label
from app.models.quick_reply import QuickReply
from app.services.customer_service import CustomerService
from app.services.label_service import LabelService
from app.services.quick_reply_service import QuickReplyService


def get_app_state(request: Request) -> AppState:
    """FastAPI dependency returning the process-wide relay state."""
    return request.app.state.relay


def get_customer_by_id(
    customer_id: int,
    db: Session = Depends(get_db),
) -> Customer:
    """FastAPI dependency to get a customer by ID."""
    customer = CustomerService(db).get_customer(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


def get_label_by_id(
    id: int,
    db: Session = Depends(get_db),
) -> Label:
    """FastAPI dependency to get a label by ID."""
    label = LabelService(db).get_label(id)
    if label is None:
        raise HTTPException(status_code=404, detail="Label not found")
    return label


def get_quick_reply_by_id(
    id: int,
    db: Session = Depends(get_db),
) -> QuickReply:
    """FastAPI dependency to get a quick reply by ID."""
    quick_reply = QuickReplyService(db).get_quick_reply(id)
    if quick_reply is None:
        raise HTTPException(status_code=404, detail="Quick reply not found")
    return quick_reply
