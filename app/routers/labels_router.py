"""Labels API: label catalog and customer label assignment."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.exceptions import NotFoundError
from app.infra.logging_config import get_logger
from app.models.customer import Customer
from app.models.label import Label
from app.routers.utils.dependencies import get_customer_by_id, get_label_by_id
from app.schemas.label import CustomerLabelAssign, LabelCreate, LabelRead
from app.services.label_service import LabelService

logger = get_logger("labels")

router = APIRouter(
    prefix="/labels",
    tags=["labels"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[LabelRead])
def list_labels(
    params: Params = Depends(),
    db: Session = Depends(get_db),
) -> Page[LabelRead]:
    """List labels with pagination."""
    return paginate(LabelService(db).get_labels_query(), params=params)


@router.post("", response_model=LabelRead, status_code=201)
def create_label(
    data: LabelCreate,
    db: Session = Depends(get_db),
) -> LabelRead:
    """Create a label."""
    try:
        return LabelService(db).create_label(data)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail="Label already exists") from e


@router.get("/{id}", response_model=LabelRead)
def get_label(label: Label = Depends(get_label_by_id)) -> LabelRead:
    """Get a label by ID."""
    return label


@router.delete("/{id}", status_code=204)
def delete_label(
    label: Label = Depends(get_label_by_id),
    db: Session = Depends(get_db),
) -> None:
    """Delete a label (and its assignments)."""
    LabelService(db).delete_label(label.id)


@router.get("/customers/{customer_id}", response_model=List[LabelRead])
def list_customer_labels(
    customer: Customer = Depends(get_customer_by_id),
    db: Session = Depends(get_db),
) -> List[LabelRead]:
    """Labels assigned to a customer."""
    return LabelService(db).get_customer_labels(customer.id)


@router.post("/customers/{customer_id}", response_model=LabelRead, status_code=201)
def assign_customer_label(
    data: CustomerLabelAssign,
    customer: Customer = Depends(get_customer_by_id),
    db: Session = Depends(get_db),
) -> LabelRead:
    """Assign a label to a customer by label name."""
    try:
        label = LabelService(db).assign_label(customer.id, data.label_name)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Label not found") from e
    logger.info("Label %s assigned to customer %s", label.name, customer.id)
    return label


@router.delete("/customers/{customer_id}/{label_name}", status_code=204)
def remove_customer_label(
    label_name: str,
    customer: Customer = Depends(get_customer_by_id),
    db: Session = Depends(get_db),
) -> None:
    """Remove a label from a customer."""
    try:
        removed = LabelService(db).remove_label(customer.id, label_name)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Label not found") from e
    if not removed:
        raise HTTPException(status_code=404, detail="Label not assigned")
