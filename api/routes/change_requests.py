"""Community change request routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_actor, get_classification_service
from api.responses import ERROR_RESPONSES
from domain.enums import RequestType
from domain.schemas.actor_schemas import Actor
from domain.schemas.change_request_schemas import (
    ChangeRequestCreate,
    ChangeRequestEdit,
    ApproveRequest,
    RejectRequest,
    ChangeRequestResponse,
    ApprovalResult,
)
from domain.schemas.ingredient_schemas import IngredientResponse
from domain.schemas.product_schemas import ProductResponse
from services.change_request_service import ChangeRequestService
from services.classification_service import ClassificationService

router = APIRouter(prefix="/change-requests", tags=["Change Requests"], responses=ERROR_RESPONSES)
logger = logging.getLogger("halalcheck.api.change_requests")


@router.get("", response_model=List[ChangeRequestResponse])
def list_requests(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    """All change requests, newest first"""
    return [ChangeRequestResponse.model_validate(r) for r in ChangeRequestService.get_all(db)]


@router.get("/pending", response_model=List[ChangeRequestResponse])
def list_pending(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return [ChangeRequestResponse.model_validate(r) for r in ChangeRequestService.get_pending(db)]


@router.get("/mine", response_model=List[ChangeRequestResponse])
def list_mine(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    requests = ChangeRequestService.get_by_requester(db, actor.username)
    return [ChangeRequestResponse.model_validate(r) for r in requests]


@router.get("/{request_id}", response_model=ChangeRequestResponse)
def get_request(request_id: UUID, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    """Request details (requester or admin only)"""
    return ChangeRequestResponse.model_validate(
        ChangeRequestService.get_by_id(db, request_id, actor)
    )


@router.post(
    "/{request_type}",
    response_model=ChangeRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_request(
    request_type: RequestType,
    payload: ChangeRequestCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Submit an Add, Edit or Delete request"""
    request = ChangeRequestService.submit(db, request_type, payload, actor)
    return ChangeRequestResponse.model_validate(request)


@router.patch("/{request_id}", response_model=ChangeRequestResponse)
def edit_request(
    request_id: UUID,
    payload: ChangeRequestEdit,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Change fields of your own pending request"""
    request = ChangeRequestService.edit_request(db, request_id, payload, actor)
    return ChangeRequestResponse.model_validate(request)


@router.post("/{request_id}/verify", response_model=List[IngredientResponse])
def verify_ingredients(
    request_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    classifier: ClassificationService = Depends(get_classification_service),
):
    """Classify the request's ingredients for review before approval"""
    ingredients = ChangeRequestService.verify_ingredients(db, request_id, actor, classifier)
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.post("/{request_id}/approve", response_model=ApprovalResult)
def approve_request(
    request_id: UUID,
    payload: ApproveRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    request, product = ChangeRequestService.approve(
        db, request_id, actor, payload.final_ingredients
    )
    return ApprovalResult(
        request=ChangeRequestResponse.model_validate(request),
        product=ProductResponse.model_validate(product) if product is not None else None,
    )


@router.post("/{request_id}/reject", response_model=ChangeRequestResponse)
def reject_request(
    request_id: UUID,
    payload: RejectRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    request = ChangeRequestService.reject(db, request_id, actor, payload.reason)
    return ChangeRequestResponse.model_validate(request)
