"""Community poll routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_actor
from api.responses import ERROR_RESPONSES
from app.config import settings
from app.exceptions import AuthorizationError
from domain.schemas.actor_schemas import Actor
from domain.schemas.poll_schemas import (
    PollCreate,
    VoteCreate,
    PollResponse,
    VoteResponse,
    PollResults,
)
from services.poll_service import PollService

router = APIRouter(prefix="/polls", tags=["Polls"], responses=ERROR_RESPONSES)


@router.post("", response_model=PollResponse, status_code=status.HTTP_201_CREATED)
def create_poll(payload: PollCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    """Open a poll on a product or an ingredient"""
    poll = PollService.create_poll(
        db,
        product_id=payload.product_id,
        ingredient_id=payload.ingredient_id,
        days_valid=payload.days_valid or settings.poll_default_days,
    )
    return PollResponse.model_validate(poll)


@router.post("/{poll_id}/votes", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
def cast_vote(
    poll_id: UUID,
    payload: VoteCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Vote once per poll"""
    vote = PollService.cast_vote(db, poll_id, actor.username, payload.status)
    return VoteResponse.model_validate(vote)


@router.post("/{poll_id}/close", response_model=PollResponse)
def close_poll(poll_id: UUID, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    if not actor.is_admin:
        raise AuthorizationError("Only administrators may close polls")
    return PollResponse.model_validate(PollService.close_poll(db, poll_id))


@router.delete("/{poll_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_poll(poll_id: UUID, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    if not actor.is_admin:
        raise AuthorizationError("Only administrators may delete polls")
    PollService.delete_poll(db, poll_id)


@router.get("/{poll_id}/results", response_model=PollResults)
def poll_results(poll_id: UUID, db: Session = Depends(get_db)):
    return PollService.get_poll_results(db, poll_id)


@router.get("", response_model=List[PollResponse])
def list_active_polls(
    product_id: Optional[UUID] = Query(None),
    ingredient_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    """Active polls on one product or one ingredient"""
    polls = PollService.get_active_polls(db, product_id=product_id, ingredient_id=ingredient_id)
    return [PollResponse.model_validate(p) for p in polls]
