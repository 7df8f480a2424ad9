"""Community comment routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_actor
from api.responses import ERROR_RESPONSES
from domain.schemas.actor_schemas import Actor
from domain.schemas.comment_schemas import CommentCreate, CommentResponse
from services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"], responses=ERROR_RESPONSES)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """Comment on a product or an ingredient"""
    comment = CommentService.create_comment(
        db,
        actor,
        payload.content,
        product_id=payload.product_id,
        ingredient_id=payload.ingredient_id,
    )
    return CommentResponse.model_validate(comment)


@router.get("", response_model=List[CommentResponse])
def list_comments(
    product_id: Optional[UUID] = Query(None),
    ingredient_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    comments = CommentService.get_comments(db, product_id=product_id, ingredient_id=ingredient_id)
    return [CommentResponse.model_validate(c) for c in comments]
