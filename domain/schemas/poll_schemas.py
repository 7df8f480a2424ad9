from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict
from datetime import datetime
from uuid import UUID

from domain.enums import IngredientStatus


class PollCreate(BaseModel):
    """Schema for opening a poll on a product or an ingredient"""

    product_id: Optional[UUID] = None
    ingredient_id: Optional[UUID] = None
    days_valid: Optional[int] = Field(None, ge=1, le=365)

    @model_validator(mode="after")
    def check_single_target(self):
        if (self.product_id is None) == (self.ingredient_id is None):
            raise ValueError("Exactly one of product_id or ingredient_id must be provided")
        return self


class VoteCreate(BaseModel):
    """Schema for casting a vote"""

    status: IngredientStatus


class PollResponse(BaseModel):
    """Schema for poll response"""

    poll_id: UUID
    target_type: str
    product_id: Optional[UUID] = None
    ingredient_id: Optional[UUID] = None
    created_at: datetime
    expires_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class VoteResponse(BaseModel):
    """Schema for vote response"""

    vote_id: UUID
    poll_id: UUID
    user_id: str
    status: str
    voted_at: datetime

    model_config = {"from_attributes": True}


class PollResults(BaseModel):
    """Vote tally for a poll"""

    poll_id: UUID
    total_votes: int
    counts: Dict[str, int]
    leading_status: Optional[str] = None
