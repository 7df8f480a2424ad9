from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


class CommentCreate(BaseModel):
    """Schema for commenting on a product or an ingredient"""

    product_id: Optional[UUID] = None
    ingredient_id: Optional[UUID] = None
    content: str = Field(..., min_length=1, max_length=2000)

    @model_validator(mode="after")
    def check_single_target(self):
        if (self.product_id is None) == (self.ingredient_id is None):
            raise ValueError("Exactly one of product_id or ingredient_id must be provided")
        return self


class CommentResponse(BaseModel):
    """Schema for comment response"""

    comment_id: UUID
    target_type: str
    product_id: Optional[UUID] = None
    ingredient_id: Optional[UUID] = None
    user_id: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
