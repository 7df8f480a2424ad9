from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.schemas.ingredient_schemas import IngredientInput
from domain.schemas.product_schemas import ProductResponse


class ChangeRequestCreate(BaseModel):
    """Proposed values for a new Add, Edit or Delete request"""

    product_id: Optional[UUID] = Field(
        None, description="Target product (required for Edit and Delete)"
    )
    product_name: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: Optional[List[str]] = Field(
        None, description="User-supplied ingredient names"
    )
    use_only_user_ingredients: bool = Field(
        default=False,
        description="Classify only the supplied ingredient names instead of asking for the product's list",
    )

    def has_proposed_change(self) -> bool:
        return bool(
            self.product_name
            or self.barcode
            or self.category
            or self.description
            or self.image_url
            or self.ingredients
        )


class ChangeRequestEdit(BaseModel):
    """Field-level overlay for a pending request; omitted fields keep their value"""

    product_name: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: Optional[List[str]] = None
    use_only_user_ingredients: Optional[bool] = None


class ApproveRequest(BaseModel):
    """Admin approval payload"""

    final_ingredients: List[IngredientInput] = Field(default_factory=list)


class RejectRequest(BaseModel):
    """Admin rejection payload"""

    reason: str = Field(..., description="Why the request was rejected")


class ChangeRequestResponse(BaseModel):
    """Schema for change request response"""

    request_id: UUID
    request_type: str
    request_status: str
    requested_by: str
    request_date: datetime
    action_date: Optional[datetime] = None
    actioned_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    product_id: Optional[UUID] = None
    product_name: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[str] = []
    use_only_user_ingredients: bool = False

    model_config = {"from_attributes": True}


class ApprovalResult(BaseModel):
    """Outcome of an approved request"""

    request: ChangeRequestResponse
    product: Optional[ProductResponse] = None

    model_config = {"from_attributes": True}
