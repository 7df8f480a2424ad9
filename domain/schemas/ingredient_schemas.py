from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID, uuid4

from domain.enums import IngredientStatus


class ParsedIngredient(BaseModel):
    """Ingredient record extracted from generated text, not yet persisted"""

    ingredient_id: UUID = Field(default_factory=uuid4)
    name: str
    e_code: str = "N/A"
    description: str
    status: IngredientStatus
    halal_in: List[str]
    haram_in: List[str]
    mushbooh_in: List[str]
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class IngredientInput(BaseModel):
    """Ingredient reference supplied by an admin when approving a request.

    Resolved by id or case-insensitive name; unknown entries are created.
    """

    ingredient_id: Optional[UUID] = None
    name: str = Field(..., min_length=1)
    status: Optional[IngredientStatus] = None
    e_code: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Ingredient name must not be blank")
        return v


class ClassifyProductRequest(BaseModel):
    """Schema for classifying a product by name or barcode"""

    product_name: Optional[str] = None
    barcode: Optional[str] = None
    country: Optional[str] = None


class ClassifyIngredientsRequest(BaseModel):
    """Schema for classifying an explicit list of ingredient names"""

    ingredients: List[str] = Field(default_factory=list)
    country: Optional[str] = None


class IngredientResponse(BaseModel):
    """Schema for ingredient response"""

    ingredient_id: UUID
    name: str
    status: str
    e_code: Optional[str] = None
    description: Optional[str] = None
    halal_in: List[str]
    haram_in: List[str]
    mushbooh_in: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
