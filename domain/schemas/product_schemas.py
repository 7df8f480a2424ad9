from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.schemas.ingredient_schemas import IngredientResponse


class ProductCreate(BaseModel):
    """Admin payload for adding a product directly to the catalog"""

    name: str
    country: str
    description: str
    category: str
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: Optional[List[str]] = Field(
        None, description="Ingredient names; unknown names are added as Mushbooh"
    )
    use_ai: bool = Field(
        default=False,
        description="Classify the product by barcode instead of using the supplied names",
    )


class ProductUpdate(BaseModel):
    """Admin payload for editing a product; a blank category keeps the current one"""

    name: str
    country: str
    description: str
    category: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: Optional[List[str]] = None
    use_ai: bool = False


class ProductResponse(BaseModel):
    """Schema for catalog product response"""

    product_id: UUID
    name: str
    status: str
    category: Optional[str] = None
    description: Optional[str] = None
    country: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None
    added_by: Optional[str] = None
    verified_by: Optional[str] = None
    ingredients: List[IngredientResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProductEvaluation(BaseModel):
    """Result of recomputing a product's status from its ingredients"""

    product_id: UUID
    product_name: str
    status: str
    country: Optional[str] = None
    ingredients: List[IngredientResponse] = []

    model_config = {"from_attributes": True}
