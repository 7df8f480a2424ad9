"""Catalog routes: public reads and admin product writes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_actor, get_classification_service
from api.responses import ERROR_RESPONSES
from domain.schemas.actor_schemas import Actor
from domain.schemas.ingredient_schemas import IngredientResponse
from domain.schemas.product_schemas import ProductCreate, ProductResponse, ProductUpdate
from services.catalog_service import CatalogService
from services.classification_service import ClassificationService

router = APIRouter(prefix="/catalog", tags=["Catalog"], responses=ERROR_RESPONSES)


@router.get("/products", response_model=List[ProductResponse])
def list_products(
    name: Optional[str] = Query(None, description="Name substring"),
    category: Optional[List[str]] = Query(None, description="Allowed categories"),
    country: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List products, optionally filtered"""
    if name or category or country or status:
        products = CatalogService.search_products(
            db, name=name, categories=category, country=country, status=status
        )
    else:
        products = CatalogService.get_products(db)
    return [ProductResponse.model_validate(p) for p in products]


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    return ProductResponse.model_validate(CatalogService.get_product(db, product_id))


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    classifier: ClassificationService = Depends(get_classification_service),
):
    """Add a product directly (admin only)"""
    product = CatalogService.create_product(db, payload, actor, classifier)
    return ProductResponse.model_validate(product)


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    classifier: ClassificationService = Depends(get_classification_service),
):
    product = CatalogService.update_product(db, product_id, payload, actor, classifier)
    return ProductResponse.model_validate(product)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: UUID, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    CatalogService.delete_product(db, product_id, actor)


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService.get_categories(db)


@router.get("/countries", response_model=List[str])
def list_countries(db: Session = Depends(get_db)):
    return CatalogService.get_countries(db)


@router.get("/ingredients", response_model=List[IngredientResponse])
def list_ingredients(
    q: Optional[str] = Query(None, description="Name substring"),
    db: Session = Depends(get_db),
):
    return [IngredientResponse.model_validate(i) for i in CatalogService.get_ingredients(db, q)]


@router.get("/ingredients/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: UUID, db: Session = Depends(get_db)):
    return IngredientResponse.model_validate(CatalogService.get_ingredient(db, ingredient_id))
