"""Ingredient classification routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_db, get_classification_service
from domain.schemas.ingredient_schemas import (
    ClassifyProductRequest,
    ClassifyIngredientsRequest,
    IngredientResponse,
)
from domain.schemas.product_schemas import ProductEvaluation
from services.classification_service import ClassificationService

router = APIRouter(prefix="/classification", tags=["Classification"])
logger = logging.getLogger("halalcheck.api.classification")


@router.post("/product", response_model=List[IngredientResponse])
def classify_product(
    payload: ClassifyProductRequest,
    db: Session = Depends(get_db),
    classifier: ClassificationService = Depends(get_classification_service),
):
    """Classify the ingredients of a product looked up by name or barcode"""
    ingredients = classifier.classify_by_name_or_barcode(
        db, payload.product_name, payload.barcode, payload.country
    )
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.post("/ingredients", response_model=List[IngredientResponse])
def classify_ingredients(
    payload: ClassifyIngredientsRequest,
    db: Session = Depends(get_db),
    classifier: ClassificationService = Depends(get_classification_service),
):
    """Classify an explicit list of ingredient names"""
    ingredients = classifier.classify_by_name_list(db, payload.ingredients, payload.country)
    return [IngredientResponse.model_validate(i) for i in ingredients]


@router.post("/products/{product_id}/evaluate", response_model=ProductEvaluation)
def evaluate_product(product_id: UUID, db: Session = Depends(get_db)):
    """Recompute a product's status from its ingredients"""
    return ClassificationService.evaluate_product_status(db, product_id)
