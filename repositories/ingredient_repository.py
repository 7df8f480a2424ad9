"""
Ingredient Repository - Data access layer for the ingredient master table
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from domain.models import Ingredient, ProductIngredient
from repositories.base import BaseRepository


def normalize_name(name: str) -> str:
    """Names are stored trimmed and compared case-insensitively."""
    return (name or "").strip()


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient master data"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        """Get ingredient by name (case-insensitive)"""
        normalized_name = normalize_name(name).lower()
        if not normalized_name:
            return None
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name) == normalized_name)
            .first()
        )

    def get_all(self, skip: int = 0, limit: Optional[int] = None) -> List[Ingredient]:
        """Get all ingredients ordered by name"""
        query = self.db.query(Ingredient).order_by(Ingredient.name).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def search_by_name(self, query: str, limit: int = 20) -> List[Ingredient]:
        """Search ingredients by name (case-insensitive partial match)"""
        search_pattern = f"%{query.lower()}%"
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name).like(search_pattern))
            .order_by(Ingredient.name)
            .limit(limit)
            .all()
        )

    def get_product_ids_using(self, ingredient_id: UUID) -> List[UUID]:
        """Ids of every product that links the ingredient"""
        rows = (
            self.db.query(ProductIngredient.product_id)
            .filter(ProductIngredient.ingredient_id == ingredient_id)
            .all()
        )
        return [row[0] for row in rows]
