"""
Product Repository - Data access layer for catalog products and their ingredient links
"""

from typing import List, Optional, Iterable
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from domain.models import Product, ProductIngredient
from repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Repository for catalog products"""

    def __init__(self, db: Session):
        super().__init__(db, Product)

    def _with_ingredients(self):
        return self.db.query(Product).options(
            selectinload(Product.ingredient_links).selectinload(ProductIngredient.ingredient)
        )

    def get_by_id(self, product_id: UUID) -> Optional[Product]:
        """Get product with its ingredients eagerly loaded"""
        return self._with_ingredients().filter(Product.product_id == product_id).first()

    def get_by_name(self, name: str) -> Optional[Product]:
        """Get product by exact name (case-insensitive)"""
        return (
            self.db.query(Product)
            .filter(func.lower(Product.name) == (name or "").strip().lower())
            .first()
        )

    def get_all(self, skip: int = 0, limit: Optional[int] = None) -> List[Product]:
        query = self._with_ingredients().order_by(Product.name).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def search(
        self,
        name: Optional[str] = None,
        categories: Optional[Iterable[str]] = None,
        country: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Product]:
        """
        Filtered product search.

        Args:
            name: case-insensitive substring of the product name
            categories: product category must be one of these
            country: exact country match
            status: exact status match

        Returns:
            Matching products ordered by name
        """
        query = self._with_ingredients()
        if name:
            query = query.filter(func.lower(Product.name).like(f"%{name.lower()}%"))
        categories = [c for c in (categories or []) if c]
        if categories:
            query = query.filter(Product.category.in_(categories))
        if country:
            query = query.filter(Product.country == country)
        if status:
            query = query.filter(Product.status == status)
        return query.order_by(Product.name).all()

    def get_categories(self) -> List[str]:
        rows = (
            self.db.query(Product.category)
            .filter(Product.category.isnot(None))
            .distinct()
            .order_by(Product.category)
            .all()
        )
        return [row[0] for row in rows]

    def get_countries(self) -> List[str]:
        rows = (
            self.db.query(Product.country)
            .filter(Product.country.isnot(None))
            .distinct()
            .order_by(Product.country)
            .all()
        )
        return [row[0] for row in rows]


class ProductIngredientRepository(BaseRepository[ProductIngredient]):
    """Repository for product-ingredient links"""

    def __init__(self, db: Session):
        super().__init__(db, ProductIngredient)

    def get_for_product(self, product_id: UUID) -> List[ProductIngredient]:
        return (
            self.db.query(ProductIngredient)
            .filter(ProductIngredient.product_id == product_id)
            .all()
        )

    def link(self, product: Product, ingredient) -> ProductIngredient:
        """Stage one link between a product and an ingredient"""
        return self.add(ProductIngredient(product=product, ingredient=ingredient))

    def remove_for_product(self, product_id: UUID) -> int:
        """Stage removal of every link of a product; returns how many were removed"""
        links = self.get_for_product(product_id)
        for link in links:
            self.db.delete(link)
        self.db.flush()
        return len(links)
