"""
Product catalog models.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import IngredientStatus


class Product(Base):
    """Catalog product; ``status`` is derived from the linked ingredients"""

    __tablename__ = "product"

    product_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default=IngredientStatus.UNKNOWN.value)
    category = Column(Text)
    description = Column(Text)
    country = Column(Text)
    barcode = Column(Text, index=True)
    image_url = Column(Text)
    added_by = Column(Text)
    verified_by = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ingredient_links = relationship(
        "ProductIngredient", back_populates="product", cascade="all, delete-orphan"
    )
    polls = relationship("Poll", cascade="all")
    comments = relationship("Comment", cascade="all")

    __table_args__ = (Index("uq_product_name_lower", func.lower(name), unique=True),)

    @property
    def ingredients(self):
        return [link.ingredient for link in self.ingredient_links]

    def __repr__(self):
        return f"<Product(id={self.product_id}, name='{self.name}', status='{self.status}')>"


class ProductIngredient(Base):
    """Association between a product and one of its ingredients"""

    __tablename__ = "product_ingredient"

    product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.product_id", ondelete="CASCADE"),
        primary_key=True,
    )
    ingredient_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("ingredient.ingredient_id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="ingredient_links")
    ingredient = relationship("Ingredient", back_populates="product_links")
