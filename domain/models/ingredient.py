"""
Ingredient model - Master ingredient table.
Single source of truth for every ingredient classification in the catalog.
"""

from sqlalchemy import Column, Text, JSON, TIMESTAMP, Index, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import IngredientStatus

NO_COUNTRY = "None"


def _no_countries():
    return [NO_COUNTRY]


class Ingredient(Base):
    """
    Master ingredient table.

    ``status`` holds the most recently evaluated classification. The three country
    lists keep per-country evidence; a country appears in at most one of them and an
    empty list holds the ``"None"`` sentinel.
    """

    __tablename__ = "ingredient"

    ingredient_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False, default=IngredientStatus.UNKNOWN.value)
    e_code = Column(Text, default="N/A")
    description = Column(Text)

    halal_in = Column(JSON, nullable=False, default=_no_countries)
    haram_in = Column(JSON, nullable=False, default=_no_countries)
    mushbooh_in = Column(JSON, nullable=False, default=_no_countries)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    product_links = relationship(
        "ProductIngredient", back_populates="ingredient", cascade="all, delete-orphan"
    )

    # Names are unique regardless of case
    __table_args__ = (Index("uq_ingredient_name_lower", func.lower(name), unique=True),)

    def __repr__(self):
        return f"<Ingredient(id={self.ingredient_id}, name='{self.name}', status='{self.status}')>"
