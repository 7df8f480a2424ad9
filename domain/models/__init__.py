"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.ingredient import Ingredient, NO_COUNTRY
from domain.models.product import Product, ProductIngredient
from domain.models.change_request import ProductChangeRequest
from domain.models.poll import Poll, Vote
from domain.models.comment import Comment

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Catalog models
    "Ingredient",
    "NO_COUNTRY",
    "Product",
    "ProductIngredient",
    # Moderation models
    "ProductChangeRequest",
    "Poll",
    "Vote",
    "Comment",
]
