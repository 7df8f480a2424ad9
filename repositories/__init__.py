"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.product_repository import ProductRepository, ProductIngredientRepository
from repositories.change_request_repository import ChangeRequestRepository
from repositories.poll_repository import PollRepository, VoteRepository
from repositories.comment_repository import CommentRepository

__all__ = [
    "BaseRepository",
    "IngredientRepository",
    "ProductRepository",
    "ProductIngredientRepository",
    "ChangeRequestRepository",
    "PollRepository",
    "VoteRepository",
    "CommentRepository",
]
