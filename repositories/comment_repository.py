"""
Comment Repository - Data access layer for comments
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Comment
from repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for comments"""

    def __init__(self, db: Session):
        super().__init__(db, Comment)

    def get_for_product(self, product_id: UUID) -> List[Comment]:
        """Comments on a product, oldest first"""
        return (
            self.db.query(Comment)
            .filter(Comment.product_id == product_id)
            .order_by(Comment.created_at, Comment.comment_id)
            .all()
        )

    def get_for_ingredient(self, ingredient_id: UUID) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.ingredient_id == ingredient_id)
            .order_by(Comment.created_at, Comment.comment_id)
            .all()
        )
