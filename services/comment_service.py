"""
Comment service - community remarks on products and ingredients.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import PollTarget
from domain.models import Comment
from domain.schemas.actor_schemas import Actor
from repositories import CommentRepository, IngredientRepository, ProductRepository

logger = logging.getLogger("halalcheck.comment")


class CommentService:
    @staticmethod
    def create_comment(
        db: Session,
        actor: Actor,
        content: str,
        product_id: Optional[UUID] = None,
        ingredient_id: Optional[UUID] = None,
    ) -> Comment:
        """
        Attach a comment to exactly one product or one ingredient.

        Raises:
            ServiceValidationError: if not exactly one target is given or the content is blank
            NotFoundError: if the target does not exist
        """
        if (product_id is None) == (ingredient_id is None):
            raise ServiceValidationError("A comment targets exactly one product or one ingredient")
        content = (content or "").strip()
        if not content:
            raise ServiceValidationError("Comment content must not be blank")

        if product_id is not None:
            if not ProductRepository(db).exists(product_id):
                raise NotFoundError(f"Product not found: {product_id}")
            target_type = PollTarget.PRODUCT
        else:
            if not IngredientRepository(db).exists(ingredient_id):
                raise NotFoundError(f"Ingredient not found: {ingredient_id}")
            target_type = PollTarget.INGREDIENT

        comment = Comment(
            target_type=target_type.value,
            product_id=product_id,
            ingredient_id=ingredient_id,
            user_id=actor.username,
            content=content,
            created_at=datetime.utcnow(),
        )
        try:
            CommentRepository(db).add(comment)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error creating comment")
            raise

        logger.info(
            "User %s commented on %s %s",
            actor.username,
            target_type.value,
            product_id or ingredient_id,
        )
        return comment

    @staticmethod
    def get_comments(
        db: Session,
        product_id: Optional[UUID] = None,
        ingredient_id: Optional[UUID] = None,
    ) -> List[Comment]:
        """Comments on one product or one ingredient, oldest first"""
        if (product_id is None) == (ingredient_id is None):
            raise ServiceValidationError("Filter by exactly one product or one ingredient")
        repo = CommentRepository(db)
        if product_id is not None:
            return repo.get_for_product(product_id)
        return repo.get_for_ingredient(ingredient_id)
