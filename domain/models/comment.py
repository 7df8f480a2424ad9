"""
Community comment model.
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, CheckConstraint, Uuid
from datetime import datetime
import uuid

from domain.models.database import Base


class Comment(Base):
    """Free-text remark on exactly one product or one ingredient"""

    __tablename__ = "comment"

    comment_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    target_type = Column(Text, nullable=False)  # Product | Ingredient
    product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.product_id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    ingredient_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("ingredient.ingredient_id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    user_id = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(
            "(product_id IS NULL) <> (ingredient_id IS NULL)",
            name="ck_comment_single_target",
        ),
    )
