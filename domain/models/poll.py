"""
Community poll and vote models.
"""

from sqlalchemy import (
    Column,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from domain.models.database import Base


class Poll(Base):
    """Poll on the classification of exactly one product or one ingredient"""

    __tablename__ = "poll"

    poll_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    target_type = Column(Text, nullable=False)  # Product | Ingredient
    product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.product_id", ondelete="CASCADE"),
        nullable=True,
    )
    ingredient_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("ingredient.ingredient_id", ondelete="CASCADE"),
        nullable=True,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    votes = relationship("Vote", back_populates="poll", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "(product_id IS NULL) <> (ingredient_id IS NULL)",
            name="ck_poll_single_target",
        ),
    )

    def is_open(self, now: datetime) -> bool:
        return bool(self.is_active) and self.expires_at > now


class Vote(Base):
    """One user's vote in a poll"""

    __tablename__ = "vote"

    vote_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    poll_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("poll.poll_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
    voted_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    poll = relationship("Poll", back_populates="votes")

    __table_args__ = (UniqueConstraint("poll_id", "user_id", name="uq_vote_poll_user"),)
