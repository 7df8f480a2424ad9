"""
Poll Repository - Data access layer for polls and votes
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Poll, Vote
from repositories.base import BaseRepository


class PollRepository(BaseRepository[Poll]):
    """Repository for polls"""

    def __init__(self, db: Session):
        super().__init__(db, Poll)

    def get_active_for_product(self, product_id: UUID) -> List[Poll]:
        return (
            self.db.query(Poll)
            .filter(Poll.product_id == product_id, Poll.is_active.is_(True))
            .all()
        )

    def get_active_for_ingredient(self, ingredient_id: UUID) -> List[Poll]:
        return (
            self.db.query(Poll)
            .filter(Poll.ingredient_id == ingredient_id, Poll.is_active.is_(True))
            .all()
        )


class VoteRepository(BaseRepository[Vote]):
    """Repository for votes"""

    def __init__(self, db: Session):
        super().__init__(db, Vote)

    def get_vote(self, poll_id: UUID, user_id: str) -> Optional[Vote]:
        """The vote a user cast in a poll, if any"""
        return (
            self.db.query(Vote)
            .filter(Vote.poll_id == poll_id, Vote.user_id == user_id)
            .first()
        )

    def get_votes(self, poll_id: UUID) -> List[Vote]:
        """Votes of a poll in casting order"""
        return (
            self.db.query(Vote)
            .filter(Vote.poll_id == poll_id)
            .order_by(Vote.voted_at, Vote.vote_id)
            .all()
        )
