"""
Poll service - community polls on product and ingredient classifications.

A vote immediately recomputes the target's status by plurality. For an
ingredient poll, every product containing the ingredient is then re-evaluated
from its ingredients; products never take a vote result directly from an
ingredient poll.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from adapters import cache_adapter
from app.exceptions import ConflictError, NotFoundError, ServiceError, ServiceValidationError
from domain.enums import CLASSIFIED_STATUSES, IngredientStatus, PollTarget
from domain.models import Poll, Vote
from domain.schemas.poll_schemas import PollResults
from repositories import (
    IngredientRepository,
    PollRepository,
    ProductRepository,
    VoteRepository,
)
from services.classification_service import ClassificationService

logger = logging.getLogger("halalcheck.poll")


def plurality_status(votes: Sequence[Vote]) -> Optional[str]:
    """Most voted status; on a tie the status voted first wins."""
    if not votes:
        return None
    # Counter keeps insertion order, and most_common is stable for equal counts
    counts = Counter(vote.status for vote in votes)
    return counts.most_common(1)[0][0]


class PollService:
    @staticmethod
    def create_poll(
        db: Session,
        product_id: Optional[UUID] = None,
        ingredient_id: Optional[UUID] = None,
        days_valid: int = 7,
    ) -> Poll:
        """
        Open a poll on exactly one product or one ingredient.

        Raises:
            ServiceValidationError: if not exactly one target is given or days_valid < 1
            NotFoundError: if the target does not exist
        """
        if (product_id is None) == (ingredient_id is None):
            raise ServiceValidationError("A poll targets exactly one product or one ingredient")
        if days_valid < 1:
            raise ServiceValidationError("days_valid must be at least 1")

        if product_id is not None:
            if not ProductRepository(db).exists(product_id):
                raise NotFoundError(f"Product not found: {product_id}")
            target_type = PollTarget.PRODUCT
        else:
            if not IngredientRepository(db).exists(ingredient_id):
                raise NotFoundError(f"Ingredient not found: {ingredient_id}")
            target_type = PollTarget.INGREDIENT

        now = datetime.utcnow()
        poll = Poll(
            target_type=target_type.value,
            product_id=product_id,
            ingredient_id=ingredient_id,
            created_at=now,
            expires_at=now + timedelta(days=days_valid),
            is_active=True,
        )
        try:
            PollRepository(db).add(poll)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error creating poll")
            raise

        logger.info("Opened %s poll %s until %s", target_type.value, poll.poll_id, poll.expires_at)
        return poll

    @staticmethod
    def _get_poll(db: Session, poll_id: UUID) -> Poll:
        poll = PollRepository(db).get_by_id(poll_id)
        if not poll:
            raise NotFoundError(f"Poll not found: {poll_id}")
        return poll

    @staticmethod
    def cast_vote(db: Session, poll_id: UUID, user_id: str, status) -> Vote:
        """
        Record one user's vote and recompute the poll target's status.

        Args:
            db: Database session
            poll_id: poll to vote in
            user_id: voting user
            status: Halal, Haram or Mushbooh (case-insensitive)

        Returns:
            Vote: the recorded vote

        Raises:
            NotFoundError: if the poll does not exist
            ConflictError: if the poll is closed or expired, or the user already voted
            ServiceValidationError: if the status is not a votable classification
        """
        poll = PollService._get_poll(db, poll_id)
        if not poll.is_open(datetime.utcnow()):
            raise ConflictError(
                "Poll is closed or has expired", details={"poll_id": str(poll_id)}
            )

        parsed = IngredientStatus.parse(status)
        if parsed not in CLASSIFIED_STATUSES:
            raise ServiceValidationError(
                f"Invalid vote status: {status}",
                details={"allowed": [s.value for s in CLASSIFIED_STATUSES]},
            )

        vote_repo = VoteRepository(db)
        if vote_repo.get_vote(poll_id, user_id):
            raise ConflictError(
                "User has already voted in this poll",
                details={"poll_id": str(poll_id), "user_id": user_id},
            )

        try:
            vote = vote_repo.add(
                Vote(
                    poll_id=poll.poll_id,
                    user_id=user_id,
                    status=parsed.value,
                    voted_at=datetime.utcnow(),
                )
            )
            PollService._recalculate(db, poll)
            db.commit()
        except ServiceError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(
                "User has already voted in this poll",
                details={"poll_id": str(poll_id), "user_id": user_id},
            ) from e
        except Exception:
            db.rollback()
            logger.exception("Error casting vote in poll %s", poll_id)
            raise

        cache_adapter.invalidate_products()
        logger.info("User %s voted %s in poll %s", user_id, parsed.value, poll_id)
        return vote

    @staticmethod
    def _recalculate(db: Session, poll: Poll) -> None:
        status = plurality_status(VoteRepository(db).get_votes(poll.poll_id))
        if status is None:
            return

        if poll.target_type == PollTarget.PRODUCT.value:
            product = ProductRepository(db).get_by_id(poll.product_id)
            if not product:
                raise NotFoundError(f"Product not found: {poll.product_id}")
            product.status = status
            db.flush()
            logger.info("Product %s set to %s by poll %s", product.name, status, poll.poll_id)
            return

        ingredient_repo = IngredientRepository(db)
        ingredient = ingredient_repo.get_by_id(poll.ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {poll.ingredient_id}")
        ingredient.status = status
        db.flush()

        product_ids = ingredient_repo.get_product_ids_using(ingredient.ingredient_id)
        for product_id in product_ids:
            ClassificationService.evaluate_product_status(db, product_id, commit=False)
        logger.info(
            "Ingredient %s set to %s by poll %s, re-evaluated %d products",
            ingredient.name,
            status,
            poll.poll_id,
            len(product_ids),
        )

    @staticmethod
    def close_poll(db: Session, poll_id: UUID) -> Poll:
        poll = PollService._get_poll(db, poll_id)
        poll.is_active = False
        try:
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error closing poll %s", poll_id)
            raise
        logger.info("Closed poll %s", poll_id)
        return poll

    @staticmethod
    def delete_poll(db: Session, poll_id: UUID) -> None:
        """Remove a poll and its votes; statuses already set by the poll are kept."""
        poll = PollService._get_poll(db, poll_id)
        try:
            PollRepository(db).delete(poll)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error deleting poll %s", poll_id)
            raise
        logger.info("Deleted poll %s", poll_id)

    @staticmethod
    def get_active_polls(
        db: Session,
        product_id: Optional[UUID] = None,
        ingredient_id: Optional[UUID] = None,
    ) -> List[Poll]:
        """Active polls on one product or one ingredient"""
        if (product_id is None) == (ingredient_id is None):
            raise ServiceValidationError("Filter by exactly one product or one ingredient")
        repo = PollRepository(db)
        if product_id is not None:
            return repo.get_active_for_product(product_id)
        return repo.get_active_for_ingredient(ingredient_id)

    @staticmethod
    def get_poll_results(db: Session, poll_id: UUID) -> PollResults:
        poll = PollService._get_poll(db, poll_id)
        votes = VoteRepository(db).get_votes(poll.poll_id)
        counts = {s.value: 0 for s in CLASSIFIED_STATUSES}
        for vote in votes:
            counts[vote.status] = counts.get(vote.status, 0) + 1
        return PollResults(
            poll_id=poll.poll_id,
            total_votes=len(votes),
            counts=counts,
            leading_status=plurality_status(votes),
        )
