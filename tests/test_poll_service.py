"""
Tests for community polls and vote recalculation.
"""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from test_fixtures import db_session, make_ingredient, make_product
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import IngredientStatus
from domain.models import Ingredient, Product, Vote
from services.poll_service import PollService, plurality_status


# =============================================================================
# POLL LIFECYCLE
# =============================================================================


def test_create_product_poll(db_session: Session):
    product = make_product(db_session)

    poll = PollService.create_poll(db_session, product_id=product.product_id, days_valid=3)

    assert poll.target_type == "Product"
    assert poll.is_active is True
    assert timedelta(days=2, hours=23) < poll.expires_at - poll.created_at <= timedelta(days=3)


def test_create_poll_needs_exactly_one_target(db_session: Session):
    product = make_product(db_session)
    ingredient = make_ingredient(db_session, "Gelatin")

    with pytest.raises(ServiceValidationError):
        PollService.create_poll(db_session)
    with pytest.raises(ServiceValidationError):
        PollService.create_poll(
            db_session, product_id=product.product_id, ingredient_id=ingredient.ingredient_id
        )


def test_create_poll_missing_target(db_session: Session):
    with pytest.raises(NotFoundError):
        PollService.create_poll(db_session, ingredient_id=uuid.uuid4())


def test_close_poll(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)

    closed = PollService.close_poll(db_session, poll.poll_id)

    assert closed.is_active is False


def test_delete_poll_removes_votes_keeps_status(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)
    PollService.cast_vote(db_session, poll.poll_id, "voter-1", "Haram")

    PollService.delete_poll(db_session, poll.poll_id)

    assert db_session.query(Vote).count() == 0
    assert db_session.get(Product, product.product_id).status == "Haram"
    with pytest.raises(NotFoundError):
        PollService.get_poll_results(db_session, poll.poll_id)
    with pytest.raises(NotFoundError):
        PollService.delete_poll(db_session, poll.poll_id)


def test_active_polls_exclude_closed(db_session: Session):
    ingredient = make_ingredient(db_session, "Gelatin")
    first = PollService.create_poll(db_session, ingredient_id=ingredient.ingredient_id)
    second = PollService.create_poll(db_session, ingredient_id=ingredient.ingredient_id)
    PollService.close_poll(db_session, first.poll_id)

    active = PollService.get_active_polls(db_session, ingredient_id=ingredient.ingredient_id)

    assert [p.poll_id for p in active] == [second.poll_id]
    with pytest.raises(ServiceValidationError):
        PollService.get_active_polls(db_session)


# =============================================================================
# VOTING
# =============================================================================


def test_product_poll_sets_plurality_status(db_session: Session):
    product = make_product(db_session, status=IngredientStatus.UNKNOWN)
    poll = PollService.create_poll(db_session, product_id=product.product_id)

    PollService.cast_vote(db_session, poll.poll_id, "u1", "Haram")
    PollService.cast_vote(db_session, poll.poll_id, "u2", "halal")
    PollService.cast_vote(db_session, poll.poll_id, "u3", "Halal")

    assert db_session.get(Product, product.product_id).status == "Halal"


def test_vote_status_is_stored_canonically(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)

    vote = PollService.cast_vote(db_session, poll.poll_id, "u1", "mushbooh")

    assert vote.status == "Mushbooh"


def test_duplicate_vote_is_conflict(db_session: Session):
    """
    Test the one-vote-per-user rule.

    Verifies:
    - Second vote by the same user raises ConflictError
    - Only the first vote is stored
    - The status set by the first vote is unchanged
    """
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)
    PollService.cast_vote(db_session, poll.poll_id, "u1", "Haram")

    with pytest.raises(ConflictError):
        PollService.cast_vote(db_session, poll.poll_id, "u1", "Halal")

    assert db_session.query(Vote).count() == 1
    assert db_session.get(Product, product.product_id).status == "Haram"


@pytest.mark.parametrize("status", ["Unknown", "Kosher", ""])
def test_invalid_vote_status(db_session: Session, status):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)

    with pytest.raises(ServiceValidationError):
        PollService.cast_vote(db_session, poll.poll_id, "u1", status)
    assert db_session.query(Vote).count() == 0


def test_vote_on_closed_poll(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)
    PollService.close_poll(db_session, poll.poll_id)

    with pytest.raises(ConflictError):
        PollService.cast_vote(db_session, poll.poll_id, "u1", "Halal")


def test_vote_on_expired_poll(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)
    poll.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()

    with pytest.raises(ConflictError):
        PollService.cast_vote(db_session, poll.poll_id, "u1", "Halal")


def test_vote_on_missing_poll(db_session: Session):
    with pytest.raises(NotFoundError):
        PollService.cast_vote(db_session, uuid.uuid4(), "u1", "Halal")


def test_ingredient_poll_cascades_to_products(db_session: Session):
    """
    Test that an ingredient vote re-evaluates every product containing it.

    Verifies:
    - The ingredient takes the plurality status
    - Products are recomputed from all their ingredients, not set to the vote
    - Products without the ingredient are untouched
    """
    gelatin = make_ingredient(db_session, "Gelatin", IngredientStatus.HALAL)
    sugar = make_ingredient(db_session, "Sugar", IngredientStatus.HALAL)
    carmine = make_ingredient(db_session, "Carmine", IngredientStatus.HARAM)
    gummies = make_product(db_session, name="Gummies", ingredients=[gelatin, sugar], status=IngredientStatus.HALAL)
    jelly = make_product(db_session, name="Red Jelly", ingredients=[gelatin, carmine], status=IngredientStatus.HARAM)
    biscuit = make_product(db_session, name="Biscuit", ingredients=[sugar], status=IngredientStatus.HALAL)
    poll = PollService.create_poll(db_session, ingredient_id=gelatin.ingredient_id)

    PollService.cast_vote(db_session, poll.poll_id, "u1", "Mushbooh")

    assert db_session.get(Ingredient, gelatin.ingredient_id).status == "Mushbooh"
    assert db_session.get(Product, gummies.product_id).status == "Mushbooh"
    assert db_session.get(Product, jelly.product_id).status == "Haram"
    assert db_session.get(Product, biscuit.product_id).status == "Halal"


# =============================================================================
# RESULTS
# =============================================================================


def test_poll_results(db_session: Session):
    product = make_product(db_session)
    poll = PollService.create_poll(db_session, product_id=product.product_id)
    PollService.cast_vote(db_session, poll.poll_id, "u1", "Haram")
    PollService.cast_vote(db_session, poll.poll_id, "u2", "Haram")
    PollService.cast_vote(db_session, poll.poll_id, "u3", "Halal")

    results = PollService.get_poll_results(db_session, poll.poll_id)

    assert results.total_votes == 3
    assert results.counts == {"Halal": 1, "Haram": 2, "Mushbooh": 0}
    assert results.leading_status == "Haram"


def test_plurality_tie_goes_to_first_seen_status():
    base = datetime(2026, 1, 1, 12, 0, 0)
    votes = [
        Vote(user_id="u1", status="Mushbooh", voted_at=base),
        Vote(user_id="u2", status="Halal", voted_at=base + timedelta(seconds=1)),
        Vote(user_id="u3", status="Halal", voted_at=base + timedelta(seconds=2)),
        Vote(user_id="u4", status="Mushbooh", voted_at=base + timedelta(seconds=3)),
    ]

    assert plurality_status(votes) == "Mushbooh"


def test_plurality_of_no_votes():
    assert plurality_status([]) is None
