"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.actor_schemas import Actor
from domain.schemas.ingredient_schemas import (
    ParsedIngredient,
    IngredientInput,
    ClassifyProductRequest,
    ClassifyIngredientsRequest,
    IngredientResponse,
)
from domain.schemas.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductEvaluation,
)
from domain.schemas.change_request_schemas import (
    ChangeRequestCreate,
    ChangeRequestEdit,
    ApproveRequest,
    RejectRequest,
    ChangeRequestResponse,
    ApprovalResult,
)
from domain.schemas.poll_schemas import (
    PollCreate,
    VoteCreate,
    PollResponse,
    VoteResponse,
    PollResults,
)
from domain.schemas.comment_schemas import CommentCreate, CommentResponse

__all__ = [
    "Actor",
    # Ingredient schemas
    "ParsedIngredient",
    "IngredientInput",
    "ClassifyProductRequest",
    "ClassifyIngredientsRequest",
    "IngredientResponse",
    # Product schemas
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductEvaluation",
    # Change request schemas
    "ChangeRequestCreate",
    "ChangeRequestEdit",
    "ApproveRequest",
    "RejectRequest",
    "ChangeRequestResponse",
    "ApprovalResult",
    # Poll schemas
    "PollCreate",
    "VoteCreate",
    "PollResponse",
    "VoteResponse",
    "PollResults",
    # Comment schemas
    "CommentCreate",
    "CommentResponse",
]
