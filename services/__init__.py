"""
Services package - Business logic layer.
"""

from services.catalog_service import CatalogService
from services.classification_service import ClassificationService
from services.change_request_service import ChangeRequestService
from services.poll_service import PollService
from services.comment_service import CommentService
from services.status_aggregator import aggregate_status
from services.ingredient_text_parser import parse_ingredients

__all__ = [
    "CatalogService",
    "ClassificationService",
    "ChangeRequestService",
    "PollService",
    "CommentService",
    "aggregate_status",
    "parse_ingredients",
]
