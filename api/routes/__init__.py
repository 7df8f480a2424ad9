"""API routes package"""

from . import health, catalog, classification, change_requests, polls, comments

__all__ = ["health", "catalog", "classification", "change_requests", "polls", "comments"]
