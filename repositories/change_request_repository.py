"""
Change Request Repository - Data access layer for community product proposals
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import ProductChangeRequest
from repositories.base import BaseRepository


class ChangeRequestRepository(BaseRepository[ProductChangeRequest]):
    """Repository for product change requests"""

    def __init__(self, db: Session):
        super().__init__(db, ProductChangeRequest)

    def get_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ProductChangeRequest]:
        """All requests, newest first"""
        query = (
            self.db.query(ProductChangeRequest)
            .order_by(ProductChangeRequest.request_date.desc())
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_status(self, status: str) -> List[ProductChangeRequest]:
        return (
            self.db.query(ProductChangeRequest)
            .filter(ProductChangeRequest.request_status == status)
            .order_by(ProductChangeRequest.request_date.desc())
            .all()
        )

    def get_by_requester(self, username: str) -> List[ProductChangeRequest]:
        return (
            self.db.query(ProductChangeRequest)
            .filter(ProductChangeRequest.requested_by == username)
            .order_by(ProductChangeRequest.request_date.desc())
            .all()
        )
