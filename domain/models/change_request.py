"""
Community change-request model.
"""

from sqlalchemy import Column, Text, JSON, Boolean, DateTime, Uuid
from datetime import datetime
import uuid

from domain.models.database import Base
from domain.enums import RequestStatus


class ProductChangeRequest(Base):
    """
    Proposal to add, edit or delete a catalog product.

    Proposed values are a denormalized snapshot; ``product_id`` is a plain reference
    (no foreign key) so that the request survives the deletion it asked for.
    """

    __tablename__ = "product_change_request"

    request_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_type = Column(Text, nullable=False)
    request_status = Column(Text, nullable=False, default=RequestStatus.PENDING.value, index=True)
    requested_by = Column(Text, nullable=False, index=True)
    request_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    action_date = Column(DateTime)
    actioned_by = Column(Text)
    rejection_reason = Column(Text)

    # Proposed values (Add/Edit); Delete keeps name and country for display
    product_name = Column(Text)
    category = Column(Text)
    description = Column(Text)
    image_url = Column(Text)
    barcode = Column(Text)
    country = Column(Text)
    ingredients = Column(JSON, nullable=False, default=list)
    use_only_user_ingredients = Column(Boolean, nullable=False, default=False)

    # Edit/Delete target
    product_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    @property
    def is_pending(self) -> bool:
        return self.request_status == RequestStatus.PENDING.value

    def __repr__(self):
        return (
            f"<ProductChangeRequest(id={self.request_id}, type='{self.request_type}', "
            f"status='{self.request_status}')>"
        )
