"""
Domain enums for HalalCheck.
Contains all enumeration types used across the domain models.
"""

import enum


class IngredientStatus(str, enum.Enum):
    """Dietary classification of an ingredient or product"""

    HALAL = "Halal"
    HARAM = "Haram"
    MUSHBOOH = "Mushbooh"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> "IngredientStatus":
        """Case-insensitive lookup; anything unrecognised maps to UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNKNOWN
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.UNKNOWN


# Statuses a vote or a parsed text line may carry
CLASSIFIED_STATUSES = (
    IngredientStatus.HALAL,
    IngredientStatus.HARAM,
    IngredientStatus.MUSHBOOH,
)


class RequestType(str, enum.Enum):
    """Kind of community change request"""

    ADD = "Add"
    EDIT = "Edit"
    DELETE = "Delete"


class RequestStatus(str, enum.Enum):
    """Moderation state of a change request"""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PollTarget(str, enum.Enum):
    """What a community poll or comment refers to"""

    PRODUCT = "Product"
    INGREDIENT = "Ingredient"
