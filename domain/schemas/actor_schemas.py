from pydantic import BaseModel, Field
from typing import List

from app.config import settings


class Actor(BaseModel):
    """Authenticated caller as resolved by the boundary layer"""

    username: str = Field(..., min_length=1)
    roles: List[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return settings.admin_role in self.roles
