"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session

from adapters import TextGenerationClient
from domain.models import get_db_session
from domain.schemas.actor_schemas import Actor
from services.classification_service import ClassificationService


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_classification_service() -> ClassificationService:
    """Classification service wired to the configured text-generation endpoint"""
    return ClassificationService(TextGenerationClient.from_settings())


def get_actor(
    x_user_name: Optional[str] = Header(None),
    x_user_roles: Optional[str] = Header(None),
) -> Actor:
    """
    Resolve the calling user from headers set by the authenticating gateway.

    ``X-User-Name`` carries the username and ``X-User-Roles`` a comma-separated
    role list.
    """
    if not x_user_name or not x_user_name.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Name header",
        )
    roles = [r.strip() for r in (x_user_roles or "").split(",") if r.strip()]
    return Actor(username=x_user_name.strip(), roles=roles)
