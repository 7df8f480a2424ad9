"""
Change request service - moderation workflow for community product proposals.

A request is created Pending and moves once, by an admin, to Approved or
Rejected. Approving applies the proposal to the catalog in the same
transaction that records the approval.
"""

from typing import List, Optional, Sequence, Tuple
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from adapters import cache_adapter
from app.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ServiceValidationError,
)
from domain.enums import IngredientStatus, RequestStatus, RequestType
from domain.models import Ingredient, Product, ProductChangeRequest
from domain.schemas.actor_schemas import Actor
from domain.schemas.change_request_schemas import ChangeRequestCreate, ChangeRequestEdit
from domain.schemas.ingredient_schemas import IngredientInput
from repositories import ChangeRequestRepository, ProductRepository
from services.catalog_service import CatalogService, clean_names, clean_text
from services.classification_service import ClassificationService

logger = logging.getLogger("halalcheck.change_request")

DEFAULT_CATEGORY = "Unknown"
DEFAULT_DESCRIPTION = "No description provided"

# Product fields an Edit request may overwrite (request attribute, product attribute)
_EDITABLE_PRODUCT_FIELDS = (
    ("product_name", "name"),
    ("category", "category"),
    ("description", "description"),
    ("country", "country"),
    ("barcode", "barcode"),
    ("image_url", "image_url"),
)


class ChangeRequestService:
    # ------------------ Guards ------------------
    @staticmethod
    def _require_admin(actor: Actor, action: str) -> None:
        if not actor.is_admin:
            raise AuthorizationError(
                f"Only administrators may {action} change requests",
                details={"user": actor.username},
            )

    @staticmethod
    def _get_request(db: Session, request_id: UUID) -> ProductChangeRequest:
        request = ChangeRequestRepository(db).get_by_id(request_id)
        if not request:
            raise NotFoundError(f"Change request not found: {request_id}")
        return request

    @staticmethod
    def _require_pending(request: ProductChangeRequest) -> None:
        if not request.is_pending:
            raise ConflictError(
                "Request already processed",
                details={
                    "request_id": str(request.request_id),
                    "request_status": request.request_status,
                },
            )

    @staticmethod
    def _get_owned_product(db: Session, product_id: Optional[UUID], actor: Actor) -> Product:
        if product_id is None:
            raise ServiceValidationError("Product id is required")
        product = ProductRepository(db).get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product not found: {product_id}")
        if product.added_by != actor.username:
            raise AuthorizationError(
                "You can only request changes to products you added",
                details={"product_id": str(product_id)},
            )
        return product

    # ------------------ Submission ------------------
    @staticmethod
    def submit(
        db: Session, request_type, data: ChangeRequestCreate, actor: Actor
    ) -> ProductChangeRequest:
        """
        Submit a new Add, Edit or Delete request.

        Add needs a product name and a country. Edit needs the target product, a
        country and at least one proposed change; unchanged fields are copied from
        the product so the request keeps a snapshot of what was proposed. Delete
        needs the target product. Edit and Delete are only allowed for the user
        who added the product.

        Returns:
            ProductChangeRequest: the new Pending request

        Raises:
            ServiceValidationError: if the type is unknown or a required field is missing
            NotFoundError: if the target product does not exist
            AuthorizationError: if the requester does not own the target product
        """
        try:
            request_type = RequestType(request_type)
        except ValueError:
            raise ServiceValidationError(f"Unknown request type: {request_type}")

        request = ProductChangeRequest(
            request_type=request_type.value,
            request_status=RequestStatus.PENDING.value,
            requested_by=actor.username,
            request_date=datetime.utcnow(),
            use_only_user_ingredients=data.use_only_user_ingredients,
        )

        if request_type == RequestType.ADD:
            name, country = clean_text(data.product_name), clean_text(data.country)
            if not name or not country:
                raise ServiceValidationError("Product name and country are required")
            request.product_name = name
            request.country = country
            request.category = clean_text(data.category)
            request.description = clean_text(data.description)
            request.barcode = clean_text(data.barcode)
            request.image_url = clean_text(data.image_url)
            request.ingredients = clean_names(data.ingredients)

        elif request_type == RequestType.EDIT:
            country = clean_text(data.country)
            if data.product_id is None or not country:
                raise ServiceValidationError("Product id and country are required")
            if not data.has_proposed_change() and not data.use_only_user_ingredients:
                raise ServiceValidationError("At least one field must be changed")
            product = ChangeRequestService._get_owned_product(db, data.product_id, actor)

            request.product_id = product.product_id
            request.country = country
            request.product_name = clean_text(data.product_name) or product.name
            request.category = clean_text(data.category) or product.category
            request.description = clean_text(data.description) or product.description
            request.barcode = clean_text(data.barcode) or product.barcode
            request.image_url = clean_text(data.image_url) or product.image_url
            request.ingredients = clean_names(data.ingredients) or [
                i.name for i in product.ingredients
            ]

        else:
            product = ChangeRequestService._get_owned_product(db, data.product_id, actor)
            request.product_id = product.product_id
            request.product_name = product.name
            request.country = product.country
            request.ingredients = []

        try:
            ChangeRequestRepository(db).add(request)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error submitting %s request", request_type.value)
            raise

        cache_adapter.invalidate_pending_requests()
        logger.info(
            "%s request %s submitted by %s", request.request_type, request.request_id, actor.username
        )
        return request

    @staticmethod
    def edit_request(
        db: Session, request_id: UUID, changes: ChangeRequestEdit, actor: Actor
    ) -> ProductChangeRequest:
        """
        Overlay new values onto a pending request; fields left out keep their value.

        Raises:
            NotFoundError: if the request does not exist
            AuthorizationError: if the actor is not the requester
            ConflictError: if the request is no longer Pending
        """
        request = ChangeRequestService._get_request(db, request_id)
        if request.requested_by != actor.username:
            raise AuthorizationError("You can only edit your own requests")
        ChangeRequestService._require_pending(request)

        updates = changes.model_dump(exclude_unset=True)
        for field in ("product_name", "country", "category", "description", "barcode", "image_url"):
            value = clean_text(updates.get(field))
            if value is not None:
                setattr(request, field, value)
        if updates.get("ingredients") is not None:
            request.ingredients = clean_names(updates["ingredients"])
        if updates.get("use_only_user_ingredients") is not None:
            request.use_only_user_ingredients = updates["use_only_user_ingredients"]

        try:
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error editing request %s", request_id)
            raise

        cache_adapter.invalidate_pending_requests()
        logger.info("Request %s edited by %s", request_id, actor.username)
        return request

    # ------------------ Moderation ------------------
    @staticmethod
    def verify_ingredients(
        db: Session,
        request_id: UUID,
        actor: Actor,
        classifier: ClassificationService,
    ) -> List[Ingredient]:
        """
        Classify the ingredients of a pending request for admin review.

        With ``use_only_user_ingredients`` and a user list, only that list is
        classified. Otherwise the product itself is classified; a user list, if
        present, is classified and saved too, but only the product's list is
        returned. The request itself is not modified.
        """
        ChangeRequestService._require_admin(actor, "verify")
        request = ChangeRequestService._get_request(db, request_id)
        ChangeRequestService._require_pending(request)
        if request.request_type == RequestType.DELETE.value:
            raise ServiceValidationError("Delete requests have no ingredients to verify")

        user_ingredients = clean_names(request.ingredients)
        if request.use_only_user_ingredients and user_ingredients:
            logger.info("Verifying %d user ingredients of request %s", len(user_ingredients), request_id)
            return classifier.classify_by_name_list(db, user_ingredients, request.country)

        verified = classifier.classify_by_name_or_barcode(
            db, request.product_name, request.barcode, request.country
        )
        if user_ingredients:
            classifier.classify_by_name_list(db, user_ingredients, request.country)
        logger.info("Verified %d ingredients for request %s", len(verified), request_id)
        return verified

    @staticmethod
    def approve(
        db: Session,
        request_id: UUID,
        actor: Actor,
        final_ingredients: Sequence[IngredientInput],
    ) -> Tuple[ProductChangeRequest, Optional[Product]]:
        """
        Apply a pending request to the catalog and mark it Approved.

        The catalog change and the status transition commit together; on any
        failure everything is rolled back and the request stays Pending.

        Returns:
            (request, product) where product is None for Delete requests

        Raises:
            AuthorizationError: if the actor is not an admin
            NotFoundError: if the request or the target product does not exist
            ConflictError: if the request was already processed or the product name is taken
        """
        ChangeRequestService._require_admin(actor, "approve")
        request = ChangeRequestService._get_request(db, request_id)
        ChangeRequestService._require_pending(request)

        product_repo = ProductRepository(db)
        product = None
        try:
            if request.request_type == RequestType.ADD.value:
                name = request.product_name or f"Product_{uuid4().hex[:8]}"
                if product_repo.get_by_name(name):
                    raise ConflictError(f"A product named '{name}' already exists")
                product = product_repo.add(
                    Product(
                        name=name,
                        status=IngredientStatus.UNKNOWN.value,
                        category=request.category or DEFAULT_CATEGORY,
                        description=request.description or DEFAULT_DESCRIPTION,
                        country=request.country,
                        barcode=request.barcode,
                        image_url=request.image_url,
                        added_by=request.requested_by,
                        verified_by=actor.username,
                    )
                )
                CatalogService.link_ingredients(db, product, final_ingredients)
                ClassificationService.evaluate_product_status(db, product.product_id, commit=False)
                request.product_id = product.product_id

            elif request.request_type == RequestType.EDIT.value:
                product = product_repo.get_by_id(request.product_id)
                if not product:
                    raise NotFoundError(f"Product not found: {request.product_id}")
                for request_field, product_field in _EDITABLE_PRODUCT_FIELDS:
                    value = clean_text(getattr(request, request_field))
                    if value:
                        setattr(product, product_field, value)
                product.verified_by = actor.username
                CatalogService.replace_links(db, product, final_ingredients)
                ClassificationService.evaluate_product_status(db, product.product_id, commit=False)

            else:
                target = product_repo.get_by_id(request.product_id)
                if not target:
                    raise NotFoundError(f"Product not found: {request.product_id}")
                CatalogService.remove_links(db, target)
                product_repo.delete(target)

            request.request_status = RequestStatus.APPROVED.value
            request.action_date = datetime.utcnow()
            request.actioned_by = actor.username
            db.commit()
        except ServiceError:
            db.rollback()
            logger.warning("Approval of request %s failed, rolled back", request_id)
            raise
        except IntegrityError as e:
            db.rollback()
            logger.warning("Approval of request %s conflicted: %s", request_id, e.orig)
            raise ConflictError(
                "Catalog changed while approving the request, please retry",
                details={"request_id": str(request_id)},
            ) from e
        except Exception:
            db.rollback()
            logger.exception("Error approving request %s", request_id)
            raise

        cache_adapter.invalidate_pending_requests()
        cache_adapter.invalidate_products()
        logger.info(
            "%s request %s approved by %s", request.request_type, request_id, actor.username
        )
        return request, product

    @staticmethod
    def reject(db: Session, request_id: UUID, actor: Actor, reason: str) -> ProductChangeRequest:
        """Reject a pending request; a reason is mandatory."""
        ChangeRequestService._require_admin(actor, "reject")
        reason = clean_text(reason)
        if not reason:
            raise ServiceValidationError("Rejection reason is required")
        request = ChangeRequestService._get_request(db, request_id)
        ChangeRequestService._require_pending(request)

        request.request_status = RequestStatus.REJECTED.value
        request.rejection_reason = reason
        request.action_date = datetime.utcnow()
        request.actioned_by = actor.username
        try:
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error rejecting request %s", request_id)
            raise

        cache_adapter.invalidate_pending_requests()
        logger.info("Request %s rejected by %s", request_id, actor.username)
        return request

    # ------------------ Queries ------------------
    @staticmethod
    def get_all(db: Session) -> List[ProductChangeRequest]:
        return ChangeRequestRepository(db).get_all()

    @staticmethod
    def get_pending(db: Session) -> List[ProductChangeRequest]:
        return ChangeRequestRepository(db).get_by_status(RequestStatus.PENDING.value)

    @staticmethod
    def get_by_requester(db: Session, username: str) -> List[ProductChangeRequest]:
        return ChangeRequestRepository(db).get_by_requester(username)

    @staticmethod
    def get_by_id(db: Session, request_id: UUID, actor: Actor) -> ProductChangeRequest:
        """Request details, visible to the requester and to admins."""
        request = ChangeRequestService._get_request(db, request_id)
        if request.requested_by != actor.username and not actor.is_admin:
            raise AuthorizationError("You are not allowed to view this request")
        return request
