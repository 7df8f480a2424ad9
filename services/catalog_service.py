"""Catalog service - product and ingredient reads, admin product writes and ingredient linking."""

from typing import Iterable, List, Optional, Sequence
from uuid import UUID
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
    UpstreamFormatError,
    UpstreamServiceError,
)
from domain.enums import IngredientStatus
from domain.models import Ingredient, Product
from domain.schemas.actor_schemas import Actor
from domain.schemas.ingredient_schemas import IngredientInput
from domain.schemas.product_schemas import ProductCreate, ProductUpdate
from repositories import (
    IngredientRepository,
    ProductRepository,
    ProductIngredientRepository,
)
from services.classification_service import ClassificationService
from services.country_scope import initial_country_lists

logger = logging.getLogger("halalcheck.catalog")


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def clean_names(names: Optional[Sequence[str]]) -> List[str]:
    return [n.strip() for n in (names or []) if n and n.strip()]


class CatalogService:
    """Catalog reads, admin product writes and the ingredient link operations they share."""

    # ------------------ Products ------------------
    @staticmethod
    def get_products(db: Session) -> List[Product]:
        return ProductRepository(db).get_all()

    @staticmethod
    def get_product(db: Session, product_id: UUID) -> Product:
        product = ProductRepository(db).get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    @staticmethod
    def product_exists(db: Session, product_id: UUID) -> bool:
        return ProductRepository(db).exists(product_id)

    @staticmethod
    def search_products(
        db: Session,
        name: Optional[str] = None,
        categories: Optional[List[str]] = None,
        country: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Product]:
        """
        Filter products by name substring, category set, country and status.

        Status filters are matched on the canonical spelling, so ``"halal"`` finds Halal products.
        """
        if status:
            status = IngredientStatus.parse(status).value
        return ProductRepository(db).search(
            name=name, categories=categories, country=country, status=status
        )

    @staticmethod
    def get_categories(db: Session) -> List[str]:
        return ProductRepository(db).get_categories()

    @staticmethod
    def get_countries(db: Session) -> List[str]:
        return ProductRepository(db).get_countries()

    # ------------------ Admin product writes ------------------
    @staticmethod
    def _require_admin(actor: Actor, action: str) -> None:
        if not actor.is_admin:
            raise AuthorizationError(f"Only administrators may {action} products")

    @staticmethod
    def _ingredient_items(
        db: Session,
        names: Optional[Sequence[str]],
        use_ai: bool,
        barcode: Optional[str],
        country: str,
        classifier: Optional[ClassificationService],
    ) -> List[IngredientInput]:
        """
        Ingredients for an admin write, either classified by barcode or taken from ``names``.

        A failing text service is not fatal: the product is saved without
        ingredients. Names not yet in the catalog are added as Mushbooh.
        """
        if not use_ai:
            return [
                IngredientInput(name=name, status=IngredientStatus.MUSHBOOH)
                for name in clean_names(names)
            ]

        if classifier is None:
            raise ServiceValidationError("Ingredient classification is not available")
        try:
            classified = classifier.classify_by_name_or_barcode(db, None, barcode, country)
        except (UpstreamServiceError, UpstreamFormatError) as exc:
            logger.warning(
                "Classification of barcode %s failed, saving without ingredients: %s",
                barcode,
                exc.message,
            )
            return []
        return [IngredientInput(ingredient_id=i.ingredient_id, name=i.name) for i in classified]

    @staticmethod
    def create_product(
        db: Session,
        data: ProductCreate,
        actor: Actor,
        classifier: Optional[ClassificationService] = None,
    ) -> Product:
        """
        Add a product straight to the catalog.

        With ``use_ai`` the ingredients come from classifying the barcode; otherwise
        the supplied names are linked. The status is then derived from the linked
        ingredients (Unknown when there are none).

        Raises:
            AuthorizationError: if the actor is not an admin
            ServiceValidationError: if a required field is blank or ``use_ai`` has no barcode
            ConflictError: if a product with the same name exists
        """
        CatalogService._require_admin(actor, "add")
        name, country = clean_text(data.name), clean_text(data.country)
        description, category = clean_text(data.description), clean_text(data.category)
        if not (name and country and description and category):
            raise ServiceValidationError(
                "Product name, country, description and category are required"
            )
        barcode = clean_text(data.barcode)
        if data.use_ai and not barcode:
            raise ServiceValidationError("A barcode is required for ingredient classification")

        product_repo = ProductRepository(db)
        if product_repo.get_by_name(name):
            raise ConflictError(f"A product named '{name}' already exists")

        # Classification commits, nothing may be staged before it
        items = CatalogService._ingredient_items(
            db, data.ingredients, data.use_ai, barcode, country, classifier
        )
        try:
            product = product_repo.add(
                Product(
                    name=name,
                    status=IngredientStatus.UNKNOWN.value,
                    category=category,
                    description=description,
                    country=country,
                    barcode=barcode,
                    image_url=clean_text(data.image_url),
                    added_by=actor.username,
                    verified_by=actor.username,
                )
            )
            CatalogService.link_ingredients(db, product, items, country)
            ClassificationService.evaluate_product_status(db, product.product_id, commit=False)
            db.commit()
        except ServiceError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(f"A product named '{name}' already exists") from e
        except Exception:
            db.rollback()
            logger.exception("Error creating product %s", name)
            raise

        cache_adapter.invalidate_products()
        logger.info(
            "Product %s added by %s with %d ingredients (%s)",
            product.name,
            actor.username,
            len(items),
            product.status,
        )
        return product

    @staticmethod
    def update_product(
        db: Session,
        product_id: UUID,
        data: ProductUpdate,
        actor: Actor,
        classifier: Optional[ClassificationService] = None,
    ) -> Product:
        """
        Overwrite a product's details.

        Category, barcode and image keep their current value when left blank.
        Ingredient links are replaced only when ``use_ai`` is set or names are
        supplied; the status is then re-derived.

        Raises:
            AuthorizationError: if the actor is not an admin
            NotFoundError: if the product does not exist
            ServiceValidationError: if a required field is blank or ``use_ai`` has no barcode
            ConflictError: if another product already has the new name
        """
        CatalogService._require_admin(actor, "edit")
        product = CatalogService.get_product(db, product_id)
        name, country = clean_text(data.name), clean_text(data.country)
        description = clean_text(data.description)
        if not (name and country and description):
            raise ServiceValidationError("Product name, country and description are required")
        barcode = clean_text(data.barcode) or product.barcode
        if data.use_ai and not barcode:
            raise ServiceValidationError("A barcode is required for ingredient classification")

        other = ProductRepository(db).get_by_name(name)
        if other and other.product_id != product.product_id:
            raise ConflictError(f"A product named '{name}' already exists")

        names = clean_names(data.ingredients)
        replace = data.use_ai or bool(names)
        items = []
        if replace:
            items = CatalogService._ingredient_items(
                db, names, data.use_ai, barcode, country, classifier
            )
        try:
            product.name = name
            product.country = country
            product.description = description
            product.category = clean_text(data.category) or product.category
            product.barcode = barcode
            product.image_url = clean_text(data.image_url) or product.image_url
            product.verified_by = actor.username
            if replace:
                CatalogService.replace_links(db, product, items, country)
                ClassificationService.evaluate_product_status(
                    db, product.product_id, commit=False
                )
            db.commit()
        except ServiceError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(f"A product named '{name}' already exists") from e
        except Exception:
            db.rollback()
            logger.exception("Error updating product %s", product_id)
            raise

        cache_adapter.invalidate_products()
        logger.info("Product %s updated by %s", product_id, actor.username)
        return product

    @staticmethod
    def delete_product(db: Session, product_id: UUID, actor: Actor) -> None:
        """Remove a product with its ingredient links, polls and comments."""
        CatalogService._require_admin(actor, "delete")
        product = CatalogService.get_product(db, product_id)
        try:
            CatalogService.remove_links(db, product)
            ProductRepository(db).delete(product)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Error deleting product %s", product_id)
            raise

        cache_adapter.invalidate_products()
        logger.info("Product %s deleted by %s", product_id, actor.username)

    # ------------------ Ingredients ------------------
    @staticmethod
    def get_ingredients(db: Session, query: Optional[str] = None) -> List[Ingredient]:
        repo = IngredientRepository(db)
        if query:
            return repo.search_by_name(query)
        return repo.get_all()

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: UUID) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient not found: {ingredient_id}")
        return ingredient

    @staticmethod
    def resolve_ingredient(
        db: Session, item: IngredientInput, country: Optional[str] = None
    ) -> Ingredient:
        """
        Find an ingredient by id or case-insensitive name, creating it when absent.

        New ingredients default to status Unknown, E-code "N/A" and the name as
        description; ``country``, when given, is recorded in the list matching the
        status. Existing rows are returned unchanged. Nothing is committed.
        """
        repo = IngredientRepository(db)
        name = (item.name or "").strip()
        if not name:
            raise ServiceValidationError("Ingredient name must not be blank")
        ingredient = repo.get_by_id(item.ingredient_id) if item.ingredient_id else None
        if ingredient is None:
            ingredient = repo.get_by_name(name)
        if ingredient:
            return ingredient

        status = item.status or IngredientStatus.UNKNOWN
        halal_in, haram_in, mushbooh_in = initial_country_lists(country, status)
        ingredient = repo.add(
            Ingredient(
                name=name,
                status=status.value,
                e_code=(item.e_code or "").strip() or "N/A",
                description=(item.description or "").strip() or name,
                halal_in=halal_in,
                haram_in=haram_in,
                mushbooh_in=mushbooh_in,
            )
        )
        logger.info("Created ingredient %s (%s)", ingredient.name, ingredient.status)
        return ingredient

    @staticmethod
    def link_ingredients(
        db: Session,
        product: Product,
        items: Iterable[IngredientInput],
        country: Optional[str] = None,
    ) -> List[Ingredient]:
        """
        Resolve each item and link it to the product once.

        Items that resolve to an ingredient already linked (or already seen in this
        call) are skipped. Nothing is committed.

        Returns:
            The linked ingredients in input order
        """
        link_repo = ProductIngredientRepository(db)
        linked_ids = {link.ingredient_id for link in link_repo.get_for_product(product.product_id)}
        linked = []
        for item in items:
            ingredient = CatalogService.resolve_ingredient(db, item, country)
            if ingredient.ingredient_id in linked_ids:
                continue
            link_repo.link(product, ingredient)
            linked_ids.add(ingredient.ingredient_id)
            linked.append(ingredient)

        logger.debug("Linked %d ingredients to product %s", len(linked), product.product_id)
        return linked

    @staticmethod
    def remove_links(db: Session, product: Product) -> int:
        removed = ProductIngredientRepository(db).remove_for_product(product.product_id)
        db.expire(product, ["ingredient_links"])
        return removed

    @staticmethod
    def replace_links(
        db: Session,
        product: Product,
        items: Iterable[IngredientInput],
        country: Optional[str] = None,
    ) -> List[Ingredient]:
        """Drop every existing link of the product and link ``items`` instead."""
        CatalogService.remove_links(db, product)
        return CatalogService.link_ingredients(db, product, items, country)
