"""
Classification service - asks the text-generation service for ingredient
classifications, parses the answer and merges it into the ingredient table.
"""

from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.models import Ingredient
from domain.schemas.ingredient_schemas import ParsedIngredient, IngredientResponse
from domain.schemas.product_schemas import ProductEvaluation
from repositories import IngredientRepository, ProductRepository
from services.country_scope import apply_country_scope
from services.ingredient_text_parser import parse_ingredients
from services.prompts import (
    NO_INGREDIENTS_SENTINEL,
    build_ingredient_list_prompt,
    build_product_prompt,
)
from services.status_aggregator import aggregate_status

logger = logging.getLogger("halalcheck.classification")


class ClassificationService:
    """
    Ingredient classification backed by an external text generator.

    The text client is injected so that deployments (and tests) choose the
    endpoint, key and transport. Any transport or format failure raised by the
    client propagates to the caller unchanged.
    """

    def __init__(self, text_client):
        self.text_client = text_client

    def _generate(self, prompt: str) -> str:
        text = self.text_client.generate(prompt)
        if not text or not text.strip():
            logger.warning("Text service returned an empty answer")
            return NO_INGREDIENTS_SENTINEL
        return text

    def classify_by_name_or_barcode(
        self,
        db: Session,
        product_name: Optional[str],
        barcode: Optional[str],
        country: Optional[str],
    ) -> List[Ingredient]:
        """
        Classify the ingredients of a product identified by name or barcode.

        Args:
            db: Database session
            product_name: product name (preferred over the barcode when both are given)
            barcode: product barcode
            country: country the product is sold in (required)

        Returns:
            The persisted ingredients in the order they were parsed

        Raises:
            ServiceValidationError: if neither name nor barcode is given, or country is blank
            UpstreamFormatError: if the text service answered without a candidate
            UpstreamServiceError: if the text service could not be reached
            ConflictError: if a concurrent writer created the same ingredient
        """
        product_name = (product_name or "").strip()
        barcode = (barcode or "").strip()
        country = (country or "").strip()

        if not product_name and not barcode:
            raise ServiceValidationError("Either product name or barcode is required")
        if not country:
            raise ServiceValidationError("Country is required")

        prompt = build_product_prompt(product_name, barcode, country)
        logger.info("Classifying product %r (barcode %r) for %s", product_name, barcode, country)
        text = self._generate(prompt)

        records = parse_ingredients(text, product_name or barcode, country)
        logger.info("Parsed %d ingredients for %r", len(records), product_name or barcode)
        return self.save_ingredients(db, records, country)

    def classify_by_name_list(
        self, db: Session, names: Sequence[str], country: Optional[str] = None
    ) -> List[Ingredient]:
        """
        Classify an explicit list of ingredient names with one batched prompt.

        Raises:
            ServiceValidationError: if the list holds no usable name
        """
        names = [n.strip() for n in (names or []) if n and n.strip()]
        if not names:
            raise ServiceValidationError("Ingredient list is required")
        country = (country or "").strip() or None

        prompt = build_ingredient_list_prompt(names, country)
        logger.info("Classifying %d ingredient names", len(names))
        text = self._generate(prompt)

        records = parse_ingredients(
            text,
            ", ".join(names),
            country,
            single_ingredient_fallback=len(names) == 1,
            reject_subject_name=False,
        )
        return self.save_ingredients(db, records, country)

    @staticmethod
    def save_ingredients(
        db: Session, records: Sequence[ParsedIngredient], country: Optional[str]
    ) -> List[Ingredient]:
        """
        Insert new ingredients and merge into existing ones matched by name.

        An existing ingredient takes the new status, E-code and description, and the
        observation is merged into its country lists when a country is known.
        """
        repo = IngredientRepository(db)
        saved = []
        try:
            for record in records:
                existing = repo.get_by_name(record.name)
                if existing:
                    existing.status = record.status.value
                    existing.e_code = record.e_code
                    existing.description = record.description
                    if country:
                        apply_country_scope(existing, country, record.status)
                    db.flush()
                    saved.append(existing)
                    continue

                saved.append(
                    repo.add(
                        Ingredient(
                            ingredient_id=record.ingredient_id,
                            name=record.name,
                            status=record.status.value,
                            e_code=record.e_code,
                            description=record.description,
                            halal_in=list(record.halal_in),
                            haram_in=list(record.haram_in),
                            mushbooh_in=list(record.mushbooh_in),
                        )
                    )
                )
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("Conflict while saving ingredients: %s", e.orig)
            raise ConflictError(
                "Ingredient was modified concurrently, please retry",
                details={"names": [r.name for r in records]},
            ) from e
        except Exception:
            db.rollback()
            logger.exception("Error saving ingredients")
            raise

        logger.info("Saved %d ingredients", len(saved))
        return saved

    @staticmethod
    def evaluate_product_status(
        db: Session, product_id: UUID, commit: bool = True
    ) -> ProductEvaluation:
        """
        Recompute a product's status from its linked ingredients.

        Args:
            db: Database session
            product_id: product to evaluate
            commit: commit the new status; callers running a larger unit of work pass False

        Raises:
            NotFoundError: if the product does not exist
        """
        product = ProductRepository(db).get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product not found: {product_id}")

        ingredients = product.ingredients
        status = aggregate_status(i.status for i in ingredients)
        product.status = status.value
        db.flush()
        if commit:
            try:
                db.commit()
            except Exception:
                db.rollback()
                logger.exception("Error saving status of product %s", product_id)
                raise

        logger.info("Product %s evaluated as %s", product.name, product.status)
        return ProductEvaluation(
            product_id=product.product_id,
            product_name=product.name,
            status=product.status,
            country=product.country,
            ingredients=[IngredientResponse.model_validate(i) for i in ingredients],
        )
