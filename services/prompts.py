"""Prompt templates sent to the text-generation service.

Every template asks for one ingredient per line in the format understood by
``services.ingredient_text_parser``.
"""

from typing import Iterable, Optional

NO_INGREDIENTS_SENTINEL = "No ingredients available"

LINE_FORMAT = "'Ingredient: <name>: <ecode>: <description>: <status>'"

_FORMAT_INSTRUCTIONS = (
    f"Format each entry as {LINE_FORMAT} on a new line, with no additional details, "
    "explanations, disclaimers, or markdown."
)

# Subjects that are very likely a single meat ingredient
MEAT_KEYWORDS = ("pork", "beef", "chicken", "lamb", "fish", "sausage", "meat")

# Branded multi-ingredient products with a short hint that helps the model
BRANDED_PRODUCT_HINTS = {
    "kitkat": "a chocolate wafer bar",
}


def is_meat_product(product_name: Optional[str]) -> bool:
    name = (product_name or "").lower()
    return any(keyword in name for keyword in MEAT_KEYWORDS)


def branded_hint(product_name: Optional[str]) -> Optional[str]:
    name = (product_name or "").lower()
    for keyword, hint in BRANDED_PRODUCT_HINTS.items():
        if keyword in name:
            return hint
    return None


def build_product_prompt(
    product_name: Optional[str], barcode: Optional[str], country: str
) -> str:
    """Prompt for a product identified by name (preferred) or barcode."""
    if product_name:
        if is_meat_product(product_name):
            return (
                f"Provide the ingredient for the product '{product_name}' sold in {country}, "
                "treating it as a single-ingredient meat product. Return the ingredient as "
                f"'Ingredient: {product_name}: N/A: {product_name}: <Halal|Haram|Mushbooh>' "
                "on a new line, with no additional details, explanations, disclaimers, or "
                f"markdown. If no data is found, return '{NO_INGREDIENTS_SENTINEL}'."
            )
        hint = branded_hint(product_name)
        subject = f"'{product_name}' ({hint})" if hint else f"'{product_name}'"
        single_note = (
            ""
            if hint
            else " For single-ingredient products like meat, use the product name as the ingredient name."
        )
        return (
            f"Provide a list of all ingredients for the product {subject} sold in {country} "
            "with their E-code (if applicable), description, and Halal, Haram, or Mushbooh "
            f"status.{single_note} {_FORMAT_INSTRUCTIONS} "
            f"If no ingredients are found, return '{NO_INGREDIENTS_SENTINEL}'."
        )

    return (
        f"Provide a list of all ingredients for the product with barcode '{barcode}' sold in "
        f"{country} with their E-code (if applicable), description, and Halal, Haram, or "
        "Mushbooh status. For single-ingredient products like meat, use the product name as "
        f"the ingredient name. {_FORMAT_INSTRUCTIONS} "
        f"If no ingredients are found, return '{NO_INGREDIENTS_SENTINEL}'."
    )


def build_ingredient_list_prompt(names: Iterable[str], country: Optional[str] = None) -> str:
    """Prompt for an explicit, batched list of ingredient names."""
    ingredients_list = ", ".join(names)
    where = f" as sold in {country}" if country else ""
    return (
        f"Provide a list of the following ingredients{where}: {ingredients_list}. For each "
        "ingredient, include its E-code (if applicable), description, and Halal, Haram, or "
        f"Mushbooh status. {_FORMAT_INSTRUCTIONS} "
        f"If no data is available, return '{NO_INGREDIENTS_SENTINEL}'."
    )
