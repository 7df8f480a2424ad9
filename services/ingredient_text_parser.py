"""
Parser for ingredient lists returned by the text-generation service.

The expected line format is::

    [Ingredient: ]<name> : <ecode> : <description> : <Halal|Haram|Mushbooh>

The generator does not always follow it, so parsing degrades in three steps:

1. structured lines found anywhere in the text
2. per-line retry, where a plain line that is not disclaimer prose becomes a
   Mushbooh ingredient
3. for well-known whole foods (chicken, pork, ...) one ingredient named after
   the subject itself

An empty result is a normal outcome, not an error.
"""

import logging
import re
from typing import List, Optional

from domain.enums import IngredientStatus
from domain.schemas.ingredient_schemas import ParsedIngredient
from services.country_scope import initial_country_lists
from services.prompts import NO_INGREDIENTS_SENTINEL

logger = logging.getLogger("halalcheck.parser")

INGREDIENT_LINE_PATTERN = re.compile(
    r"^(?:Ingredient:\s*)?"
    r"(?P<name>[^:\n]+?)\s*:\s*"
    r"(?P<ecode>[^:\n]*?)\s*:\s*"
    r"(?P<description>[^:\n]*?)\s*:\s*"
    r"(?P<status>Halal|Haram|Mushbooh)$",
    re.IGNORECASE | re.MULTILINE,
)

DEFAULT_E_CODE = "N/A"
MAX_NAME_LENGTH = 50

# Fragments that only show up in explanatory prose around the list
DISCLAIMER_FRAGMENTS = (
    "since",
    "database",
    "estimated",
    "always check",
    "certification",
    "important considerations",
    "mushbooh means",
    "processing methods",
    " and ",
)
BULLET_MARKERS = ("*", "-")

SINGLE_INGREDIENT_KEYWORDS = ("pork", "beef", "chicken", "lamb", "fish", "milk", "egg", "honey")
HARAM_MEAT_KEYWORDS = ("pork", "pig")
HALAL_MEAT_KEYWORDS = ("chicken", "beef", "lamb", "fish")

RESERVED_NAME = "ingredient"


def is_invalid_ingredient_name(name: Optional[str]) -> bool:
    """True when the string reads like prose or markup rather than an ingredient name."""
    if not name or not name.strip():
        return True
    text = name.strip()
    if text.startswith(BULLET_MARKERS):
        return True
    if len(text) > MAX_NAME_LENGTH:
        return True
    lowered = text.lower()
    return any(fragment in lowered for fragment in DISCLAIMER_FRAGMENTS)


def is_single_ingredient_product(subject_name: Optional[str]) -> bool:
    lowered = (subject_name or "").lower()
    return any(keyword in lowered for keyword in SINGLE_INGREDIENT_KEYWORDS)


def single_ingredient_status(subject_name: str) -> IngredientStatus:
    """Default slaughter assumption for whole-food subjects."""
    lowered = subject_name.lower()
    if any(keyword in lowered for keyword in HARAM_MEAT_KEYWORDS):
        return IngredientStatus.HARAM
    if any(keyword in lowered for keyword in HALAL_MEAT_KEYWORDS):
        return IngredientStatus.HALAL
    return IngredientStatus.MUSHBOOH


def _is_rejected_name(name: str, subject_name: str) -> bool:
    lowered = name.strip().lower()
    if not lowered or lowered == RESERVED_NAME:
        return True
    if subject_name and lowered == subject_name.strip().lower():
        return True
    return is_invalid_ingredient_name(name)


def _build_record(
    name: str,
    e_code: Optional[str],
    description: Optional[str],
    status: IngredientStatus,
    country: Optional[str],
) -> ParsedIngredient:
    name = name.strip()
    halal_in, haram_in, mushbooh_in = initial_country_lists(country, status)
    return ParsedIngredient(
        name=name,
        e_code=(e_code or "").strip() or DEFAULT_E_CODE,
        description=(description or "").strip() or name,
        status=status,
        halal_in=halal_in,
        haram_in=haram_in,
        mushbooh_in=mushbooh_in,
    )


def _from_match(match, subject_name: str, country: Optional[str]) -> Optional[ParsedIngredient]:
    name = match.group("name").strip()
    if _is_rejected_name(name, subject_name):
        logger.debug("Skipping rejected ingredient name %r", name)
        return None
    return _build_record(
        name,
        match.group("ecode"),
        match.group("description"),
        IngredientStatus.parse(match.group("status")),
        country,
    )


def _parse_structured(text: str, subject_name: str, country: Optional[str]) -> List[ParsedIngredient]:
    records = []
    for match in INGREDIENT_LINE_PATTERN.finditer(text):
        record = _from_match(match, subject_name, country)
        if record is not None:
            records.append(record)
    return records


def _parse_line_by_line(text: str, subject_name: str, country: Optional[str]) -> List[ParsedIngredient]:
    records = []
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line or line.lower() == NO_INGREDIENTS_SENTINEL.lower():
            continue

        match = INGREDIENT_LINE_PATTERN.match(line)
        if match:
            record = _from_match(match, subject_name, country)
            if record is not None:
                records.append(record)
            continue

        if _is_rejected_name(line, subject_name):
            logger.debug("Skipping unstructured line %r", line)
            continue

        records.append(_build_record(line, None, None, IngredientStatus.MUSHBOOH, country))
    return records


def _deduplicate(records: List[ParsedIngredient]) -> List[ParsedIngredient]:
    seen = set()
    unique = []
    for record in records:
        key = record.name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def parse_ingredients(
    text: Optional[str],
    subject_name: Optional[str],
    country: Optional[str] = None,
    single_ingredient_fallback: bool = True,
    reject_subject_name: bool = True,
) -> List[ParsedIngredient]:
    """
    Turn generated text into deduplicated ingredient records.

    Args:
        text: raw text from the generator (may be empty)
        subject_name: product name or ingredient-list descriptor the text is about
        country: country placed into the country list matching each record's status
        single_ingredient_fallback: allow synthesizing one record named after the
            subject when nothing else could be parsed
        reject_subject_name: drop parsed names equal to the subject; off when the
            subject is itself the requested ingredient name

    Returns:
        Records in first-seen order, one per case-insensitive name
    """
    subject_name = (subject_name or "").strip()
    text = (text or "").replace("\r\n", "\n").replace("\r", "\n")

    excluded_name = subject_name if reject_subject_name else ""

    records = _parse_structured(text, excluded_name, country)

    if not records and text.strip():
        logger.info("No structured ingredient lines for %r, scanning line by line", subject_name)
        records = _parse_line_by_line(text, excluded_name, country)

    if not records and single_ingredient_fallback and is_single_ingredient_product(subject_name):
        status = single_ingredient_status(subject_name)
        logger.info("Treating %r as a single-ingredient product (%s)", subject_name, status.value)
        records = [_build_record(subject_name, None, None, status, country)]

    return _deduplicate(records)
