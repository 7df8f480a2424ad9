"""Product status aggregation.

The most restrictive classification wins:

    empty list          -> Unknown
    any Haram           -> Haram
    any Mushbooh        -> Mushbooh
    all Halal           -> Halal
    anything else       -> Unknown
"""

from typing import Iterable

from domain.enums import IngredientStatus


def aggregate_status(statuses: Iterable) -> IngredientStatus:
    """Collapse per-ingredient statuses (enum members or strings) into one status."""
    parsed = [IngredientStatus.parse(s) for s in statuses]
    if not parsed:
        return IngredientStatus.UNKNOWN
    if IngredientStatus.HARAM in parsed:
        return IngredientStatus.HARAM
    if IngredientStatus.MUSHBOOH in parsed:
        return IngredientStatus.MUSHBOOH
    if all(s == IngredientStatus.HALAL for s in parsed):
        return IngredientStatus.HALAL
    return IngredientStatus.UNKNOWN
