"""Per-country classification evidence kept on each ingredient.

An ingredient carries three country lists (``halal_in``, ``haram_in``,
``mushbooh_in``). A country sits in at most one of them, and a list with no
country holds the ``"None"`` placeholder.
"""

from typing import List, Optional, Sequence, Tuple

from domain.enums import IngredientStatus
from domain.models.ingredient import NO_COUNTRY

CountryLists = Tuple[List[str], List[str], List[str]]


def _normalized(values: Optional[Sequence[str]]) -> List[str]:
    cleaned = [v for v in (values or []) if v and v != NO_COUNTRY]
    return cleaned or [NO_COUNTRY]


def initial_country_lists(country: Optional[str], status) -> CountryLists:
    """Country lists for a freshly classified ingredient."""
    return merge_country_scope(None, None, None, country, status)


def merge_country_scope(
    halal_in: Optional[Sequence[str]],
    haram_in: Optional[Sequence[str]],
    mushbooh_in: Optional[Sequence[str]],
    country: Optional[str],
    status,
) -> CountryLists:
    """
    Merge one (country, status) observation into the three country lists.

    The country is removed from every list and then added to the list matching
    ``status``; other countries are left alone. Unknown status only clears the
    country's previous placement. New lists are returned, inputs are not mutated.

    Args:
        halal_in: countries where the ingredient is Halal
        haram_in: countries where the ingredient is Haram
        mushbooh_in: countries where the ingredient is Mushbooh
        country: country of the observation; blank leaves the lists as they are
        status: observed status (enum member or string)

    Returns:
        Tuple of (halal_in, haram_in, mushbooh_in)
    """
    lists = {
        IngredientStatus.HALAL: _normalized(halal_in),
        IngredientStatus.HARAM: _normalized(haram_in),
        IngredientStatus.MUSHBOOH: _normalized(mushbooh_in),
    }
    country = (country or "").strip()
    if country and country != NO_COUNTRY:
        for key, values in lists.items():
            values = [v for v in values if v != country]
            lists[key] = values

        target = lists.get(IngredientStatus.parse(status))
        if target is not None:
            if NO_COUNTRY in target:
                target.remove(NO_COUNTRY)
            target.append(country)

        for key, values in lists.items():
            if not values:
                lists[key] = [NO_COUNTRY]

    return (
        lists[IngredientStatus.HALAL],
        lists[IngredientStatus.HARAM],
        lists[IngredientStatus.MUSHBOOH],
    )


def apply_country_scope(ingredient, country: Optional[str], status) -> None:
    """Merge an observation into an ORM ingredient, assigning fresh lists so the change is tracked."""
    halal_in, haram_in, mushbooh_in = merge_country_scope(
        ingredient.halal_in, ingredient.haram_in, ingredient.mushbooh_in, country, status
    )
    ingredient.halal_in = halal_in
    ingredient.haram_in = haram_in
    ingredient.mushbooh_in = mushbooh_in
