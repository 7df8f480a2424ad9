"""
Tests for parsing generated ingredient text.

Covers the structured line format, the per-line fallback, disclaimer
filtering, single-ingredient synthesis and deduplication.
"""

import pytest

from domain.enums import IngredientStatus
from services.ingredient_text_parser import (
    parse_ingredients,
    is_invalid_ingredient_name,
    is_single_ingredient_product,
    single_ingredient_status,
)


# =============================================================================
# STRUCTURED LINES
# =============================================================================


def test_parses_structured_lines():
    """
    Test the documented two-line example.

    Verifies:
    - Both lines become records in order
    - Statuses are mapped to the enum
    - E-code and description are kept
    """
    text = "Sugar: N/A: sweetener: Halal\nPalm Oil: E471: emulsifier: Mushbooh"

    records = parse_ingredients(text, "Choco Wafer")

    assert [r.name for r in records] == ["Sugar", "Palm Oil"]
    assert [r.status for r in records] == [IngredientStatus.HALAL, IngredientStatus.MUSHBOOH]
    assert records[1].e_code == "E471"
    assert records[1].description == "emulsifier"


def test_line_order_does_not_change_result_set():
    forward = parse_ingredients("Sugar: N/A: sweetener: Halal\nPalm Oil: E471: emulsifier: Mushbooh", "X")
    backward = parse_ingredients("Palm Oil: E471: emulsifier: Mushbooh\nSugar: N/A: sweetener: Halal", "X")

    assert {(r.name, r.status) for r in forward} == {(r.name, r.status) for r in backward}


def test_ingredient_prefix_and_case_insensitive_status():
    text = "Ingredient: Gelatin: E441: gelling agent: haram\nINGREDIENT: Salt: : : HALAL"

    records = parse_ingredients(text, "Gummy Bears")

    assert [r.name for r in records] == ["Gelatin", "Salt"]
    assert records[0].status == IngredientStatus.HARAM
    assert records[1].status == IngredientStatus.HALAL


def test_empty_ecode_and_description_are_defaulted():
    records = parse_ingredients("Salt:  :  : Halal", "Crisps")

    assert records[0].e_code == "N/A"
    assert records[0].description == "Salt"


def test_unknown_status_token_fails_the_line():
    """
    Test that only Halal, Haram and Mushbooh are accepted in the status slot.

    Verifies:
    - A "Doubtful" line is not parsed
    - The valid line next to it still is
    """
    text = "Sugar: N/A: sweetener: Halal\nE120: Carmine: colouring: Doubtful"

    records = parse_ingredients(text, "Candy")

    assert [r.name for r in records] == ["Sugar"]


def test_rejects_reserved_and_subject_names():
    text = (
        "Ingredient: Ingredient: N/A: header: Halal\n"
        "Choco Wafer: N/A: the product itself: Halal\n"
        "Cocoa Butter: N/A: fat: Halal"
    )

    records = parse_ingredients(text, "Choco Wafer")

    assert [r.name for r in records] == ["Cocoa Butter"]


def test_subject_name_kept_when_rejection_disabled():
    records = parse_ingredients(
        "Gelatin: E441: gelling agent: Mushbooh", "Gelatin", reject_subject_name=False
    )

    assert [r.name for r in records] == ["Gelatin"]


def test_disclaimer_lines_are_filtered():
    text = (
        "* Sugar: N/A: sweetener: Halal\n"
        "Always check certification: N/A: note: Mushbooh\n"
        "Flour: N/A: wheat flour: Halal"
    )

    records = parse_ingredients(text, "Biscuit")

    assert [r.name for r in records] == ["Flour"]


def test_deduplicates_case_insensitively_keeping_first():
    text = "Sugar: N/A: cane sugar: Halal\nSUGAR: N/A: beet sugar: Mushbooh"

    records = parse_ingredients(text, "Cake")

    assert len(records) == 1
    assert records[0].description == "cane sugar"
    assert records[0].status == IngredientStatus.HALAL


def test_records_get_fresh_ids_and_timestamps():
    records = parse_ingredients("Sugar: N/A: s: Halal\nSalt: N/A: s: Halal", "Cake")

    assert records[0].ingredient_id != records[1].ingredient_id
    assert records[0].created_at is not None
    assert records[0].updated_at is not None


# =============================================================================
# COUNTRY LISTS
# =============================================================================


def test_country_goes_to_matching_list():
    records = parse_ingredients("Gelatin: E441: gelling agent: Haram", "Gummies", country="Malaysia")

    assert records[0].haram_in == ["Malaysia"]
    assert records[0].halal_in == ["None"]
    assert records[0].mushbooh_in == ["None"]


def test_no_country_leaves_placeholders():
    records = parse_ingredients("Sugar: N/A: s: Halal", "Cake")

    assert records[0].halal_in == ["None"]
    assert records[0].haram_in == ["None"]
    assert records[0].mushbooh_in == ["None"]


# =============================================================================
# FALLBACKS
# =============================================================================


def test_plain_lines_become_mushbooh_ingredients():
    """
    Test the per-line fallback for unstructured answers.

    Verifies:
    - Bare names become Mushbooh with E-code N/A
    - Blank lines and the no-data sentinel are skipped
    - Prose lines are skipped
    """
    text = "Cocoa Mass\n\nEmulsifier\nThis list is estimated from public data\nNo ingredients available"

    records = parse_ingredients(text, "Dark Chocolate", country="Turkey")

    assert [r.name for r in records] == ["Cocoa Mass", "Emulsifier"]
    assert all(r.status == IngredientStatus.MUSHBOOH for r in records)
    assert all(r.e_code == "N/A" for r in records)
    assert records[0].mushbooh_in == ["Turkey"]


def test_fallback_retries_structured_format_per_line():
    # Trailing spaces defeat the whole-text pattern but not the per-line retry
    text = "Sugar: N/A: sweetener: Halal   \nMilk Powder"

    records = parse_ingredients(text, "Toffee")

    assert [r.name for r in records] == ["Sugar", "Milk Powder"]
    assert records[0].status == IngredientStatus.HALAL
    assert records[1].status == IngredientStatus.MUSHBOOH


def test_sentinel_only_yields_nothing():
    assert parse_ingredients("No ingredients available", "Mystery Snack") == []


def test_empty_text_yields_nothing_for_composite_products():
    assert parse_ingredients("", "Choco Wafer") == []


def test_chicken_breast_synthesized_as_halal():
    records = parse_ingredients("", "Chicken Breast")

    assert len(records) == 1
    assert records[0].name == "Chicken Breast"
    assert records[0].status == IngredientStatus.HALAL
    assert records[0].e_code == "N/A"


def test_pork_sausage_synthesized_as_haram():
    records = parse_ingredients("No ingredients available", "Pork Sausage", country="Germany")

    assert len(records) == 1
    assert records[0].status == IngredientStatus.HARAM
    assert records[0].haram_in == ["Germany"]


def test_honey_synthesized_as_mushbooh():
    records = parse_ingredients("", "Raw Honey")

    assert records[0].status == IngredientStatus.MUSHBOOH


def test_synthesis_can_be_disabled():
    assert parse_ingredients("", "Chicken Breast", single_ingredient_fallback=False) == []


# =============================================================================
# HELPERS
# =============================================================================


@pytest.mark.parametrize(
    "name",
    [
        "",
        "   ",
        "* Sugar",
        "- Sugar",
        "Salt and pepper",
        "Data from our database",
        "x" * 51,
        "Mushbooh means doubtful",
    ],
)
def test_invalid_names(name):
    assert is_invalid_ingredient_name(name)


@pytest.mark.parametrize("name", ["Sugar", "Palm Oil", "E471", "x" * 50])
def test_valid_names(name):
    assert not is_invalid_ingredient_name(name)


def test_single_ingredient_keywords():
    assert is_single_ingredient_product("Fresh Milk")
    assert is_single_ingredient_product("Free Range EGG")
    assert not is_single_ingredient_product("Choco Wafer")


@pytest.mark.parametrize(
    "subject,expected",
    [
        ("Pig Trotters", IngredientStatus.HARAM),
        ("Beef Mince", IngredientStatus.HALAL),
        ("Lamb Chops", IngredientStatus.HALAL),
        ("Fish Fingers", IngredientStatus.HALAL),
        ("Whole Milk", IngredientStatus.MUSHBOOH),
    ],
)
def test_single_ingredient_status(subject, expected):
    assert single_ingredient_status(subject) == expected
