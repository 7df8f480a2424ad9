"""
Tests for ClassificationService and the text-generation client.

The text service is replaced with FakeTextClient; the HTTP client itself is
exercised against httpx.MockTransport.
"""

import json
import uuid

import httpx
import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from test_fixtures import db_session, FakeTextClient, make_ingredient, make_product
from adapters.text_generation_client import TextGenerationClient
from app.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceValidationError,
    UpstreamFormatError,
    UpstreamServiceError,
)
from domain.enums import IngredientStatus
from domain.models import Ingredient, Product
from services.classification_service import ClassificationService


# =============================================================================
# VALIDATION
# =============================================================================


def test_requires_name_or_barcode(db_session: Session):
    service = ClassificationService(FakeTextClient())

    with pytest.raises(ServiceValidationError):
        service.classify_by_name_or_barcode(db_session, "  ", None, "Malaysia")


def test_requires_country(db_session: Session):
    client = FakeTextClient()
    service = ClassificationService(client)

    with pytest.raises(ServiceValidationError):
        service.classify_by_name_or_barcode(db_session, "Choco Wafer", None, "")
    assert client.prompts == []


def test_requires_ingredient_names(db_session: Session):
    service = ClassificationService(FakeTextClient())

    with pytest.raises(ServiceValidationError):
        service.classify_by_name_list(db_session, ["", "  "])


# =============================================================================
# CLASSIFY BY NAME OR BARCODE
# =============================================================================


def test_classify_product_persists_parsed_ingredients(db_session: Session):
    """
    Test the full classify-and-save path.

    Verifies:
    - Parsed ingredients are returned in order
    - New ingredients are stored with the country in the matching list
    - The prompt names the product and the country
    """
    client = FakeTextClient(
        ["Ingredient: Sugar: N/A: sweetener: Halal\nIngredient: Gelatin: E441: gelling agent: Haram"]
    )
    service = ClassificationService(client)

    result = service.classify_by_name_or_barcode(db_session, "Gummy Bears", None, "Malaysia")

    assert [i.name for i in result] == ["Sugar", "Gelatin"]
    stored = db_session.query(Ingredient).filter(Ingredient.name == "Gelatin").one()
    assert stored.status == "Haram"
    assert stored.haram_in == ["Malaysia"]
    assert "'Gummy Bears'" in client.prompts[0]
    assert "Malaysia" in client.prompts[0]


def test_meat_product_uses_single_ingredient_prompt(db_session: Session):
    client = FakeTextClient([""])
    service = ClassificationService(client)

    service.classify_by_name_or_barcode(db_session, "Beef Burger", None, "UK")

    assert "single-ingredient meat product" in client.prompts[0]


def test_branded_product_prompt_has_hint(db_session: Session):
    client = FakeTextClient([""])
    service = ClassificationService(client)

    service.classify_by_name_or_barcode(db_session, "KitKat 4 Finger", None, "UK")

    assert "a chocolate wafer bar" in client.prompts[0]


def test_barcode_only_prompt(db_session: Session):
    client = FakeTextClient(["Sugar: N/A: sweetener: Halal"])
    service = ClassificationService(client)

    result = service.classify_by_name_or_barcode(db_session, None, "5000159461122", "UK")

    assert "barcode '5000159461122'" in client.prompts[0]
    assert [i.name for i in result] == ["Sugar"]


def test_empty_answer_is_not_an_error(db_session: Session):
    service = ClassificationService(FakeTextClient(["   "]))

    assert service.classify_by_name_or_barcode(db_session, "Choco Wafer", None, "UK") == []


def test_empty_answer_for_chicken_synthesizes_halal(db_session: Session):
    service = ClassificationService(FakeTextClient([""]))

    result = service.classify_by_name_or_barcode(db_session, "Chicken Breast", None, "Malaysia")

    assert len(result) == 1
    assert result[0].name == "Chicken Breast"
    assert result[0].status == "Halal"
    assert result[0].halal_in == ["Malaysia"]


def test_upstream_errors_propagate(db_session: Session):
    service = ClassificationService(FakeTextClient([UpstreamFormatError("no candidates")]))

    with pytest.raises(UpstreamFormatError):
        service.classify_by_name_or_barcode(db_session, "Choco Wafer", None, "UK")
    assert db_session.query(Ingredient).count() == 0


# =============================================================================
# MERGING
# =============================================================================


def test_existing_ingredient_is_merged_not_duplicated(db_session: Session):
    """
    Test insert-or-merge by case-insensitive name.

    Verifies:
    - No second row is created for "gelatin"
    - Status, E-code and description are replaced
    - The new country is merged without losing the old one
    """
    make_ingredient(db_session, "Gelatin", IngredientStatus.HALAL, halal_in=["Turkey"])
    service = ClassificationService(FakeTextClient(["gelatin: E441: porcine gelatin: Haram"]))

    service.classify_by_name_or_barcode(db_session, "Gummy Bears", None, "Malaysia")

    rows = db_session.query(Ingredient).all()
    assert len(rows) == 1
    assert rows[0].name == "Gelatin"
    assert rows[0].status == "Haram"
    assert rows[0].e_code == "E441"
    assert rows[0].description == "porcine gelatin"
    assert rows[0].halal_in == ["Turkey"]
    assert rows[0].haram_in == ["Malaysia"]


def test_name_list_without_country_keeps_country_lists(db_session: Session):
    make_ingredient(db_session, "Carmine", IngredientStatus.HALAL, halal_in=["Turkey"])
    service = ClassificationService(FakeTextClient(["Carmine: E120: red colouring: Mushbooh"]))

    service.classify_by_name_list(db_session, ["Carmine"])

    carmine = db_session.query(Ingredient).one()
    assert carmine.status == "Mushbooh"
    assert carmine.halal_in == ["Turkey"]
    assert carmine.mushbooh_in == ["None"]


def test_single_name_list_keeps_matching_line(db_session: Session):
    client = FakeTextClient(["Ingredient: Gelatin: E441: gelling agent: Mushbooh"])
    service = ClassificationService(client)

    result = service.classify_by_name_list(db_session, ["Gelatin"], "Egypt")

    assert [i.name for i in result] == ["Gelatin"]
    assert result[0].mushbooh_in == ["Egypt"]
    assert "Gelatin" in client.prompts[0]


def test_integrity_error_becomes_conflict(db_session: Session, monkeypatch):
    service = ClassificationService(FakeTextClient(["Sugar: N/A: sweetener: Halal"]))

    def failing_commit():
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(ConflictError):
        service.classify_by_name_or_barcode(db_session, "Cake", None, "UK")


# =============================================================================
# PRODUCT EVALUATION
# =============================================================================


def test_evaluate_product_status(db_session: Session):
    sugar = make_ingredient(db_session, "Sugar", IngredientStatus.HALAL)
    emulsifier = make_ingredient(db_session, "E471", IngredientStatus.MUSHBOOH)
    product = make_product(db_session, ingredients=[sugar, emulsifier])

    evaluation = ClassificationService.evaluate_product_status(db_session, product.product_id)

    assert evaluation.status == "Mushbooh"
    assert {i.name for i in evaluation.ingredients} == {"Sugar", "E471"}
    assert db_session.get(Product, product.product_id).status == "Mushbooh"


def test_evaluate_product_without_ingredients_is_unknown(db_session: Session):
    product = make_product(db_session, status=IngredientStatus.HALAL)

    evaluation = ClassificationService.evaluate_product_status(db_session, product.product_id)

    assert evaluation.status == "Unknown"


def test_evaluate_missing_product(db_session: Session):
    with pytest.raises(NotFoundError):
        ClassificationService.evaluate_product_status(db_session, uuid.uuid4())


# =============================================================================
# TEXT GENERATION CLIENT
# =============================================================================


def _client_with(handler):
    return TextGenerationClient(
        api_key="test-key",
        endpoint="https://text.example.com/v1/generate",
        transport=httpx.MockTransport(handler),
    )


def test_client_sends_envelope_and_reads_first_candidate():
    seen = {}

    def handler(request: httpx.Request):
        seen["key"] = request.url.params.get("key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "Sugar: N/A: s: Halal"}]}}]},
        )

    text = _client_with(handler).generate("list the ingredients")

    assert text == "Sugar: N/A: s: Halal"
    assert seen["key"] == "test-key"
    assert seen["body"] == {"contents": [{"parts": [{"text": "list the ingredients"}]}]}


def test_client_no_candidates_is_format_error():
    client = _client_with(lambda request: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(UpstreamFormatError):
        client.generate("prompt")


def test_client_empty_text_returns_empty_string():
    client = _client_with(
        lambda request: httpx.Response(200, json={"candidates": [{"content": {"parts": []}}]})
    )

    assert client.generate("prompt") == ""


def test_client_non_string_text_is_format_error():
    client = _client_with(
        lambda request: httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": 42}]}}]}
        )
    )

    with pytest.raises(UpstreamFormatError):
        client.generate("prompt")


def test_client_wraps_http_errors():
    client = _client_with(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(UpstreamServiceError):
        client.generate("prompt")


def test_client_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamServiceError):
        _client_with(handler).generate("prompt")


def test_client_invalid_json_is_format_error():
    client = _client_with(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(UpstreamFormatError):
        client.generate("prompt")


def test_client_requires_api_key():
    client = TextGenerationClient(api_key=None, endpoint="https://text.example.com")

    with pytest.raises(UpstreamServiceError):
        client.generate("prompt")
