"""
Tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from app.config import Environment, Settings


def test_environment_is_case_insensitive():
    assert Settings(environment="PRODUCTION").environment == Environment.PRODUCTION


@pytest.mark.parametrize(
    "raw, expected",
    [("", ""), ("/", ""), ("api", "/api"), ("/api/v1/", "/api/v1")],
)
def test_api_prefix_normalized(raw, expected):
    assert Settings(api_prefix=raw).api_prefix == expected


def test_log_level_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_admin_role_required():
    with pytest.raises(ValidationError):
        Settings(admin_role="  ")
