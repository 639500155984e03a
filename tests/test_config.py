"""
Tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from config import Settings, get_settings, reload_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.default_valuation_method == "weighted"
    assert settings.strict_valuation is False
    assert settings.low_stock_check_interval_minutes == 60


@pytest.mark.parametrize('tag', ['FIFO', 'LIFO', 'weighted'])
def test_accepts_method_tags(tag):
    assert Settings(_env_file=None, default_valuation_method=tag).default_valuation_method == tag


def test_rejects_unknown_method():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, default_valuation_method="average")


def test_rejects_non_positive_interval():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, low_stock_check_interval_minutes=0)


def test_email_from_defaults_to_username():
    settings = Settings(_env_file=None, smtp_username="ops@example.com", smtp_password="secret")
    assert settings.email_from == "ops@example.com"
    assert settings.is_email_configured


def test_reload_settings_replaces_singleton():
    first = reload_settings(database_url="sqlite://", strict_valuation=True)
    assert get_settings() is first
    assert get_settings().strict_valuation is True
