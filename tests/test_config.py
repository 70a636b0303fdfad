# tests/test_config.py
import pytest

from app.config import DEFAULT_SEARCH_API_URL, Settings


def test_defaults(test_settings):
    assert test_settings.SEARCH_API_URL == DEFAULT_SEARCH_API_URL == "http://localhost:8080/search"
    assert test_settings.SEARCH_PAGE_SIZE == 10
    assert test_settings.SEARCH_API_TIMEOUT is None
    assert test_settings.REQUEST_TIMEOUT == 29.0
    assert not test_settings.is_prod


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SEARCH_API_URL", " http://search:8080/search ")
    monkeypatch.setenv("SEARCH_PAGE_SIZE", "25")
    monkeypatch.setenv("SEARCH_API_TIMEOUT", "2.5")
    monkeypatch.setenv("ENV", "PROD")

    s = Settings()
    assert s.SEARCH_API_URL == "http://search:8080/search"
    assert s.SEARCH_PAGE_SIZE == 25
    assert s.SEARCH_API_TIMEOUT == 2.5
    assert s.is_prod


def test_blank_page_size_uses_default(monkeypatch):
    monkeypatch.setenv("SEARCH_PAGE_SIZE", "  ")
    assert Settings().SEARCH_PAGE_SIZE == 10


@pytest.mark.parametrize("value", ["0", "-5", "ten"])
def test_invalid_page_size(monkeypatch, value):
    monkeypatch.setenv("SEARCH_PAGE_SIZE", value)
    with pytest.raises(ValueError):
        Settings()
