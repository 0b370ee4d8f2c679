"""Tests for Settings."""

from app.config import Settings


def test_test_environment_uses_sqlite():
    settings = Settings()
    assert settings.is_test
    assert settings.database_url.startswith("sqlite")


def test_pages_from_environment(monkeypatch):
    monkeypatch.setenv("PAGE_1_ID", "111")
    monkeypatch.setenv("PAGE_1_NAME", "Shop One")
    monkeypatch.setenv("PAGE_1_TOKEN", "tok-1")
    monkeypatch.setenv("PAGE_2_ID", "222")
    monkeypatch.setenv("PAGE_2_TOKEN", "tok-2")
    monkeypatch.setenv("PAGE_3_ID", "333")  # no token: skipped

    pages = Settings().pages

    assert [(p.id, p.name, p.token) for p in pages] == [
        ("111", "Shop One", "tok-1"),
        ("222", "222", "tok-2"),
    ]


def test_defaults():
    settings = Settings()
    assert settings.thread_window_hours == 48
    assert settings.operator_language == "vi"
    assert settings.customer_language == "en"
