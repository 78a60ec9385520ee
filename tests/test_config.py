"""Tests for configuration helpers."""

from lumina_gallery.config import Settings, resolve_image_url


def test_api_base_url_joins_prefix() -> None:
    settings = Settings(backend_url="https://gallery.test/")

    assert settings.api_base_url == "https://gallery.test/api"


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("BACKEND_URL", "https://photos.example")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")

    settings = Settings()

    assert settings.backend_url == "https://photos.example"
    assert settings.request_timeout == 5.0


def test_resolve_image_url_keeps_absolute_urls() -> None:
    assert resolve_image_url("https://a.test", "http://cdn.test/x.jpg") == (
        "http://cdn.test/x.jpg"
    )
    assert resolve_image_url("https://a.test/", "/uploads/x.jpg") == (
        "https://a.test/uploads/x.jpg"
    )
