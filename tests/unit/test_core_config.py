"""Unit tests for the core configuration module."""

from core.config import Settings, get_settings


def test_settings_defaults():
    """Test that Settings initializes with expected defaults."""
    settings = Settings()

    assert settings.analysis_model is None
    assert settings.analysis_temperature == 0.3
    assert settings.analysis_max_retries == 2

    assert settings.visual_max_tokens == 2000
    assert settings.visual_include_image is True
    assert settings.visual_request_interval == 0.1

    assert settings.context_max_chars == 2000
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.merge_distance_threshold == 50.0
    assert settings.semantic_merge_distance == 200.0
    assert settings.canvas_width == 800
    assert not hasattr(settings, "canvas_height")


def test_settings_with_env_vars(monkeypatch):
    """Test that Settings properly loads values from environment variables."""
    monkeypatch.setenv("ANALYSIS_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("VISUAL_REQUEST_INTERVAL", "0.5")
    monkeypatch.setenv("MERGE_DISTANCE_THRESHOLD", "75")

    settings = Settings()

    assert settings.analysis_model == "gpt-4o-mini"
    assert settings.visual_request_interval == 0.5
    assert settings.merge_distance_threshold == 75.0


def test_get_settings_singleton():
    """Test that get_settings returns the same instance each time."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2
    assert isinstance(settings1, Settings)


def test_settings_extra_field_handling(monkeypatch):
    """Test that settings ignores extra fields."""
    monkeypatch.setenv("UNKNOWN_FIELD", "value")
    settings = Settings()

    assert not hasattr(settings, "unknown_field")
