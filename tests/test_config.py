"""
Tests for settings loading.
"""

import pytest

from moneybook.config import AppSettings, LLMSettings, ProviderKind, get_settings, validate_all_settings


@pytest.fixture
def fresh_settings(monkeypatch, tmp_path):
    """Empty environment, no .env file, no cached Settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("LLM_PROVIDER", "KIMI_API_KEY", "FIREWORKS_API_KEY", "GEMINI_API_KEY",
                 "SUPPORTED_IMAGE_MIME_TYPES", "MAX_IMAGE_SIZE_MB"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:
    """Tests for the settings classes."""

    def test_provider_defaults_to_kimi(self, fresh_settings):
        assert LLMSettings().provider == ProviderKind.KIMI

    def test_provider_is_case_insensitive(self, fresh_settings):
        fresh_settings.setenv("LLM_PROVIDER", " GEMINI ")
        assert LLMSettings().provider == ProviderKind.GEMINI

    def test_mime_types_list(self, fresh_settings):
        fresh_settings.setenv("SUPPORTED_IMAGE_MIME_TYPES", "image/PNG, image/jpeg ,")
        assert AppSettings().supported_mime_types_list == ["image/png", "image/jpeg"]

    def test_max_image_size_bytes(self, fresh_settings):
        assert AppSettings(max_image_size_mb=2).max_image_size_bytes == 2 * 1024 * 1024

    def test_get_settings_is_cached(self, fresh_settings):
        assert get_settings() is get_settings()

    def test_validate_all_settings_reports_missing_keys(self, fresh_settings):
        fresh_settings.setenv("KIMI_API_KEY", "kimi-key")
        results = validate_all_settings()

        assert results["llm"] is True
        assert results["kimi"] is True
        assert results["app"] is True
        assert results["fireworks"] is False
        assert "fireworks_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
