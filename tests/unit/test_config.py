"""Tests for pydantic-settings configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from marginalia.config import HighlightsConfig, LoggingConfig, Settings, get_settings


class TestHighlightsConfig:
    """HighlightsConfig sub-model tests."""

    def test_default_storage_is_document(self) -> None:
        """Highlights go to the top-level list by default."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.highlights.storage == "document"

    def test_override_via_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """HIGHLIGHTS__STORAGE selects the legacy layout."""
        monkeypatch.setenv("HIGHLIGHTS__STORAGE", "anchor_block")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.highlights.storage == "anchor_block"

    def test_unknown_storage_rejected(self) -> None:
        """Only the two layouts are accepted."""
        with pytest.raises(ValidationError):
            HighlightsConfig(storage="entity_map")  # type: ignore[arg-type]


class TestLoggingConfig:
    """LoggingConfig sub-model tests."""

    def test_level_normalised_to_upper(self) -> None:
        """Level names are case-insensitive."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_level_rejected(self) -> None:
        """Made-up level names fail validation."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")

    def test_log_dir_via_env(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """LOGGING__LOG_DIR sets the log directory."""
        monkeypatch.setenv("LOGGING__LOG_DIR", str(tmp_path))
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.log_dir == tmp_path


class TestGetSettings:
    """Cached singleton access."""

    def test_cached(self) -> None:
        """Repeated calls return the same instance."""
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Clearing the cache picks up new env values."""
        first = get_settings()
        monkeypatch.setenv("HIGHLIGHTS__STORAGE", "anchor_block")
        get_settings.cache_clear()

        assert get_settings() is not first
        assert get_settings().highlights.storage == "anchor_block"
