"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from hospital_finance.core.config import Settings, get_settings
from hospital_finance.core.reference_data import SUPPORTED_YEARS


@pytest.mark.unit
class TestSettings:
    """Test defaults, environment overrides and validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.supported_years == list(SUPPORTED_YEARS) == [2021, 2022, 2023, 2024]
        assert settings.variation_percent == 15.0
        assert settings.percentage_places == 2
        assert settings.random_seed is None
        assert settings.build_workers == 1
        assert not settings.is_production
        assert not settings.use_json_logs
        assert settings.effective_log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("HOSPITAL_FINANCE_RANDOM_SEED", "42")
        monkeypatch.setenv("HOSPITAL_FINANCE_APP_ENV", "production")
        monkeypatch.setenv("HOSPITAL_FINANCE_SUPPORTED_YEARS", "[2024, 2023]")

        settings = Settings(_env_file=None)
        assert settings.random_seed == 42
        assert settings.is_production
        assert settings.use_json_logs
        assert settings.supported_years == [2023, 2024]

    def test_debug_overrides_log_level(self):
        settings = Settings(_env_file=None, debug=True, log_level="WARNING")
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "DEBUG"

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field, value", [
        ("app_env", "qa"),
        ("log_level", "VERBOSE"),
        ("variation_percent", -1),
        ("percentage_places", 7),
        ("supported_years", []),
        ("supported_years", [2024, 2024]),
        ("build_workers", 0),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
