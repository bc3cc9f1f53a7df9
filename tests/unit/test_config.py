"""Tests for environment-driven settings."""

import logging

import pytest

from maritime_ghg.config import (
    DEFAULT_EUA_PRICE_EUR,
    DEFAULT_GFI_TIER1_PRICE_USD,
    Settings,
    get_float,
    get_settings,
    settings,
)


class TestGetFloat:
    def test_missing_uses_default(self, monkeypatch):
        monkeypatch.delenv("TEST_PRICE", raising=False)
        assert get_float("TEST_PRICE", 1.5) == 1.5

    def test_parsed(self, monkeypatch):
        monkeypatch.setenv("TEST_PRICE", "92.5")
        assert get_float("TEST_PRICE", 1.5) == 92.5

    def test_garbage_uses_default(self, monkeypatch):
        monkeypatch.setenv("TEST_PRICE", "expensive")
        assert get_float("TEST_PRICE", 1.5) == 1.5


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.default_eua_price_eur == DEFAULT_EUA_PRICE_EUR
        assert s.gfi_tier1_price_usd == DEFAULT_GFI_TIER1_PRICE_USD
        assert s.gfi_tier2_price_usd == 380.0

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_EUA_PRICE_EUR", "70")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.default_eua_price_eur == 70.0
        assert s.log_level == "DEBUG"

    def test_negative_price_reset(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_EUA_PRICE_EUR", "-10")
        assert Settings().default_eua_price_eur == DEFAULT_EUA_PRICE_EUR

    def test_negative_gfi_price_reset(self):
        s = Settings(gfi_tier1_price_usd=-1, gfi_tier2_price_usd=500)
        assert s.gfi_tier1_price_usd == DEFAULT_GFI_TIER1_PRICE_USD
        assert s.gfi_tier2_price_usd == 380.0

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_non_finite_env_price_reset(self, monkeypatch, raw):
        monkeypatch.setenv("DEFAULT_EUA_PRICE_EUR", raw)
        monkeypatch.setenv("GFI_TIER1_PRICE_USD", raw)
        s = Settings()
        assert s.default_eua_price_eur == DEFAULT_EUA_PRICE_EUR
        assert s.gfi_tier1_price_usd == DEFAULT_GFI_TIER1_PRICE_USD

    def test_infinite_gfi_price_reset(self, caplog):
        with caplog.at_level(logging.WARNING):
            s = Settings(gfi_tier2_price_usd=float("inf"))
        assert s.gfi_tier2_price_usd == 380.0
        assert "finite" in caplog.text

    def test_singleton(self):
        assert get_settings() is settings

    def test_configure_logging(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        Settings(log_level="warning").configure_logging()
        assert calls["level"] == logging.WARNING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
