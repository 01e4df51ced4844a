"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from api.config import Settings


def test_defaults(monkeypatch) -> None:
	for name in ("OVERLAY_FONT", "EXPORT_QUALITY", "LOG_LEVEL", "CORS_ORIGINS"):
		monkeypatch.delenv(f"PHOTOMAT_{name}", raising=False)

	settings = Settings()

	assert settings.overlay_font == "courbd.ttf"
	assert settings.export_quality == 100
	assert settings.log_level == "INFO"
	assert settings.cors_origin_list() == ["*"]


def test_reads_prefixed_environment(monkeypatch) -> None:
	monkeypatch.setenv("PHOTOMAT_EXPORT_QUALITY", "85")
	monkeypatch.setenv("PHOTOMAT_LOG_LEVEL", "debug")
	monkeypatch.setenv("PHOTOMAT_CORS_ORIGINS", "http://a.test, ,http://b.test")
	monkeypatch.setenv("PHOTOMAT_OVERLAY_FONT", "DejaVuSansMono.ttf")

	settings = Settings()

	assert settings.export_quality == 85
	assert settings.log_level == "DEBUG"
	assert settings.cors_origin_list() == ["http://a.test", "http://b.test"]
	assert settings.overlay_font == "DejaVuSansMono.ttf"


@pytest.mark.parametrize("value", ["500", "0", "high"])
def test_export_quality_is_validated(monkeypatch, value) -> None:
	monkeypatch.setenv("PHOTOMAT_EXPORT_QUALITY", value)

	with pytest.raises(ValidationError):
		Settings()


def test_unknown_log_level_is_rejected(monkeypatch) -> None:
	monkeypatch.setenv("PHOTOMAT_LOG_LEVEL", "chatty")

	with pytest.raises(ValidationError):
		Settings()
