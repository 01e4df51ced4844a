from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Output canvas
CANVAS_WIDTH = 1440
CANVAS_HEIGHT = 1440
CANVAS_MARGIN = 25
OVERLAY_MARGIN = 100
CORNER_RADIUS = 30

# Ingestion works against the same square; thumbnails are cheap JPEGs
WORK_CANVAS_WIDTH = CANVAS_WIDTH
WORK_CANVAS_HEIGHT = CANVAS_HEIGHT
THUMBNAIL_QUALITY = 80

# Glow: css blur(300px) at 65% opacity
GLOW_SIGMA = 300.0
GLOW_ALPHA = 0.65
GLOW_SCALE = 1.1
GLOW_DOWNSCALE = 8

# Overlay text
OVERLAY_FONT_FALLBACKS = ("DejaVuSansMono-Bold.ttf", "LiberationMono-Bold.ttf")
OVERLAY_FONT_SIZE = 42
OVERLAY_OFFSET = 48

MAT_COLORS = {"dark": (0, 0, 0), "light": (255, 255, 255)}
TEXT_COLORS = {"dark": (0x99, 0x99, 0x99), "light": (0x66, 0x66, 0x66)}

PREVIEW_QUALITY = 90
EXPORT_SUFFIX = "_mat.jpeg"


class Settings(BaseSettings):
	"""Deployment knobs, read from PHOTOMAT_* environment variables."""

	overlay_font: str = "courbd.ttf"
	export_quality: int = Field(100, ge=1, le=100)
	log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
	# comma separated
	cors_origins: str = "*"

	model_config = SettingsConfigDict(env_prefix="PHOTOMAT_", extra="ignore")

	@field_validator("log_level", mode="before")
	@classmethod
	def _upper_level(cls, v):
		return v.upper() if isinstance(v, str) else v

	def cors_origin_list(self) -> List[str]:
		return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
	return Settings()
