from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from PIL import ImageFont

from api.config import (
	CANVAS_MARGIN,
	CORNER_RADIUS,
	GLOW_ALPHA,
	GLOW_DOWNSCALE,
	GLOW_SCALE,
	GLOW_SIGMA,
	MAT_COLORS,
	OVERLAY_FONT_FALLBACKS,
	OVERLAY_FONT_SIZE,
	OVERLAY_MARGIN,
	OVERLAY_OFFSET,
	TEXT_COLORS,
	get_settings,
)
from api.services.geometry import rounded_rect_path
from api.services.ingest import PhotoRecord
from api.services.layout import Placement, compute_fit
from api.services.overlay import format_overlay
from api.services.surface import Surface

logger = logging.getLogger(__name__)


class Mat(str, Enum):
	LIGHT = "light"
	DARK = "dark"


@dataclass(frozen=True)
class DisplayOptions:
	rounded_corners: bool = True
	show_metadata_overlay: bool = False
	mat: Mat = Mat.DARK
	glow: bool = False


@lru_cache(maxsize=4)
def load_overlay_font(size: int = OVERLAY_FONT_SIZE) -> ImageFont.ImageFont:
	for name in (get_settings().overlay_font,) + OVERLAY_FONT_FALLBACKS:
		try:
			return ImageFont.truetype(name, size)
		except OSError:
			continue
	logger.info("No monospace TrueType font found, using Pillow's default font")
	return ImageFont.load_default(size=size)


def render(surface: Surface, photo: PhotoRecord, options: DisplayOptions) -> Placement:
	"""
	Draw `photo` framed on `surface` according to `options`.
	Every call fully repaints the surface; nothing here awaits.
	"""
	mat = Mat(options.mat)
	surface.clear()
	surface.fill(MAT_COLORS[mat.value])

	text = format_overlay(photo.metadata) if options.show_metadata_overlay else ""
	margin_b = OVERLAY_MARGIN if text else CANVAS_MARGIN

	fit = compute_fit(
		surface.width,
		surface.height,
		CANVAS_MARGIN,
		CANVAS_MARGIN,
		CANVAS_MARGIN,
		margin_b,
		photo.aspect,
	)

	if options.glow:
		gw, gh = fit.w * GLOW_SCALE, fit.h * GLOW_SCALE
		gx = fit.x + fit.w * 0.5 - gw * 0.5
		gy = fit.y + fit.h * 0.5 - gh * 0.5
		surface.draw_glow(photo.raster, gx, gy, gw, gh, sigma=GLOW_SIGMA, alpha=GLOW_ALPHA, downscale=GLOW_DOWNSCALE)

	rect: Optional[tuple] = None
	path = None
	if options.rounded_corners:
		rect = (fit.x, fit.y, fit.w, fit.h)
		path = rounded_rect_path(fit.x, fit.y, fit.w, fit.h, CORNER_RADIUS)
	with surface.clip(path=path, rect=rect):
		surface.draw_image(photo.raster, fit.x, fit.y, fit.w, fit.h)

	if text:
		surface.fill_text(
			text,
			surface.width / 2,
			surface.height - OVERLAY_OFFSET,
			load_overlay_font(),
			TEXT_COLORS[mat.value],
		)
	return fit
