from __future__ import annotations

import math
from dataclasses import dataclass

from api.services.errors import InvalidGeometry


@dataclass(frozen=True)
class Placement:
	x: float
	y: float
	w: float
	h: float
	portrait: bool = False


def compute_fit(
	canvas_w: float,
	canvas_h: float,
	margin_l: float,
	margin_r: float,
	margin_t: float,
	margin_b: float,
	source_aspect: float,
) -> Placement:
	"""
	Fit an image of `source_aspect` (w / h) into the canvas content area.

	Landscape-constrained first: the width fills the horizontal budget, the
	image is anchored left and centered vertically. When that height would
	overflow, switch to portrait-constrained: the height fills the vertical
	budget, the image is centered horizontally and anchored to the top.
	"""
	if not math.isfinite(source_aspect) or source_aspect <= 0:
		raise InvalidGeometry(f"aspect ratio must be finite and > 0, got {source_aspect!r}")

	portrait_h = canvas_h - margin_t - margin_b

	# size if landscape
	w = canvas_w - margin_l - margin_r
	h = w / source_aspect

	# size if portrait
	if h > portrait_h:
		h = portrait_h
		w = h * source_aspect

	x = margin_l
	y = canvas_h * 0.5 - h * 0.5

	# position if portrait; same h as the regime check above
	if h == portrait_h:
		return Placement(x=canvas_w * 0.5 - w * 0.5, y=margin_t, w=w, h=h, portrait=True)
	return Placement(x=x, y=y, w=w, h=h)
