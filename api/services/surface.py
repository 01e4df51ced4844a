from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFont

from api.services.geometry import ClipPath, rounded_rect_path
from api.services.image_utils import encode_jpeg

Color = Tuple[int, int, int]


def _pixel_box(x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
	x0, y0 = int(round(x)), int(round(y))
	x1, y1 = int(round(x + w)), int(round(y + h))
	return x0, y0, max(x1, x0 + 1), max(y1, y0 + 1)


class Surface:
	"""
	RGB drawing target with a stack of clip masks.
	Single-threaded: the owner must not draw from two places at once.
	"""

	def __init__(self, width: int, height: int) -> None:
		self.width = width
		self.height = height
		self.image = Image.new("RGB", (width, height), (0, 0, 0))
		self._clips: List[Image.Image] = []

	@property
	def size(self) -> Tuple[int, int]:
		return (self.width, self.height)

	def clear(self) -> None:
		self.image.paste((0, 0, 0), (0, 0, self.width, self.height))

	def fill(self, color: Color) -> None:
		self.image.paste(color, (0, 0, self.width, self.height))

	@contextmanager
	def clip(
		self,
		path: Optional[ClipPath] = None,
		rect: Optional[Tuple[float, float, float, float]] = None,
	) -> Iterator["Surface"]:
		"""
		Intersect the current clip with `rect` (x, y, w, h) and `path` for the
		duration of the block. The previous clip is restored on every exit.
		"""
		mask = self._clips[-1] if self._clips else None
		if rect is not None:
			mask = self._intersect(mask, rounded_rect_path(*rect, 0).to_mask(self.size))
		if path is not None:
			mask = self._intersect(mask, path.to_mask(self.size))
		depth = len(self._clips)
		if mask is not None:
			self._clips.append(mask)
		try:
			yield self
		finally:
			del self._clips[depth:]

	@staticmethod
	def _intersect(a: Optional[Image.Image], b: Image.Image) -> Image.Image:
		return b if a is None else ImageChops.multiply(a, b)

	def draw_image(self, img: Image.Image, x: float, y: float, w: float, h: float, alpha: float = 1.0) -> None:
		x0, y0, x1, y1 = _pixel_box(x, y, w, h)
		size = (x1 - x0, y1 - y0)
		tile = img if img.size == size else img.resize(size, Image.Resampling.LANCZOS)
		if tile.mode != "RGB":
			tile = tile.convert("RGB")

		mask = self._clips[-1].crop((x0, y0, x1, y1)) if self._clips else None
		if alpha < 1.0:
			a = Image.new("L", size, int(round(255 * max(alpha, 0.0))))
			mask = a if mask is None else ImageChops.multiply(mask, a)
		self.image.paste(tile, (x0, y0), mask)

	def draw_glow(
		self,
		img: Image.Image,
		x: float,
		y: float,
		w: float,
		h: float,
		sigma: float,
		alpha: float,
		downscale: int = 8,
	) -> None:
		"""
		Draw `img` into (x, y, w, h) gaussian blurred with `sigma` pixels and
		blended at `alpha`. The blur runs on a downscaled premultiplied layer.
		"""
		d = max(1, int(downscale))
		small_w, small_h = max(1, self.width // d), max(1, self.height // d)
		layer = np.zeros((small_h, small_w, 3), dtype=np.float32)
		cover = np.zeros((small_h, small_w), dtype=np.float32)

		x0, y0, x1, y1 = _pixel_box(x / d, y / d, w / d, h / d)
		tile = np.asarray(img.convert("RGB").resize((x1 - x0, y1 - y0), Image.Resampling.BILINEAR), dtype=np.float32)
		# paste the tile, cropped to the layer bounds
		cx0, cy0 = max(x0, 0), max(y0, 0)
		cx1, cy1 = min(x1, small_w), min(y1, small_h)
		if cx1 <= cx0 or cy1 <= cy0:
			return
		layer[cy0:cy1, cx0:cx1] = tile[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0]
		cover[cy0:cy1, cx0:cx1] = 1.0

		s = sigma / d
		if s > 0:
			pad = int(math.ceil(3 * s))
			layer = np.pad(layer, ((pad, pad), (pad, pad), (0, 0)))
			cover = np.pad(cover, pad)
			layer = cv2.GaussianBlur(layer, (0, 0), sigmaX=s, sigmaY=s, borderType=cv2.BORDER_REPLICATE)
			cover = cv2.GaussianBlur(cover, (0, 0), sigmaX=s, sigmaY=s, borderType=cv2.BORDER_REPLICATE)
			layer = layer[pad:pad + small_h, pad:pad + small_w]
			cover = cover[pad:pad + small_h, pad:pad + small_w]

		layer = cv2.resize(layer, self.size, interpolation=cv2.INTER_LINEAR)
		cover = cv2.resize(cover, self.size, interpolation=cv2.INTER_LINEAR)[..., None]

		dst = np.asarray(self.image, dtype=np.float32)
		out = dst * (1.0 - alpha * cover) + alpha * layer
		self.image = Image.fromarray(np.clip(out + 0.5, 0, 255).astype(np.uint8))

	def fill_text(self, text: str, cx: float, cy: float, font: ImageFont.ImageFont, color: Color) -> None:
		"""Draw `text` centered on (cx, cy)."""
		ImageDraw.Draw(self.image).text((cx, cy), text, font=font, fill=color, anchor="mm")

	def encode_jpeg(self, quality: int) -> bytes:
		return encode_jpeg(self.image, quality)
