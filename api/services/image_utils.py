from __future__ import annotations

import base64
import math
from io import BytesIO
from typing import Tuple

from PIL import ExifTags, Image, UnidentifiedImageError

from api.services.errors import DecodeFailure

_FLIP = Image.Transpose.FLIP_LEFT_RIGHT

# EXIF orientation -> (mirror first, then rotate counter-clockwise by degrees)
_ORIENTATION_OPS = {
	2: (True, 0),
	3: (False, 180),
	4: (True, 180),
	5: (True, 90),
	6: (False, 270),
	7: (True, 270),
	8: (False, 90),
}


def apply_exif_orientation(img: Image.Image, exif) -> Image.Image:
	orientation = None
	if exif:
		orientation = exif.get(ExifTags.Base.Orientation)
	try:
		op = _ORIENTATION_OPS.get(int(orientation)) if orientation is not None else None
	except (TypeError, ValueError):
		return img
	if op is None:
		return img
	mirror, degrees = op
	if mirror:
		img = img.transpose(_FLIP)
	if degrees:
		img = img.rotate(degrees, expand=True)
	return img


def decode_raster(data: bytes, filename: str = "image") -> Image.Image:
	"""
	Decode image bytes into an upright RGB raster.
	Raises DecodeFailure for unreadable data or a degenerate size.
	"""
	try:
		img = Image.open(BytesIO(data))
		img.load()
	except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
		raise DecodeFailure(filename, f"unable to load image ({e})") from e
	img = apply_exif_orientation(img, img.getexif())
	if img.mode != "RGB":
		img = img.convert("RGB")
	natural_w, natural_h = img.size
	if natural_w <= 0 or natural_h <= 0:
		raise DecodeFailure(filename, f"degenerate size {natural_w}x{natural_h}")
	return img


def aspect_ratio(size: Tuple[int, int], filename: str = "image") -> float:
	w, h = size
	aspect = w / h if h else float("nan")
	if not math.isfinite(aspect) or aspect <= 0:
		raise DecodeFailure(filename, f"invalid aspect ratio for size {w}x{h}")
	return aspect


def resample_to(img: Image.Image, w: float, h: float) -> Image.Image:
	# canvas sizes truncate to whole pixels
	size = (max(1, int(w)), max(1, int(h)))
	if img.size == size:
		return img.copy()
	return img.resize(size, Image.Resampling.LANCZOS)


def encode_jpeg(img: Image.Image, quality: int) -> bytes:
	buf = BytesIO()
	img.convert("RGB").save(buf, format="JPEG", quality=quality, optimize=True)
	return buf.getvalue()


def jpeg_data_url(img: Image.Image, quality: int) -> str:
	payload = base64.b64encode(encode_jpeg(img, quality)).decode("ascii")
	return f"data:image/jpeg;base64,{payload}"
