from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

import piexif

from api.services.errors import MetadataUnavailable

logger = logging.getLogger(__name__)

# Tag names as the front end reads them
EXPOSURE_TIME = "ExposureTime"
F_NUMBER = "FNumber"
ISO_SPEED = "ISOSpeedRatings"
FOCAL_LENGTH_35MM = "FocalLengthIn35mmFilm"


@dataclass(frozen=True)
class ExifTag:
	value: Any
	description: str


@dataclass(frozen=True)
class ExposureMetadata:
	"""The closed set of exposure fields shown in the overlay; None means absent."""
	focal_length: Optional[str] = None
	aperture: Optional[str] = None
	iso: Optional[str] = None
	exposure_time: Optional[str] = None

	@classmethod
	def from_tags(cls, tags: Mapping[str, ExifTag]) -> "ExposureMetadata":
		def desc(name: str) -> Optional[str]:
			tag = tags.get(name)
			if tag is None or not tag.description:
				return None
			return tag.description

		return cls(
			focal_length=desc(FOCAL_LENGTH_35MM),
			aperture=desc(F_NUMBER),
			iso=desc(ISO_SPEED),
			exposure_time=desc(EXPOSURE_TIME),
		)

	def as_dict(self) -> Dict[str, Optional[str]]:
		return asdict(self)


EMPTY_METADATA = ExposureMetadata()


def _rational_to_float(x: Any) -> Optional[float]:
	if x is None:
		return None
	if isinstance(x, tuple) and len(x) == 2:
		num, den = x
		if not den:
			return None
		return float(num) / float(den)
	try:
		return float(x)
	except (TypeError, ValueError):
		return None


def _apex_to_time(apex: Optional[float]) -> Optional[float]:
	if apex is None:
		return None
	try:
		return 2.0 ** (-apex)
	except OverflowError:
		return None


def _to_int_safe(v: Any) -> Optional[int]:
	if v is None:
		return None
	if isinstance(v, int):
		return v
	if isinstance(v, (list, tuple)) and v:
		return _to_int_safe(v[0])
	if isinstance(v, bytes):
		v = v.decode("utf-8", errors="ignore").strip()
	try:
		return int(v)
	except (TypeError, ValueError):
		return None


def _format_number(v: float) -> str:
	return f"{v:g}"


def describe_exposure_time(seconds: Optional[float]) -> Optional[str]:
	if seconds is None or not math.isfinite(seconds) or seconds <= 0:
		return None
	if seconds >= 1:
		return _format_number(seconds)
	# subnormal times overflow the reciprocal
	denom = 1 / seconds
	if not math.isfinite(denom):
		return None
	return f"1/{round(denom)}"


def describe_f_number(fnumber: Optional[float]) -> Optional[str]:
	if fnumber is None or fnumber <= 0:
		return None
	return f"f/{_format_number(fnumber)}"


def _load_exif(data: bytes) -> Dict[str, Dict[int, Any]]:
	if not data:
		raise MetadataUnavailable("no data")
	# piexif treats anything it does not recognise as a filename
	if not (data[:2] == b"\xff\xd8" or data[:2] in (b"II", b"MM") or data[:4] in (b"Exif", b"RIFF")):
		raise MetadataUnavailable("unsupported container")
	try:
		return piexif.load(data)
	except Exception as e:
		raise MetadataUnavailable(str(e)) from e


def decode_exif_tags(data: bytes) -> Dict[str, ExifTag]:
	"""
	Decode the exposure tags of a JPEG/TIFF/WebP byte string.
	Malformed or missing EXIF yields an empty (or partial) mapping, never an error.
	"""
	try:
		ex = _load_exif(data)
	except MetadataUnavailable as e:
		logger.debug("EXIF unavailable: %s", e)
		return {}

	try:
		return _parse_tags(ex.get("Exif") or {})
	except (ArithmeticError, TypeError, ValueError) as e:
		logger.warning("Ignoring malformed EXIF: %s", e)
		return {}


def _parse_tags(exif: Mapping[int, Any]) -> Dict[str, ExifTag]:
	tags: Dict[str, ExifTag] = {}

	raw = exif.get(piexif.ExifIFD.ExposureTime)
	exp = _rational_to_float(raw)
	if exp is None:
		raw = exif.get(piexif.ExifIFD.ShutterSpeedValue)
		exp = _apex_to_time(_rational_to_float(raw))
	desc = describe_exposure_time(exp)
	if desc:
		tags[EXPOSURE_TIME] = ExifTag(raw, desc)

	raw = exif.get(piexif.ExifIFD.FNumber)
	desc = describe_f_number(_rational_to_float(raw))
	if desc:
		tags[F_NUMBER] = ExifTag(raw, desc)

	raw = exif.get(piexif.ExifIFD.ISOSpeedRatings)
	iso = _to_int_safe(raw)
	if iso:
		tags[ISO_SPEED] = ExifTag(raw, str(iso))

	raw = exif.get(piexif.ExifIFD.FocalLengthIn35mmFilm)
	focal = _to_int_safe(raw)
	if focal:
		tags[FOCAL_LENGTH_35MM] = ExifTag(raw, str(focal))

	return tags


def read_exposure_metadata(data: bytes) -> ExposureMetadata:
	tags = decode_exif_tags(data)
	if not tags:
		return EMPTY_METADATA
	return ExposureMetadata.from_tags(tags)
