from __future__ import annotations

from api.services.metadata import ExposureMetadata

SEPARATOR = " | "


def format_overlay(metadata: ExposureMetadata) -> str:
	"""Focal length, aperture, ISO, exposure time; missing fields are dropped."""
	fields = [
		metadata.focal_length + "mm" if metadata.focal_length else None,
		metadata.aperture or None,
		"ISO" + metadata.iso if metadata.iso else None,
		metadata.exposure_time + "s" if metadata.exposure_time else None,
	]
	return SEPARATOR.join(f for f in fields if f)
