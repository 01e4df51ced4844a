"""Shared test fixtures."""

from __future__ import annotations

from io import BytesIO
from typing import Dict, Optional, Tuple

import piexif
import pytest
from PIL import Image

from api.services.ingest import PhotoRecord, SourceFile
from api.services.metadata import ExposureMetadata
from api.services.session import PhotoSession
from api.services.surface import Surface


def make_jpeg(
	size: Tuple[int, int] = (300, 200),
	color: Tuple[int, int, int] = (200, 40, 40),
	exif: Optional[Dict[int, object]] = None,
) -> bytes:
	img = Image.new("RGB", size, color)
	buf = BytesIO()
	if exif:
		img.save(buf, format="JPEG", quality=95, exif=piexif.dump({"Exif": exif}))
	else:
		img.save(buf, format="JPEG", quality=95)
	return buf.getvalue()


def make_record(
	size: Tuple[int, int] = (300, 200),
	color: Tuple[int, int, int] = (200, 40, 40),
	metadata: Optional[ExposureMetadata] = None,
	name: str = "photo.jpg",
) -> PhotoRecord:
	raster = Image.new("RGB", size, color)
	return PhotoRecord(
		source=SourceFile(name=name, data=b""),
		display_url="data:image/jpeg;base64,",
		raster=raster,
		metadata=metadata or ExposureMetadata(),
		width=size[0],
		height=size[1],
	)


FULL_EXIF = {
	piexif.ExifIFD.ExposureTime: (1, 200),
	piexif.ExifIFD.FNumber: (28, 10),
	piexif.ExifIFD.ISOSpeedRatings: 200,
	piexif.ExifIFD.FocalLengthIn35mmFilm: 50,
}


@pytest.fixture
def small_surface() -> Surface:
	return Surface(240, 240)


@pytest.fixture
def session() -> PhotoSession:
	return PhotoSession(surface=Surface(240, 240))


@pytest.fixture
def jpeg_source() -> SourceFile:
	return SourceFile(name="a.jpg", data=make_jpeg(exif=FULL_EXIF))
