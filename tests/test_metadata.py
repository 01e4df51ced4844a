"""Tests for EXIF decoding."""

import piexif

from api.services.metadata import (
	EXPOSURE_TIME,
	F_NUMBER,
	ExposureMetadata,
	decode_exif_tags,
	describe_exposure_time,
	describe_f_number,
	read_exposure_metadata,
)
from tests.conftest import FULL_EXIF, make_jpeg


def test_reads_exposure_fields_from_jpeg() -> None:
	meta = read_exposure_metadata(make_jpeg(exif=FULL_EXIF))

	assert meta == ExposureMetadata(focal_length="50", aperture="f/2.8", iso="200", exposure_time="1/200")


def test_partial_exif_leaves_missing_fields_none() -> None:
	meta = read_exposure_metadata(make_jpeg(exif={piexif.ExifIFD.FNumber: (4, 1)}))

	assert meta.aperture == "f/4"
	assert meta.focal_length is None
	assert meta.iso is None
	assert meta.exposure_time is None


def test_shutter_speed_apex_fallback() -> None:
	# APEX 8 -> 1/256 s
	tags = decode_exif_tags(make_jpeg(exif={piexif.ExifIFD.ShutterSpeedValue: (8, 1)}))

	assert tags[EXPOSURE_TIME].description == "1/256"
	assert F_NUMBER not in tags


def test_jpeg_without_exif_is_empty() -> None:
	assert decode_exif_tags(make_jpeg()) == {}
	assert read_exposure_metadata(make_jpeg()) == ExposureMetadata()


def test_garbage_never_raises() -> None:
	assert decode_exif_tags(b"") == {}
	assert decode_exif_tags(b"not an image at all") == {}
	assert decode_exif_tags(b"\xff\xd8\xff\xe1\x00\x10Exif\x00\x00garbage") == {}


def test_descriptions() -> None:
	assert describe_exposure_time(1 / 200) == "1/200"
	assert describe_exposure_time(2.0) == "2"
	assert describe_exposure_time(2.5) == "2.5"
	assert describe_exposure_time(0) is None
	assert describe_f_number(2.8) == "f/2.8"
	assert describe_f_number(11.0) == "f/11"


def test_extreme_shutter_speed_apex_is_dropped() -> None:
	for apex in ((-2000, 1), (1070, 1)):
		tags = decode_exif_tags(make_jpeg(exif={
			piexif.ExifIFD.ShutterSpeedValue: apex,
			piexif.ExifIFD.FNumber: (4, 1),
		}))

		assert EXPOSURE_TIME not in tags
		assert tags[F_NUMBER].description == "f/4"


def test_out_of_range_exposure_times_have_no_description() -> None:
	assert describe_exposure_time(5e-324) is None
	assert describe_exposure_time(float("inf")) is None
	assert describe_exposure_time(float("nan")) is None
