"""Tests for rounded-rect clip paths."""

import math

import pytest

from api.services.geometry import ArcTo, LineTo, MoveTo, rounded_rect_path


def test_rounded_rect_segments() -> None:
	path = rounded_rect_path(10, 20, 100, 50, 8)

	assert path.segments == [
		MoveTo((18, 20)),
		ArcTo((10, 20), (10, 62), 8),
		ArcTo((10, 70), (102, 70), 8),
		ArcTo((110, 70), (110, 62), 8),
		ArcTo((110, 20), (102, 20), 8),
		LineTo((18, 20)),
	]


def test_flattened_corners_lie_on_their_circles() -> None:
	w, h, r = 200, 100, 20
	pts = rounded_rect_path(0, 0, w, h, r).flatten()
	corners = [
		((r, r), lambda px, py: px <= r and py <= r),
		((r, h - r), lambda px, py: px <= r and py >= h - r),
		((w - r, h - r), lambda px, py: px >= w - r and py >= h - r),
		((w - r, r), lambda px, py: px >= w - r and py <= r),
	]

	assert len(pts) > 10
	for px, py in pts:
		assert -1e-9 <= px <= w + 1e-9
		assert -1e-9 <= py <= h + 1e-9
		for (cx, cy), inside in corners:
			if inside(px, py):
				assert math.hypot(px - cx, py - cy) == pytest.approx(r, abs=1e-6)


def test_zero_radius_is_a_plain_rectangle() -> None:
	pts = rounded_rect_path(5, 5, 10, 10, 0).flatten()

	assert set(pts) == {(5, 5), (15, 5), (15, 15), (5, 15)}


def test_mask_clears_corners_and_fills_center() -> None:
	mask = rounded_rect_path(0, 0, 100, 100, 30).to_mask((100, 100))

	assert mask.mode == "L"
	assert mask.getpixel((1, 1)) == 0
	assert mask.getpixel((98, 98)) == 0
	assert mask.getpixel((50, 50)) == 255
	assert mask.getpixel((50, 1)) == 255


def test_oversized_radius_does_not_raise() -> None:
	path = rounded_rect_path(0, 0, 40, 20, 50)

	assert path.flatten()
	path.to_mask((40, 20))
