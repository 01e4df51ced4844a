"""Tests for the fit/placement calculator."""

import math

import pytest

from api.services.errors import InvalidGeometry
from api.services.layout import compute_fit


def test_landscape_anchors_left_and_centers_vertically() -> None:
	fit = compute_fit(1440, 1440, 25, 25, 25, 100, 1.5)

	assert fit.w == 1390
	assert fit.h == pytest.approx(926.667, abs=1e-3)
	assert fit.x == 25
	assert fit.y == pytest.approx(720 - fit.h / 2)
	assert not fit.portrait


def test_portrait_centers_horizontally_and_anchors_top() -> None:
	fit = compute_fit(1440, 1440, 25, 25, 25, 100, 0.67)

	assert fit.h == 1315
	assert fit.w == pytest.approx(881.05)
	assert fit.x == pytest.approx(720 - fit.w / 2)
	assert fit.y == 25
	assert fit.portrait


@pytest.mark.parametrize("aspect", [0.2, 0.5, 0.67, 1.0, 1.05, 1.5, 3.0, 10.0])
@pytest.mark.parametrize("margins", [(25, 25, 25, 25), (25, 25, 25, 100), (10, 40, 5, 60)])
def test_fit_keeps_aspect_and_touches_exactly_one_bound(aspect, margins) -> None:
	ml, mr, mt, mb = margins
	fit = compute_fit(1440, 1000, ml, mr, mt, mb, aspect)
	budget_w = 1440 - ml - mr
	budget_h = 1000 - mt - mb

	assert fit.w / fit.h == pytest.approx(aspect)
	assert fit.w <= budget_w + 1e-9
	assert fit.h <= budget_h + 1e-9
	touches_w = math.isclose(fit.w, budget_w)
	touches_h = math.isclose(fit.h, budget_h)
	assert touches_w != touches_h


def test_square_canvas_with_square_image_uses_portrait_position() -> None:
	# h == bound exactly, so the portrait positioning branch applies
	fit = compute_fit(1440, 1440, 25, 25, 25, 25, 1.0)

	assert fit.portrait
	assert (fit.x, fit.y, fit.w, fit.h) == (25, 25, 1390, 1390)


@pytest.mark.parametrize("aspect", [0, -1.5, float("nan"), float("inf")])
def test_rejects_invalid_aspect(aspect) -> None:
	with pytest.raises(InvalidGeometry):
		compute_fit(1440, 1440, 25, 25, 25, 25, aspect)
