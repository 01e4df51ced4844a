from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from PIL import Image, ImageDraw

Point = Tuple[float, float]


@dataclass(frozen=True)
class MoveTo:
	point: Point


@dataclass(frozen=True)
class ArcTo:
	"""Canvas-style arcTo: tangent arc between (current, c1) and (c1, c2)."""
	c1: Point
	c2: Point
	radius: float


@dataclass(frozen=True)
class LineTo:
	point: Point


Segment = Union[MoveTo, ArcTo, LineTo]


def _arc_points(current: Point, c1: Point, c2: Point, radius: float) -> List[Point]:
	"""
	Flatten one arcTo segment starting at `current`.
	Returns the points to append, the last one being the new current point.
	"""
	x0, y0 = current
	x1, y1 = c1
	x2, y2 = c2
	v1 = (x0 - x1, y0 - y1)
	v2 = (x2 - x1, y2 - y1)
	n1 = math.hypot(*v1)
	n2 = math.hypot(*v2)
	if radius <= 0 or n1 == 0 or n2 == 0:
		return [c1]
	u1 = (v1[0] / n1, v1[1] / n1)
	u2 = (v2[0] / n2, v2[1] / n2)
	cos_theta = max(-1.0, min(1.0, u1[0] * u2[0] + u1[1] * u2[1]))
	theta = math.acos(cos_theta)
	# collinear control points: the arc degenerates into a straight line
	if theta < 1e-9 or math.pi - theta < 1e-9:
		return [c1]

	tangent = radius / math.tan(theta / 2.0)
	t1 = (x1 + u1[0] * tangent, y1 + u1[1] * tangent)
	t2 = (x1 + u2[0] * tangent, y1 + u2[1] * tangent)
	bis = (u1[0] + u2[0], u1[1] + u2[1])
	bn = math.hypot(*bis)
	dist = radius / math.sin(theta / 2.0)
	center = (x1 + bis[0] / bn * dist, y1 + bis[1] / bn * dist)

	a1 = math.atan2(t1[1] - center[1], t1[0] - center[0])
	a2 = math.atan2(t2[1] - center[1], t2[0] - center[0])
	sweep = a2 - a1
	if sweep > math.pi:
		sweep -= 2 * math.pi
	elif sweep <= -math.pi:
		sweep += 2 * math.pi

	steps = max(2, int(math.ceil(abs(sweep) * radius / 4.0)))
	pts: List[Point] = [t1]
	for i in range(1, steps + 1):
		a = a1 + sweep * i / steps
		pts.append((center[0] + radius * math.cos(a), center[1] + radius * math.sin(a)))
	return pts


@dataclass
class ClipPath:
	segments: List[Segment] = field(default_factory=list)

	def move_to(self, x: float, y: float) -> "ClipPath":
		self.segments.append(MoveTo((x, y)))
		return self

	def arc_to(self, x1: float, y1: float, x2: float, y2: float, r: float) -> "ClipPath":
		self.segments.append(ArcTo((x1, y1), (x2, y2), r))
		return self

	def line_to(self, x: float, y: float) -> "ClipPath":
		self.segments.append(LineTo((x, y)))
		return self

	def flatten(self) -> List[Point]:
		"""Polyline approximation of the path, arcs included."""
		pts: List[Point] = []
		current = None
		for seg in self.segments:
			if isinstance(seg, MoveTo):
				current = seg.point
				pts.append(current)
			elif isinstance(seg, LineTo):
				current = seg.point
				pts.append(current)
			else:
				if current is None:
					# arcTo with no current point behaves as moveTo(c1)
					current = seg.c1
					pts.append(current)
					continue
				arc = _arc_points(current, seg.c1, seg.c2, seg.radius)
				pts.extend(arc)
				current = arc[-1]
		return pts

	def to_mask(self, size: Tuple[int, int], supersample: int = 4) -> Image.Image:
		"""Rasterise the closed path into an anti-aliased "L" mask of `size`."""
		w, h = size
		big = Image.new("L", (w * supersample, h * supersample), 0)
		pts = [(px * supersample, py * supersample) for (px, py) in self.flatten()]
		if len(pts) >= 3:
			ImageDraw.Draw(big).polygon(pts, fill=255)
		if supersample == 1:
			return big
		return big.resize((w, h), Image.Resampling.BOX)


def rounded_rect_path(x: float, y: float, w: float, h: float, r: float) -> ClipPath:
	"""
	Rectangle with quarter-circle corners of radius r.
	r is not clamped; r > min(w, h) / 2 gives self-intersecting geometry.
	"""
	path = ClipPath()
	path.move_to(x + r, y)
	path.arc_to(x, y, x, y + h - r, r)  # top-left
	path.arc_to(x, y + h, x + w - r, y + h, r)  # bottom-left
	path.arc_to(x + w, y + h, x + w, y + h - r, r)  # bottom-right
	path.arc_to(x + w, y, x + w - r, y, r)  # top-right
	path.line_to(x + r, y)
	return path
