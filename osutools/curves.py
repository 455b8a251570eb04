"""Turns the raw control points of a slider into a path that can be drawn

Every function in here is pure and none of them raise on degenerate input :
when a curve can't be computed the way its kind asks for, the path falls
back to straight lines between the points"""

from __future__ import annotations

import math
from dataclasses import astuple, dataclass
from functools import lru_cache
from typing import Iterator, List, Optional, Sequence, Tuple

from more_itertools import pairwise

from osutools.chart import CurveKind, Position, Slider
from osutools.tempo import TempoTrack

# points emitted per linear segment, bezier curve and catmull-rom spline
CURVE_SAMPLES = 21
# points emitted per segment when a perfect circle degrades to straight lines
FALLBACK_STEPS = 10
# triangles flatter than this are treated as straight lines
COLLINEAR_AREA = 1e-3
MIN_RADIUS = 1.0
MAX_RADIUS = 1000.0
MIN_ARC_SEGMENTS = 20
ARC_PIXELS_PER_SEGMENT = 4.0


@dataclass(frozen=True)
class Point:
    """2D float vector"""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield from astuple(self)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, other: float) -> Point:
        return Point(self.x * other, self.y * other)

    __rmul__ = __mul__

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def from_position(cls, pos: Position) -> Point:
        return cls(float(pos.x), float(pos.y))


Path = Tuple[Point, ...]


def lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def sample_parameters(count: int = CURVE_SAMPLES) -> Iterator[float]:
    """count evenly spaced values from 0 to 1, both ends included"""
    steps = count - 1
    for i in range(count):
        yield i / steps


def cross(a: Point, b: Point) -> float:
    return a.x * b.y - a.y * b.x


@lru_cache(maxsize=4096)
def curve_path(start: Point, kind: CurveKind, controls: Tuple[Point, ...]) -> Path:
    """Path of a slider starting at start and going through controls.
    The first point of the path is always start itself"""
    if not controls:
        return (start,)

    if kind == CurveKind.LINEAR:
        points = linear_path(start, controls)
    elif kind == CurveKind.BEZIER:
        points = bezier_path(start, controls)
    elif kind == CurveKind.CATMULL:
        points = catmull_path(start, controls)
    elif kind == CurveKind.PERFECT:
        points = perfect_path(start, controls)
    else:
        raise NotImplementedError(f"Unknown curve kind : {kind!r}")

    return tuple(points)


def linear_path(start: Point, controls: Sequence[Point]) -> List[Point]:
    path = [start]
    for a, b in pairwise([start, *controls]):
        path.extend(lerp(a, b, t) for t in sample_parameters())

    return path


def bezier_point(points: Sequence[Point], t: float) -> Point:
    """Evaluate the bezier curve of degree len(points) - 1 at t, in the
    Bernstein basis. Weights are computed as logarithms since the binomial
    coefficients of long curves don't fit in a float"""
    if t <= 0:
        return points[0]
    if t >= 1:
        return points[-1]

    degree = len(points) - 1
    log_t = math.log(t)
    log_1_t = math.log1p(-t)
    log_degree_factorial = math.lgamma(degree + 1)
    x = y = 0.0
    for i, p in enumerate(points):
        log_weight = (
            log_degree_factorial
            - math.lgamma(i + 1)
            - math.lgamma(degree - i + 1)
            + i * log_t
            + (degree - i) * log_1_t
        )
        weight = math.exp(log_weight)
        x += weight * p.x
        y += weight * p.y

    return Point(x, y)


def bezier_path(start: Point, controls: Sequence[Point]) -> List[Point]:
    # repeated control points (red anchors) do not split the curve
    points = [start, *controls]
    return [start, *(bezier_point(points, t) for t in sample_parameters())]


def catmull_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        2 * p1
        + t * (p2 - p0)
        + t2 * (2 * p0 - 5 * p1 + 4 * p2 - p3)
        + t3 * (3 * p1 - p0 - 3 * p2 + p3)
    )


def catmull_path(start: Point, controls: Sequence[Point]) -> List[Point]:
    points = [start, *controls]
    last = len(points) - 1
    path = [start]
    for u in sample_parameters():
        global_t = u * last
        segment = min(int(global_t), last - 1)
        t = global_t - segment
        path.append(
            catmull_point(
                points[max(segment - 1, 0)],
                points[segment],
                points[segment + 1],
                points[min(segment + 2, last)],
                t,
            )
        )

    return path


def circumcircle(a: Point, b: Point, c: Point) -> Optional[Tuple[Point, float]]:
    """Center and radius of the circle going through a, b and c, None if
    there is no such circle"""
    d = 2 * (a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))
    if d == 0:
        return None

    a_sq = a.x ** 2 + a.y ** 2
    b_sq = b.x ** 2 + b.y ** 2
    c_sq = c.x ** 2 + c.y ** 2
    center = Point(
        (a_sq * (b.y - c.y) + b_sq * (c.y - a.y) + c_sq * (a.y - b.y)) / d,
        (a_sq * (c.x - b.x) + b_sq * (a.x - c.x) + c_sq * (b.x - a.x)) / d,
    )
    radius = (a - center).length()
    if not (center.is_finite() and math.isfinite(radius)):
        return None

    return center, radius


def is_collinear(a: Point, b: Point, c: Point) -> bool:
    return abs(cross(b - a, c - a)) / 2 < COLLINEAR_AREA


def perfect_path(start: Point, controls: Sequence[Point]) -> List[Point]:
    if len(controls) < 2:
        return linear_path(start, controls)

    a, b, c = start, controls[0], controls[1]
    circle = None if is_collinear(a, b, c) else circumcircle(a, b, c)
    if circle is None or not MIN_RADIUS < circle[1] < MAX_RADIUS:
        return polyline_path(start, [b, c])

    center, radius = circle
    start_angle = math.atan2(a.y - center.y, a.x - center.x)
    sweep = arc_sweep(
        start_angle,
        math.atan2(b.y - center.y, b.x - center.x),
        math.atan2(c.y - center.y, c.x - center.x),
    )
    segments = max(
        MIN_ARC_SEGMENTS, math.ceil(radius * abs(sweep) / ARC_PIXELS_PER_SEGMENT)
    )
    path = [start]
    for i in range(segments + 1):
        angle = start_angle + sweep * i / segments
        path.append(
            Point(
                center.x + radius * math.cos(angle),
                center.y + radius * math.sin(angle),
            )
        )

    return path


def arc_sweep(start: float, middle: float, end: float) -> float:
    """Signed angle to travel from start to end while passing through middle,
    positive when going in the direction of increasing angles"""
    full_turn = 2 * math.pi
    to_end = (end - start) % full_turn
    to_middle = (middle - start) % full_turn
    if to_middle <= to_end:
        return to_end
    else:
        return to_end - full_turn


def polyline_path(start: Point, controls: Sequence[Point]) -> List[Point]:
    path = [start]
    for a, b in pairwise([start, *controls]):
        path.extend(lerp(a, b, t) for t in sample_parameters(FALLBACK_STEPS + 1))

    return path


def path_length(path: Sequence[Point]) -> float:
    return sum((b - a).length() for a, b in pairwise(path))


def slider_path(slider: Slider) -> Path:
    return curve_path(
        Point.from_position(slider.position),
        slider.curve_kind,
        tuple(Point.from_position(p) for p in slider.curve_points),
    )


def traversal_time(
    pixel_length: float, slider_multiplier: float, track: TempoTrack
) -> float:
    """Milliseconds needed to go through pixel_length osu!pixels of a slider
    once, at the tempo and velocity track currently points to"""
    pixels_per_beat = 100 * slider_multiplier * track.velocity_multiplier()
    if pixels_per_beat == 0:
        raise ValueError(
            "Can't compute slider duration with a zero slider multiplier "
            "or a zero velocity"
        )

    return pixel_length / pixels_per_beat * track.beat_length()
