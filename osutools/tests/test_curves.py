import math
from typing import List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from osutools.chart import (
    CurveKind,
    HitObjectExtras,
    Position,
    Slider,
    TempoMarker,
)
from osutools.curves import (
    CURVE_SAMPLES,
    Point,
    circumcircle,
    curve_path,
    is_collinear,
    path_length,
    perfect_path,
    polyline_path,
    slider_path,
    traversal_time,
)
from osutools.tempo import TempoTrack
from osutools.testutils import strategies as osust


def close_to(a: Point, b: Point) -> bool:
    return math.isclose(a.x, b.x, abs_tol=1e-6) and math.isclose(
        a.y, b.y, abs_tol=1e-6
    )


@pytest.mark.parametrize("kind", list(CurveKind))
def test_no_control_points(kind: CurveKind) -> None:
    start = Point(12, 34)
    assert curve_path(start, kind, ()) == (start,)


def test_linear_path() -> None:
    path = curve_path(Point(0, 0), CurveKind.LINEAR, (Point(100, 0),))
    assert len(path) == 1 + CURVE_SAMPLES
    assert path[0] == Point(0, 0)
    assert path[1] == Point(0, 0)
    assert path[-1] == Point(100, 0)
    assert path[11] == Point(50, 0)
    assert path_length(path) == pytest.approx(100)


def test_linear_path_has_one_run_of_samples_per_segment() -> None:
    path = curve_path(Point(0, 0), CurveKind.LINEAR, (Point(10, 0), Point(10, 10)))
    assert len(path) == 1 + 2 * CURVE_SAMPLES
    assert path_length(path) == pytest.approx(20)


def test_bezier_endpoints() -> None:
    start = Point(0, 0)
    controls = (Point(50, 100), Point(100, -40), Point(150, 0))
    path = curve_path(start, CurveKind.BEZIER, controls)
    assert len(path) == 1 + CURVE_SAMPLES
    assert path[0] == start
    assert close_to(path[1], start)
    assert close_to(path[-1], controls[-1])


def test_quadratic_bezier_midpoint() -> None:
    path = curve_path(
        Point(0, 0), CurveKind.BEZIER, (Point(50, 100), Point(100, 0))
    )
    assert close_to(path[11], Point(50, 50))


def test_catmull_endpoints() -> None:
    start = Point(0, 0)
    controls = (Point(50, 50), Point(100, 0), Point(150, 50))
    path = curve_path(start, CurveKind.CATMULL, controls)
    assert len(path) == 1 + CURVE_SAMPLES
    assert close_to(path[1], start)
    assert close_to(path[-1], controls[-1])


def test_circumcircle() -> None:
    circle = circumcircle(Point(0, 0), Point(1, 1), Point(2, 0))
    assert circle is not None
    center, radius = circle
    assert close_to(center, Point(1, 0))
    assert radius == pytest.approx(1)


def test_circumcircle_of_aligned_points() -> None:
    assert circumcircle(Point(0, 0), Point(1, 1), Point(2, 2)) is None


def test_collinear() -> None:
    assert is_collinear(Point(0, 0), Point(1, 1), Point(2, 2))
    assert is_collinear(Point(0, 0), Point(0, 0), Point(5, 3))
    assert not is_collinear(Point(0, 0), Point(1, 1), Point(2, 0))


def test_collinear_perfect_curve_is_drawn_as_straight_lines() -> None:
    start = Point(0, 0)
    controls = (Point(50, 50), Point(100, 100))
    path = perfect_path(start, list(controls))
    assert path == polyline_path(start, list(controls))
    assert all(math.isclose(p.x, p.y) for p in path)


def test_perfect_curve_with_a_single_control_point_is_linear() -> None:
    path = curve_path(Point(0, 0), CurveKind.PERFECT, (Point(100, 0),))
    assert path == curve_path(Point(0, 0), CurveKind.LINEAR, (Point(100, 0),))


def test_perfect_curve_with_a_huge_radius_is_drawn_as_straight_lines() -> None:
    start = Point(0, 0)
    controls = [Point(100, 0.5), Point(200, 0)]
    assert perfect_path(start, controls) == polyline_path(start, controls)


def test_half_circle() -> None:
    start = Point(0, 0)
    controls = (Point(100, 100), Point(200, 0))
    path = curve_path(start, CurveKind.PERFECT, controls)
    assert path[0] == start
    assert close_to(path[1], start)
    assert close_to(path[-1], Point(200, 0))
    # goes through the middle control point, never below the x axis
    assert max(p.y for p in path) == pytest.approx(100, abs=0.5)
    assert min(p.y for p in path) > -1e-6
    assert path_length(path) == pytest.approx(math.pi * 100, rel=1e-3)


def test_arc_direction_follows_the_middle_point() -> None:
    start = Point(0, 0)
    path = curve_path(start, CurveKind.PERFECT, (Point(100, -100), Point(200, 0)))
    assert min(p.y for p in path) == pytest.approx(-100, abs=0.5)
    assert max(p.y for p in path) < 1e-6


@given(
    osust.point(),
    st.sampled_from(list(CurveKind)),
    st.lists(osust.point(), max_size=6),
)
def test_that_paths_are_always_finite(
    start: Point, kind: CurveKind, controls: List[Point]
) -> None:
    path = curve_path(start, kind, tuple(controls))
    assert path[0] == start
    assert all(p.is_finite() for p in path)
    assert math.isfinite(path_length(path))


def test_slider_path() -> None:
    slider = Slider(
        x=0,
        y=0,
        time=0,
        new_combo=False,
        color_skip=0,
        hitsound=0,
        extras=HitObjectExtras(),
        curve_kind=CurveKind.LINEAR,
        curve_points=(Position(30, 40),),
        repeat=1,
        pixel_length=50,
    )
    assert path_length(slider_path(slider)) == pytest.approx(50)


def marker(offset: int, beat_length: float) -> TempoMarker:
    return TempoMarker(
        offset=offset,
        beat_length=beat_length,
        meter=4,
        sample_set="0",
        sample_index=0,
        volume=100,
        inherited=beat_length <= 0,
        kiai=False,
    )


def test_traversal_time() -> None:
    track = TempoTrack([marker(0, 500), marker(1000, -50)])
    track.advance(0)
    assert traversal_time(140, 1.4, track) == pytest.approx(500)
    track.advance(1000)
    assert traversal_time(140, 1.4, track) == pytest.approx(1000)


def test_traversal_time_with_a_zero_slider_multiplier() -> None:
    track = TempoTrack([marker(0, 500)])
    with pytest.raises(ValueError):
        traversal_time(100, 0.0, track)


def test_perfect_curve_over_aligned_points_is_not_an_arc() -> None:
    start = Point(0, 0)
    controls = (Point(1, 0), Point(2, 0))
    path = curve_path(start, CurveKind.PERFECT, controls)
    assert path == tuple(polyline_path(start, list(controls)))
    assert all(p.y == 0 for p in path)


def test_bezier_with_a_very_high_degree() -> None:
    start = Point(0, 0)
    controls = tuple(Point(i, 100 * (i % 2)) for i in range(1, 1201))
    path = curve_path(start, CurveKind.BEZIER, controls)
    assert len(path) == 1 + CURVE_SAMPLES
    assert all(p.is_finite() for p in path)
    assert path[1] == start
    assert path[-1] == controls[-1]
    # halfway along a zigzag that goes from x=0 to x=1200
    assert close_to(path[11], Point(600, 50))
