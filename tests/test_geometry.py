import math

import pytest

from branch_generator.geometry import (
    Position,
    Segment,
    as_position,
    bounding_box,
    project,
    segment_multiset,
    thicken_segments,
)


def test_position_translate_is_new_position():
    p = Position(1.0, 2.0, 3.0)
    q = p.translate((0, -1, 1))
    assert q == Position(1.0, 1.0, 4.0)
    assert p == Position(1.0, 2.0, 3.0)


def test_segment_length_and_linestring():
    s = Segment(Position(0, 0, 0), Position(0, 1, 1))
    assert math.isclose(s.length, math.sqrt(2))
    line = s.to_linestring()
    assert line.has_z
    assert list(line.coords) == [(0, 0, 0), (0, 1, 1)]


def test_as_position_rejects_wrong_arity():
    with pytest.raises(ValueError):
        as_position((1, 2))


def test_project_planes():
    assert project((1, 2, 3), "xy") == (1, 2)
    assert project((1, 2, 3), "xz") == (1, 3)
    assert project((1, 2, 3), "yz") == (2, 3)
    with pytest.raises(ValueError):
        project((1, 2, 3), "zz")


def test_segment_multiset_ignores_order():
    a = Segment(Position(0, 0, 0), Position(0, 0, 1))
    b = Segment(Position(0, 0, 1), Position(0, 1, 2))
    assert segment_multiset([a, b]) == segment_multiset([b, a])
    assert segment_multiset([a, a]) != segment_multiset([a])


def test_bounding_box():
    segments = [
        Segment(Position(0, 0, 0), Position(0, 1, 1)),
        Segment(Position(0, 0, 0), Position(0, -1, 1)),
    ]
    lo, hi = bounding_box(segments)
    assert lo.tolist() == [0, -1, 0]
    assert hi.tolist() == [0, 1, 1]


def test_thicken_segments_unions_branches():
    segments = [
        Segment(Position(0, 0, 0), Position(0, 0, 1)),
        Segment(Position(0, 0, 1), Position(0, 1, 2)),
    ]
    outline = thicken_segments(segments, radius=0.1)
    assert outline.geom_type == "Polygon"
    assert outline.area > 0
    assert outline.contains(outline.representative_point())


def test_thicken_segments_requires_positive_radius():
    with pytest.raises(ValueError):
        thicken_segments([], radius=0)
