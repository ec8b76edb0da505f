import math

import pytest
from shapely.geometry import box

from branch_generator.subdivision import split_cell, subdivide, subdivide_by_codes


def test_split_cell_cuts_longer_side():
    assert split_cell((0, 0, 4, 2)) == ((0, 0, 2, 2), (2, 0, 4, 2))
    assert split_cell((0, 0, 2, 4), ratio=0.25) == ((0, 0, 2, 1), (0, 1, 2, 4))


def test_subdivide_depth_zero_returns_cell():
    cells = subdivide((0, 0, 3, 2), 0)
    assert len(cells) == 1
    assert cells[0].equals(box(0, 0, 3, 2))


def test_subdivide_doubles_per_level_and_keeps_area():
    cells = subdivide(box(0, 0, 8, 4), 3)
    assert len(cells) == 8
    assert math.isclose(sum(c.area for c in cells), 32.0)
    # First leaf is the lower-left corner
    assert cells[0].bounds == (0.0, 0.0, 2.0, 2.0)


def test_subdivide_respects_min_size():
    cells = subdivide((0, 0, 4, 4), 10, min_size=1.0)
    assert len(cells) == 16
    assert all(min(c.bounds[2] - c.bounds[0], c.bounds[3] - c.bounds[1]) >= 1.0 for c in cells)


@pytest.mark.parametrize("depth, ratio", [(-1, 0.5), (2, 0.0), (2, 1.0)])
def test_subdivide_rejects_bad_parameters(depth, ratio):
    with pytest.raises(ValueError):
        subdivide((0, 0, 1, 1), depth, ratio=ratio)


def test_subdivide_rejects_degenerate_bounds():
    with pytest.raises(ValueError):
        subdivide((0, 0, 0, 1), 1)


def test_subdivide_by_codes_queue_order():
    cells = subdivide_by_codes((0, 0, 4, 2), [1, 0, 2])
    # Left half finished first, right half quartered
    assert len(cells) == 5
    assert cells[0].bounds == (0.0, 0.0, 2.0, 2.0)
    assert math.isclose(sum(c.area for c in cells), 8.0)


def test_subdivide_by_codes_drains_leftover_codes():
    cells = subdivide_by_codes((0, 0, 1, 1), [0, 1, 2, 1])
    assert len(cells) == 1


def test_subdivide_by_codes_does_not_mutate_input():
    codes = [1, 1]
    subdivide_by_codes((0, 0, 1, 1), codes)
    assert codes == [1, 1]
