"""
Tests for polygon coverage and the max_cells budget search.
"""

from unittest.mock import patch

import pytest
from shapely.geometry import Polygon

from geohashkit import grid
from geohashkit.compaction import compact
from geohashkit.coverage import (
    _cover_parts,
    compute_cells,
    interior_min_precision,
    polygon_to_cells,
    sibling_merge_count,
)
from geohashkit.errors import (
    AntimeridianError,
    DegenerateInputError,
    RangeError,
    SizingError,
)
from geohashkit.models import CoverageOptions, NormalisedPolygon
from geohashkit.spatial.hull import cells_to_convex_hull
from geohashkit.spatial.predicates import point_in_polygon, point_on_ring_boundary

LONDON = [(-0.14, 51.495), (-0.12, 51.495), (-0.12, 51.505), (-0.14, 51.505)]
GREENWICH = [(-0.01, 51.495), (0.01, 51.495), (0.01, 51.505), (-0.01, 51.505)]
PARIS = [(2.30, 48.85), (2.32, 48.85), (2.32, 48.86), (2.30, 48.86)]

BRITAIN = [(-6.0, 49.5), (2.0, 49.5), (2.0, 59.0), (-6.0, 59.0)]
MIDLANDS = [(-3.0, 52.0), (-1.0, 52.0), (-1.0, 54.0), (-3.0, 54.0)]

OUTER = [(-1.0, 51.0), (1.0, 51.0), (1.0, 52.0), (-1.0, 52.0)]
HOLE = [(-0.5, 51.25), (0.5, 51.25), (0.5, 51.75), (-0.5, 51.75)]

ACROSS_ANTIMERIDIAN = [(170.0, 0.0), (-170.0, 0.0), (-170.0, 10.0), (170.0, 10.0)]


def geojson(*rings):
    return {"type": "Polygon", "coordinates": [[list(p) for p in r] + [list(r[0])] for r in rings]}


def covered(point, cells):
    return any(grid.bounds(c).contains_point(point) for c in cells)


def assert_no_ancestors(cells):
    present = set(cells)
    for cell in cells:
        assert not any(cell[:n] in present for n in range(1, len(cell)))


class TestTuning:
    """Test suite for the threshold-derived tuning values."""

    @pytest.mark.parametrize('min_p,max_p,threshold,expected', [
        (1, 9, 1.0, 9),
        (1, 9, 0.0, 1),
        (1, 9, 0.5, 5),
        (3, 6, 0.5, 5),
        (4, 4, 0.3, 4),
    ])
    def test_interior_min_precision(self, min_p, max_p, threshold, expected):
        assert interior_min_precision(min_p, max_p, threshold) == expected

    @pytest.mark.parametrize('threshold,expected', [
        (1.0, 32),
        (0.0, 24),
        (0.5, 28),
        (0.75, 30),
        (0.0625, 25),
    ])
    def test_sibling_merge_count(self, threshold, expected):
        assert sibling_merge_count(threshold) == expected


class TestPolygonToCells:
    """Test suite for the public coverage entry point."""

    def test_small_rectangle(self):
        cells = polygon_to_cells(LONDON, min_precision=1, max_precision=7, max_cells=500)
        assert cells
        assert len(cells) == len(set(cells))
        assert all(len(c) <= 7 for c in cells)
        assert cells == sorted(cells)

    def test_rectangle_is_covered(self):
        cells = polygon_to_cells(LONDON, min_precision=1, max_precision=7, max_cells=500)
        for vertex in LONDON:
            assert covered(vertex, cells)
        assert covered((-0.13, 51.50), cells)

    def test_budget_steps_precision_down(self):
        # Inside 'gcp' but straddling a precision-4 boundary
        assert polygon_to_cells(LONDON, min_precision=1, max_precision=7, max_cells=1) == ['gcp']

    def test_sizing_error_reports_minimum_count(self, caplog):
        # Straddles the prime meridian, so at least 'g' and 'u' are needed
        with pytest.raises(SizingError, match='at least 2 cells at precision 1') as excinfo:
            polygon_to_cells(GREENWICH, min_precision=1, max_precision=7, max_cells=1)
        assert excinfo.value.required_cells == 2
        assert excinfo.value.precision == 1
        assert excinfo.value.max_cells == 1
        assert 'trying coarsest coverage' in caplog.text

    def test_budget_of_two_straddling_cells(self):
        cells = polygon_to_cells(GREENWICH, min_precision=1, max_precision=7, max_cells=2)
        assert len(cells) == 2
        assert [c[0] for c in cells] == ['g', 'u']

    def test_budget_and_no_ancestor_invariants(self):
        cells = polygon_to_cells(geojson(BRITAIN, MIDLANDS), max_cells=100)
        assert 0 < len(cells) <= 100
        assert len(cells) == len(set(cells))
        assert cells == sorted(cells)
        assert_no_ancestors(cells)

    def test_huge_polygon_falls_back_to_precision_one(self):
        world = [(-179.0, -89.0), (0.0, -89.0), (179.0, -89.0),
                 (179.0, 89.0), (0.0, 89.0), (-179.0, 89.0)]
        cells = polygon_to_cells(world, max_cells=32)
        assert len(cells) == 32
        assert all(len(c) == 1 for c in cells)

    def test_min_precision_is_respected(self):
        cells = polygon_to_cells(LONDON, min_precision=5, max_precision=7, max_cells=5000)
        assert cells
        assert all(5 <= len(c) <= 7 for c in cells)

    def test_threshold_reduces_cell_count(self):
        ring = [(-0.3, 51.4), (-0.1, 51.4), (-0.1, 51.6), (-0.3, 51.6)]
        counts = [
            len(polygon_to_cells(ring, min_precision=3, max_precision=6,
                                 max_cells=10000, merge_threshold=t))
            for t in (0.0, 0.5, 1.0)
        ]
        assert counts[0] <= counts[1] <= counts[2]

    def test_options_object_and_overrides(self):
        options = CoverageOptions(min_precision=1, max_precision=7, max_cells=500)
        assert polygon_to_cells(LONDON, options) == polygon_to_cells(
            LONDON, CoverageOptions(), max_precision=7
        )

    def test_out_of_range_options_are_clamped(self):
        assert polygon_to_cells(LONDON, min_precision=-3, max_precision=7.2, max_cells=500) == \
            polygon_to_cells(LONDON, min_precision=1, max_precision=7, max_cells=500)

    def test_input_shapes_are_equivalent(self):
        options = CoverageOptions(max_precision=6)
        from_ring = polygon_to_cells(LONDON, options)
        assert polygon_to_cells(geojson(LONDON), options) == from_ring
        assert polygon_to_cells({"type": "Feature", "geometry": geojson(LONDON)}, options) == from_ring
        assert polygon_to_cells(Polygon(LONDON), options) == from_ring

    def test_empty_multipolygon(self):
        assert polygon_to_cells({"type": "MultiPolygon", "coordinates": []}) == []

    def test_hull_encloses_polygon(self):
        cells = polygon_to_cells(LONDON, max_precision=7)
        hull = cells_to_convex_hull(cells)
        for vertex in LONDON:
            assert point_in_polygon(vertex, hull)


class TestHoles:
    """Test suite for polygons with interior rings."""

    @pytest.fixture
    def cells(self):
        return polygon_to_cells(geojson(OUTER, HOLE), max_precision=4, max_cells=10000)

    def test_hole_interior_is_not_covered(self, cells):
        assert not covered((0.2, 51.5), cells)

    def test_ring_between_outer_and_hole_is_covered(self, cells):
        assert covered((0.75, 51.5), cells)
        assert covered((-0.75, 51.9), cells)

    def test_hole_reduces_coverage(self, cells):
        solid = polygon_to_cells(geojson(OUTER), max_precision=4, max_cells=10000)
        assert covered((0.2, 51.5), solid)
        assert cells != solid


class TestMultiPart:
    """Test suite for multi-part inputs."""

    def test_parts_are_unioned(self):
        options = CoverageOptions(max_precision=6, max_cells=5000)
        london = polygon_to_cells(LONDON, options)
        paris = polygon_to_cells(PARIS, options)
        multi = {
            "type": "MultiPolygon",
            "coordinates": [geojson(LONDON)["coordinates"], geojson(PARIS)["coordinates"]],
        }
        assert polygon_to_cells(multi, options) == sorted(london + paris)

    def test_list_of_polygons(self):
        options = CoverageOptions(max_precision=6, max_cells=5000)
        multi = {
            "type": "MultiPolygon",
            "coordinates": [geojson(LONDON)["coordinates"], geojson(PARIS)["coordinates"]],
        }
        assert polygon_to_cells([geojson(LONDON), geojson(PARIS)], options) == \
            polygon_to_cells(multi, options)

    def test_overlapping_parts_have_no_ancestors(self):
        cells = polygon_to_cells([geojson(OUTER), geojson(HOLE)], max_precision=5, max_cells=10000)
        assert_no_ancestors(cells)


class TestBailoutBudget:
    """Test suite for the bailout limit shared by every coverage pass."""

    RING = [(-0.3, 51.4), (-0.1, 51.4), (-0.1, 51.6), (-0.3, 51.6)]

    def test_last_resort_pass_is_bounded(self):
        with patch('geohashkit.coverage.compute_cells', wraps=compute_cells) as spy:
            with pytest.raises(SizingError, match='more than 40 cells at precision 8') as excinfo:
                polygon_to_cells(self.RING, min_precision=8, max_precision=8, max_cells=10)
        bailouts = [c.args[4] for c in spy.call_args_list]
        assert len(bailouts) == 2
        assert bailouts == [40, 40]
        assert excinfo.value.exceeded
        assert excinfo.value.required_cells == 41

    def test_exact_count_when_last_resort_completes(self):
        with pytest.raises(SizingError) as excinfo:
            polygon_to_cells(GREENWICH, min_precision=1, max_precision=7, max_cells=1)
        assert not excinfo.value.exceeded

    def test_parts_share_the_bailout(self):
        parts = [NormalisedPolygon(outer=tuple(LONDON)), NormalisedPolygon(outer=tuple(PARIS))]
        with patch('geohashkit.coverage.compute_cells', side_effect=[['gcp', 'gcq'], ['u09']]) as mock:
            cells = _cover_parts(parts, 1, 3, 1.0, bailout=10)
        assert cells == ['gcp', 'gcq', 'u09']
        assert [c.args[4] for c in mock.call_args_list] == [10, 8]

    def test_parts_exceeding_the_bailout_together(self):
        parts = [NormalisedPolygon(outer=tuple(LONDON)), NormalisedPolygon(outer=tuple(PARIS))]
        with patch('geohashkit.coverage.compute_cells',
                   side_effect=[['gcp', 'gcq', 'gcr'], ['u09', 'u0d']]):
            assert _cover_parts(parts, 1, 3, 1.0, bailout=4) is None

    def test_later_parts_are_skipped_once_over_budget(self):
        parts = [NormalisedPolygon(outer=tuple(LONDON))] * 3
        with patch('geohashkit.coverage.compute_cells',
                   side_effect=[['gcp', 'gcq', 'gcr'], ['u09', 'u0d'], ['u0e']]) as mock:
            assert _cover_parts(parts, 1, 3, 1.0, bailout=4) is None
        assert mock.call_count == 2


class TestValidationBeforeWork:
    """Test suite for errors raised before any subdivision starts."""

    def test_antimeridian_ring(self):
        with patch('geohashkit.coverage.compute_cells') as mock_compute:
            with pytest.raises(AntimeridianError):
                polygon_to_cells(ACROSS_ANTIMERIDIAN)
            mock_compute.assert_not_called()

    def test_one_bad_part_fails_the_whole_call(self):
        multi = [geojson(LONDON), geojson(ACROSS_ANTIMERIDIAN)]
        with patch('geohashkit.coverage.compute_cells') as mock_compute:
            with pytest.raises(AntimeridianError):
                polygon_to_cells(multi)
            mock_compute.assert_not_called()

    def test_degenerate_ring(self):
        with pytest.raises(DegenerateInputError):
            polygon_to_cells([(0.0, 0.0), (1.0, 1.0)])

    def test_out_of_range_coordinate(self):
        with pytest.raises(RangeError):
            polygon_to_cells([(0.0, 0.0), (1.0, 95.0), (1.0, 0.0)])

    @pytest.mark.parametrize('overrides', [
        {'max_cells': 0},
        {'max_cells': float('inf')},
        {'min_precision': float('nan')},
        {'merge_threshold': 'high'},
        {'max_precision': True},
    ])
    def test_invalid_options(self, overrides):
        with patch('geohashkit.coverage.compute_cells') as mock_compute:
            with pytest.raises(RangeError):
                polygon_to_cells(LONDON, **overrides)
            mock_compute.assert_not_called()


class TestComputeCells:
    """Test suite for a single fixed-precision coverage pass."""

    @pytest.fixture
    def polygon(self):
        return NormalisedPolygon(outer=tuple(BRITAIN), holes=(tuple(MIDLANDS),))

    def test_raw_cells_are_contained_or_at_max_precision(self, polygon):
        with patch('geohashkit.coverage.compact', side_effect=lambda cells, *args: sorted(cells)):
            raw = compute_cells(polygon, 1, 4, 0.0)
        assert raw
        coarse = [c for c in raw if len(c) < 4]
        assert coarse
        assert all(len(c) == 4 for c in raw if c not in coarse)
        for cell in coarse:
            for corner in grid.bounds(cell).corners():
                assert point_in_polygon(corner, polygon.outer)
                for hole in polygon.holes:
                    assert point_on_ring_boundary(corner, hole) or not point_in_polygon(corner, hole)

    def test_result_is_compacted(self, polygon):
        cells = compute_cells(polygon, 1, 4, 1.0)
        assert cells == compact(cells)
        assert_no_ancestors(cells)

    def test_bailout(self, polygon):
        assert compute_cells(polygon, 1, 6, 1.0, bailout=10) is None

    def test_polygon_smaller_than_a_cell(self):
        polygon = NormalisedPolygon(outer=tuple(LONDON))
        assert compute_cells(polygon, 1, 2, 1.0) == ['gc']
