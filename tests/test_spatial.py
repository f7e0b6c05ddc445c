"""Tests for the geospatial utilities and the feature dataset."""

from __future__ import annotations

import json
import math

import pytest

from archishield.geo.features import BuildingDataset, Feature
from archishield.geo.spatial import (
    count_within_radius,
    distance,
    nearest_line_distance,
    neighborhood_stats,
    point_in_polygon,
)
from tests.builders import QUIET_SITE, point, ring_features

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


# ---------------------------------------------------------------------------
# distance
# ---------------------------------------------------------------------------


class TestDistance:

    def test_same_point_is_zero(self) -> None:
        assert distance(48.2082, 16.3738, 48.2082, 16.3738) == 0

    def test_symmetric(self) -> None:
        a = (48.2084, 16.3731)
        b = (48.2036, 16.3692)
        assert distance(*a, *b) == distance(*b, *a)

    def test_one_degree_latitude(self) -> None:
        expected = 6_371_000 * math.pi / 180
        assert distance(48.0, 16.0, 49.0, 16.0) == pytest.approx(expected, rel=1e-9)

    def test_triangle_inequality(self) -> None:
        a, b, c = (48.20, 16.34), (48.21, 16.37), (48.22, 16.40)
        assert distance(*a, *c) <= distance(*a, *b) + distance(*b, *c)


# ---------------------------------------------------------------------------
# nearest_line_distance
# ---------------------------------------------------------------------------


class TestNearestLineDistance:

    def test_no_lines_is_infinite(self) -> None:
        assert nearest_line_distance(48.2, 16.3, []) == math.inf

    def test_non_line_features_ignored(self) -> None:
        assert nearest_line_distance(48.2, 16.3, [point("p", 48.2, 16.3)]) == math.inf

    def test_uses_vertices_only(self) -> None:
        # The query point lies on the segment midpoint, but only vertices count
        line = Feature.line([(16.30, 48.20), (16.32, 48.20)])
        d = nearest_line_distance(48.20, 16.31, [line])
        assert d == pytest.approx(distance(48.20, 16.31, 48.20, 16.30))
        assert d > 700

    def test_minimum_across_lines(self) -> None:
        near = Feature.line([(16.3401, 48.2000)], name="near")
        far = Feature.line([(16.35, 48.21)], name="far")
        d = nearest_line_distance(48.2000, 16.3400, [far, near])
        assert d == pytest.approx(distance(48.2000, 16.3400, 48.2000, 16.3401))


# ---------------------------------------------------------------------------
# point_in_polygon
# ---------------------------------------------------------------------------


class TestPointInPolygon:

    def test_inside_and_outside(self) -> None:
        assert point_in_polygon(5.0, 5.0, SQUARE)
        assert not point_in_polygon(15.0, 5.0, SQUARE)
        assert not point_in_polygon(5.0, -1.0, SQUARE)

    def test_closed_ring_same_as_open(self) -> None:
        closed = SQUARE + [SQUARE[0]]
        assert point_in_polygon(5.0, 5.0, closed)
        assert not point_in_polygon(5.0, 11.0, closed)

    def test_bottom_and_left_edges_inside(self) -> None:
        assert point_in_polygon(0.0, 5.0, SQUARE)
        assert point_in_polygon(5.0, 0.0, SQUARE)

    def test_top_and_right_edges_outside(self) -> None:
        assert not point_in_polygon(10.0, 5.0, SQUARE)
        assert not point_in_polygon(5.0, 10.0, SQUARE)

    def test_degenerate_ring(self) -> None:
        assert not point_in_polygon(0.0, 0.0, [(0.0, 0.0), (1.0, 1.0)])


# ---------------------------------------------------------------------------
# Radius queries
# ---------------------------------------------------------------------------


class TestRadiusQueries:

    def test_count_within_radius(self) -> None:
        features = ring_features(12)
        lat, lng = QUIET_SITE
        assert count_within_radius(lat, lng, features, 150) == 12
        # Only the four axis neighbours at roughly 55-60 m
        assert count_within_radius(lat, lng, features, 70) == 4

    def test_lines_have_no_representative_point(self) -> None:
        line = Feature.line([(QUIET_SITE[1], QUIET_SITE[0])])
        assert count_within_radius(*QUIET_SITE, [line], 150) == 0

    def test_polygon_uses_first_vertex(self) -> None:
        lat, lng = QUIET_SITE
        poly = Feature(
            id="poly",
            geometry_type="Polygon",
            coordinates=[[[lng + 0.0005, lat], [lng + 0.01, lat], [lng + 0.01, lat + 0.01]]],
            height=12,
        )
        assert poly.representative_point == (lng + 0.0005, lat)
        assert count_within_radius(lat, lng, [poly], 150) == 1

    def test_empty_neighbourhood(self) -> None:
        stats = neighborhood_stats(*QUIET_SITE, [], 150)
        assert stats.count == 0
        assert stats.avg_height == 0
        assert stats.max_height == 0
        assert stats.nearest == []
        assert stats.radius == 150

    def test_average_rounds_half_up(self) -> None:
        lat, lng = QUIET_SITE
        features = [
            point("a", lat + 0.0005, lng, 10.0),
            point("b", lat - 0.0005, lng, 11.0),
        ]
        stats = neighborhood_stats(lat, lng, features, 150)
        assert stats.count == 2
        assert stats.avg_height == 11
        assert stats.max_height == 11

    def test_nearest_sorted_and_capped(self) -> None:
        stats = neighborhood_stats(*QUIET_SITE, ring_features(12), 150)
        assert stats.count == 12
        assert len(stats.nearest) == 10
        distances = [n.distance for n in stats.nearest]
        assert distances == sorted(distances)
        assert {"n9", "n10"}.isdisjoint({n.id for n in stats.nearest})


# ---------------------------------------------------------------------------
# BuildingDataset
# ---------------------------------------------------------------------------


def _collection() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "b1",
                "geometry": {"type": "Point", "coordinates": [16.34, 48.2]},
                "properties": {"height": "24.5", "building:levels": "7"},
            },
            {
                "type": "Feature",
                "properties": {"id": 42, "height": None},
                "geometry": {"type": "Polygon", "coordinates": [[[16.35, 48.21], [16.36, 48.21], [16.36, 48.22]]]},
            },
            {
                "type": "Feature",
                "properties": {},
                "geometry": {"type": "MultiPolygon", "coordinates": []},
            },
        ],
    }


class TestBuildingDataset:

    def test_from_geojson_skips_unsupported(self) -> None:
        ds = BuildingDataset.from_geojson(_collection())
        assert len(ds) == 2
        assert [f.id for f in ds] == ["b1", "42"]

    def test_height_and_levels_coerced(self) -> None:
        ds = BuildingDataset.from_geojson(_collection())
        b1 = ds.find("b1")
        assert b1 is not None
        assert b1.height == 24.5
        assert b1.levels == 7
        assert ds.find("42").height == 0.0

    def test_find_missing(self) -> None:
        assert BuildingDataset.from_geojson(_collection()).find("nope") is None

    def test_load_file(self, tmp_path) -> None:
        path = tmp_path / "buildings.geojson"
        path.write_text(json.dumps(_collection()), encoding="utf-8")
        ds = BuildingDataset.load(path)
        assert len(ds.features) == 2


class TestMalformedFeatures:

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "Point"},
            {"type": "Point", "coordinates": [16.34]},
            {"type": "Point", "coordinates": ["east", "north"]},
            {"type": "Polygon", "coordinates": []},
            {"type": "Polygon", "coordinates": [[]]},
            {"type": "Polygon", "coordinates": [[[16.34]]]},
        ],
    )
    def test_unusable_position_is_not_counted(self, geometry) -> None:
        ds = BuildingDataset.from_geojson(
            {"features": [{"geometry": geometry, "properties": {"id": "x", "height": 30}}]}
        )
        [feature] = ds.features
        assert feature.representative_point is None
        assert count_within_radius(*QUIET_SITE, ds, 150) == 0
        assert neighborhood_stats(*QUIET_SITE, ds, 150).count == 0

    def test_line_with_bad_vertices(self) -> None:
        line = Feature(geometry_type="LineString", coordinates=[[16.34], None, [16.34, 48.2]])
        assert nearest_line_distance(48.2, 16.34, [line]) == 0

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", float("nan")])
    def test_non_finite_height_becomes_zero(self, raw) -> None:
        lat, lng = QUIET_SITE
        ds = BuildingDataset.from_geojson(
            {
                "features": [
                    {
                        "geometry": {"type": "Point", "coordinates": [lng, lat + 0.0001]},
                        "properties": {"id": "x", "height": raw, "levels": "inf"},
                    }
                ]
            }
        )
        feature = ds.find("x")
        assert feature.height == 0.0
        assert feature.levels is None
        assert neighborhood_stats(lat, lng, ds, 150).avg_height == 0

    def test_non_finite_height_rejected_on_model(self) -> None:
        with pytest.raises(ValueError):
            Feature(geometry_type="Point", coordinates=[16.34, 48.2], height=float("nan"))


class TestExcludeId:

    def test_excludes_only_counted_feature(self) -> None:
        lat, lng = QUIET_SITE
        near = [point("target", lat, lng), *ring_features(3)]
        far = [point("target", lat + 0.01, lng), *ring_features(3)]
        assert count_within_radius(lat, lng, near, 150, exclude_id="target") == 3
        assert count_within_radius(lat, lng, far, 150, exclude_id="target") == 3
