"""Tests for the wind load evaluator."""

from __future__ import annotations

import pytest

from archishield.audits.wind_load import WindLoadAudit
from archishield.models.context import AuditContext
from archishield.models.results import Severity
from tests.builders import QUIET_SITE, point, ring_features


@pytest.fixture
def audit() -> WindLoadAudit:
    return WindLoadAudit()


def _ctx(count: int) -> AuditContext:
    return AuditContext(district=7, features=tuple(ring_features(count)))


class TestShieldingBands:

    def test_exposed(self, audit, make_building) -> None:
        result = audit.execute(make_building(), _ctx(0))
        assert not result.passed
        assert result.score == 65
        assert result.data["shielding"] == "None (Highly Exposed)"
        [c] = result.constraints
        assert c.type == "WIND_LOAD_WARNING"
        assert c.severity is Severity.CRITICAL

    @pytest.mark.parametrize("count", [3, 9])
    def test_low_shielding(self, audit, make_building, count: int) -> None:
        result = audit.execute(make_building(), _ctx(count))
        assert result.passed
        assert result.score == 90
        assert result.data["neighbor_count"] == count

    def test_high_shielding(self, audit, make_building) -> None:
        result = audit.execute(make_building(), _ctx(12))
        assert result.passed
        assert result.score == 98
        assert result.constraints == []


class TestTallOverride:

    def test_tall_and_exposed(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=61), _ctx(2))
        assert not result.passed
        assert result.score == 40
        assert any("Wind Tunnel" in r for r in result.requirements)

    def test_tall_but_shielded(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=61), _ctx(5))
        assert result.score == 90

    def test_exactly_threshold_height(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=60), _ctx(0))
        assert result.score == 65


class TestSelfExclusion:

    def _features(self):
        lat, lng = QUIET_SITE
        return (point("target", lat, lng, 25.0), *ring_features(3))

    def test_existing_structure_not_counted(self, audit, make_building) -> None:
        ctx = AuditContext(features=self._features())
        result = audit.execute(make_building(id="target"), ctx)
        assert result.data["neighbor_count"] == 3

    def test_new_building_counts_everything(self, audit, make_building) -> None:
        ctx = AuditContext(features=self._features())
        result = audit.execute(make_building(), ctx)
        assert result.data["neighbor_count"] == 4

    def test_unknown_id_not_subtracted(self, audit, make_building) -> None:
        ctx = AuditContext(features=self._features())
        result = audit.execute(make_building(id="elsewhere"), ctx)
        assert result.data["neighbor_count"] == 4

    def test_distant_existing_structure_keeps_neighbours(self, audit, make_building) -> None:
        lat, lng = QUIET_SITE
        # The target sits 1.1 km away and was never counted
        ctx = AuditContext(features=(point("target", lat + 0.01, lng), *ring_features(3)))
        result = audit.execute(make_building(id="target"), ctx)
        assert result.data["neighbor_count"] == 3
        assert result.passed
        assert result.score == 90

    def test_never_negative(self, audit, make_building) -> None:
        lat, lng = QUIET_SITE
        # Existing structure outside the radius: count is 0 and stays 0
        ctx = AuditContext(features=(point("target", lat + 0.01, lng),))
        result = audit.execute(make_building(id="target"), ctx)
        assert result.data["neighbor_count"] == 0


class TestStressLevel:

    def test_exposed_reference_height(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=80), _ctx(0))
        assert result.data["stress_level"] == 100

    def test_shielded(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=80), _ctx(12))
        # 80 - min(48, 60) + 20
        assert result.data["stress_level"] == 52

    def test_floor_at_zero(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=1), _ctx(12))
        assert result.data["stress_level"] == 0
