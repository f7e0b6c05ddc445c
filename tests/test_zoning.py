"""Tests for the zoning evaluator."""

from __future__ import annotations

import pytest

from archishield.audits.zoning import ZoningAudit
from archishield.models.context import AuditContext, NeighborhoodStats
from archishield.models.results import Severity


def _context(district: int | None, avg: float = 0.0, max_height: float = 0.0, count: int = 0) -> AuditContext:
    return AuditContext(
        district=district,
        neighborhood=NeighborhoodStats(count=count, avg_height=avg, max_height=max_height, radius=150),
    )


@pytest.fixture
def audit() -> ZoningAudit:
    return ZoningAudit()


class TestZoningClear:

    def test_within_class_limits(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=20, floors=5), _context(7))
        assert result.passed
        assert result.score == 100
        assert result.constraints == []
        assert result.data["building_class"]["name"] == "IV"
        assert "Zoning clear - proceed to pre-submission meeting" in result.recommendations

    def test_unknown_district_uses_default_class(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=15, floors=4), _context(None))
        assert result.data["building_class"]["name"] == "III"
        assert result.passed


class TestContextualVariance:

    def test_contextual_limit(self, audit) -> None:
        limit, suggested = audit.contextual_limit(16, _context(2, avg=22, max_height=30, count=8))
        # max(16, class V 26, 0.95 * 30 = 28.5) rounded half-up
        assert limit == 29
        assert suggested == "V"

    def test_empty_neighbourhood_uses_regulatory_height(self, audit) -> None:
        limit, suggested = audit.contextual_limit(16, _context(2))
        assert limit == 16
        assert suggested == "III"

    def test_variance_opportunity(self, audit, make_building) -> None:
        ctx = _context(2, avg=22, max_height=30, count=8)
        result = audit.execute(make_building(height=25, floors=4), ctx)
        assert not result.passed
        assert result.score == 85
        [c] = result.constraints
        assert c.type == "HEIGHT_VARIANCE_OPPORTUNITY"
        assert c.severity is Severity.IMPORTANT
        assert c.data["contextual_limit"] == 29

    def test_violation_beyond_context(self, audit, make_building) -> None:
        ctx = _context(2, avg=22, max_height=30, count=8)
        result = audit.execute(make_building(height=35, floors=4), ctx)
        assert not result.passed
        assert result.score == 60
        [c] = result.constraints
        assert c.type == "HEIGHT_VIOLATION"
        assert c.severity is Severity.CRITICAL

    def test_violation_with_no_neighbours(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=17, floors=4), _context(2))
        assert result.constraints[0].type == "HEIGHT_VIOLATION"


class TestFloorsAndZones:

    def test_floor_warning_does_not_fail(self, audit, make_building) -> None:
        result = audit.execute(make_building(height=15, floors=7), _context(2))
        assert result.passed
        assert result.score == 80
        assert [c.type for c in result.constraints] == ["FLOOR_WARNING"]
        assert result.constraints[0].severity is Severity.WARNING

    def test_protection_zone(self, audit, make_building) -> None:
        result = audit.execute(make_building(48.2100, 16.3700), _context(1))
        assert result.passed
        assert result.score == 90
        [c] = result.constraints
        assert c.type == "SCHUTZZONE"
        assert c.severity is Severity.IMPORTANT
        assert result.data["protection_zone"]["id"] == "district1_core"
        assert "Contact MA 19 for heritage assessment" in result.recommendations

    def test_only_first_matching_zone(self, audit, make_building) -> None:
        # Inside both the Innere Stadt core and Spittelberg rectangles
        result = audit.execute(make_building(48.2060, 16.3560), _context(1))
        zones = [c for c in result.constraints if c.type == "SCHUTZZONE"]
        assert len(zones) == 1
        assert zones[0].data["zone"] == "district1_core"

    def test_penalties_stack_and_clamp(self, audit, make_building) -> None:
        result = audit.execute(make_building(48.2100, 16.3700, height=60, floors=20), _context(1))
        # -40 violation, -20 floors, -10 zone
        assert result.score == 30
        assert 0 <= result.score <= 100
