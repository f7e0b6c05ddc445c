"""AuditEngine — main entry point for a building compliance audit.

Usage::

    from archishield import AuditEngine

    engine = AuditEngine(dataset=BuildingDataset.load("vienna.geojson"))
    result = engine.run(48.2082, 16.3738, {"height": 45, "material": "timber"})
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Sequence

from archishield.audits.base import AuditRule
from archishield.audits.registry import DOMAIN_ORDER, AuditRegistry
from archishield.config import NO_CRITICAL_CONSTRAINTS
from archishield.geo.features import BuildingDataset, Feature
from archishield.models.building import Building, BuildingOverrides
from archishield.models.context import AuditContext
from archishield.models.results import (
    AggregateResult,
    AuditFailure,
    AuditResult,
    AuditStatus,
    Constraint,
    Mandate,
    Severity,
)
from archishield.normalizer import (
    BuildingValidationError,
    normalize_building,
    parse_district,
    parse_overrides,
)
from archishield.regulations.loader import load_regulations
from archishield.regulations.schema import Regulations
from archishield.regulations.vienna import VIENNA_REGULATIONS
from archishield.remediation.advisor import RemediationAdvisor
from archishield.resolver import resolve_context
from archishield.scoring import round_half_up
from archishield.settings import AuditSettings, configure_logging

logger = logging.getLogger(__name__)

HIGH_FEASIBILITY = 80
MEDIUM_FEASIBILITY = 60


def _domain_rank(domain: str) -> int:
    try:
        return DOMAIN_ORDER.index(domain)
    except ValueError:
        return len(DOMAIN_ORDER)


def _decide_status(has_blocking: bool, all_passed: bool, feasibility: int) -> AuditStatus:
    if has_blocking:
        return AuditStatus.REJECTED
    if all_passed and feasibility >= HIGH_FEASIBILITY:
        return AuditStatus.HIGH
    if feasibility >= MEDIUM_FEASIBILITY:
        return AuditStatus.MEDIUM
    return AuditStatus.LOW


def aggregate(
    results: Sequence[tuple[str, AuditResult]],
    *,
    building: Building,
    district: int | None = None,
) -> AggregateResult:
    """Combine per-evaluator results into a single verdict.

    Feasibility is the mean over the domains present in *results* and
    ``total_domains`` is their count.  The default registry covers all
    five domains; a custom registry that leaves a domain out is averaged
    over the domains it does cover, not scored as zero for the rest.

    Parameters
    ----------
    results:
        ``(domain, result)`` pairs in declaration order.  Evaluators that
        share a domain are averaged into one domain score and the domain
        passes only if all of them passed.

    Returns
    -------
    AggregateResult
        Without remediations; the engine attaches those.
    """
    ordered = sorted(enumerate(results), key=lambda item: (_domain_rank(item[1][0]), item[0]))

    grouped: dict[str, list[AuditResult]] = {}
    audits: dict[str, AuditResult] = {}
    constraints: list[Constraint] = []
    mandates: list[Mandate] = []
    requirements: list[str] = []
    for _, (domain, result) in ordered:
        grouped.setdefault(domain, []).append(result)
        audits[result.name] = result
        constraints.extend(result.constraints)
        mandates.extend(result.mandates)
        for req in result.requirements:
            if req not in requirements:
                requirements.append(req)

    domain_scores = {
        domain: sum(r.score for r in group) / len(group) for domain, group in grouped.items()
    }
    domain_passed = {domain: all(r.passed for r in group) for domain, group in grouped.items()}

    total = len(domain_scores)
    feasibility = round_half_up(sum(domain_scores.values()) / total) if total else 0
    passed_count = sum(1 for ok in domain_passed.values() if ok)
    has_blocking = any(c.severity == Severity.BLOCKING for c in constraints)
    status = _decide_status(has_blocking, total > 0 and passed_count == total, feasibility)

    key_risk = next(
        (c.message for c in constraints if c.severity.at_least(Severity.CRITICAL)),
        NO_CRITICAL_CONSTRAINTS,
    )

    return AggregateResult(
        district=district,
        building=building,
        audits=audits,
        domain_scores=domain_scores,
        domain_passed=domain_passed,
        feasibility=feasibility,
        status=status,
        key_risk=key_risk,
        constraints=constraints,
        mandates=mandates,
        requirements=requirements,
        passed_count=passed_count,
        total_domains=total,
    )


class AuditEngine:
    """Run all registered evaluators against one building.

    Parameters
    ----------
    regulations:
        Regulatory regime bound to the default evaluators.
    dataset:
        Default feature dataset used when ``run`` is not given one.
    registry:
        Evaluators to run.  Defaults to the six built-in evaluators.
    advisor:
        Remediation advisor; ``None`` disables remediation suggestions.
    parallel:
        Run evaluators on a thread pool.  Results are re-ordered by
        declaration order, so output is identical to a sequential run.
    max_workers:
        Thread pool size when *parallel* is set.
    radius:
        Neighbourhood radius in metres; ``None`` uses the 150 m default.
    """

    def __init__(
        self,
        regulations: Regulations = VIENNA_REGULATIONS,
        dataset: BuildingDataset | None = None,
        *,
        registry: AuditRegistry | None = None,
        advisor: RemediationAdvisor | None = None,
        parallel: bool = False,
        max_workers: int = 6,
        radius: float | None = None,
    ) -> None:
        self.regulations = regulations
        self.dataset = dataset
        self.registry = registry if registry is not None else AuditRegistry.default(regulations)
        self.advisor = advisor if advisor is not None else RemediationAdvisor()
        self.parallel = parallel
        self.max_workers = max_workers
        self.radius = radius

    @classmethod
    def from_settings(
        cls,
        settings: AuditSettings,
        dataset: BuildingDataset | None = None,
    ) -> AuditEngine:
        """Build an engine from loaded ``AuditSettings``.

        Also applies the configured log level to the ``archishield`` logger.

        Raises
        ------
        RegulationsError
            If the configured overlay file is unreadable or invalid.
        """
        configure_logging(settings.log_level)
        regulations = load_regulations(settings.regulations_path)
        return cls(
            regulations,
            dataset,
            parallel=settings.parallel,
            max_workers=settings.max_workers,
            radius=settings.neighborhood_radius,
        )

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(
        self,
        latitude: float,
        longitude: float,
        overrides: BuildingOverrides | Mapping[str, Any] | None = None,
        dataset: BuildingDataset | Iterable[Feature] | None = None,
        *,
        district: int | None = None,
        radius: float | None = None,
    ) -> AggregateResult | AuditFailure:
        """Normalise the input, resolve the context and run every evaluator.

        Invalid input yields an ``AuditFailure``; a run that completes
        always yields an ``AggregateResult``, even when REJECTED.

        Parameters
        ----------
        latitude, longitude:
            Site location in degrees.
        overrides:
            Partial building parameters (snake_case or camelCase keys).
            An ``id`` key selects an existing structure in the dataset.
        dataset:
            Features for this run; falls back to the engine's dataset.
        district:
            Known district; skips the bounding-box lookup.
        radius:
            Neighbourhood radius override in metres.
        """
        if dataset is None:
            dataset = self.dataset
        elif not isinstance(dataset, BuildingDataset):
            dataset = BuildingDataset(list(dataset))

        known_district = None
        try:
            known_district = parse_district(district)
            parsed = parse_overrides(overrides)
            existing = None
            if parsed.structure_id is not None:
                existing = dataset.find(parsed.structure_id) if dataset is not None else None
                if existing is None:
                    logger.warning(
                        "Structure %s not found in dataset; using default dimensions",
                        parsed.structure_id,
                    )
            building = normalize_building(latitude, longitude, parsed, existing)
        except BuildingValidationError as exc:
            logger.warning("Audit rejected invalid input: %s", exc)
            return AuditFailure(error=str(exc), messages=exc.errors, district=known_district)

        context = resolve_context(
            building,
            dataset,
            district=known_district,
            radius=radius if radius is not None else self.radius,
            regulations=self.regulations,
        )
        return self.run_building(building, context)

    def run_building(self, building: Building, context: AuditContext) -> AggregateResult:
        """Run every evaluator on an already-normalised building and context."""
        rules = self.registry.list_rules()
        results = self._execute(rules, building, context)
        for rule, result in zip(rules, results):
            logger.debug("%s: score=%s passed=%s", rule.name, result.score, result.passed)

        aggregate_result = aggregate(
            [(rule.domain, result) for rule, result in zip(rules, results)],
            building=building,
            district=context.district,
        )
        if self.advisor is not None:
            remediations = self.advisor.advise(
                aggregate_result.constraints, aggregate_result.mandates, building
            )
            aggregate_result = aggregate_result.model_copy(update={"remediations": remediations})

        logger.info(
            "Audit complete: district=%s feasibility=%d status=%s",
            context.district,
            aggregate_result.feasibility,
            aggregate_result.status.value,
        )
        return aggregate_result

    def _execute(
        self,
        rules: list[AuditRule],
        building: Building,
        context: AuditContext,
    ) -> list[AuditResult]:
        if not self.parallel or len(rules) < 2:
            return [rule.execute(building, context) for rule in rules]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(rule.execute, building, context) for rule in rules]
            return [future.result() for future in futures]


def run_audit(
    latitude: float,
    longitude: float,
    overrides: BuildingOverrides | Mapping[str, Any] | None = None,
    dataset: BuildingDataset | Iterable[Feature] | None = None,
    *,
    district: int | None = None,
    radius: float | None = None,
    regulations: Regulations = VIENNA_REGULATIONS,
) -> AggregateResult | AuditFailure:
    """One-shot audit with a default engine."""
    engine = AuditEngine(regulations)
    return engine.run(
        latitude, longitude, overrides, dataset, district=district, radius=radius
    )
