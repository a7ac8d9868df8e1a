"""Earned-value aggregation across the projects in scope."""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from app.scenarios.compute.types import ProjectRecord, EarnedValueRecord


@dataclass
class EarnedValueAggregate:
    aggregate_cpi: Optional[float] = None
    aggregate_spi: Optional[float] = None


def aggregate_earned_value(
    projects: Iterable[ProjectRecord],
    snapshots: Dict[str, EarnedValueRecord],
) -> EarnedValueAggregate:
    """
    Portfolio CPI/SPI from each project's latest snapshot.

    EV, AC and PV are summed over projects with a positive BAC, so larger
    projects weigh more. CPI = EV/AC and SPI = EV/PV, rounded to 3 places,
    or None when the denominator is zero.
    """
    total_ev = 0.0
    total_ac = 0.0
    total_pv = 0.0

    for project in projects:
        snapshot = snapshots.get(project.id)
        if snapshot is None:
            continue
        bac = float(snapshot.bac or 0)
        if bac <= 0:
            continue
        total_ev += float(snapshot.ev or 0)
        total_ac += float(snapshot.ac or 0)
        total_pv += float(snapshot.pv or 0)

    return EarnedValueAggregate(
        aggregate_cpi=round(total_ev / total_ac, 3) if total_ac > 0 else None,
        aggregate_spi=round(total_ev / total_pv, 3) if total_pv > 0 else None,
    )
