# ============================================================================
# HEALTH CHECK AGGREGATOR
# ============================================================================
# STATUS: Infrastructure - Status aggregation
# PURPOSE: Reduce per-check results into one overall verdict
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Aggregator

Pure reduction from per-check results to an AggregateReport:

- unhealthy           if any down check has skip_on_err=False
- partiallyUnhealthy  else if any down check has skip_on_err=True
- healthy             otherwise (no checks registered included)

Results without a matching config are treated as skip_on_err=False.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from health.core import (
    AggregateReport,
    CheckConfig,
    CheckResult,
    CheckStatus,
    OverallStatus,
    utcnow,
)


def derive_status(
    results: Mapping[str, CheckResult],
    configs: Mapping[str, CheckConfig],
) -> OverallStatus:
    """Overall status for a set of results."""
    partial = False
    for name, result in results.items():
        if result.status != CheckStatus.DOWN:
            continue
        config = configs.get(name)
        if config is None or not config.skip_on_err:
            return OverallStatus.UNHEALTHY
        partial = True

    if partial:
        return OverallStatus.PARTIALLY_UNHEALTHY
    return OverallStatus.HEALTHY


def aggregate(
    results: Mapping[str, CheckResult],
    configs: Mapping[str, CheckConfig],
    component: Optional[Dict[str, str]] = None,
    system: Optional[Dict[str, Any]] = None,
    timestamp: Optional[datetime] = None,
) -> AggregateReport:
    """
    Build the report for one execution cycle.

    Args:
        results: Check name -> result
        configs: Check name -> config (for skip_on_err)
        component: Optional component info block
        system: Optional system info block
        timestamp: Report time (now if None)

    Returns:
        A fresh AggregateReport; inputs are not modified
    """
    return AggregateReport(
        status=derive_status(results, configs),
        details=dict(results),
        timestamp=timestamp or utcnow(),
        component=dict(component) if component else None,
        system=dict(system) if system else None,
    )


__all__ = [
    "aggregate",
    "derive_status",
]
