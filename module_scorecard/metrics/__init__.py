"""
The fixed set of metrics every scorecard is built from.
"""

from module_scorecard.metrics import (
    bus_factor,
    correctness,
    license_compliance,
    ramp_up,
    responsive_maintainer,
)
from module_scorecard.metrics.base import (
    MetricContext,
    MetricFailure,
    MetricResult,
    MetricSpec,
    MetricSuccess,
    run_metric,
)

# Closed set: the orchestrator runs exactly these, in this order
METRICS: tuple[MetricSpec, ...] = (
    ramp_up.METRIC,
    correctness.METRIC,
    bus_factor.METRIC,
    responsive_maintainer.METRIC,
    license_compliance.METRIC,
)

__all__ = [
    "METRICS",
    "MetricContext",
    "MetricFailure",
    "MetricResult",
    "MetricSpec",
    "MetricSuccess",
    "run_metric",
]
