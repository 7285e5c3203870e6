"""
Scorecard record and net-score aggregation.
"""

import json
from dataclasses import dataclass

# Sub-score fields aggregated into the net score
SCORE_FIELDS = (
    "ramp_up",
    "correctness",
    "bus_factor",
    "responsive_maintainer",
    "license",
)


def _clamp(score: float) -> float:
    return min(max(float(score), 0.0), 1.0)


def _as_number(value: float | int) -> float | int:
    """Write integral values without a fractional part (1 rather than 1.0)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class Scorecard:
    """Scores and latencies gathered for a single module URL."""

    url: str
    owner: str = ""
    repo: str = ""
    net_score: float = 0.0
    net_score_latency: int = 0
    ramp_up: float = 0.0
    ramp_up_latency: int = 0
    correctness: float = 0.0
    correctness_latency: int = 0
    bus_factor: float = 0.0
    bus_factor_latency: int = 0
    responsive_maintainer: float = 0.0
    responsive_maintainer_latency: int = 0
    license: float = 0.0
    license_latency: int = 0

    def record(
        self, score_field: str, latency_field: str, score: float, latency_ms: int
    ) -> None:
        """Store one metric's sub-score (clamped to [0, 1]) and latency."""
        if score_field not in SCORE_FIELDS:
            raise ValueError(f"Unknown score field: {score_field}")
        if latency_field != f"{score_field}_latency":
            raise ValueError(f"Latency field {latency_field} does not match {score_field}")
        setattr(self, score_field, _clamp(score))
        setattr(self, latency_field, max(int(latency_ms), 0))

    def calculate_net_score(self) -> None:
        """Set net_score to the unweighted mean of the five sub-scores.

        net_score_latency is left untouched.
        """
        scores = [getattr(self, name) for name in SCORE_FIELDS]
        self.net_score = sum(scores) / len(scores)

    def to_record(self) -> dict[str, str | float | int]:
        """Project the scorecard onto the output field names."""
        return {
            "URL": self.url,
            "NetScore": _as_number(self.net_score),
            "NetScore_Latency": self.net_score_latency,
            "RampUp": _as_number(self.ramp_up),
            "RampUp_Latency": self.ramp_up_latency,
            "Correctness": _as_number(self.correctness),
            "Correctness_Latency": self.correctness_latency,
            "BusFactor": _as_number(self.bus_factor),
            "BusFactor_Latency": self.bus_factor_latency,
            "ResponsiveMaintainer": _as_number(self.responsive_maintainer),
            "ResponsiveMaintainer_Latency": self.responsive_maintainer_latency,
            "License": _as_number(self.license),
            "License_Latency": self.license_latency,
        }

    def get_results(self) -> str:
        """
        Serialize the scorecard as a single JSON line.

        The compact JSON text has every comma followed by a space, including
        commas inside string values, to stay byte-compatible with existing
        consumers of this format.
        """
        text = json.dumps(self.to_record(), separators=(",", ":"), ensure_ascii=False)
        return text.replace(",", ", ")
