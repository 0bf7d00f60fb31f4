"""Default parameters for enrichment metrics.

Default metric parameters can be overridden through environment variables:
- ENRICHVS_ALPHA: early-recognition weight for RIE/BEDROC
- ENRICHVS_TOP: fraction of the ranked list used by EF/AUC/AUAC
- ENRICHVS_DECREASING: rank by decreasing score (higher is better)
- ENRICHVS_PRECISION: decimal places used when printing results
"""

import os
from dataclasses import dataclass


# Metric parameters
DEFAULT_ALPHA = float(os.getenv("ENRICHVS_ALPHA", "0.20"))
DEFAULT_TOP = float(os.getenv("ENRICHVS_TOP", "0.05"))
DEFAULT_DECREASING = os.getenv("ENRICHVS_DECREASING", "true").lower() in ("true", "1", "yes")

# Output formatting
DEFAULT_PRECISION = int(os.getenv("ENRICHVS_PRECISION", "3"))


@dataclass(frozen=True)
class MetricSettings:
    """Parameters shared by all enrichment metrics.

    Attributes:
        alpha: Exponential weight for RIE and BEDROC
        top: Fraction of the list considered by EF, AUC and AUAC
        decreasing: True if higher scores rank first
    """
    alpha: float = DEFAULT_ALPHA
    top: float = DEFAULT_TOP
    decreasing: bool = DEFAULT_DECREASING

    @classmethod
    def from_env(cls) -> "MetricSettings":
        """Build settings from the current environment.

        Unlike the module-level defaults, this re-reads the environment on
        every call.
        """
        return cls(
            alpha=float(os.getenv("ENRICHVS_ALPHA", "0.20")),
            top=float(os.getenv("ENRICHVS_TOP", "0.05")),
            decreasing=os.getenv("ENRICHVS_DECREASING", "true").lower() in ("true", "1", "yes"),
        )
