"""Early-recognition enrichment metrics for virtual screening.

This package provides tools for:
- Ranking scored items with tie-aware average ranks
- Computing RIE, BEDROC, enrichment factor, AUC and AUAC
- Loading ranked screening datasets (identifier, score, hit flag)
"""

from .datasets import (
    ScreeningDataset,
    load_screening_csv,
    load_screening_rows,
)
from .errors import (
    DatasetFormatError,
    DegenerateInputError,
    EnrichmentError,
    InputMismatchError,
    InvalidLabelError,
)
from .metrics import (
    VirtualScreeningEvaluator,
    compute_all_metrics,
)
from .ranking import (
    average_ranks,
    rank_order,
)
from .settings import MetricSettings

__all__ = [
    "ScreeningDataset",
    "load_screening_csv",
    "load_screening_rows",
    "DatasetFormatError",
    "DegenerateInputError",
    "EnrichmentError",
    "InputMismatchError",
    "InvalidLabelError",
    "VirtualScreeningEvaluator",
    "compute_all_metrics",
    "average_ranks",
    "rank_order",
    "MetricSettings",
]
