"""Regression values on the DUD EGFR docking dataset.

Expected values come from the R enrichvs package. The dataset is not
bundled; drop ``dud_egfr.csv`` into ``tests/data/`` to run these tests.
"""

from pathlib import Path

import pytest

from enrichment_eval.datasets import load_screening_csv
from enrichment_eval.metrics import VirtualScreeningEvaluator

DATA_FILE = Path(__file__).parent / "data" / "dud_egfr.csv"

pytestmark = pytest.mark.skipif(not DATA_FILE.exists(), reason=f"{DATA_FILE} not available")

ALPHA = 0.20
TOP = 0.05

EXPECTED = {
    False: {
        "bedroc": 0.591155,
        "enrichment_factor": 3.108108,
        "rie": 1.021421,
        "auac": 0.07586939,
        "auc": 0.07668251,
    },
    True: {
        "bedroc": 0.3848914,
        "enrichment_factor": 1.891892,
        "rie": 0.980375,
        "auac": 0.05835606,
        "auc": 0.05862467,
    },
}


@pytest.fixture(scope="module")
def evaluator():
    dataset = load_screening_csv(DATA_FILE)
    return VirtualScreeningEvaluator(dataset.scores, dataset.labels)


@pytest.mark.parametrize("decreasing", [False, True])
@pytest.mark.parametrize("metric", ["bedroc", "enrichment_factor", "rie", "auac", "auc"])
def test_reference_value(evaluator, metric, decreasing):
    parameter = ALPHA if metric in ("bedroc", "rie") else TOP
    value = getattr(evaluator, metric)(parameter, decreasing)

    assert value == pytest.approx(EXPECTED[decreasing][metric], abs=1e-4)
