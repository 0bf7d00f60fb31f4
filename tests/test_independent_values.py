"""Metric values checked against independently computed references.

RIE/BEDROC are compared with the RDKit scoring formulas (``CalcRIE`` and
``CalcBEDROC``: sum over 1-based active positions, BEDROC rescaled between
RIEmin and RIEmax), written out here on plain Python lists. EF/AUC/AUAC are
compared with values worked out by hand on a small dataset with tied scores.
"""

import math

import numpy as np
import pytest

from enrichment_eval.metrics import VirtualScreeningEvaluator


def _ranked_actives(scores, labels, decreasing):
    """Active flags in ranked order; scores must be distinct."""
    pairs = sorted(zip(scores, labels), key=lambda p: p[0], reverse=decreasing)
    return [bool(label) for _, label in pairs]


def _rdkit_rie(actives, alpha):
    n_items = len(actives)
    sum_exp = 0.0
    n_actives = 0
    for i, active in enumerate(actives):
        if active:
            n_actives += 1
            sum_exp += math.exp(-(alpha * (i + 1)) / n_items)
    ratio = n_actives / n_items
    random_sum = ratio * (1 - math.exp(-alpha)) / (math.exp(alpha / n_items) - 1)
    return sum_exp / random_sum


def _rdkit_bedroc(actives, alpha):
    ratio = sum(actives) / len(actives)
    rie = _rdkit_rie(actives, alpha)
    rie_max = (1 - math.exp(-alpha * ratio)) / (ratio * (1 - math.exp(-alpha)))
    rie_min = (1 - math.exp(alpha * ratio)) / (ratio * (1 - math.exp(alpha)))
    return (rie - rie_min) / (rie_max - rie_min)


def _rie_from_ranks(hit_ranks, n_items, alpha):
    """RIE from an explicit set of 1-based hit positions."""
    s = sum(math.exp(-alpha * r / n_items) for r in hit_ranks)
    ratio = len(hit_ranks) / n_items
    return s / (ratio * (1 - math.exp(-alpha)) / (math.exp(alpha / n_items) - 1))


@pytest.fixture(scope="module")
def screening_500():
    """500 items with distinct scores and roughly 10% hits."""
    rng = np.random.default_rng(20071)
    scores = (rng.permutation(500) / 7.0 - 30.0).tolist()
    labels = (rng.random(500) < 0.1).tolist()
    assert 0 < sum(labels) < len(labels)
    return scores, labels


class TestRDKitReference:
    """RIE/BEDROC on a seeded 500-item dataset."""

    @pytest.mark.parametrize("alpha", [0.2, 20.0])
    @pytest.mark.parametrize("decreasing", [True, False])
    def test_rie_matches_rdkit(self, screening_500, alpha, decreasing):
        scores, labels = screening_500
        evaluator = VirtualScreeningEvaluator(scores, labels)

        expected = _rdkit_rie(_ranked_actives(scores, labels, decreasing), alpha)

        assert evaluator.rie(alpha, decreasing) == pytest.approx(expected, rel=1e-9)

    @pytest.mark.parametrize("alpha", [0.2, 20.0])
    @pytest.mark.parametrize("decreasing", [True, False])
    def test_bedroc_matches_rdkit(self, screening_500, alpha, decreasing):
        scores, labels = screening_500
        evaluator = VirtualScreeningEvaluator(scores, labels)

        expected = _rdkit_bedroc(_ranked_actives(scores, labels, decreasing), alpha)

        assert evaluator.bedroc(alpha, decreasing) == pytest.approx(expected, rel=1e-9, abs=1e-12)

    def test_directions_differ(self, screening_500):
        scores, labels = screening_500
        evaluator = VirtualScreeningEvaluator(scores, labels)

        assert evaluator.rie(20.0, True) != pytest.approx(evaluator.rie(20.0, False))


# Decreasing order visits 3 | 2 2 2 | 1 | 0. Inside the tie the larger index
# comes first, so the hits sit at positions 3, 4 and 6. Increasing order
# visits 0 | 1 | 2 2 2 | 3, putting the hits at positions 1, 4 and 5.
TIED_SCORES = [3.0, 2.0, 2.0, 2.0, 1.0, 0.0]
TIED_LABELS = [False, True, True, False, False, True]


@pytest.fixture
def tied():
    return VirtualScreeningEvaluator(TIED_SCORES, TIED_LABELS)


class TestHandDerivedTies:
    """EF/AUC/AUAC with a tie group straddling the threshold."""

    @pytest.mark.parametrize(
        "metric,top,decreasing,expected",
        [
            ("enrichment_factor", 0.5, True, 8 / 9),
            ("enrichment_factor", 0.5, False, 10 / 9),
            ("auc", 1.0, True, 1 / 3),
            ("auc", 1.0, False, 2 / 3),
            ("auc", 0.5, True, 1 / 9),
            ("auc", 0.5, False, 4 / 9),
            ("auac", 1.0, True, 5 / 12),
            ("auac", 1.0, False, 7 / 12),
            ("auac", 0.5, True, 2 / 9),
            ("auac", 0.5, False, 7 / 18),
        ],
    )
    def test_threshold_metric(self, tied, metric, top, decreasing, expected):
        assert getattr(tied, metric)(top, decreasing) == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize(
        "decreasing,hit_ranks",
        [
            (True, [3, 4, 6]),
            (False, [1, 4, 5]),
        ],
    )
    @pytest.mark.parametrize("alpha", [0.2, 20.0])
    def test_rie_hit_positions(self, tied, decreasing, hit_ranks, alpha):
        expected = _rie_from_ranks(hit_ranks, len(TIED_SCORES), alpha)

        assert tied.rie(alpha, decreasing) == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize(
        "decreasing,actives",
        [
            (True, [False, False, True, True, False, True]),
            (False, [True, False, False, True, True, False]),
        ],
    )
    def test_bedroc_matches_rdkit_on_tie_order(self, tied, decreasing, actives):
        assert tied.bedroc(20.0, decreasing) == pytest.approx(_rdkit_bedroc(actives, 20.0), rel=1e-9)
