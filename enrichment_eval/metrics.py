"""Early-recognition metrics for virtual screening.

This module provides:
- RIE (Robust Initial Enhancement)
- BEDROC (Boltzmann-Enhanced Discrimination of ROC)
- Enrichment factor at a fraction of the ranked list
- Partial/full area under the ROC curve (AUC)
- Partial/full area under the accumulation curve (AUAC)

Refs.:
    Truchon et al. Evaluating Virtual Screening Methods: Good and Bad Metrics
    for the "Early Recognition" Problem. J. Chem. Inf. Model. (2007) 47, 488-508.
    Tom Fawcett, An introduction to ROC analysis. Pattern Recognition Letters
    27, 861-874 (2006).
"""

import logging
from typing import Any, Dict, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import DegenerateInputError, InputMismatchError, InvalidLabelError
from .ranking import rank_order
from .settings import MetricSettings

logger = logging.getLogger(__name__)


class _Segment(NamedTuple):
    """Cumulative counts at a score change (or at the end of the list)."""
    fp_prev: np.float64
    tp_prev: np.float64
    fp: np.float64
    tp: np.float64
    final: bool


class VirtualScreeningEvaluator:
    """Compute enrichment metrics for one ranked screening dataset.

    The scores and labels are copied into read-only arrays on construction.
    Every metric call builds its own rank ordering, so calls are independent,
    repeatable and may be made in any order.

    Args:
        scores: Score per item, e.g. docking energies
        labels: True for items that are known hits
        settings: Default alpha/top/direction used when a call omits them

    Raises:
        InvalidLabelError: If labels are not booleans or integers (nonzero
            integers are hits)
    """

    def __init__(
        self,
        scores: Sequence[float],
        labels: Sequence[bool],
        settings: Optional[MetricSettings] = None,
    ):
        raw_labels = np.asarray(labels)
        # Non-empty strings would otherwise all cast to True
        if raw_labels.size and raw_labels.dtype.kind not in "biu":
            raise InvalidLabelError(raw_labels.dtype)

        self._scores = np.array(scores, dtype=float)
        self._labels = np.array(raw_labels, dtype=bool)
        self._scores.setflags(write=False)
        self._labels.setflags(write=False)
        self.settings = settings or MetricSettings()

    @property
    def scores(self) -> np.ndarray:
        return self._scores

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    def rie(self, alpha: Optional[float] = None, decreasing: Optional[bool] = None) -> float:
        """Robust Initial Enhancement.

        Args:
            alpha: Exponential weight given to early hits
            decreasing: True if items are ranked by decreasing score

        Returns:
            RIE, in the range from 0 to +Inf
        """
        alpha = self._alpha(alpha)
        n_items, n_pos = self._counts()

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            s = self._hit_sum(alpha, self._direction(decreasing), n_items)
            random_sum = (n_pos / n_items) * (1.0 - np.exp(-alpha)) / (np.exp(alpha / n_items) - 1.0)
            return float(s / random_sum)

    def bedroc(self, alpha: Optional[float] = None, decreasing: Optional[bool] = None) -> float:
        """Boltzmann-Enhanced Discrimination of ROC.

        Args:
            alpha: Exponential weight given to early hits
            decreasing: True if items are ranked by decreasing score

        Returns:
            BEDROC, in the range from 0 to 1
        """
        alpha = self._alpha(alpha)
        n_items, n_pos = self._counts()

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            s = self._hit_sum(alpha, self._direction(decreasing), n_items)
            ra = n_pos / n_items
            ri = (n_items - n_pos) / n_items

            random_sum = ra * np.exp(-alpha / n_items) * (1.0 - np.exp(-alpha)) / (1.0 - np.exp(-alpha / n_items))
            fac = ra * np.sinh(alpha / 2.0) / (np.cosh(alpha / 2.0) - np.cosh(alpha / 2.0 - alpha * ra))
            cte = 1.0 / (1.0 - np.exp(alpha * ri))
            return float(s / random_sum * fac + cte)

    def enrichment_factor(self, top: Optional[float] = None, decreasing: Optional[bool] = None) -> float:
        """Enrichment factor at a fraction of the ranked list.

        Ties are counted as a batch. The true-positive count at exactly
        ``N * top`` items is interpolated between the surrounding score
        changes.

        Args:
            top: Fraction of the ranked list to consider
            decreasing: True if items are ranked by decreasing score

        Returns:
            EF, in the range from 0 to +Inf. 1.0 when the threshold is never
            reached before the last group of tied scores (e.g. top >= 1).
        """
        top = self._top(top)
        n_items, n_pos = self._counts()
        limit = n_items * top

        with np.errstate(divide="ignore", invalid="ignore"):
            for seg in self._segments(self._direction(decreasing)):
                if seg.final:
                    break
                if seg.fp + seg.tp >= limit:
                    n_right = (seg.fp - seg.fp_prev) + (seg.tp - seg.tp_prev)
                    rat = (limit - (seg.fp_prev + seg.tp_prev)) / n_right
                    tp_r = seg.tp_prev + rat * (seg.tp - seg.tp_prev)
                    return float((tp_r / limit) / (n_pos / n_items))

        return 1.0

    def auc(self, top: Optional[float] = None, decreasing: Optional[bool] = None) -> float:
        """Area under the ROC curve, optionally restricted to a top list.

        The threshold is on false positives: the area stops once
        ``(N - n) * top`` decoys have been ranked.

        Args:
            top: Threshold ratio of the false positives
            decreasing: True if items are ranked by decreasing score

        Returns:
            AUC, in the range from 0 to 1
        """
        top = self._top(top)
        n_items, n_pos = self._counts()
        n_neg = n_items - n_pos
        limit = n_neg * top
        area = np.float64(0.0)

        with np.errstate(divide="ignore", invalid="ignore"):
            for seg in self._segments(self._direction(decreasing)):
                width = seg.fp - seg.fp_prev
                height = seg.tp + seg.tp_prev
                if seg.final:
                    area += width * height / 2.0
                    break
                if seg.fp >= limit:
                    rat = (limit - seg.fp_prev) / width
                    area += rat * width * height / 2.0
                    return float(area / (n_pos * n_neg * top))
                area += width * height / 2.0

            logger.debug("AUC threshold not reached, returning full area")
            return float(area / (n_pos * n_neg))

    def auac(self, top: Optional[float] = None, decreasing: Optional[bool] = None) -> float:
        """Area under the accumulation curve, optionally restricted to a top list.

        Unlike AUC, the horizontal axis and the threshold count every ranked
        item, hits included.

        Args:
            top: Fraction of the ranked list to consider
            decreasing: True if items are ranked by decreasing score

        Returns:
            AUAC, in the range from 0 to 1
        """
        top = self._top(top)
        n_items, n_pos = self._counts()
        limit = n_items * top
        area = np.float64(0.0)

        with np.errstate(divide="ignore", invalid="ignore"):
            for seg in self._segments(self._direction(decreasing)):
                n_right = (seg.fp - seg.fp_prev) + (seg.tp - seg.tp_prev)
                height = seg.tp + seg.tp_prev
                if seg.final:
                    area += n_right * height / 2.0
                    break
                if seg.fp + seg.tp >= limit:
                    rat = (limit - (seg.fp_prev + seg.tp_prev)) / n_right
                    area += rat * n_right * height / 2.0
                    return float(area / (n_pos * n_items * top))
                area += n_right * height / 2.0

            logger.debug("AUAC threshold not reached, returning full area")
            return float(area / (n_pos * n_items))

    def summary(
        self,
        alpha: Optional[float] = None,
        top: Optional[float] = None,
        decreasing: Optional[bool] = None,
    ) -> Dict[str, float]:
        """Compute all five metrics for one ranking direction."""
        return {
            "rie": self.rie(alpha, decreasing),
            "bedroc": self.bedroc(alpha, decreasing),
            "ef": self.enrichment_factor(top, decreasing),
            "auc": self.auc(top, decreasing),
            "auac": self.auac(top, decreasing),
        }

    def _alpha(self, alpha: Optional[float]) -> float:
        return self.settings.alpha if alpha is None else float(alpha)

    def _top(self, top: Optional[float]) -> float:
        return self.settings.top if top is None else float(top)

    def _direction(self, decreasing: Optional[bool]) -> bool:
        return self.settings.decreasing if decreasing is None else bool(decreasing)

    def _counts(self) -> Tuple[np.float64, np.float64]:
        """Validate the dataset and return (N, n) as floats.

        Raises:
            InputMismatchError: If scores and labels differ in length
            DegenerateInputError: If there are no items, no hits or no non-hits
        """
        n_scores = self._scores.shape[0]
        n_labels = self._labels.shape[0]
        if n_scores != n_labels:
            raise InputMismatchError(n_scores, n_labels)

        n_pos = int(np.count_nonzero(self._labels))
        if n_labels == 0 or n_pos == 0 or n_pos == n_labels:
            raise DegenerateInputError(n_labels, n_pos)

        logger.debug("N: %d", n_labels)
        logger.debug("n: %d", n_pos)
        return np.float64(n_labels), np.float64(n_pos)

    def _hit_sum(self, alpha: float, decreasing: bool, n_items: np.float64) -> np.float64:
        """Sum of exp(-alpha * r / N) over the 1-based ranks r of the hits."""
        order = rank_order(self._scores, decreasing)
        m_rank = np.flatnonzero(self._labels[order]) + 1
        s = np.sum(np.exp(-alpha * m_rank / n_items))
        logger.debug("Sum: %s (%d hits)", s, m_rank.shape[0])
        return s

    def _segments(self, decreasing: bool) -> Iterator[_Segment]:
        """Walk the ranking, yielding cumulative counts at every score change.

        Items with equal scores are counted before the next checkpoint, so the
        order inside a tie never biases the result. A final segment closing
        the last group is yielded after the walk.
        """
        order = rank_order(self._scores, decreasing)
        fp = tp = fp_prev = tp_prev = np.float64(0.0)
        x_prev = -np.inf

        for j in order:
            score = self._scores[j]
            if score != x_prev:
                yield _Segment(fp_prev, tp_prev, fp, tp, False)
                x_prev = score
                fp_prev = fp
                tp_prev = tp
            if self._labels[j]:
                tp = tp + 1.0
            else:
                fp = fp + 1.0

        yield _Segment(fp_prev, tp_prev, fp, tp, True)


def compute_all_metrics(
    scores: Sequence[float],
    labels: Sequence[bool],
    alpha: Optional[float] = None,
    top: Optional[float] = None,
    directions: Sequence[str] = ("decreasing", "increasing"),
) -> Dict[str, Any]:
    """Compute every metric for each requested ranking direction.

    Args:
        scores: Score per item
        labels: Hit flag per item
        alpha: Weight for RIE/BEDROC (default from configuration)
        top: Fraction for EF/AUC/AUAC (default from configuration)
        directions: Any of "decreasing", "increasing"

    Returns:
        Dict with 'n_items', 'n_positives', 'alpha', 'top', and one metric
        dict per requested direction, keyed by the direction name

    Raises:
        ValueError: If a direction name is not recognised
    """
    unknown = [d for d in directions if d not in ("decreasing", "increasing")]
    if unknown:
        raise ValueError(f"Unknown ranking direction(s): {unknown}")

    evaluator = VirtualScreeningEvaluator(scores, labels)
    alpha = evaluator.settings.alpha if alpha is None else float(alpha)
    top = evaluator.settings.top if top is None else float(top)

    metrics = {
        "n_items": int(evaluator.labels.shape[0]),
        "n_positives": int(np.count_nonzero(evaluator.labels)),
        "alpha": alpha,
        "top": top,
    }
    for direction in directions:
        logger.info("Computing metrics (%s)", direction)
        metrics[direction] = evaluator.summary(alpha, top, decreasing=(direction == "decreasing"))

    logger.info(
        "Computed enrichment metrics for %d items (%d hits)",
        metrics["n_items"],
        metrics["n_positives"],
    )
    return metrics
