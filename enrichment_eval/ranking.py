"""Tie-aware rank ordering of screening scores.

Scores are first converted to average ranks (tied scores share the mean of
the positions they occupy), then the rank values are sorted into a visiting
order. Within a group of tied scores the item with the larger original index
is visited first, in both directions, so an ascending ordering is not simply
the reverse of a descending one.
"""

import logging
from typing import Sequence

import numpy as np
from scipy.stats import rankdata

logger = logging.getLogger(__name__)


def average_ranks(scores: Sequence[float]) -> np.ndarray:
    """Compute 1-based average ranks for scores.

    NaN scores are not excluded: they are ranked after every other value and
    share the average of the trailing positions.

    Args:
        scores: Raw scores

    Returns:
        Float array of rank values, same length as scores
    """
    values = np.asarray(scores, dtype=float)
    ranks = np.empty(values.shape[0], dtype=float)

    nan_mask = np.isnan(values)
    n_ranked = int(np.count_nonzero(~nan_mask))

    ranks[~nan_mask] = rankdata(values[~nan_mask], method="average")
    if n_ranked < values.shape[0]:
        ranks[nan_mask] = (n_ranked + 1 + values.shape[0]) / 2.0

    return ranks


def rank_order(scores: Sequence[float], decreasing: bool = True) -> np.ndarray:
    """Return the visiting order of items, best first.

    ``order[k]`` is the original index of the item ranked k-th. With
    ``decreasing=True`` higher scores come first, otherwise lower scores do.

    Args:
        scores: Raw scores
        decreasing: True if items are ranked by decreasing score

    Returns:
        Integer array, a permutation of 0..N-1
    """
    ranks = average_ranks(scores)
    index = np.arange(ranks.shape[0])

    primary = -ranks if decreasing else ranks
    # np.lexsort sorts by the last key first
    order = np.lexsort((-index, primary))

    logger.debug("Rank order: %d items (decreasing=%s)", order.shape[0], decreasing)
    return order
