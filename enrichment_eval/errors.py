"""Exception types raised by the enrichment evaluation package."""


class EnrichmentError(ValueError):
    """Base class for invalid input to enrichment metrics."""


class InputMismatchError(EnrichmentError):
    """Scores and labels have different lengths."""

    def __init__(self, n_scores: int, n_labels: int):
        self.n_scores = n_scores
        self.n_labels = n_labels
        super().__init__(
            f"The number of scores must be equal to the number of labels "
            f"(got {n_scores} scores, {n_labels} labels)"
        )


class DegenerateInputError(EnrichmentError):
    """Dataset has no items, no hits, or no non-hits, so metrics are undefined."""

    def __init__(self, n_items: int, n_positives: int):
        self.n_items = n_items
        self.n_positives = n_positives
        if n_items == 0:
            reason = "dataset is empty"
        elif n_positives == 0:
            reason = "dataset contains no hits"
        else:
            reason = "dataset contains no non-hits"
        super().__init__(
            f"Enrichment metrics are undefined: {reason} "
            f"(N={n_items}, n={n_positives})"
        )


class DatasetFormatError(EnrichmentError):
    """Screening dataset file could not be read or parsed."""


class InvalidLabelError(EnrichmentError):
    """Hit labels are not booleans or integers."""

    def __init__(self, dtype):
        self.dtype = dtype
        super().__init__(
            f"Labels must be booleans or integers (got dtype {dtype}); "
            f"parse flags such as '0'/'1' before evaluating"
        )
