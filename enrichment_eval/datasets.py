"""Loading of ranked screening datasets.

Expected layout: delimited text with a header row and three columns,
(identifier, score, hit flag). A flag of 1 marks a known hit; any other
integer marks a decoy.

    ID,Energy,Active
    ZINC00001,-9.8,1
    ZINC00002,-7.1,0
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .errors import DatasetFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreeningDataset:
    """Parallel identifiers, scores and hit labels of one screening run."""
    ids: List[str] = field(default_factory=list)
    scores: List[float] = field(default_factory=list)
    labels: List[bool] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.scores)

    @property
    def positives(self) -> int:
        return sum(1 for label in self.labels if label)


def parse_hit_flag(value: str) -> bool:
    """Map an integer hit flag to a label.

    Args:
        value: Flag text, e.g. "1" or "0"

    Returns:
        True only when the flag equals 1

    Raises:
        ValueError: If the flag is not an integer
    """
    return int(str(value).strip()) == 1


def load_screening_rows(rows: Iterable[Sequence[str]], first_line: int = 2) -> ScreeningDataset:
    """Build a dataset from already-split rows (header excluded).

    Blank rows are skipped.

    Args:
        rows: Row values, each (identifier, score, flag, ...)
        first_line: Line number of the first row, used in error messages

    Returns:
        ScreeningDataset

    Raises:
        DatasetFormatError: If a row has fewer than three columns or a value
            cannot be parsed
    """
    ids: List[str] = []
    scores: List[float] = []
    labels: List[bool] = []

    for line_no, row in enumerate(rows, start=first_line):
        if not row or all(not str(value).strip() for value in row):
            continue
        if len(row) < 3:
            raise DatasetFormatError(f"Line {line_no}: expected 3 columns, got {len(row)}")

        try:
            score = float(str(row[1]).strip())
            label = parse_hit_flag(row[2])
        except ValueError as e:
            raise DatasetFormatError(f"Line {line_no}: {e}") from e

        ids.append(str(row[0]).strip())
        scores.append(score)
        labels.append(label)

    return ScreeningDataset(ids=ids, scores=scores, labels=labels)


def load_screening_csv(file_path: Union[str, Path], delimiter: str = ",") -> ScreeningDataset:
    """Load a screening dataset from a delimited text file.

    Args:
        file_path: Path to CSV (or other delimited) file
        delimiter: Column separator

    Returns:
        ScreeningDataset

    Raises:
        DatasetFormatError: If the file cannot be read or parsed
    """
    path = Path(file_path)
    if not path.exists():
        raise DatasetFormatError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f, delimiter=delimiter)
            header = next(reader, None)
            if header is None:
                raise DatasetFormatError(f"Empty file: {path}")
            dataset = load_screening_rows(reader)
    except (OSError, csv.Error) as e:
        raise DatasetFormatError(f"Error reading {path}: {e}") from e

    logger.info(
        "Loaded %d items (%d hits) from %s",
        dataset.size,
        dataset.positives,
        path,
    )
    return dataset
