"""
Convergence log: one CSV row per evaluation point.

Every solver writes the same columns in the same order, so logs of
different solvers can be plotted together.
"""

import csv
import logging
from dataclasses import dataclass, astuple
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

COLUMNS = ['iteration', 'wall_clock_seconds', 'exploitability', 'br_value_p1', 'br_value_p2']


@dataclass
class ConvergenceRecord:
    """One evaluation point of a training run."""
    iteration: int
    wall_clock_seconds: float
    exploitability: float
    br_value_p1: float
    br_value_p2: float


class ConvergenceLogWriter:
    """
    Append-mode CSV writer for convergence records.

    The header is written when the file is new or empty. Each row is
    flushed as soon as it is written, so a crashed run keeps its log.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        write_header = not self.path.exists() or self.path.stat().st_size == 0
        self._file = open(self.path, 'a', newline='')
        self._writer = csv.writer(self._file)
        if write_header:
            self._writer.writerow(COLUMNS)
            self._file.flush()
        logger.debug("Writing convergence log to %s", self.path)

    def write(self, record: ConvergenceRecord) -> None:
        self._writer.writerow(astuple(record))
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> 'ConvergenceLogWriter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def read_convergence_log(path: Union[str, Path]) -> List[ConvergenceRecord]:
    """
    Read and validate a convergence log.

    Raises:
        ValueError: on a wrong header, a malformed row, non-increasing
            iterations or negative exploitability
    """
    records: List[ConvergenceRecord] = []
    with open(path, newline='') as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header != COLUMNS:
            raise ValueError(f"{path}: expected header {COLUMNS}, got {header}")

        for line_no, row in enumerate(reader, start=2):
            if len(row) != len(COLUMNS):
                raise ValueError(f"{path}:{line_no}: expected {len(COLUMNS)} fields, got {len(row)}")
            record = ConvergenceRecord(
                iteration=int(row[0]),
                wall_clock_seconds=float(row[1]),
                exploitability=float(row[2]),
                br_value_p1=float(row[3]),
                br_value_p2=float(row[4]),
            )
            if records and record.iteration <= records[-1].iteration:
                raise ValueError(
                    f"{path}:{line_no}: iteration {record.iteration} does not "
                    f"increase (previous {records[-1].iteration})"
                )
            if record.exploitability < 0:
                raise ValueError(f"{path}:{line_no}: negative exploitability {record.exploitability}")
            records.append(record)

    return records
