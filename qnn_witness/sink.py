"""
Append-or-create CSV output for witness sweeps.

File layout:
    Chunked QNN Test
    Time Chunks,T_f,Count,Epochs
    <chunks>,<T_f>,<count>,<epochs>
    ,<label_1>,...,<label_n>
    Targets,<target_1>,...,<target_n>
    <index>,<witness_1>,...,<witness_n>
    ...

The header block is written only when the file is empty at open time, so
repeated runs against one path append data rows under a single header.
"""

import csv
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import CSV_CONFIG_FIELDS, CSV_TARGETS_LABEL, CSV_TITLE
from .errors import SinkIOFailure


def header_block(
    time_chunks: int,
    final_time: float,
    count: int,
    epochs: int,
    labels: Sequence[str],
    targets: Sequence[float],
) -> List[list]:
    """Rows of the CSV header block."""
    return [
        [CSV_TITLE],
        list(CSV_CONFIG_FIELDS),
        [time_chunks, float(final_time), count, epochs],
        [""] + list(labels),
        [CSV_TARGETS_LABEL] + [float(t) for t in targets],
    ]


class ResultSink:
    """
    CSV writer owning one output file for the duration of a sweep.

    The path may be given to the constructor or to open_or_create(); a path
    passed to open_or_create() replaces the one given at construction.

    Example usage:
        with ResultSink(path, header_block(...)) as sink:
            sink.write_row(1, [0.98, 0.01])

        sink = ResultSink(None, header_block(...))
        sink.open_or_create(path)
    """

    def __init__(self, path: Optional[Union[str, Path]], header: List[list]):
        self.path = None if path is None else Path(path)
        self.header = header
        self.width = len(header[-1])

        self.header_written = False
        self._file = None
        self._writer = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open_or_create(self, path: Optional[Union[str, Path]] = None) -> "ResultSink":
        """Open `path` (default: the constructor's) for append; write the header if empty."""
        if self._file is not None:
            raise RuntimeError(f"ResultSink is already open on {self.path}")
        if path is not None:
            self.path = Path(path)
        if self.path is None:
            raise ValueError("ResultSink has no output path")

        self.header_written = False

        try:
            self._file = open(self.path, "a", newline="", encoding="utf-8")
            self._writer = csv.writer(self._file, lineterminator="\n")

            if os.fstat(self._file.fileno()).st_size == 0:
                self._writer.writerows(self.header)
                self._file.flush()
                self.header_written = True
        except OSError as e:
            self.close()
            raise SinkIOFailure(self.path, e) from e

        return self

    def write_row(self, index: int, values: Sequence[float]) -> None:
        """Append one data row and flush it."""
        if self._file is None:
            raise RuntimeError("ResultSink is not open")

        row = [index] + [float(v) for v in values]
        if len(row) != self.width:
            raise ValueError(
                f"Row has {len(row)} fields but the header defines {self.width}"
            )

        try:
            self._writer.writerow(row)
            self._file.flush()
        except OSError as e:
            raise SinkIOFailure(self.path, e) from e

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None
            self._writer = None

    def __enter__(self) -> "ResultSink":
        return self.open_or_create()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
