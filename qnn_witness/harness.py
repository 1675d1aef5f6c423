"""
Sweep runner for chunked QNN witness measurements.

This module provides the SweepHarness class that handles:
- Output file setup (header block written once per file)
- Epoch sweeps: fixed count, one row per epoch
- Precision sweeps: increasing count, one row per count step
- Console echo of every row

Lifecycle: IDLE → STREAM_OPEN → SWEEPING → STREAM_CLOSED. A harness runs a
single sweep; the output file is closed on every exit path.
"""

import enum
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple, Union

from tqdm import tqdm

from .config import (
    BASE_FILE_NAME,
    DEFAULT_COUNT,
    DEFAULT_COUNT_STEP,
    DEFAULT_EPOCHS,
    DEFAULT_FINAL_TIME,
    DEFAULT_TIME_CHUNKS,
    FILE_NAME_EXT,
    INDEX_FORMAT,
    VALUE_FORMAT,
)
from .estimator import MeasureFn, WitnessEstimator
from .network import DEFAULT_HAMILTONIAN, CoupledTwoQubitNetwork, HamiltonianParameters
from .sink import ResultSink, header_block
from .states import StateCatalog, StateEntry, StateVector


def default_output_name() -> Path:
    """Timestamped output file name, e.g. qnn_witness_20260101_120000.csv."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(f"{BASE_FILE_NAME}_{timestamp}{FILE_NAME_EXT}")


@dataclass(frozen=True)
class SweepConfig:
    """
    Parameters of one sweep run.

    Attributes:
        output: CSV file to create or append to
        time_chunks: Number of time chunks of the network
        evolution_time: Final evolution time T_f
        count: Trials per witness (epoch sweep) or largest count (precision sweep)
        epochs: Epochs to run, or measurements averaged per count step
        count_step: Count increment of the precision sweep
        signed: Keep witness signs instead of folding to absolute values
        verbose: Echo rows to the console
        average: Average precision-sweep witnesses over `epochs` measurements
        progress: Show a tqdm progress bar
    """
    output: Union[str, Path] = field(default_factory=default_output_name)
    time_chunks: int = DEFAULT_TIME_CHUNKS
    evolution_time: float = DEFAULT_FINAL_TIME
    count: int = DEFAULT_COUNT
    epochs: int = DEFAULT_EPOCHS
    count_step: int = DEFAULT_COUNT_STEP
    signed: bool = False
    verbose: bool = True
    average: bool = False
    progress: bool = False

    def __post_init__(self):
        for name in ("time_chunks", "count", "epochs", "count_step"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        object.__setattr__(self, "output", Path(self.output))


class SweepState(enum.Enum):
    IDLE = "idle"
    STREAM_OPEN = "stream_open"
    SWEEPING = "sweeping"
    STREAM_CLOSED = "stream_closed"


@dataclass(frozen=True)
class ResultRow:
    """Sweep index (epoch or count) and one witness per catalog entry."""
    index: int
    values: Tuple[float, ...]


class SweepHarness:
    """
    Runs witness sweeps over a state catalog and records them to CSV.

    Example usage:
        harness = SweepHarness(
            SweepConfig(output="run.csv", count=1000, epochs=4),
            StateCatalog.default(),
            AerWitnessMeasurement(seed=1),
        )
        rows = harness.run_epoch_sweep()

    Attributes:
        config: Sweep parameters
        catalog: States to measure (snapshotted when the sweep starts)
        network: Chunked network providing control angles
        estimator: Witness estimator bound to the measurement backend
        state: Current lifecycle state
        rows: Rows written by the sweep
    """

    def __init__(
        self,
        config: SweepConfig,
        catalog: StateCatalog,
        measure: MeasureFn,
        constants: HamiltonianParameters = DEFAULT_HAMILTONIAN,
    ):
        if len(catalog) == 0:
            raise ValueError("Cannot sweep an empty state catalog")

        self.config = config
        self.catalog = catalog
        self.network = CoupledTwoQubitNetwork(
            config.time_chunks, config.evolution_time, constants
        )
        self.estimator = WitnessEstimator(self.network, measure, signed=config.signed)
        self.state = SweepState.IDLE
        self.rows: List[ResultRow] = []

    def run(self, witness: bool = False) -> List[ResultRow]:
        """Run a precision sweep if `witness` is set, else an epoch sweep."""
        if witness:
            return self.run_precision_sweep()
        return self.run_epoch_sweep()

    def run_epoch_sweep(self) -> List[ResultRow]:
        """One row per epoch 1..epochs, every state measured at `count` trials."""
        return self._sweep(self._epoch_rows)

    def run_precision_sweep(self) -> List[ResultRow]:
        """One row per count step, count_step, 2·count_step, ... ≤ count."""
        if self.config.count_step > self.config.count:
            warnings.warn(
                f"count_step={self.config.count_step} exceeds count={self.config.count}; "
                "the precision sweep emits no rows"
            )
        return self._sweep(self._precision_rows)

    # -------------------------------------------------------------------------

    def _sweep(self, row_source) -> List[ResultRow]:
        if self.state is not SweepState.IDLE:
            raise RuntimeError(f"Sweep already run (state: {self.state.value})")

        entries = list(self.catalog)
        if not entries:
            raise ValueError("Cannot sweep an empty state catalog")
        self._echo_header(entries)

        sink = ResultSink(self.config.output, self._header(entries))
        try:
            with sink:
                self.state = SweepState.STREAM_OPEN
                self.state = SweepState.SWEEPING

                for index, values in row_source(entries):
                    sink.write_row(index, values)
                    row = ResultRow(index, tuple(values))
                    self.rows.append(row)
                    self._echo_row(row)
        finally:
            self.state = SweepState.STREAM_CLOSED

        return list(self.rows)

    def _epoch_rows(self, entries: Sequence[StateEntry]) -> Iterator[Tuple[int, List[float]]]:
        epochs = range(1, self.config.epochs + 1)
        for epoch in tqdm(epochs, desc="Epochs", disable=not self.config.progress):
            values = [self.estimator.estimate(e.state, self.config.count) for e in entries]
            yield epoch, values

    def _precision_rows(self, entries: Sequence[StateEntry]) -> Iterator[Tuple[int, List[float]]]:
        counts = range(self.config.count_step, self.config.count + 1, self.config.count_step)
        for current_count in tqdm(counts, desc="Counts", disable=not self.config.progress):
            if self.config.average:
                values = [self._averaged_witness(e.state, current_count) for e in entries]
            else:
                values = [self.estimator.estimate(e.state, current_count) for e in entries]
            yield current_count, values

    def _averaged_witness(self, state: StateVector, sample_count: int) -> float:
        """Mean of `epochs` witnesses; unsigned mode folds the running sum, not the sample."""
        entanglement = 0.0
        for _ in range(self.config.epochs):
            witness = self.estimator.estimate(state, sample_count, signed=True)
            if not self.config.signed:
                entanglement = abs(entanglement)
            entanglement += witness
        return entanglement / self.config.epochs

    def _header(self, entries: Sequence[StateEntry]) -> List[list]:
        return header_block(
            self.config.time_chunks,
            self.config.evolution_time,
            self.config.count,
            self.config.epochs,
            [e.label for e in entries],
            [e.target for e in entries],
        )

    def _echo_header(self, entries: Sequence[StateEntry]) -> None:
        if not self.config.verbose:
            return
        print()
        print(f"File Name: {self.config.output}")
        print()
        print(f"{self.catalog.entry_type:>12}:" + "".join(f"  {e.label:>11}" for e in entries))
        print("      Target:" + "".join("  " + VALUE_FORMAT.format(e.target) for e in entries))

    def _echo_row(self, row: ResultRow) -> None:
        if not self.config.verbose:
            return
        line = "     " + INDEX_FORMAT.format(row.index) + ":"
        line += "".join("  " + VALUE_FORMAT.format(v) for v in row.values)
        print(line)
