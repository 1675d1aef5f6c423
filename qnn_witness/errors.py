"""
Exceptions raised by the witness sweep components.

Each error also derives from the built-in exception callers would expect
(ValueError for bad input, RuntimeError for measurement, OSError for I/O).
"""


class QNNWitnessError(Exception):
    """Base class for all qnn_witness errors."""


class ArityMismatchError(QNNWitnessError, ValueError):
    """Parallel state/label/target sequences differ in length."""

    def __init__(self, n_states: int, n_labels: int, n_targets: int):
        self.lengths = (n_states, n_labels, n_targets)
        super().__init__(
            f"States, labels and targets must have equal lengths "
            f"(got {n_states}, {n_labels}, {n_targets})"
        )


class MalformedGammaError(QNNWitnessError, ValueError):
    """A gamma token is neither a real number nor a complex literal."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(
            f"Cannot parse gamma value {token!r}: expected a real number "
            "or a complex literal such as 0.5+0.25i"
        )


class MeasurementFailure(QNNWitnessError, RuntimeError):
    """The measurement backend failed or returned an invalid tally."""


class SinkIOFailure(QNNWitnessError, OSError):
    """The result file could not be created, opened or written."""

    def __init__(self, path, cause: OSError):
        self.path = path
        super().__init__(f"Cannot write results to {path}: {cause}")
