"""
Entanglement witness estimation from repeated measurements.

A measurement backend is any callable

    measure(angles, amplitudes, trials) -> int

that evolves the two-qubit input state under the chunked control angles,
measures it `trials` times and returns the tally of favorable outcomes.
Tallies may be signed (±1 per trial), so k ∈ [-trials, trials] and the
witness k / trials lies in [-1, 1].
"""

import numbers
from typing import Callable, Optional

import numpy as np

from .errors import MeasurementFailure
from .network import CoupledTwoQubitNetwork
from .states import StateVector

MeasureFn = Callable[[np.ndarray, np.ndarray, int], int]


def check_tally(tally, trials: int) -> int:
    """
    Validate a backend tally.

    Raises:
        MeasurementFailure: tally is not an integer in [-trials, trials]
    """
    if isinstance(tally, (bool, np.bool_)) or not isinstance(tally, numbers.Integral):
        raise MeasurementFailure(
            f"Measurement returned {tally!r}; expected an integer tally"
        )
    tally = int(tally)
    if abs(tally) > trials:
        raise MeasurementFailure(
            f"Measurement returned tally {tally} outside [-{trials}, {trials}]"
        )
    return tally


class WitnessEstimator:
    """
    Monte-Carlo estimator of the entanglement witness.

    Each call to estimate() is one independent measurement of one state:
    no caching and no batching across states.

    Attributes:
        network: Chunked network providing the control angles
        measure: Measurement backend
        signed: Keep the sign of the witness (otherwise fold to |witness|)
    """

    def __init__(
        self,
        network: CoupledTwoQubitNetwork,
        measure: MeasureFn,
        signed: bool = False,
    ):
        self.network = network
        self.measure = measure
        self.signed = signed

    def estimate(
        self,
        state: StateVector,
        sample_count: int,
        signed: Optional[bool] = None,
    ) -> float:
        """
        Estimate the witness of one state.

        Args:
            state: Input state
            sample_count: Number of measurement trials (> 0)
            signed: Override the estimator's sign mode for this call

        Returns:
            k / sample_count, folded to its absolute value when unsigned
        """
        if sample_count <= 0:
            raise ValueError(f"sample_count must be positive, got {sample_count}")
        if signed is None:
            signed = self.signed

        angles = self.network.get_angles()

        try:
            tally = self.measure(angles, state.amplitudes, sample_count)
        except MeasurementFailure:
            raise
        except Exception as e:
            raise MeasurementFailure(f"Measurement backend failed: {e}") from e

        witness = check_tally(tally, sample_count) / sample_count

        if not signed:
            witness = abs(witness)

        return witness
