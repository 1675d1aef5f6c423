"""
Control angles for the chunked coupled two-qubit network.

Two interacting qubits A and B evolve under

    H = K_A σ_xA + K_B σ_xB + ε_A σ_zA + ε_B σ_zB + ζ σ_zA σ_zB

where K are the tunneling amplitudes, ε the biases and ζ the qubit-qubit
coupling (Behrman, Steck, Kumar & Walsh, arXiv:0808.1558). The total
evolution time is split into time chunks, each with its own trained
parameters, and every chunk is mapped to five control angles:

    timeScale = N_chunks · T_f · π
    norm_A    = √(K_A² + ε_B²)
    norm_B    = √(K_B² + ε_B²)

    w₀ = timeScale · ζ
    w₁ = asin(K_A / norm_A)
    w₂ = asin(K_B / norm_B)
    w₃ = timeScale · norm_A
    w₄ = timeScale · norm_B

Both normalizations use ε_B; this matches the trained network and is kept.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import (
    TUNNELING_A,
    TUNNELING_B,
    BIAS_A,
    BIAS_B,
    COUPLING,
    DEFAULT_FINAL_TIME,
)


@dataclass(frozen=True)
class HamiltonianParameters:
    """Per-chunk physical constants of the coupled two-qubit Hamiltonian."""
    tunneling_a: Tuple[float, ...]
    tunneling_b: Tuple[float, ...]
    bias_a: Tuple[float, ...]
    bias_b: Tuple[float, ...]
    coupling: Tuple[float, ...]

    def __post_init__(self):
        for name in ("tunneling_a", "tunneling_b", "bias_a", "bias_b", "coupling"):
            object.__setattr__(self, name, tuple(float(v) for v in getattr(self, name)))

    @property
    def max_chunks(self) -> int:
        """Largest chunk count every parameter vector can cover."""
        return min(
            len(self.tunneling_a),
            len(self.tunneling_b),
            len(self.bias_a),
            len(self.bias_b),
            len(self.coupling),
        )


DEFAULT_HAMILTONIAN = HamiltonianParameters(
    tunneling_a=TUNNELING_A,
    tunneling_b=TUNNELING_B,
    bias_a=BIAS_A,
    bias_b=BIAS_B,
    coupling=COUPLING,
)


def compute_angles(
    constants: HamiltonianParameters,
    time_chunks: int,
    evolution_time: float,
) -> np.ndarray:
    """
    Compute the control angles for every time chunk.

    Args:
        constants: Hamiltonian parameters (at least time_chunks entries each)
        time_chunks: Number of time chunks
        evolution_time: Final evolution time T_f

    Returns:
        Array of shape (time_chunks, 5); a fresh array on every call
    """
    if time_chunks <= 0:
        raise ValueError(f"time_chunks must be positive, got {time_chunks}")
    if time_chunks > constants.max_chunks:
        raise ValueError(
            f"time_chunks={time_chunks} exceeds the {constants.max_chunks} "
            "chunks covered by the Hamiltonian parameters"
        )

    weights = np.zeros((time_chunks, 5))
    time_scale = time_chunks * evolution_time * np.pi

    for i in range(time_chunks):
        norm_a = np.sqrt(constants.tunneling_a[i]**2 + constants.bias_b[i]**2)
        norm_b = np.sqrt(constants.tunneling_b[i]**2 + constants.bias_b[i]**2)

        weights[i, 0] = time_scale * constants.coupling[i]
        weights[i, 1] = np.arcsin(constants.tunneling_a[i] / norm_a)
        weights[i, 2] = np.arcsin(constants.tunneling_b[i] / norm_b)
        weights[i, 3] = time_scale * norm_a
        weights[i, 4] = time_scale * norm_b

    return weights


class CoupledTwoQubitNetwork:
    """
    Chunked coupled two-qubit network with fixed trained parameters.

    Example usage:
        network = CoupledTwoQubitNetwork(time_chunks=4)
        angles = network.get_angles()
    """

    def __init__(
        self,
        time_chunks: int,
        time_interval: float = DEFAULT_FINAL_TIME,
        constants: HamiltonianParameters = DEFAULT_HAMILTONIAN,
    ):
        if time_chunks <= 0 or time_chunks > constants.max_chunks:
            raise ValueError(
                f"time_chunks must be in [1, {constants.max_chunks}], got {time_chunks}"
            )
        self.time_chunks = time_chunks
        self.time_interval = time_interval
        self.constants = constants

    def get_angles(self, time_interval: Optional[float] = None) -> np.ndarray:
        """Angles for the configured chunk count (default: the network's T_f)."""
        if time_interval is None:
            time_interval = self.time_interval
        return compute_angles(self.constants, self.time_chunks, time_interval)
