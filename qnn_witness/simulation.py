"""
Qiskit Aer measurement backend for the chunked two-qubit network.

Circuit structure (2 qubits, 2 clbits):
- initialize(|ψ⟩) with amplitudes ordered |AB⟩ = |00⟩, |01⟩, |10⟩, |11⟩,
  so qubit A is qiskit qubit 1 and qubit B is qiskit qubit 0
- per time chunk (w₀..w₄ from the angle model):
    RZZ(2w₀)                       coupling ζ σ_zA σ_zB
    RY(w₁) RZ(2w₃) RY(-w₁) on A    tunneling + bias, axis tilted by w₁
    RY(w₂) RZ(2w₄) RY(-w₂) on B
- measure both qubits

Witness tally: k = N(even parity) - N(odd parity) = trials · ⟨σ_zA σ_zB⟩.
"""

from typing import Dict, Optional

import numpy as np
from qiskit import QuantumCircuit, transpile
from qiskit_aer import AerSimulator

QUBIT_A = 1
QUBIT_B = 0


def _tilted_rotation(qc: QuantumCircuit, qubit: int, tilt: float, phase: float) -> None:
    """exp(-i·phase·(sin(tilt)σ_x + cos(tilt)σ_z)) as RY(tilt) RZ(2·phase) RY(-tilt)."""
    qc.ry(-tilt, qubit)
    qc.rz(2 * phase, qubit)
    qc.ry(tilt, qubit)


def create_witness_circuit(angles: np.ndarray, amplitudes: np.ndarray) -> QuantumCircuit:
    """
    Create the chunked evolution and measurement circuit.

    Args:
        angles: Control angles, shape (time_chunks, 5)
        amplitudes: 4 complex input amplitudes (normalized here)

    Returns:
        QuantumCircuit measuring both qubits
    """
    angles = np.asarray(angles, dtype=float)
    if angles.ndim != 2 or angles.shape[1] != 5:
        raise ValueError(f"angles must have shape (chunks, 5), got {angles.shape}")

    psi = np.asarray(amplitudes, dtype=complex)
    if psi.shape != (4,):
        raise ValueError(f"Expected 4 amplitudes, got shape {psi.shape}")
    psi = psi / np.linalg.norm(psi)

    qc = QuantumCircuit(2, 2, name="witness")
    qc.initialize(psi, [0, 1])
    qc.barrier()

    for coupling_phase, tilt_a, tilt_b, phase_a, phase_b in angles:
        qc.rzz(2 * coupling_phase, QUBIT_A, QUBIT_B)
        _tilted_rotation(qc, QUBIT_A, tilt_a, phase_a)
        _tilted_rotation(qc, QUBIT_B, tilt_b, phase_b)

    qc.barrier()
    qc.measure([0, 1], [0, 1])

    return qc


def parity_tally(counts: Dict[str, int]) -> int:
    """N(even) - N(odd) over measured bitstrings."""
    tally = 0
    for bits, n in counts.items():
        if bits.replace(" ", "").count("1") % 2 == 0:
            tally += n
        else:
            tally -= n
    return tally


class AerWitnessMeasurement:
    """
    Measurement backend running the witness circuit on AerSimulator.

    A seed makes a sequence of calls reproducible; every call still draws its
    own simulator seed, so repeated measurements of one state are independent.

    Example usage:
        measure = AerWitnessMeasurement(seed=7)
        k = measure(network.get_angles(), state.amplitudes, 1000)
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        optimization_level: int = 1,
        backend=None,
    ):
        self.backend = AerSimulator() if backend is None else backend
        self.optimization_level = optimization_level
        self._rng = None if seed is None else np.random.default_rng(seed)

    def __call__(self, angles: np.ndarray, amplitudes: np.ndarray, trials: int) -> int:
        qc = create_witness_circuit(angles, amplitudes)
        compiled = transpile(qc, self.backend, optimization_level=self.optimization_level)

        run_options = {"shots": trials}
        if self._rng is not None:
            run_options["seed_simulator"] = int(self._rng.integers(2**31))

        counts = self.backend.run(compiled, **run_options).result().get_counts()
        return parity_tally(counts)
