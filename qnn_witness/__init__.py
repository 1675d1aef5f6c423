"""
Entanglement Witness Sweeps for a Chunked Two-Qubit Quantum Neural Network
==========================================================================

Measures the entanglement witness learned by a coupled two-qubit quantum
neural network (Behrman, Steck et al.) whose Hamiltonian

    H = K_A σ_xA + K_B σ_xB + ε_A σ_zA + ε_B σ_zB + ζ σ_zA σ_zB

is split into time chunks with trained parameters. Witness values are
estimated from repeated measurements and swept across epochs or sample
counts into a CSV trace.

Package Structure:
==================
- network.py      Control angles from the chunked Hamiltonian parameters
- states.py       Input states, partially entangled family, StateCatalog
- estimator.py    WitnessEstimator (measurement tally → witness)
- simulation.py   Qiskit Aer measurement backend
- sink.py         Append-or-create CSV output
- harness.py      SweepHarness: epoch and precision sweeps
- trace.py        Reading, summarizing and plotting CSV traces
- validation.py   Self-checks of all components
- cli.py          `qnn-witness` command

Quick Start:
    from qnn_witness import SweepConfig, SweepHarness, StateCatalog
    from qnn_witness.simulation import AerWitnessMeasurement

    catalog = StateCatalog.default()
    harness = SweepHarness(SweepConfig(output="run.csv"), catalog, AerWitnessMeasurement())
    rows = harness.run_epoch_sweep()
"""

__version__ = "1.0.0"

from .errors import (
    QNNWitnessError,
    ArityMismatchError,
    MalformedGammaError,
    MeasurementFailure,
    SinkIOFailure,
)
from .network import (
    HamiltonianParameters,
    DEFAULT_HAMILTONIAN,
    CoupledTwoQubitNetwork,
    compute_angles,
)
from .states import (
    StateVector,
    StateEntry,
    StateCatalog,
    parse_gamma,
    parse_gamma_list,
    partially_entangled_state,
    concurrence,
)
from .estimator import WitnessEstimator
from .sink import ResultSink, header_block
from .harness import (
    SweepConfig,
    SweepHarness,
    SweepState,
    ResultRow,
)
from .trace import (
    SweepTrace,
    read_trace,
    summarize_trace,
    print_trace_summary,
    plot_trace,
)
from .validation import run_validation

__all__ = [
    # Errors
    "QNNWitnessError",
    "ArityMismatchError",
    "MalformedGammaError",
    "MeasurementFailure",
    "SinkIOFailure",

    # Angle model
    "HamiltonianParameters",
    "DEFAULT_HAMILTONIAN",
    "CoupledTwoQubitNetwork",
    "compute_angles",

    # States
    "StateVector",
    "StateEntry",
    "StateCatalog",
    "parse_gamma",
    "parse_gamma_list",
    "partially_entangled_state",
    "concurrence",

    # Estimation and sweeps
    "WitnessEstimator",
    "ResultSink",
    "header_block",
    "SweepConfig",
    "SweepHarness",
    "SweepState",
    "ResultRow",

    # Trace analysis
    "SweepTrace",
    "read_trace",
    "summarize_trace",
    "print_trace_summary",
    "plot_trace",

    # Validation
    "run_validation",
]
