"""
Self-validation of the witness sweep components.

Checks:
- Angle model: shape, purity, mix-angle bounds
- State catalog: normalization of preset and partially entangled states
- Concurrence formula and gamma parsing
- CSV header idempotence across reopened files
- (full) Aer measurement backend on states with known ⟨σ_zA σ_zB⟩
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, NamedTuple

import numpy as np

from .config import NORMALIZATION_TOLERANCE
from .errors import MalformedGammaError
from .network import DEFAULT_HAMILTONIAN, compute_angles
from .sink import ResultSink, header_block
from .states import StateCatalog, concurrence, parse_gamma, partially_entangled_state


class CheckResult(NamedTuple):
    name: str
    passed: bool
    details: str = ""


@dataclass
class ValidationResults:
    """Checks recorded by one validation group."""
    checks: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for check in self.checks if check.passed)

    @property
    def failed(self) -> int:
        return len(self.checks) - self.passed

    def record(self, name: str, condition: bool, details: str = "") -> bool:
        check = CheckResult(name, bool(condition), details)
        self.checks.append(check)
        return check.passed

    def summary(self) -> str:
        return f"{self.passed}/{len(self.checks)} checks passed"


# ==============================================================================
# Validation Tests
# ==============================================================================

def validate_angle_model(n_tests: int = 50) -> ValidationResults:
    """Angle vectors have the right shape, are reproducible and bounded."""
    results = ValidationResults()
    rng = np.random.default_rng(42)

    for time_chunks in range(1, DEFAULT_HAMILTONIAN.max_chunks + 1):
        angles = compute_angles(DEFAULT_HAMILTONIAN, time_chunks, 0.1)
        results.record(
            f"{time_chunks} chunks → shape ({time_chunks}, 5)",
            angles.shape == (time_chunks, 5),
            f"shape = {angles.shape}",
        )

    max_diff = 0.0
    mix_in_range = True
    for _ in range(n_tests):
        t_f = rng.uniform(0.0, 1.0)
        first = compute_angles(DEFAULT_HAMILTONIAN, 4, t_f)
        second = compute_angles(DEFAULT_HAMILTONIAN, 4, t_f)
        max_diff = max(max_diff, float(np.max(np.abs(first - second))))
        mix = first[:, 1:3]
        mix_in_range &= bool(np.all((mix >= -np.pi / 2) & (mix <= np.pi / 2)))

    results.record("Angles reproducible", max_diff == 0.0, f"max diff = {max_diff}")
    results.record("Mix angles in [-π/2, π/2]", mix_in_range)

    return results


def validate_states() -> ValidationResults:
    """Preset and partially entangled states are normalized with correct targets."""
    results = ValidationResults()

    catalog = StateCatalog.default()
    for entry in catalog:
        norm = np.linalg.norm(entry.state.amplitudes)
        results.record(
            f"{entry.label} normalized",
            abs(norm - 1.0) < NORMALIZATION_TOLERANCE,
            f"norm = {norm:.12f}",
        )

    for gamma in [0.0, 0.5, 1.0, 0.3 + 0.4j, -0.6j]:
        entry = partially_entangled_state(gamma)
        norm = np.linalg.norm(entry.state.amplitudes)
        results.record(
            f"γ = {gamma}: normalized",
            abs(norm - 1.0) < NORMALIZATION_TOLERANCE,
            f"norm = {norm:.12f}",
        )

        # Concurrence of a pure state: 2|a₀₀a₁₁ - a₀₁a₁₀|
        a = entry.state.amplitudes
        direct = 2 * abs(a[0] * a[3] - a[1] * a[2])
        results.record(
            f"γ = {gamma}: concurrence",
            abs(direct - entry.target) < 1e-12,
            f"direct = {direct:.12f}, formula = {entry.target:.12f}",
        )

    results.record("C(1) = 2/3", abs(concurrence(1.0) - 2 / 3) < 1e-12)
    results.record("C(0) = 0", concurrence(0.0) == 0.0)

    return results


def validate_gamma_parsing() -> ValidationResults:
    """Gamma tokens parse to the expected values; bad tokens are rejected."""
    results = ValidationResults()

    cases = [
        ("0.5", 0.5),
        ("-1", -1.0),
        ("0.3+0.4i", 0.3 + 0.4j),
        ("0.3-0.4i", 0.3 - 0.4j),
        ("0.5i", 0.5j),
        ("3+4i", 0.6 + 0.8j),
    ]
    for token, expected in cases:
        value = parse_gamma(token)
        results.record(
            f"parse {token!r}",
            abs(value - expected) < 1e-12,
            f"got {value}, expected {expected}",
        )

    for token in ["", "abc", "1+i", "0.5j"]:
        try:
            parse_gamma(token)
            rejected = False
        except MalformedGammaError:
            rejected = True
        results.record(f"reject {token!r}", rejected)

    return results


def validate_result_sink(n_first: int = 3, n_second: int = 2) -> ValidationResults:
    """Reopening a CSV file appends rows under a single header block."""
    results = ValidationResults()
    header = header_block(4, 0.0628, 100, 1, ["A", "B"], [1.0, 0.0])

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "trace.csv"

        with ResultSink(path, header) as sink:
            for i in range(n_first):
                sink.write_row(i + 1, [0.5, -0.5])
            first_wrote_header = sink.header_written

        with ResultSink(path, header) as sink:
            for i in range(n_second):
                sink.write_row(n_first + i + 1, [0.25, 0.75])
            second_wrote_header = sink.header_written

        lines = path.read_text(encoding="utf-8").splitlines()

    results.record("Header written on creation", first_wrote_header)
    results.record("Header skipped on reopen", not second_wrote_header)
    results.record(
        "Line count",
        len(lines) == len(header) + n_first + n_second,
        f"{len(lines)} lines",
    )
    results.record(
        "Row widths",
        all(len(line.split(",")) == 3 for line in lines[len(header):]),
    )

    return results


def validate_aer_backend(shots: int = 2000) -> ValidationResults:
    """Without evolution, ⟨σ_zA σ_zB⟩ is +1 for |Φ⁺⟩ and -1 for |01⟩."""
    from .simulation import AerWitnessMeasurement

    results = ValidationResults()
    measure = AerWitnessMeasurement(seed=11)
    no_evolution = np.zeros((1, 5))

    phi_plus = np.array([1, 0, 0, 1]) / np.sqrt(2)
    tally = measure(no_evolution, phi_plus, shots)
    results.record("|Φ⁺⟩ tally = +shots", tally == shots, f"tally = {tally}")

    ket_01 = np.array([0, 1, 0, 0])
    tally = measure(no_evolution, ket_01, shots)
    results.record("|01⟩ tally = -shots", tally == -shots, f"tally = {tally}")

    angles = compute_angles(DEFAULT_HAMILTONIAN, 4, 0.0628)
    tally = measure(angles, phi_plus, shots)
    results.record("Evolved tally in range", abs(tally) <= shots, f"tally = {tally}")

    return results


CHECK_GROUPS = [
    ("Angle Model", validate_angle_model),
    ("States", validate_states),
    ("Gamma Parsing", validate_gamma_parsing),
    ("Result Sink", validate_result_sink),
]


def run_validation(
    verbose: bool = True,
    full: bool = True,
) -> Dict[str, ValidationResults]:
    """
    Run every check group.

    Args:
        verbose: Print one line per group and the details of failed checks
        full: Include the Aer simulation checks

    Returns:
        Dictionary mapping group names to ValidationResults
    """
    groups = list(CHECK_GROUPS)
    if full:
        groups.append(("Aer Backend", validate_aer_backend))

    all_results = {name: check_group() for name, check_group in groups}

    if verbose:
        print_validation_report(all_results)

    return all_results


def print_validation_report(all_results: Dict[str, ValidationResults]) -> None:
    for name, results in all_results.items():
        mark = "✓" if results.failed == 0 else "✗"
        print(f"{mark} {name:<16} {results.summary()}")
        for check in results.checks:
            if not check.passed:
                print(f"    FAIL {check.name}: {check.details}")

    total_failed = sum(r.failed for r in all_results.values())
    if total_failed:
        print(f"\n{total_failed} check(s) failed")
    else:
        print("\nAll components validated")
