"""
Input states for the witness network.

Implements:
- StateVector: tagged real/complex amplitude vector in basis |00⟩, |01⟩, |10⟩, |11⟩
- Partially entangled family: |ψ(γ)⟩ = (|00⟩ + |01⟩ + γ|10⟩) / √(2 + |γ|²)
  with concurrence C(γ) = 2|γ| / (2 + |γ|²)
- StateCatalog: ordered (label, state, target) entries measured by a sweep
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union

import numpy as np

from .config import (
    DEFAULT_LABELS,
    DEFAULT_STATES,
    DEFAULT_TARGETS,
    GAMMA_LABEL_FORMAT,
    STATE_DIMENSION,
)
from .errors import ArityMismatchError, MalformedGammaError

Gamma = Union[float, complex]

# Real number, optionally signed, with optional fractional part
_FLOAT = r"([-+]?\d+\.?\d*|[-+]?\d*\.?\d+)"
_IMAGINARY_PATTERN = re.compile(_FLOAT + r"i")
_COMPLEX_PATTERN = re.compile(_FLOAT + _FLOAT + r"i")


@dataclass(frozen=True)
class StateVector:
    """
    Two-qubit input state, tagged by amplitude representation.

    Encodings:
        "real":    4 values (a₀₀, a₀₁, a₁₀, a₁₁)
        "complex": 8 values (Re a₀₀, Im a₀₀, Re a₀₁, Im a₀₁, ...)

    The measurement backend always receives `amplitudes`, a complex128
    array of length 4, whatever the tag.
    """
    kind: str
    values: Tuple[float, ...]

    def __post_init__(self):
        if self.kind == "real":
            expected = STATE_DIMENSION
        elif self.kind == "complex":
            expected = 2 * STATE_DIMENSION
        else:
            raise ValueError(f"Unknown state representation: {self.kind}")
        if len(self.values) != expected:
            raise ValueError(
                f"A {self.kind} state needs {expected} values, got {len(self.values)}"
            )
        if not np.all(np.isfinite(self.values)):
            raise ValueError("State amplitudes must be finite")
        if self.norm() == 0:
            raise ValueError("State vector must not be zero")

    @classmethod
    def from_real(cls, amplitudes: Sequence[float]) -> "StateVector":
        return cls("real", tuple(float(a) for a in amplitudes))

    @classmethod
    def from_complex(cls, amplitudes: Sequence[complex]) -> "StateVector":
        values = []
        for a in amplitudes:
            a = complex(a)
            values.extend((a.real, a.imag))
        return cls("complex", tuple(values))

    @classmethod
    def from_amplitudes(cls, amplitudes) -> "StateVector":
        """Build a state, choosing the tag from the amplitudes' dtype."""
        if isinstance(amplitudes, StateVector):
            return amplitudes
        array = np.asarray(amplitudes)
        if np.iscomplexobj(array):
            return cls.from_complex(array)
        return cls.from_real(array)

    @property
    def amplitudes(self) -> np.ndarray:
        if self.kind == "real":
            return np.array(self.values, dtype=complex)
        pairs = np.array(self.values).reshape(STATE_DIMENSION, 2)
        return pairs[:, 0] + 1j * pairs[:, 1]

    def encode(self) -> Tuple[float, ...]:
        """Flat real encoding (4 or 8 values depending on the tag)."""
        return self.values

    def norm(self) -> float:
        return float(np.sqrt(np.sum(np.square(self.values))))


@dataclass(frozen=True)
class StateEntry:
    """One catalog entry."""
    label: str
    state: StateVector
    target: float


# =============================================================================
# GAMMA PARSING AND THE PARTIALLY ENTANGLED FAMILY
# =============================================================================

def parse_gamma(token: str) -> Gamma:
    """
    Parse one gamma value.

    Accepts a real number ("0.5", "-1") or a complex literal written as
    "<real><signed real>i" ("0.5+0.25i", "1-2i") or "<real>i". Complex values
    outside the unit circle are scaled onto it; real values are kept as given.

    Raises:
        MalformedGammaError: token matches neither form
    """
    text = token.strip()

    if "i" not in text:
        try:
            value = float(text)
        except ValueError:
            raise MalformedGammaError(token) from None
        if not np.isfinite(value):
            raise MalformedGammaError(token)
        return value

    match = _IMAGINARY_PATTERN.fullmatch(text)
    if match is not None:
        z = complex(0.0, float(match.group(1)))
    else:
        match = _COMPLEX_PATTERN.fullmatch(text)
        if match is None:
            raise MalformedGammaError(token)
        z = complex(float(match.group(1)), float(match.group(2)))

    return _clip_to_unit_circle(z)


def parse_gamma_list(text: str) -> List[Gamma]:
    """Parse a comma-delimited list of gamma values."""
    return [parse_gamma(token) for token in text.split(",")]


def _clip_to_unit_circle(z: complex) -> complex:
    magnitude = abs(z)
    if magnitude > 1:
        z = z / magnitude
    return z


def concurrence(gamma: Gamma) -> float:
    """Concurrence C(γ) = 2|γ| / (2 + |γ|²) of the partially entangled state."""
    length = abs(gamma)
    return 2 * length / (2 + length**2)


def gamma_label(gamma: Gamma) -> str:
    """Column label for a gamma state, e.g. '+0.50-0.25i'."""
    z = complex(gamma)
    return GAMMA_LABEL_FORMAT.format(z.real, z.imag)


def partially_entangled_state(gamma: Gamma) -> StateEntry:
    """
    Create the catalog entry for |ψ(γ)⟩ = (|00⟩ + |01⟩ + γ|10⟩) / √(2 + |γ|²).

    Real gamma gives a real-tagged state, complex gamma a complex-tagged one.
    """
    is_complex = isinstance(gamma, (complex, np.complexfloating))
    if is_complex:
        gamma = _clip_to_unit_circle(complex(gamma))

    magnitude = np.sqrt(2 + abs(gamma)**2)
    amplitudes = [1 / magnitude, 1 / magnitude, gamma / magnitude, 0]

    if is_complex:
        state = StateVector.from_complex(amplitudes)
    else:
        state = StateVector.from_real(amplitudes)

    return StateEntry(label=gamma_label(gamma), state=state, target=concurrence(gamma))


# =============================================================================
# CATALOG
# =============================================================================

class StateCatalog:
    """
    Ordered collection of labeled input states and their target witnesses.

    Labels, states and targets are kept in parallel and always have the same
    length; every mutation validates its whole input before touching them.

    Example usage:
        catalog = StateCatalog.default()
        catalog.derive_partially_entangled([0.5, 0.25+0.5j])
        for entry in catalog:
            print(entry.label, entry.target)
    """

    def __init__(self):
        self._labels: List[str] = []
        self._states: List[StateVector] = []
        self._targets: List[float] = []
        self.entry_type = "State"

    @classmethod
    def default(cls) -> "StateCatalog":
        """The four preset training states Bell, Flat, C and P."""
        catalog = cls()
        catalog.append(DEFAULT_STATES, DEFAULT_LABELS, DEFAULT_TARGETS)
        return catalog

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self._labels)

    @property
    def states(self) -> Tuple[StateVector, ...]:
        return tuple(self._states)

    @property
    def targets(self) -> Tuple[float, ...]:
        return tuple(self._targets)

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[StateEntry]:
        for label, state, target in zip(self._labels, self._states, self._targets):
            yield StateEntry(label, state, target)

    def clear(self) -> None:
        self._labels.clear()
        self._states.clear()
        self._targets.clear()

    def append(self, states: Sequence, labels: Sequence[str], targets: Sequence[float]) -> None:
        """
        Append entries from parallel sequences.

        Raises:
            ArityMismatchError: sequences differ in length (catalog unchanged)
        """
        new_states, new_labels, new_targets = self._prepare(states, labels, targets)
        self._states.extend(new_states)
        self._labels.extend(new_labels)
        self._targets.extend(new_targets)

    def replace_all(self, states: Sequence, labels: Sequence[str], targets: Sequence[float]) -> None:
        """Replace every entry; the catalog is unchanged if validation fails."""
        new_states, new_labels, new_targets = self._prepare(states, labels, targets)
        self.clear()
        self._states.extend(new_states)
        self._labels.extend(new_labels)
        self._targets.extend(new_targets)
        self.entry_type = "State"

    def derive_partially_entangled(self, gamma_values: Union[str, Sequence[Gamma]]) -> None:
        """
        Replace the catalog with partially entangled states, one per gamma.

        The catalog is always cleared first. A string is parsed as a
        comma-delimited gamma list.
        """
        if isinstance(gamma_values, str):
            gamma_values = parse_gamma_list(gamma_values)

        entries = [partially_entangled_state(gamma) for gamma in gamma_values]

        self.replace_all(
            [e.state for e in entries],
            [e.label for e in entries],
            [e.target for e in entries],
        )
        self.entry_type = "Gamma"

    @staticmethod
    def _prepare(states, labels, targets):
        states = list(states)
        labels = list(labels)
        targets = list(targets)

        if not len(states) == len(labels) == len(targets):
            raise ArityMismatchError(len(states), len(labels), len(targets))

        return (
            [StateVector.from_amplitudes(s) for s in states],
            [str(label) for label in labels],
            [float(t) for t in targets],
        )
