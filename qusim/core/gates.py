"""
Gates — immutable value objects that evolve a QuantumState.

One dataclass per gate family, each carrying only the data it needs:

  FixedGate           I, X, Y, Z, H on one qubit
  RotationGate        RX, RY, RZ on one qubit
  CNOTGate            control, target
  PauliRotationGate   exp(-i theta/2 P1 x P2 x ...) on several qubits
  DiagonalMatrixGate  2^k diagonal entries on k qubits
  DenseMatrixGate     a merged gate: dense 2^k x 2^k matrix on k qubits
  MeasurementGate     Z-basis measurement into a classical register

Application dispatches through apply_gate(). Qubit indices are checked
against the state at application time, since a gate is built without one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum

import numpy as np

from qusim.core import kernels
from qusim.core.scalar import as_complex
from qusim.errors import InvalidGateError
from qusim.logging_config import get_logger

logger = get_logger("core.gates")

# Public R(theta) = exp(-i theta/2 P). The generator routine builds
# exp(+i phi/2 P), so every rotation stores phi = ROTATION_ANGLE_SIGN * theta.
ROTATION_ANGLE_SIGN = -1.0


class GateKind(Enum):
    IDENTITY = "I"
    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    CNOT = "CNOT"
    PAULI_ROTATION = "PauliRotation"
    DIAGONAL = "DiagonalMatrix"
    DENSE = "DenseMatrix"
    MEASUREMENT = "Measurement"


class Pauli(IntEnum):
    X = 1
    Y = 2
    Z = 3


_FIXED_MATRICES = {
    GateKind.IDENTITY: kernels.IDENTITY,
    GateKind.X: kernels.PAULI_X,
    GateKind.Y: kernels.PAULI_Y,
    GateKind.Z: kernels.PAULI_Z,
    GateKind.H: kernels.HADAMARD,
}

_ROTATION_AXES = {
    GateKind.RX: kernels.PAULI_X,
    GateKind.RY: kernels.PAULI_Y,
    GateKind.RZ: kernels.PAULI_Z,
}


def _check_index(value, what: str = "qubit index") -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidGateError(f"{what} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidGateError(f"{what} must be non-negative, got {value}")
    return int(value)


SEED_LIMIT = 2**32


def check_seed(seed) -> int:
    """Seeds are integers in [0, 2^32)."""
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidGateError(f"seed must be an integer, got {seed!r}")
    if not 0 <= seed < SEED_LIMIT:
        raise InvalidGateError(f"seed {seed} out of range [0, 2^32)")
    return int(seed)


def check_qubit_count(qubit_count) -> int:
    """Register sizes for circuits and observables."""
    if isinstance(qubit_count, bool) or not isinstance(qubit_count, (int, np.integer)):
        raise InvalidGateError(f"qubit_count must be an integer, got {qubit_count!r}")
    if qubit_count < 0:
        raise InvalidGateError(f"qubit_count must be non-negative, got {qubit_count}")
    return int(qubit_count)


def _check_distinct(qubits, name: str):
    if len(set(qubits)) != len(qubits):
        raise InvalidGateError(f"{name}: duplicate target qubits {list(qubits)}")


def _generator_rotation(pauli_matrix: np.ndarray, generator_angle: float) -> np.ndarray:
    """exp(+i phi/2 P) for an involutory P: cos(phi/2) I + i sin(phi/2) P."""
    dim = pauli_matrix.shape[0]
    return (np.cos(generator_angle / 2) * np.eye(dim, dtype=np.complex128)
            + 1j * np.sin(generator_angle / 2) * pauli_matrix)


# ── Gate variants ───────────────────────────────────────────────────

@dataclass(frozen=True)
class FixedGate:
    """Identity, Pauli X/Y/Z or Hadamard on one qubit."""
    kind: GateKind
    target: int

    @property
    def qubits(self) -> tuple[int, ...]:
        return (self.target,)

    @property
    def is_diagonal(self) -> bool:
        return self.kind in (GateKind.IDENTITY, GateKind.Z)

    def matrix(self) -> np.ndarray:
        return _FIXED_MATRICES[self.kind].copy()


@dataclass(frozen=True)
class RotationGate:
    """Single-qubit rotation. `generator_angle` is already sign-flipped."""
    kind: GateKind
    target: int
    generator_angle: float

    @property
    def angle(self) -> float:
        """The caller-facing angle theta of R(theta) = exp(-i theta/2 P)."""
        return self.generator_angle / ROTATION_ANGLE_SIGN

    @property
    def qubits(self) -> tuple[int, ...]:
        return (self.target,)

    @property
    def is_diagonal(self) -> bool:
        return self.kind == GateKind.RZ

    def matrix(self) -> np.ndarray:
        return _generator_rotation(_ROTATION_AXES[self.kind], self.generator_angle)


@dataclass(frozen=True)
class CNOTGate:
    control: int
    target: int
    kind: GateKind = field(default=GateKind.CNOT, init=False)

    @property
    def qubits(self) -> tuple[int, ...]:
        return (self.control, self.target)

    @property
    def is_diagonal(self) -> bool:
        return False

    def matrix(self) -> np.ndarray:
        """Local index = control bit + 2 * target bit."""
        m = np.eye(4, dtype=np.complex128)
        m[[1, 3]] = m[[3, 1]]
        return m


@dataclass(frozen=True)
class PauliRotationGate:
    """exp(-i theta/2 P1 x P2 x ...), `generator_angle` already sign-flipped."""
    targets: tuple[int, ...]
    paulis: tuple[Pauli, ...]
    generator_angle: float
    kind: GateKind = field(default=GateKind.PAULI_ROTATION, init=False)

    @property
    def angle(self) -> float:
        return self.generator_angle / ROTATION_ANGLE_SIGN

    @property
    def qubits(self) -> tuple[int, ...]:
        return self.targets

    @property
    def is_diagonal(self) -> bool:
        return all(p == Pauli.Z for p in self.paulis)

    def matrix(self) -> np.ndarray:
        product = kernels.kron_local([kernels.PAULI_MATRICES[int(p)] for p in self.paulis])
        return _generator_rotation(product, self.generator_angle)


@dataclass(frozen=True)
class DiagonalMatrixGate:
    """Diagonal entries indexed by the target bits (bit j = targets[j])."""
    targets: tuple[int, ...]
    elements: tuple[complex, ...]
    kind: GateKind = field(default=GateKind.DIAGONAL, init=False)

    @property
    def qubits(self) -> tuple[int, ...]:
        return self.targets

    @property
    def is_diagonal(self) -> bool:
        return True

    def diagonal(self) -> np.ndarray:
        return np.array(self.elements, dtype=np.complex128)

    def matrix(self) -> np.ndarray:
        return np.diag(self.diagonal())


@dataclass(frozen=True, eq=False)
class DenseMatrixGate:
    """A merged gate: a dense matrix over its sorted target qubits."""
    targets: tuple[int, ...]
    dense: np.ndarray = field(repr=False)
    kind: GateKind = field(default=GateKind.DENSE, init=False)

    def __post_init__(self):
        frozen = np.array(self.dense, dtype=np.complex128)
        frozen.setflags(write=False)
        object.__setattr__(self, "dense", frozen)

    @property
    def qubits(self) -> tuple[int, ...]:
        return self.targets

    @property
    def is_diagonal(self) -> bool:
        return False

    def matrix(self) -> np.ndarray:
        return self.dense.copy()


@dataclass(frozen=True)
class MeasurementGate:
    """Z-basis measurement of `target`, outcome stored in `register`."""
    target: int
    register: int
    seed: int
    kind: GateKind = field(default=GateKind.MEASUREMENT, init=False)

    @property
    def qubits(self) -> tuple[int, ...]:
        return (self.target,)

    @property
    def is_diagonal(self) -> bool:
        return False


Gate = (FixedGate | RotationGate | CNOTGate | PauliRotationGate
        | DiagonalMatrixGate | DenseMatrixGate | MeasurementGate)

MATRIX_GATES = (FixedGate, RotationGate, CNOTGate, PauliRotationGate,
                DiagonalMatrixGate, DenseMatrixGate)


# ── Constructors ────────────────────────────────────────────────────

def identity(target: int) -> FixedGate:
    return FixedGate(GateKind.IDENTITY, _check_index(target))


def x(target: int) -> FixedGate:
    return FixedGate(GateKind.X, _check_index(target))


def y(target: int) -> FixedGate:
    return FixedGate(GateKind.Y, _check_index(target))


def z(target: int) -> FixedGate:
    return FixedGate(GateKind.Z, _check_index(target))


def h(target: int) -> FixedGate:
    return FixedGate(GateKind.H, _check_index(target))


def _rotation(kind: GateKind, target: int, angle: float) -> RotationGate:
    return RotationGate(kind, _check_index(target), ROTATION_ANGLE_SIGN * float(angle))


def rx(target: int, angle: float) -> RotationGate:
    """RX(theta) = exp(-i theta/2 X)."""
    return _rotation(GateKind.RX, target, angle)


def ry(target: int, angle: float) -> RotationGate:
    """RY(theta) = exp(-i theta/2 Y)."""
    return _rotation(GateKind.RY, target, angle)


def rz(target: int, angle: float) -> RotationGate:
    """RZ(theta) = exp(-i theta/2 Z)."""
    return _rotation(GateKind.RZ, target, angle)


def cnot(control: int, target: int) -> CNOTGate:
    control = _check_index(control, "control qubit")
    target = _check_index(target, "target qubit")
    if control == target:
        raise InvalidGateError(f"CNOT control and target are both qubit {control}")
    return CNOTGate(control, target)


def pauli_rotation(targets, paulis, angle: float) -> PauliRotationGate:
    targets = tuple(_check_index(t) for t in targets)
    try:
        paulis = tuple(Pauli(int(p)) for p in paulis)
    except ValueError as e:
        raise InvalidGateError(f"unknown Pauli operator in {list(paulis)}") from e
    if not targets:
        raise InvalidGateError("Pauli rotation needs at least one target qubit")
    if len(targets) != len(paulis):
        raise InvalidGateError(
            f"Pauli rotation has {len(targets)} targets but {len(paulis)} Paulis")
    _check_distinct(targets, "Pauli rotation")
    return PauliRotationGate(targets, paulis, ROTATION_ANGLE_SIGN * float(angle))


def diagonal_matrix(targets, elements) -> DiagonalMatrixGate:
    targets = tuple(_check_index(t) for t in targets)
    elements = tuple(as_complex(e) for e in elements)
    if not targets:
        raise InvalidGateError("diagonal matrix gate needs at least one target qubit")
    _check_distinct(targets, "diagonal matrix gate")
    if len(elements) != 1 << len(targets):
        raise InvalidGateError(
            f"diagonal matrix gate on {len(targets)} qubits needs "
            f"{1 << len(targets)} elements, got {len(elements)}")
    return DiagonalMatrixGate(targets, elements)


def dense_matrix(targets, matrix) -> DenseMatrixGate:
    targets = tuple(_check_index(t) for t in targets)
    _check_distinct(targets, "dense matrix gate")
    matrix = np.asarray(matrix, dtype=np.complex128)
    dim = 1 << len(targets)
    if matrix.shape != (dim, dim):
        raise InvalidGateError(
            f"dense matrix gate on {len(targets)} qubits needs shape ({dim}, {dim}), "
            f"got {matrix.shape}")
    return DenseMatrixGate(targets, matrix)


def measurement(target: int, register: int, seed: int) -> MeasurementGate:
    return MeasurementGate(_check_index(target), _check_index(register, "register index"),
                           check_seed(seed))


def copy_gate(gate: Gate) -> Gate:
    """An independent clone; a dense gate gets its own matrix buffer."""
    return replace(gate)


def diagonal_elements(gate) -> np.ndarray:
    """Diagonal of a gate with is_diagonal set, over gate.qubits."""
    if isinstance(gate, DiagonalMatrixGate):
        return gate.diagonal()
    return np.diag(gate.matrix()).copy()


# ── Application ─────────────────────────────────────────────────────

def _check_range(gate, n_qubits: int):
    for q in gate.qubits:
        if q >= n_qubits:
            raise InvalidGateError(
                f"{gate.kind.value} gate uses qubit {q} but the state has {n_qubits} qubits")
    if isinstance(gate, CNOTGate) and gate.control == gate.target:
        raise InvalidGateError(f"CNOT control and target are both qubit {gate.control}")


def apply_gate(gate: Gate, state, seed: int | None = None):
    """Apply `gate` to `state` in place.

    `seed` only matters for measurements, where it overrides the gate's
    own seed (this is how a circuit-level seed reaches each measurement).
    """
    _check_range(gate, state.qubit_count)
    if seed is not None:
        check_seed(seed)
    storage = state.storage

    if isinstance(gate, FixedGate):
        if gate.kind != GateKind.IDENTITY:
            storage.apply(kernels.apply_single, gate.qubits, gate.matrix(), gate.target)
    elif isinstance(gate, RotationGate):
        storage.apply(kernels.apply_single, gate.qubits, gate.matrix(), gate.target)
    elif isinstance(gate, CNOTGate):
        storage.apply(kernels.apply_cnot, gate.qubits, gate.control, gate.target)
    elif isinstance(gate, DiagonalMatrixGate):
        storage.apply(kernels.apply_diagonal, gate.qubits, gate.diagonal(), gate.targets)
    elif isinstance(gate, (PauliRotationGate, DenseMatrixGate)):
        storage.apply(kernels.apply_matrix, gate.qubits, gate.matrix(), gate.qubits)
    elif isinstance(gate, MeasurementGate):
        _measure(gate, state, gate.seed if seed is None else seed)
    else:
        raise InvalidGateError(f"not a gate: {gate!r}")


def _measure(gate: MeasurementGate, state, seed: int):
    """Collapse `gate.target` onto a sampled outcome and record it."""
    rng = np.random.default_rng(seed)
    psi = state.storage.gather()
    norm = float(np.sum(np.abs(psi) ** 2))
    zero = kernels.zero_probability(psi, gate.target)
    p0 = zero / norm
    outcome = 0 if rng.random() < p0 else 1
    kept = zero if outcome == 0 else norm - zero
    scale = 1.0 / np.sqrt(kept)
    state.storage.apply(kernels.apply_projection, gate.qubits,
                        gate.target, outcome, scale)
    state.set_classical_value(gate.register, outcome)
    logger.debug("measured qubit %d -> %d (p0=%.6f), register %d",
                 gate.target, outcome, p0, gate.register)
    return outcome


def describe(gate: Gate) -> str:
    """Short text form, e.g. 'RX(0.5) q[1]' or 'CNOT q[0],q[2]'."""
    qubits = ",".join(f"q[{q}]" for q in gate.qubits)
    if isinstance(gate, (RotationGate, PauliRotationGate)):
        return f"{gate.kind.value}({gate.angle:g}) {qubits}"
    if isinstance(gate, MeasurementGate):
        return f"Measurement {qubits} -> c[{gate.register}]"
    return f"{gate.kind.value} {qubits}"


__all__ = [
    "ROTATION_ANGLE_SIGN", "GateKind", "Pauli", "Gate",
    "FixedGate", "RotationGate", "CNOTGate", "PauliRotationGate",
    "DiagonalMatrixGate", "DenseMatrixGate", "MeasurementGate",
    "identity", "x", "y", "z", "h", "rx", "ry", "rz", "cnot",
    "pauli_rotation", "diagonal_matrix", "dense_matrix", "measurement",
    "MATRIX_GATES", "copy_gate", "diagonal_elements", "apply_gate", "describe",
    "SEED_LIMIT", "check_seed", "check_qubit_count",
]
