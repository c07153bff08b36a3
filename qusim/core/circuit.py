"""
Quantum Circuit — an ordered gate list bound to a qubit count.

Gates run in insertion order against a borrowed QuantumState. The
circuit holds its own clones of everything added to it. Qubit ranges
are checked when a gate is applied, not when it is added; a failing
gate aborts execution and the gates before it stay applied.
"""

import numpy as np

from qusim.core import gates as g
from qusim.core.gates import Gate, MeasurementGate, apply_gate, copy_gate, describe
from qusim.core.merge import merge
from qusim.errors import DimensionMismatchError, InvalidGateError
from qusim.logging_config import get_logger

logger = get_logger("core.circuit")


class QuantumCircuit:
    """Ordered sequence of gates over a fixed number of qubits."""

    def __init__(self, qubit_count: int):
        self.qubit_count = g.check_qubit_count(qubit_count)
        self._gates: list[Gate] = []

    @property
    def gates(self) -> tuple[Gate, ...]:
        return tuple(self._gates)

    @property
    def gate_count(self) -> int:
        return len(self._gates)

    def __len__(self):
        return len(self._gates)

    def __iter__(self):
        return iter(self._gates)

    # ── Building ────────────────────────────────────────────────────

    def add_gate_copy(self, gate: Gate):
        """Append a clone of `gate`; the caller's object is never aliased."""
        self._gates.append(copy_gate(gate))

    def remove_gate(self, index: int) -> Gate:
        return self._gates.pop(index)

    def add_identity_gate(self, index: int):
        self._gates.append(g.identity(index))

    def add_x_gate(self, index: int):
        self._gates.append(g.x(index))

    def add_y_gate(self, index: int):
        self._gates.append(g.y(index))

    def add_z_gate(self, index: int):
        self._gates.append(g.z(index))

    def add_h_gate(self, index: int):
        self._gates.append(g.h(index))

    def add_rx_gate(self, index: int, angle: float):
        self._gates.append(g.rx(index, angle))

    def add_ry_gate(self, index: int, angle: float):
        self._gates.append(g.ry(index, angle))

    def add_rz_gate(self, index: int, angle: float):
        self._gates.append(g.rz(index, angle))

    def add_cnot_gate(self, control: int, target: int):
        self._gates.append(g.cnot(control, target))

    def add_pauli_rotation_gate(self, targets, paulis, angle: float):
        self._gates.append(g.pauli_rotation(targets, paulis, angle))

    def add_diagonal_matrix_gate(self, targets, elements):
        self._gates.append(g.diagonal_matrix(targets, elements))

    def add_measurement(self, target: int, register: int, seed: int):
        self._gates.append(g.measurement(target, register, seed))

    # ── Execution ───────────────────────────────────────────────────

    def execute(self, state, seed: int | None = None):
        """Apply every gate in order to `state`, in place.

        With a circuit-level `seed`, one 32-bit seed per measurement is drawn
        from it, the k-th measurement taking the k-th seed in place of its
        own. Merging unitary gates therefore leaves every outcome unchanged.
        """
        if state.qubit_count != self.qubit_count:
            raise DimensionMismatchError(
                f"circuit has {self.qubit_count} qubits but state has {state.qubit_count}")

        measurement_seeds = None
        if seed is not None:
            g.check_seed(seed)
            n_measurements = sum(isinstance(gate, MeasurementGate) for gate in self._gates)
            rng = np.random.default_rng(seed)
            measurement_seeds = iter(
                rng.integers(0, 2**32, size=n_measurements, dtype=np.uint64))

        logger.debug("executing %d gates on %r", len(self._gates), state)
        for position, gate in enumerate(self._gates):
            gate_seed = None
            if measurement_seeds is not None and isinstance(gate, MeasurementGate):
                gate_seed = int(next(measurement_seeds))
            try:
                apply_gate(gate, state, seed=gate_seed)
            except InvalidGateError as e:
                logger.error("circuit aborted at gate %d (%s): %s",
                             position, describe(gate), e)
                raise InvalidGateError(f"gate {position} ({describe(gate)}): {e}") from e

    update_quantum_state = execute

    # ── Misc ────────────────────────────────────────────────────────

    def copy(self) -> "QuantumCircuit":
        clone = QuantumCircuit(self.qubit_count)
        clone._gates = [copy_gate(gate) for gate in self._gates]
        return clone

    def __repr__(self):
        lines = [f"QuantumCircuit(qubit_count={self.qubit_count}, gates={len(self._gates)})"]
        for gate in self._gates:
            lines.append(f"  {describe(gate)}")
        return "\n".join(lines)


def optimize(circuit: QuantumCircuit, max_block_qubits: int = 2) -> QuantumCircuit:
    """Merge runs of consecutive gates whose joint support fits a block.

    Measurements are barriers and pass through untouched. The result
    evolves any state the same way as `circuit`, with fewer gates.
    """
    optimized = QuantumCircuit(circuit.qubit_count)
    pending: Gate | None = None
    pending_support: set[int] = set()

    def flush():
        nonlocal pending, pending_support
        if pending is not None:
            optimized.add_gate_copy(pending)
        pending = None
        pending_support = set()

    for gate in circuit:
        if isinstance(gate, MeasurementGate):
            flush()
            optimized.add_gate_copy(gate)
            continue
        support = pending_support | set(gate.qubits)
        if pending is not None and len(support) <= max_block_qubits:
            pending = merge(pending, gate)
            pending_support = support
        else:
            flush()
            pending = gate
            pending_support = set(gate.qubits)
    flush()

    logger.debug("optimized circuit from %d to %d gates",
                 circuit.gate_count, optimized.gate_count)
    return optimized
