"""Flat functional surface over the simulation core.

Every function is a pass-through to the object API. Values crossing this
boundary are ints, floats, strings, Complex pairs and flat lists of those.
"""

from qusim.core import gates as _gates
from qusim.core.circuit import QuantumCircuit
from qusim.core.gates import Gate, Pauli
from qusim.core.merge import merge as _merge
from qusim.core.observable import Observable
from qusim.core.scalar import Complex
from qusim.core.state import QuantumState

# ── State ───────────────────────────────────────────────────────────


def new_state(qubit_count: int, use_multi_worker: bool = False) -> QuantumState:
    return QuantumState(qubit_count, use_multi_worker)


def set_zero_state(state: QuantumState):
    state.set_zero_state()


def set_haar_random_state(state: QuantumState, seed: int):
    state.set_random_state(seed)


def sample(state: QuantumState, count: int, seed: int) -> list[int]:
    return state.sample(count, seed)


def state_vector(state: QuantumState) -> list[Complex]:
    return state.state_vector()


def classical_register(state: QuantumState) -> dict[int, int]:
    return state.classical_register()


# ── Circuit ─────────────────────────────────────────────────────────


def new_circuit(qubit_count: int) -> QuantumCircuit:
    return QuantumCircuit(qubit_count)


def update_state(circuit: QuantumCircuit, state: QuantumState, seed: int | None = None):
    circuit.execute(state, seed)


def add_h_gate(circuit: QuantumCircuit, index: int):
    circuit.add_h_gate(index)


def add_x_gate(circuit: QuantumCircuit, index: int):
    circuit.add_x_gate(index)


def add_y_gate(circuit: QuantumCircuit, index: int):
    circuit.add_y_gate(index)


def add_z_gate(circuit: QuantumCircuit, index: int):
    circuit.add_z_gate(index)


def add_rx_gate(circuit: QuantumCircuit, index: int, angle: float):
    circuit.add_rx_gate(index, angle)


def add_ry_gate(circuit: QuantumCircuit, index: int, angle: float):
    circuit.add_ry_gate(index, angle)


def add_rz_gate(circuit: QuantumCircuit, index: int, angle: float):
    circuit.add_rz_gate(index, angle)


def add_cnot_gate(circuit: QuantumCircuit, control: int, target: int):
    circuit.add_cnot_gate(control, target)


def add_gate_copy(circuit: QuantumCircuit, gate: Gate):
    circuit.add_gate_copy(gate)


# ── Standalone gates ────────────────────────────────────────────────


def new_identity_gate(index: int) -> Gate:
    return _gates.identity(index)


def new_h_gate(index: int) -> Gate:
    return _gates.h(index)


def new_x_gate(index: int) -> Gate:
    return _gates.x(index)


def new_y_gate(index: int) -> Gate:
    return _gates.y(index)


def new_z_gate(index: int) -> Gate:
    return _gates.z(index)


def new_rx_gate(index: int, angle: float) -> Gate:
    return _gates.rx(index, angle)


def new_ry_gate(index: int, angle: float) -> Gate:
    return _gates.ry(index, angle)


def new_rz_gate(index: int, angle: float) -> Gate:
    return _gates.rz(index, angle)


def new_cnot_gate(control: int, target: int) -> Gate:
    return _gates.cnot(control, target)


def new_pauli_rotation_gate(target_qubits: list[int], paulis: list[Pauli], angle: float) -> Gate:
    return _gates.pauli_rotation(target_qubits, paulis, angle)


def new_diagonal_matrix_gate(target_qubits: list[int], elements: list[Complex]) -> Gate:
    return _gates.diagonal_matrix(target_qubits, elements)


def new_measurement(index: int, register: int, seed: int) -> Gate:
    return _gates.measurement(index, register, seed)


def merge(applied_first: Gate, applied_later: Gate) -> Gate:
    return _merge(applied_first, applied_later)


# ── Observable ──────────────────────────────────────────────────────


def new_observable(qubit_count: int) -> Observable:
    return Observable(qubit_count)


def add_operator(observable: Observable, coefficient: Complex, pauli_string: str):
    observable.add_operator(coefficient, pauli_string)


def expectation_value(observable: Observable, state: QuantumState) -> Complex:
    return observable.expectation_value(state)


__all__ = [
    "new_state", "set_zero_state", "set_haar_random_state", "sample",
    "state_vector", "classical_register",
    "new_circuit", "update_state",
    "add_h_gate", "add_x_gate", "add_y_gate", "add_z_gate",
    "add_rx_gate", "add_ry_gate", "add_rz_gate", "add_cnot_gate", "add_gate_copy",
    "new_identity_gate", "new_h_gate", "new_x_gate", "new_y_gate", "new_z_gate",
    "new_rx_gate", "new_ry_gate", "new_rz_gate", "new_cnot_gate",
    "new_pauli_rotation_gate", "new_diagonal_matrix_gate", "new_measurement", "merge",
    "new_observable", "add_operator", "expectation_value",
]
