"""Gate construction, matrices and application."""

import numpy as np
import pytest
from scipy.linalg import expm

from qusim.core import gates, kernels
from qusim.core.gates import GateKind, Pauli, apply_gate
from qusim.core.state import QuantumState
from qusim.errors import InvalidGateError

ROTATIONS = [
    (gates.rx, kernels.PAULI_X),
    (gates.ry, kernels.PAULI_Y),
    (gates.rz, kernels.PAULI_Z),
]


def _run(n, *gate_list, basis=0):
    state = QuantumState(n)
    state.set_computational_basis(basis)
    for gate in gate_list:
        apply_gate(gate, state)
    return state.get_vector()


def test_x_flips_little_endian_bit():
    vec = _run(3, gates.x(0))
    assert vec[1] == 1.0  # |001> has qubit 0 set
    vec = _run(3, gates.x(2))
    assert vec[4] == 1.0


def test_y_and_z_phases():
    assert np.allclose(_run(1, gates.y(0)), [0, 1j])
    assert np.allclose(_run(1, gates.y(0), basis=1), [-1j, 0])
    assert np.allclose(_run(1, gates.z(0), basis=1), [0, -1])


def test_hadamard_superposition():
    vec = _run(2, gates.h(1))
    assert np.allclose(vec, [1 / np.sqrt(2), 0, 1 / np.sqrt(2), 0])


def test_identity_is_noop():
    state = QuantumState(2)
    state.set_random_state(seed=1)
    before = state.get_vector()
    apply_gate(gates.identity(1), state)
    assert np.array_equal(before, state.get_vector())


@pytest.mark.parametrize("make, pauli", ROTATIONS)
def test_rotation_matches_matrix_exponential(make, pauli):
    theta = 0.7
    expected = expm(-1j * theta / 2 * pauli)
    assert np.allclose(make(0, theta).matrix(), expected)


@pytest.mark.parametrize("make, pauli", ROTATIONS)
def test_rotation_inverse_and_zero(make, pauli):
    theta = 1.3
    product = make(0, -theta).matrix() @ make(0, theta).matrix()
    assert np.allclose(product, np.eye(2))
    assert np.allclose(make(0, 0.0).matrix(), np.eye(2))


def test_rotation_keeps_caller_angle():
    gate = gates.rx(0, 0.5)
    assert gate.angle == 0.5
    assert gate.generator_angle == gates.ROTATION_ANGLE_SIGN * 0.5


def test_rx_pi_on_zero():
    assert np.allclose(_run(1, gates.rx(0, np.pi)), [0, -1j])


def test_cnot_truth_table():
    # control 0, target 1; index = q0 + 2*q1
    cnot = gates.cnot(0, 1)
    assert np.allclose(_run(2, cnot, basis=0), [1, 0, 0, 0])
    assert np.allclose(_run(2, cnot, basis=1), [0, 0, 0, 1])
    assert np.allclose(_run(2, cnot, basis=2), [0, 0, 1, 0])
    assert np.allclose(_run(2, cnot, basis=3), [0, 1, 0, 0])


def test_cnot_matrix_order():
    m = gates.cnot(0, 1).matrix()
    assert np.allclose(m @ [0, 1, 0, 0], [0, 0, 0, 1])


def test_cnot_rejects_same_qubit():
    with pytest.raises(InvalidGateError):
        gates.cnot(1, 1)


def test_bell_state():
    vec = _run(2, gates.h(0), gates.cnot(0, 1))
    assert np.allclose(np.abs(vec) ** 2, [0.5, 0, 0, 0.5])


def test_pauli_rotation_matches_expm():
    gate = gates.pauli_rotation([0, 2], [Pauli.X, Pauli.Z], 0.4)
    generator = kernels.kron_local([kernels.PAULI_X, kernels.PAULI_Z])
    assert np.allclose(gate.matrix(), expm(-1j * 0.4 / 2 * generator))
    assert gate.qubits == (0, 2)
    assert not gate.is_diagonal


def test_pauli_rotation_single_axis_equals_rotation():
    assert np.allclose(gates.pauli_rotation([0], [2], 0.9).matrix(),
                       gates.ry(0, 0.9).matrix())
    assert gates.pauli_rotation([0, 1], [Pauli.Z, Pauli.Z], 0.1).is_diagonal


def test_pauli_rotation_validation():
    with pytest.raises(InvalidGateError):
        gates.pauli_rotation([0, 1], [Pauli.X], 0.1)
    with pytest.raises(InvalidGateError):
        gates.pauli_rotation([0], [4], 0.1)
    with pytest.raises(InvalidGateError):
        gates.pauli_rotation([], [], 0.1)
    with pytest.raises(InvalidGateError):
        gates.pauli_rotation([1, 1], [1, 1], 0.1)


def test_diagonal_matrix_gate():
    gate = gates.diagonal_matrix([0, 1], [1, 1j, -1, -1j])
    state = QuantumState(2)
    state.load(np.full(4, 0.5))
    apply_gate(gate, state)
    assert np.allclose(state.get_vector(), 0.5 * np.array([1, 1j, -1, -1j]))


def test_diagonal_matrix_target_order():
    # element index bit 0 follows targets[0] = qubit 1
    gate = gates.diagonal_matrix([1, 0], [1, 2, 3, 4])
    vec = _run(2, gate, basis=2)  # qubit 1 set
    assert np.allclose(vec, [0, 0, 2, 0])


def test_diagonal_matrix_element_count():
    with pytest.raises(InvalidGateError):
        gates.diagonal_matrix([0, 1], [1, 1, 1])
    with pytest.raises(InvalidGateError):
        gates.diagonal_matrix([], [1])


def test_negative_index_rejected():
    with pytest.raises(InvalidGateError):
        gates.x(-1)
    with pytest.raises(InvalidGateError):
        gates.measurement(0, -1, seed=0)


def test_out_of_range_at_apply():
    state = QuantumState(2)
    gate = gates.h(5)  # fine to build
    with pytest.raises(InvalidGateError):
        apply_gate(gate, state)
    assert np.allclose(state.get_vector(), [1, 0, 0, 0])


def test_measurement_collapses_and_records():
    state = QuantumState(2)
    apply_gate(gates.x(1), state)
    apply_gate(gates.measurement(1, register=4, seed=0), state)
    assert state.get_classical_value(4) == 1
    assert np.allclose(state.get_vector(), [0, 0, 1, 0])


def test_measurement_renormalizes():
    state = QuantumState(1)
    state.load([np.sqrt(0.5), np.sqrt(0.5)])
    apply_gate(gates.measurement(0, 0, seed=7), state)
    outcome = state.get_classical_value(0)
    assert abs(state.get_squared_norm() - 1.0) < 1e-12
    assert abs(abs(state.get_vector()[outcome]) - 1.0) < 1e-12


def test_measurement_is_seeded():
    outcomes = set()
    for seed in range(40):
        state = QuantumState(1)
        apply_gate(gates.h(0), state)
        apply_gate(gates.measurement(0, 0, seed=seed), state)
        again = QuantumState(1)
        apply_gate(gates.h(0), again)
        apply_gate(gates.measurement(0, 0, seed=seed), again)
        assert state.get_classical_value(0) == again.get_classical_value(0)
        outcomes.add(state.get_classical_value(0))
    assert outcomes == {0, 1}


def test_copy_gate_is_equal():
    gate = gates.rz(3, 0.2)
    clone = gates.copy_gate(gate)
    assert clone == gate
    assert clone is not gate
    assert clone.kind == GateKind.RZ


def test_describe():
    assert gates.describe(gates.cnot(0, 2)) == "CNOT q[0],q[2]"
    assert gates.describe(gates.rx(1, 0.5)) == "RX(0.5) q[1]"
    assert gates.describe(gates.measurement(0, 3, 1)) == "Measurement q[0] -> c[3]"


@pytest.mark.parametrize("make, pauli", ROTATIONS)
@pytest.mark.parametrize("theta", [0.0, 0.3, -1.1, np.pi / 2, np.pi, 2.7, 2 * np.pi])
def test_rotation_then_inverse_restores_random_state(make, pauli, theta):
    state = QuantumState(3)
    state.set_random_state(seed=13)
    before = state.get_vector()
    for target in range(3):
        apply_gate(make(target, theta), state)
        apply_gate(make(target, -theta), state)
    assert np.allclose(state.get_vector(), before)


@pytest.mark.parametrize("make, pauli", ROTATIONS)
def test_zero_rotation_leaves_random_state(make, pauli):
    state = QuantumState(2)
    state.set_random_state(seed=8)
    before = state.get_vector()
    apply_gate(make(1, 0.0), state)
    assert np.allclose(state.get_vector(), before)


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5])
def test_unitary_sequence_keeps_unit_norm(n):
    rng = np.random.default_rng(n)
    state = QuantumState(n)
    assert len(state.state_vector()) == 2 ** n
    single = [gates.x, gates.y, gates.z, gates.h, gates.identity]
    rotations = [gates.rx, gates.ry, gates.rz]
    for _ in range(60):
        q = int(rng.integers(n))
        kind = int(rng.integers(4))
        if kind == 0:
            apply_gate(single[int(rng.integers(len(single)))](q), state)
        elif kind == 1:
            apply_gate(rotations[int(rng.integers(3))](q, float(rng.uniform(-7, 7))), state)
        elif kind == 2 and n > 1:
            c, t = rng.choice(n, size=2, replace=False)
            apply_gate(gates.cnot(int(c), int(t)), state)
        else:
            apply_gate(gates.pauli_rotation([q], [int(rng.integers(1, 4))],
                                            float(rng.uniform(-7, 7))), state)
        assert abs(state.get_squared_norm() - 1.0) < 1e-10
    assert len(state.state_vector()) == 2 ** n


@pytest.mark.parametrize("seed", [-1, 2**32, 1.5, True])
def test_measurement_seed_range(seed):
    with pytest.raises(InvalidGateError):
        gates.measurement(0, 0, seed=seed)


def test_measurement_seed_bounds_accepted():
    assert gates.measurement(0, 0, seed=0).seed == 0
    assert gates.measurement(0, 0, seed=2**32 - 1).seed == 2**32 - 1
