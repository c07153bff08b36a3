"""
Kernels — in-place operations on a flat amplitude vector.

Little-endian throughout: qubit q is bit q of the basis index. For a gate
with target list (t0, t1, ...), bit j of its local matrix index is t_j.

Every kernel takes (psi, n_qubits, ...) and mutates psi. Kernels use only
elementwise arithmetic, so running one on each contiguous shard of a vector
gives exactly the same numbers as running it on the whole vector.
"""

import numpy as np

PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
IDENTITY = np.eye(2, dtype=np.complex128)
HADAMARD = np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)


def basis_indices(n_qubits: int, targets) -> np.ndarray:
    """Index table of shape (2^k, 2^(n-k)) for k = len(targets).

    Row c holds every basis index whose target bits spell c (bit j of c
    is the value of qubit targets[j]); columns run over the other qubits
    in increasing order.
    """
    k = len(targets)
    base = np.arange(1 << (n_qubits - k), dtype=np.int64)
    for p in sorted(targets):
        low = base & ((1 << p) - 1)
        base = ((base >> p) << (p + 1)) | low

    offsets = np.zeros(1 << k, dtype=np.int64)
    local = np.arange(1 << k, dtype=np.int64)
    for j, t in enumerate(targets):
        offsets |= ((local >> j) & 1) << t
    return offsets[:, np.newaxis] + base[np.newaxis, :]


# ── Single-qubit ────────────────────────────────────────────────────

def apply_single(psi: np.ndarray, n_qubits: int, matrix: np.ndarray, target: int):
    """Apply a 2x2 matrix to one qubit by pairing amplitudes that differ in its bit."""
    view = psi.reshape(-1, 2, 1 << target)
    a0 = view[:, 0, :].copy()
    a1 = view[:, 1, :].copy()
    view[:, 0, :] = matrix[0, 0] * a0 + matrix[0, 1] * a1
    view[:, 1, :] = matrix[1, 0] * a0 + matrix[1, 1] * a1


# ── Multi-qubit ─────────────────────────────────────────────────────

def apply_matrix(psi: np.ndarray, n_qubits: int, matrix: np.ndarray, targets):
    """Apply a dense 2^k x 2^k matrix to the given target qubits."""
    if len(targets) == 1:
        apply_single(psi, n_qubits, matrix, targets[0])
        return
    idx = basis_indices(n_qubits, targets)
    amps = psi[idx]
    out = np.zeros_like(amps)
    for col in range(matrix.shape[1]):
        out += matrix[:, col:col + 1] * amps[col]
    psi[idx] = out


def apply_cnot(psi: np.ndarray, n_qubits: int, control: int, target: int):
    """Swap the control=1 amplitudes across the target bit."""
    idx = basis_indices(n_qubits, (control, target))
    # rows: 0=(c0,t0) 1=(c1,t0) 2=(c0,t1) 3=(c1,t1)
    ones_t0 = psi[idx[1]]
    ones_t1 = psi[idx[3]]
    psi[idx[1]] = ones_t1
    psi[idx[3]] = ones_t0


def apply_diagonal(psi: np.ndarray, n_qubits: int, diagonal: np.ndarray, targets):
    """Scale each basis state by the diagonal entry its target bits select."""
    idx = basis_indices(n_qubits, targets)
    psi[idx] *= diagonal[:, np.newaxis]


def apply_projection(psi: np.ndarray, n_qubits: int, target: int,
                     outcome: int, scale: float):
    """Zero the amplitudes inconsistent with `outcome` and rescale the rest."""
    view = psi.reshape(-1, 2, 1 << target)
    view[:, 1 - outcome, :] = 0.0
    view[:, outcome, :] *= scale


def apply_pauli(psi: np.ndarray, n_qubits: int, pauli: int, target: int):
    """Apply X (1), Y (2) or Z (3) to one qubit."""
    apply_single(psi, n_qubits, PAULI_MATRICES[pauli], target)


PAULI_MATRICES = {
    0: IDENTITY,
    1: PAULI_X,
    2: PAULI_Y,
    3: PAULI_Z,
}


# ── Reductions (run on a whole vector) ──────────────────────────────

def zero_probability(psi: np.ndarray, target: int) -> float:
    """P(qubit target reads 0) under the Born rule."""
    view = psi.reshape(-1, 2, 1 << target)
    return float(np.sum(np.abs(view[:, 0, :]) ** 2))


def expand_matrix(matrix: np.ndarray, targets, support) -> np.ndarray:
    """Lift a gate-local matrix on `targets` to the larger qubit list `support`.

    Qubits of `support` that are not targets get the identity. Bit j of the
    result's index is qubit support[j].
    """
    k = len(support)
    dim = 1 << k
    position = {q: j for j, q in enumerate(support)}
    full = np.arange(dim, dtype=np.int64)

    sub = np.zeros(dim, dtype=np.int64)
    target_mask = 0
    for j, t in enumerate(targets):
        sub |= ((full >> position[t]) & 1) << j
        target_mask |= 1 << position[t]
    rest = full & ~target_mask

    same_rest = rest[:, np.newaxis] == rest[np.newaxis, :]
    values = matrix[sub[:, np.newaxis], sub[np.newaxis, :]]
    return np.where(same_rest, values, 0).astype(np.complex128)


def kron_local(matrices) -> np.ndarray:
    """Tensor product where matrices[j] acts on local bit j."""
    out = np.ones((1, 1), dtype=np.complex128)
    for m in matrices:
        out = np.kron(m, out)
    return out
