"""
Quantum State — exact state vector of n qubits.

numpy only, complex128 amplitudes, little-endian (qubit q is bit q of the
basis index). The amplitudes live in a storage strategy picked at
construction: one flat vector, or shards processed by a worker pool.
Both give identical numbers for identical seeds.
"""

import numpy as np

from qusim import config
from qusim.core.gates import check_seed
from qusim.core.scalar import Complex
from qusim.core.storage import make_storage
from qusim.errors import AllocationError, DimensionMismatchError, InvalidGateError
from qusim.logging_config import get_logger

logger = get_logger("core.state")


class QuantumState:
    """State vector simulator state: amplitudes plus a classical register."""

    def __init__(self, qubit_count: int, use_multi_worker: bool = False):
        if qubit_count < 0:
            raise AllocationError(f"qubit_count must be non-negative, got {qubit_count}")
        if qubit_count > config.MAX_QUBITS:
            raise AllocationError(
                f"qubit_count={qubit_count} exceeds limit of {config.MAX_QUBITS} "
                f"(2^{qubit_count} amplitudes = {(16 << qubit_count) / 2**30:.0f} GiB)")
        self.qubit_count = int(qubit_count)
        self.dim = 1 << self.qubit_count
        self.use_multi_worker = bool(use_multi_worker)
        try:
            self.storage = make_storage(self.qubit_count, self.use_multi_worker)
        except MemoryError as e:
            raise AllocationError(
                f"cannot allocate {self.dim} amplitudes for {qubit_count} qubits") from e
        self._classical_register: dict[int, int] = {}
        self.set_zero_state()
        logger.debug("allocated %r", self)

    # ── Initialization ──────────────────────────────────────────────

    def set_zero_state(self):
        """Snap back to |000...0⟩."""
        self.set_computational_basis(0)

    def set_computational_basis(self, index: int):
        """Set the state to the basis state |index⟩."""
        if not 0 <= index < self.dim:
            raise InvalidGateError(f"basis index {index} out of range [0, {self.dim})")
        vector = np.zeros(self.dim, dtype=np.complex128)
        vector[index] = 1.0
        self.storage.load(vector)

    def set_random_state(self, seed: int):
        """Haar-random pure state, deterministic for a given seed.

        Independent complex Gaussian amplitudes, normalized, are uniform on
        the unit sphere of C^(2^n), which is the Haar measure on pure states.
        """
        rng = np.random.default_rng(check_seed(seed))
        vector = rng.normal(size=self.dim) + 1j * rng.normal(size=self.dim)
        vector /= np.linalg.norm(vector)
        self.storage.load(vector.astype(np.complex128))

    set_haar_random_state = set_random_state

    def load(self, vector):
        """Load raw amplitudes. No normalization is applied."""
        if not isinstance(vector, np.ndarray):
            # accepts Complex pairs as well as numbers
            vector = [complex(v) for v in vector]
        vector = np.asarray(vector, dtype=np.complex128)
        if vector.shape != (self.dim,):
            raise DimensionMismatchError(
                f"expected {self.dim} amplitudes for {self.qubit_count} qubits, "
                f"got shape {vector.shape}")
        self.storage.load(vector)

    # ── Read-out ────────────────────────────────────────────────────

    def get_vector(self) -> np.ndarray:
        """Copy of the amplitudes. Multi-worker states gather first."""
        return np.array(self.storage.gather(), copy=True)

    def state_vector(self) -> list[Complex]:
        """Snapshot as boundary Complex pairs.

        A multi-worker state pays one full gather (O(2^n) copy) here.
        """
        return [Complex(float(a.real), float(a.imag)) for a in self.storage.gather()]

    def probabilities(self) -> np.ndarray:
        """Born rule: |ψ|²."""
        return np.abs(self.storage.gather()) ** 2

    def get_squared_norm(self) -> float:
        return float(np.sum(self.probabilities()))

    def normalize(self):
        norm = np.sqrt(self.get_squared_norm())
        if norm < config.TOLERANCE:
            raise ValueError(f"cannot normalize a vector of norm {norm:.3g}")
        self.storage.load(self.storage.gather() / norm)

    def get_zero_probability(self, target: int) -> float:
        """P(qubit `target` reads 0)."""
        if not 0 <= target < self.qubit_count:
            raise InvalidGateError(
                f"qubit {target} out of range for {self.qubit_count} qubits")
        probs = self.probabilities().reshape(-1, 2, 1 << target)
        return float(np.sum(probs[:, 0, :]))

    def sample(self, count: int, seed: int) -> list[int]:
        """Draw `count` basis indices from |ψ|², reproducible for a fixed seed."""
        if count < 0:
            raise ValueError(f"sample count must be non-negative, got {count}")
        rng = np.random.default_rng(check_seed(seed))
        cumulative = np.cumsum(self.probabilities())
        draws = rng.random(count) * cumulative[-1]
        indices = np.searchsorted(cumulative, draws, side="right")
        np.minimum(indices, self.dim - 1, out=indices)
        return [int(i) for i in indices]

    def entropy(self) -> float:
        """Shannon entropy of the probability distribution (bits)."""
        probs = self.probabilities()
        probs = probs[probs > 0]
        return float(-np.sum(probs * np.log2(probs)))

    # ── Classical register ──────────────────────────────────────────

    def classical_register(self) -> dict[int, int]:
        """Bits recorded by measurements so far, keyed by register index."""
        return dict(self._classical_register)

    def get_classical_value(self, index: int) -> int:
        return self._classical_register.get(index, 0)

    def set_classical_value(self, index: int, value: int):
        if index < 0:
            raise InvalidGateError(f"register index must be non-negative, got {index}")
        self._classical_register[int(index)] = int(value)

    # ── Misc ────────────────────────────────────────────────────────

    def copy(self) -> "QuantumState":
        clone = QuantumState.__new__(QuantumState)
        clone.qubit_count = self.qubit_count
        clone.dim = self.dim
        clone.use_multi_worker = self.use_multi_worker
        clone.storage = self.storage.copy()
        clone._classical_register = dict(self._classical_register)
        return clone

    def __repr__(self):
        mode = "multi-worker" if self.use_multi_worker else "single-worker"
        return (f"QuantumState(qubit_count={self.qubit_count}, {mode}, "
                f"registers={len(self._classical_register)})")
