"""
Storage — where the amplitudes of a QuantumState live.

Two strategies behind one interface:
  A. SingleWorkerStorage: one contiguous complex128 vector.
  B. ShardedStorage: the vector split into 2^g contiguous shards over the
     top g qubits, one shard per worker.

A kernel whose qubits are all local (below the shard boundary) runs on
every shard in parallel. Anything touching a global qubit gathers the
shards into one vector, runs there, and scatters back. Reductions always
read a gathered vector, which keeps both strategies bit-identical.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from qusim import config
from qusim.logging_config import get_logger

logger = get_logger("core.storage")

_EXECUTOR: ThreadPoolExecutor | None = None


def _executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    if _EXECUTOR is None:
        _EXECUTOR = ThreadPoolExecutor(max_workers=config.WORKERS,
                                       thread_name_prefix="qusim-worker")
    return _EXECUTOR


class SingleWorkerStorage:
    """Flat amplitude vector, all work on the calling thread."""

    multi_worker = False

    def __init__(self, n_qubits: int):
        self.n_qubits = n_qubits
        self.dim = 1 << n_qubits
        self.vector = np.zeros(self.dim, dtype=np.complex128)

    def gather(self) -> np.ndarray:
        """The live vector. Callers that keep it must copy."""
        return self.vector

    def load(self, vector: np.ndarray):
        self.vector[:] = vector

    def apply(self, kernel, qubits, *args):
        kernel(self.vector, self.n_qubits, *args)

    def copy(self) -> "SingleWorkerStorage":
        clone = SingleWorkerStorage.__new__(SingleWorkerStorage)
        clone.n_qubits = self.n_qubits
        clone.dim = self.dim
        clone.vector = self.vector.copy()
        return clone


@dataclass
class Shard:
    """A contiguous block of amplitudes owned by one worker."""
    shard_id: int
    index_start: int  # First basis index (global)
    amplitudes: np.ndarray

    @property
    def index_end(self) -> int:
        return self.index_start + len(self.amplitudes)


class ShardedStorage:
    """Amplitudes split across workers by the high-order qubits."""

    multi_worker = True

    def __init__(self, n_qubits: int, n_workers: int | None = None):
        if n_workers is None:
            n_workers = config.WORKERS
        self.n_qubits = n_qubits
        self.dim = 1 << n_qubits

        # Largest power of two <= workers, keeping at least one local qubit
        n_global = max(0, int(n_workers).bit_length() - 1)
        n_global = min(n_global, max(n_qubits - 1, 0))
        self.n_global = n_global
        self.n_local = n_qubits - n_global
        shard_dim = 1 << self.n_local

        self.shards: list[Shard] = [
            Shard(shard_id=i, index_start=i * shard_dim,
                  amplitudes=np.zeros(shard_dim, dtype=np.complex128))
            for i in range(1 << n_global)
        ]
        logger.debug("sharded storage: %d qubits, %d shards of %d local qubits",
                     n_qubits, len(self.shards), self.n_local)

    @property
    def n_shards(self) -> int:
        return len(self.shards)

    def is_local(self, qubits) -> bool:
        """True if every qubit lives inside a single shard's index range."""
        return all(q < self.n_local for q in qubits)

    def gather(self) -> np.ndarray:
        """Concatenate all shards into one fresh vector. O(2^n) copy."""
        return np.concatenate([s.amplitudes for s in self.shards])

    def load(self, vector: np.ndarray):
        for s in self.shards:
            s.amplitudes[:] = vector[s.index_start:s.index_end]

    def apply(self, kernel, qubits, *args):
        if self.n_shards == 1 or self.is_local(qubits):
            futures = [
                _executor().submit(kernel, s.amplitudes, self.n_local, *args)
                for s in self.shards
            ]
            for f in futures:
                f.result()
            return

        logger.debug("gather for kernel %s on global qubits %s",
                     getattr(kernel, "__name__", kernel), list(qubits))
        full = self.gather()
        kernel(full, self.n_qubits, *args)
        self.load(full)

    def copy(self) -> "ShardedStorage":
        clone = ShardedStorage.__new__(ShardedStorage)
        clone.n_qubits = self.n_qubits
        clone.dim = self.dim
        clone.n_global = self.n_global
        clone.n_local = self.n_local
        clone.shards = [Shard(s.shard_id, s.index_start, s.amplitudes.copy())
                        for s in self.shards]
        return clone


def make_storage(n_qubits: int, use_multi_worker: bool):
    if use_multi_worker:
        return ShardedStorage(n_qubits)
    return SingleWorkerStorage(n_qubits)
