"""
Gate Merge — compose two gates applied in sequence into one.

merge(first, second) returns a gate equal to applying `first` then
`second`: matrix second @ first over the sorted union of both supports.
Each operand is lifted to the union by a tensor product with identity,
so overlapping, nested and disjoint supports all compose. Two diagonal
gates stay diagonal. Measurements are not unitary and never merge.
"""

import numpy as np

from qusim import config
from qusim.core import kernels
from qusim.core.gates import (
    MATRIX_GATES,
    DenseMatrixGate,
    DiagonalMatrixGate,
    Gate,
    MeasurementGate,
    diagonal_elements,
)
from qusim.errors import UnsupportedMergeError
from qusim.logging_config import get_logger

logger = get_logger("core.merge")


def merge(first: Gate, second: Gate) -> DiagonalMatrixGate | DenseMatrixGate:
    """Gate equivalent to applying `first`, then `second`."""
    for gate in (first, second):
        if isinstance(gate, MeasurementGate):
            raise UnsupportedMergeError("measurement gates are not unitary and cannot be merged")
        if not isinstance(gate, MATRIX_GATES):
            raise UnsupportedMergeError(f"cannot merge {gate!r}")

    support = tuple(sorted(set(first.qubits) | set(second.qubits)))
    if len(support) > config.MAX_MERGE_QUBITS:
        raise UnsupportedMergeError(
            f"merged gate would act on {len(support)} qubits, "
            f"limit is {config.MAX_MERGE_QUBITS}")

    if first.is_diagonal and second.is_diagonal:
        diagonal = (_expand_diagonal(first, support)
                    * _expand_diagonal(second, support))
        logger.debug("merged %s and %s into diagonal gate on %s",
                     first.kind.value, second.kind.value, support)
        return DiagonalMatrixGate(support, tuple(complex(d) for d in diagonal))

    m_first = kernels.expand_matrix(first.matrix(), first.qubits, support)
    m_second = kernels.expand_matrix(second.matrix(), second.qubits, support)
    logger.debug("merged %s and %s into dense gate on %s",
                 first.kind.value, second.kind.value, support)
    return DenseMatrixGate(support, m_second @ m_first)


def _expand_diagonal(gate, support) -> np.ndarray:
    position = {q: j for j, q in enumerate(support)}
    full = np.arange(1 << len(support), dtype=np.int64)
    sub = np.zeros_like(full)
    for j, t in enumerate(gate.qubits):
        sub |= ((full >> position[t]) & 1) << j
    return diagonal_elements(gate)[sub]
