"""
qusim — exact state-vector quantum circuit simulation.

Construct a QuantumState and a QuantumCircuit, add gates (directly or
merged), execute the circuit against the state, then sample bitstrings,
read the classical register, or evaluate an Observable.
"""

__version__ = "0.1.0"

from qusim.core import (
    Complex,
    Observable,
    Pauli,
    QuantumCircuit,
    QuantumState,
    merge,
    optimize,
)
from qusim.core import gates
from qusim.errors import (
    AllocationError,
    DimensionMismatchError,
    InvalidGateError,
    ParseError,
    QusimError,
    UnsupportedMergeError,
)

__all__ = [
    "__version__",
    "QuantumState",
    "QuantumCircuit",
    "Observable",
    "Complex",
    "Pauli",
    "gates",
    "merge",
    "optimize",
    "QusimError",
    "AllocationError",
    "InvalidGateError",
    "DimensionMismatchError",
    "UnsupportedMergeError",
    "ParseError",
]
