"""State-vector simulation core: state, gates, circuit, merge, observable."""

from qusim.core.circuit import QuantumCircuit, optimize
from qusim.core.gates import Gate, GateKind, Pauli, apply_gate
from qusim.core.merge import merge
from qusim.core.observable import Observable, PauliTerm, parse_pauli_string
from qusim.core.scalar import Complex
from qusim.core.state import QuantumState

__all__ = [
    "QuantumState",
    "QuantumCircuit",
    "optimize",
    "Gate",
    "GateKind",
    "Pauli",
    "apply_gate",
    "merge",
    "Observable",
    "PauliTerm",
    "parse_pauli_string",
    "Complex",
]
