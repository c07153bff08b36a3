"""
Observable — weighted sum of Pauli strings, O = Σ cᵢ · Pᵢ.

A Pauli string reads like "X 0 Y 1 Z 3": an operator letter followed by
the qubit it acts on. Unlisted qubits carry the identity.
"""

from dataclasses import dataclass

import numpy as np

from qusim.core import kernels
from qusim.core.gates import Pauli, check_qubit_count
from qusim.core.scalar import Complex, as_complex
from qusim.errors import DimensionMismatchError, ParseError

_LETTERS = {"I": 0, "X": Pauli.X, "Y": Pauli.Y, "Z": Pauli.Z}


def parse_pauli_string(text: str, qubit_count: int) -> tuple[tuple[int, Pauli], ...]:
    """Parse "X 0 Y 1" into ((0, Pauli.X), (1, Pauli.Y)).

    Identity entries ("I 2") are validated and then dropped.
    """
    tokens = text.split()
    if len(tokens) % 2 != 0:
        raise ParseError(f"Pauli string {text!r}: expected operator/index pairs")

    seen: set[int] = set()
    operators = []
    for letter, raw_index in zip(tokens[0::2], tokens[1::2]):
        pauli = _LETTERS.get(letter.upper())
        if pauli is None:
            raise ParseError(f"Pauli string {text!r}: unknown operator {letter!r}")
        if not (raw_index.isascii() and raw_index.isdecimal()):
            raise ParseError(f"Pauli string {text!r}: bad qubit index {raw_index!r}")
        index = int(raw_index)
        if not 0 <= index < qubit_count:
            raise ParseError(
                f"Pauli string {text!r}: qubit {index} out of range for {qubit_count} qubits")
        if index in seen:
            raise ParseError(f"Pauli string {text!r}: qubit {index} appears twice")
        seen.add(index)
        if pauli:
            operators.append((index, Pauli(pauli)))
    return tuple(operators)


@dataclass(frozen=True)
class PauliTerm:
    """coefficient · (tensor product of single-qubit Paulis)."""
    coefficient: complex
    operators: tuple[tuple[int, Pauli], ...]

    @property
    def pauli_string(self) -> str:
        return " ".join(f"{p.name} {q}" for q, p in self.operators)

    def apply(self, psi: np.ndarray, n_qubits: int) -> np.ndarray:
        """P|ψ⟩ on a copy; the input vector is left untouched."""
        out = psi.copy()
        for qubit, pauli in self.operators:
            kernels.apply_pauli(out, n_qubits, int(pauli), qubit)
        return out

    def transition_amplitude(self, bra: np.ndarray, ket: np.ndarray, n_qubits: int) -> complex:
        """⟨bra| P |ket⟩, without the coefficient."""
        return complex(np.vdot(bra, self.apply(ket, n_qubits)))


class Observable:
    """Sum of weighted Pauli terms over a fixed register."""

    def __init__(self, qubit_count: int):
        self.qubit_count = check_qubit_count(qubit_count)
        self._terms: list[PauliTerm] = []

    @property
    def terms(self) -> tuple[PauliTerm, ...]:
        return tuple(self._terms)

    @property
    def term_count(self) -> int:
        return len(self._terms)

    def get_term(self, index: int) -> PauliTerm:
        return self._terms[index]

    def add_operator(self, coefficient, pauli_string: str):
        """Parse and append one term. Nothing is appended if parsing fails."""
        operators = parse_pauli_string(pauli_string, self.qubit_count)
        self._terms.append(PauliTerm(as_complex(coefficient), operators))

    def _check(self, state):
        if state.qubit_count != self.qubit_count:
            raise DimensionMismatchError(
                f"observable has {self.qubit_count} qubits but state has {state.qubit_count}")

    def expectation_value(self, state) -> Complex:
        """Σ cᵢ ⟨ψ|Pᵢ|ψ⟩. The state is not modified.

        Real for Hermitian observables up to rounding; the imaginary part
        is returned as computed, not forced to zero.
        """
        return self.get_transition_amplitude(state, state)

    def get_transition_amplitude(self, bra_state, ket_state) -> Complex:
        """Σ cᵢ ⟨bra|Pᵢ|ket⟩."""
        self._check(bra_state)
        self._check(ket_state)
        bra = bra_state.get_vector()
        ket = bra if ket_state is bra_state else ket_state.get_vector()

        real = 0.0
        imag = 0.0
        for term in self._terms:
            value = term.coefficient * term.transition_amplitude(bra, ket, self.qubit_count)
            real += value.real
            imag += value.imag
        return Complex(real, imag)

    def __repr__(self):
        if not self._terms:
            return f"Observable(qubit_count={self.qubit_count}, 0)"
        parts = [f"({t.coefficient}) [{t.pauli_string or 'I'}]" for t in self._terms]
        return f"Observable(qubit_count={self.qubit_count}, " + " + ".join(parts) + ")"
