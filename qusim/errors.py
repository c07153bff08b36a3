"""
Errors — every failure qusim raises.

All kinds share the QusimError base and also subclass the closest builtin,
so `except ValueError` and `except MemoryError` keep working for callers.
"""


class QusimError(Exception):
    """Base class for all qusim errors."""


class AllocationError(QusimError, MemoryError):
    """State vector too large to allocate."""


class InvalidGateError(QusimError, ValueError):
    """Out-of-range qubit index, seed or qubit count, malformed gate parameters, or control == target."""


class DimensionMismatchError(QusimError, ValueError):
    """Qubit count of a circuit/observable/vector does not match the state."""


class UnsupportedMergeError(QusimError, ValueError):
    """Two gates cannot be composed into one."""


class ParseError(QusimError, ValueError):
    """Malformed Pauli string."""


__all__ = [
    "QusimError",
    "AllocationError",
    "InvalidGateError",
    "DimensionMismatchError",
    "UnsupportedMergeError",
    "ParseError",
]
