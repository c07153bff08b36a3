"""
Complex — the (real, imag) pair exchanged at the interface boundary.

Arithmetic happens on Python/numpy complex numbers; this type only carries
values in and out.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Complex:
    """A complex scalar as a plain (real, imag) pair."""
    real: float
    imag: float = 0.0

    @staticmethod
    def from_value(value: "Complex | complex | float | int") -> "Complex":
        """Convert a float, int or complex number into a Complex pair."""
        if isinstance(value, Complex):
            return value
        value = complex(value)
        return Complex(real=float(value.real), imag=float(value.imag))

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    def to_dict(self) -> dict:
        return {"real": self.real, "imag": self.imag}

    @staticmethod
    def from_dict(d: dict) -> "Complex":
        return Complex(real=float(d["real"]), imag=float(d["imag"]))


def as_complex(value: "Complex | complex | float | int") -> complex:
    """Accept either a boundary pair or a Python number and return a complex."""
    return complex(value)
