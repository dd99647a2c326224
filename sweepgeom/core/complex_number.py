"""Complex numbers backed by a float32 2-vector, used as 2D rotations.

A unit complex ``cos(phi) + i sin(phi)`` rotates a vector by ``phi`` through
complex multiplication; :meth:`Complex.rotate` applies it to a plain vector.
"""
from __future__ import annotations

import math
from numbers import Real

import numpy as np

from .constants import FLOAT, FLOAT_TINY

__all__ = ['Complex']


class Complex:
    """Immutable complex number ``re + im*i`` with float32 components."""

    __slots__ = ('_value',)
    # Let numpy scalars defer to our reflected operators instead of broadcasting
    __array_ufunc__ = None

    IDENTITY: 'Complex'
    IMAGINARY_UNIT: 'Complex'

    def __init__(self, re=0.0, im=0.0):
        value = np.array([re, im], dtype=FLOAT)
        value.flags.writeable = False
        self._value = value

    # --- constructors -----------------------------------------------------

    @classmethod
    def from_vector(cls, v) -> 'Complex':
        v = np.asarray(v, dtype=FLOAT).reshape(2)
        return cls(v[0], v[1])

    @classmethod
    def from_matrix(cls, m) -> 'Complex':
        """Complex number from the first column of a 2x2 rotation matrix."""
        m = np.asarray(m, dtype=FLOAT).reshape(2, 2)
        return cls(m[0, 0], m[1, 0])

    @classmethod
    def polar_unit(cls, phi) -> 'Complex':
        """``e^(i*phi)``."""
        return cls(np.cos(FLOAT(phi)), np.sin(FLOAT(phi)))

    @classmethod
    def polar(cls, r, phi) -> 'Complex':
        """``r * e^(i*phi)``."""
        return FLOAT(r) * cls.polar_unit(phi)

    @classmethod
    def look_rotation(cls, direction) -> 'Complex':
        """Unit rotation pointing along ``direction``; zero direction gives non-finite parts."""
        return cls.from_vector(direction).normalized()

    @classmethod
    def look_rotation_safe(cls, direction, default=(0.0, 0.0)) -> 'Complex':
        return cls.from_vector(direction).normalized_safe(cls._coerce(default))

    @classmethod
    def _coerce(cls, other) -> 'Complex':
        if isinstance(other, Complex):
            return other
        if isinstance(other, (Real, np.floating, np.integer)):
            return cls(other, 0.0)
        try:
            arr = np.asarray(other, dtype=FLOAT)
        except (TypeError, ValueError):
            raise TypeError(f"cannot interpret {other!r} as a Complex") from None
        if arr.shape == (2,):
            return cls(arr[0], arr[1])
        raise TypeError(f"cannot interpret {other!r} as a Complex")

    # --- components -------------------------------------------------------

    @property
    def re(self) -> np.float32:
        return self._value[0]

    @property
    def im(self) -> np.float32:
        return self._value[1]

    @property
    def value(self) -> np.ndarray:
        return self._value.copy()

    @property
    def magnitude(self) -> np.float32:
        return np.sqrt(self.magnitude_sq)

    @property
    def magnitude_sq(self) -> np.float32:
        return np.dot(self._value, self._value)

    @property
    def arg(self) -> np.float32:
        """Polar angle in ``(-pi, pi]``."""
        return np.arctan2(self.im, self.re)

    # --- algebra ----------------------------------------------------------

    def conjugate(self) -> 'Complex':
        return Complex(self.re, -self.im)

    def reciprocal(self) -> 'Complex':
        return (FLOAT(1.0) / self.magnitude_sq) * self.conjugate()

    def normalized(self) -> 'Complex':
        with np.errstate(divide='ignore', invalid='ignore'):
            return Complex.from_vector(self._value / self.magnitude)

    def normalized_safe(self, default: 'Complex' = None) -> 'Complex':
        if self.magnitude_sq > FLOAT_TINY:
            return self.normalized()
        return Complex() if default is None else Complex._coerce(default)

    def pow(self, x) -> 'Complex':
        """``z**x`` through the polar form ``|z|**x * e^(i*x*arg(z))``."""
        return Complex.polar(self.magnitude ** FLOAT(x), self.arg * FLOAT(x))

    def rotate(self, v) -> np.ndarray:
        """Rotate (and scale) vector ``v`` by this number: ``(self * v).value``."""
        return (self * Complex.from_vector(v)).value

    def __pow__(self, x) -> 'Complex':
        return self.pow(x)

    def __neg__(self) -> 'Complex':
        return Complex(-self.re, -self.im)

    def __add__(self, other) -> 'Complex':
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return Complex.from_vector(self._value + o._value)

    __radd__ = __add__

    def __sub__(self, other) -> 'Complex':
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return Complex.from_vector(self._value - o._value)

    def __rsub__(self, other) -> 'Complex':
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return o - self

    def __mul__(self, other) -> 'Complex':
        if isinstance(other, (Real, np.floating, np.integer)):
            return Complex.from_vector(FLOAT(other) * self._value)
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return Complex(self.re * o.re - self.im * o.im,
                       self.re * o.im + self.im * o.re)

    __rmul__ = __mul__

    def __truediv__(self, other) -> 'Complex':
        if isinstance(other, (Real, np.floating, np.integer)):
            return (FLOAT(1.0) / FLOAT(other)) * self
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return self * o.reciprocal()

    def __rtruediv__(self, other) -> 'Complex':
        if isinstance(other, (Real, np.floating, np.integer)):
            return FLOAT(other) * self.reciprocal()
        try:
            o = Complex._coerce(other)
        except TypeError:
            return NotImplemented
        return o * self.reciprocal()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Complex):
            return NotImplemented
        return bool(np.all(self._value == other._value))

    def __hash__(self) -> int:
        return hash((float(self.re), float(self.im)))

    def __iter__(self):
        yield self.re
        yield self.im

    def __repr__(self) -> str:
        return f"Complex({float(self.re)!r}, {float(self.im)!r})"

    def __str__(self) -> str:
        return f"{float(self.re)}{float(self.im):+}i (|z|={float(self.magnitude)}, arg={math.degrees(float(self.arg)):.3f} deg)"


Complex.IDENTITY = Complex(1.0, 0.0)
Complex.IMAGINARY_UNIT = Complex(0.0, 1.0)
