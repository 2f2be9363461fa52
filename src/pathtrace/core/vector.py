"""Host-side 3D vector value type.

Vector3 is used wherever a scene is described from Python: primitive
positions, plane normals, material albedos and camera placement. Colors reuse
the same type with (x, y, z) read as (r, g, b).

The device-side counterpart is the Taichi ``vec3`` type in
:mod:`pathtrace.core.ray`; setup functions convert with :meth:`Vector3.to_list`.

Example:
    >>> a = Vector3(1.0, 0.0, 0.0)
    >>> b = Vector3(0.0, 1.0, 0.0)
    >>> a.cross(b)
    Vector3(x=0.0, y=0.0, z=1.0)
    >>> a * b  # vector * vector is the dot product
    0.0
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector3:
    """Immutable 3-component floating point vector.

    Attributes:
        x: First component (red when used as a color).
        y: Second component (green when used as a color).
        z: Third component (blue when used as a color).
    """

    x: float
    y: float
    z: float

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def ones(cls) -> Vector3:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def of(cls, value: VectorLike) -> Vector3:
        """Coerce a Vector3 or a 3-element sequence into a Vector3.

        Raises:
            ValueError: If a sequence does not have exactly three elements.
        """
        if isinstance(value, Vector3):
            return value
        if len(value) != 3:
            raise ValueError(f"Expected 3 components, got {len(value)}: {value!r}")
        return cls(float(value[0]), float(value[1]), float(value[2]))

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Vector3 | float) -> Vector3 | float:
        # vector * vector is a dot product, vector * scalar scales
        if isinstance(other, Vector3):
            return self.dot(other)
        return self.scale(other)

    def __rmul__(self, other: float) -> Vector3:
        return self.scale(other)

    def __truediv__(self, divisor: float) -> Vector3:
        if divisor == 0:
            raise ZeroDivisionError("Vector3 division by zero")
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def scale(self, s: float) -> Vector3:
        return Vector3(self.x * s, self.y * s, self.z * s)

    def product(self, other: Vector3) -> Vector3:
        """Componentwise multiply (used to apply attenuation to a color)."""
        return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector3:
        """Return the unit vector in the same direction.

        The zero vector normalizes to itself instead of raising.
        """
        length = self.length()
        if length == 0.0:
            return Vector3.zero()
        return self / length

    def reflect(self, normal: Vector3) -> Vector3:
        """Reflect about ``normal``: ``v - 2 * dot(v, n) * n``."""
        return self - normal.scale(2.0 * self.dot(normal))

    def sqrt(self) -> Vector3:
        """Elementwise square root, used for gamma 2 correction of colors."""
        return Vector3(math.sqrt(self.x), math.sqrt(self.y), math.sqrt(self.z))

    def lerp(self, other: Vector3, t: float) -> Vector3:
        """Linear blend ``(1 - t) * self + t * other``."""
        return self.scale(1.0 - t) + other.scale(t)

    def is_close(self, other: Vector3, tol: float = 1e-9) -> bool:
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(self.z - other.z) <= tol
        )

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_list(self) -> list[float]:
        """Return the components as a list, the form Taichi fields accept."""
        return [self.x, self.y, self.z]


VectorLike = Vector3 | Sequence[float]
