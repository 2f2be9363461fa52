"""Host-side scene container.

A Scene is an ordered collection of primitives. Order never changes which
surface is closest, only which of two primitives at exactly the same distance
wins (the earlier one). Scenes are filled once and frozen when they are
loaded for rendering.

Example:
    >>> from pathtrace.geometry.sphere import Sphere
    >>> from pathtrace.materials.lambertian import Lambertian
    >>> scene = Scene()
    >>> scene.add(Sphere(center=(0, 0, -1), radius=0.5, material=Lambertian((0.7, 0.3, 0.3))))
    0
    >>> len(scene)
    1
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pathtrace.geometry.plane import Plane
from pathtrace.geometry.sphere import Sphere

# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

Primitive = Sphere | Plane


class Scene:
    """An ordered, append-only sequence of primitives.

    Args:
        primitives: Optional initial primitives, added in order.
    """

    def __init__(self, primitives: Iterable[Primitive] = ()) -> None:
        self._primitives: list[Primitive] = []
        self._frozen = False
        self.extend(primitives)

    def add(self, primitive: Primitive) -> int:
        """Append a primitive.

        Args:
            primitive: A Sphere or Plane.

        Returns:
            The index of the added primitive.

        Raises:
            RuntimeError: If the scene is frozen or already holds MAX_PRIMITIVES.
            TypeError: If ``primitive`` is not a supported primitive kind.
        """
        if self._frozen:
            raise RuntimeError("Cannot add primitives to a frozen scene")
        if not isinstance(primitive, (Sphere, Plane)):
            raise TypeError(f"Unsupported primitive: {primitive!r}")
        if len(self._primitives) >= MAX_PRIMITIVES:
            raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
        self._primitives.append(primitive)
        return len(self._primitives) - 1

    def extend(self, primitives: Iterable[Primitive]) -> None:
        for primitive in primitives:
            self.add(primitive)

    def freeze(self) -> Scene:
        """Make the scene read-only. Returns the scene for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def primitives(self) -> tuple[Primitive, ...]:
        return tuple(self._primitives)

    def __len__(self) -> int:
        return len(self._primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self._primitives)

    def __repr__(self) -> str:
        return f"Scene(primitives={len(self)}, frozen={self._frozen})"
