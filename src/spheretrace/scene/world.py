"""Host-side scene construction API.

A scene is a single root Hittable, usually a HittableList. Lists may
contain spheres and other lists; the composite is flattened in scan order
when it is loaded onto the device. Flattening preserves the order in which
members are tested, so the closest-hit result (including how exact ties
are broken) is the same as scanning the nested lists directly.

Example:
    >>> from src.spheretrace.materials import Lambertian, Metal
    >>> from src.spheretrace.scene.world import HittableList, Sphere
    >>> ground = Lambertian((0.5, 0.5, 0.5))
    >>> world = HittableList([
    ...     Sphere((0.0, -1000.0, 0.0), 1000.0, ground),
    ...     Sphere((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.0)),
    ... ])
    >>> len(world)
    2
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from src.spheretrace.materials.material import Material


class Hittable(ABC):
    """Anything a ray can be intersected with."""

    @abstractmethod
    def spheres(self) -> Iterator["Sphere"]:
        """Yield the spheres making up this object, in scan order."""

    def __len__(self) -> int:
        return sum(1 for _ in self.spheres())

    def materials(self) -> list[Material]:
        """Return the distinct material objects, in order of first use."""
        seen: dict[int, Material] = {}
        for sphere in self.spheres():
            seen.setdefault(id(sphere.material), sphere.material)
        return list(seen.values())


@dataclass(frozen=True)
class Sphere(Hittable):
    """A sphere bound to a material.

    Attributes:
        center: The center point (x, y, z).
        radius: The radius (positive).
        material: The material, shared by reference with any other sphere
            constructed with the same object.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {len(self.center)}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius {self.radius} must be positive")
        if not isinstance(self.material, Material):
            raise TypeError(f"Expected a Material, got {type(self.material).__name__}")
        object.__setattr__(
            self, "center", (float(self.center[0]), float(self.center[1]), float(self.center[2]))
        )
        object.__setattr__(self, "radius", float(self.radius))

    def spheres(self) -> Iterator["Sphere"]:
        yield self


class HittableList(Hittable):
    """An ordered collection of hittables, itself hittable.

    Args:
        objects: The members, in scan order.

    Raises:
        TypeError: If a member is not a Hittable.
    """

    def __init__(self, objects: Iterable[Hittable] = ()) -> None:
        self._objects: list[Hittable] = []
        for obj in objects:
            self.add(obj)

    @property
    def objects(self) -> tuple[Hittable, ...]:
        """The direct members, in scan order."""
        return tuple(self._objects)

    def add(self, obj: Hittable) -> None:
        """Append a member at the end of the scan order.

        Only meant for building a scene; a loaded scene is never modified.
        """
        if not isinstance(obj, Hittable):
            raise TypeError(f"Expected a Hittable, got {type(obj).__name__}")
        self._objects.append(obj)

    def spheres(self) -> Iterator[Sphere]:
        for obj in self._objects:
            yield from obj.spheres()

    def __repr__(self) -> str:
        return f"HittableList({len(self._objects)} objects, {len(self)} spheres)"
