"""Geometric primitives in internal units (decimal feet)."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, model_validator

TOLERANCE = 1e-9


class Point3D(BaseModel):
    """Immutable 3D point (internal units)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Point3D) -> Point3D:
        return Point3D(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: Point3D) -> Point3D:
        return Point3D(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __mul__(self, factor: float) -> Point3D:
        return Point3D(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    def __truediv__(self, divisor: float) -> Point3D:
        return Point3D(x=self.x / divisor, y=self.y / divisor, z=self.z / divisor)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point3D):
            return NotImplemented
        return (
            math.isclose(self.x, other.x, abs_tol=TOLERANCE)
            and math.isclose(self.y, other.y, abs_tol=TOLERANCE)
            and math.isclose(self.z, other.z, abs_tol=TOLERANCE)
        )

    def __hash__(self) -> int:
        return hash((round(self.x, 9), round(self.y, 9), round(self.z, 9)))

    def raised(self, dz: float) -> Point3D:
        """Same point moved up by ``dz``."""
        return self + Point3D(x=0.0, y=0.0, z=dz)

    def midpoint(self, other: Point3D) -> Point3D:
        """Point halfway between this point and ``other``."""
        return (self + other) / 2

    def dot(self, other: Point3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def distance_to(self, other: Point3D) -> float:
        """Euclidean distance to another point."""
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Point3D(x=0.0, y=0.0, z=0.0)


class LinearSegment(BaseModel):
    """A bounded straight edge between two points.

    Used for wall centerlines and roof footprint edges.
    """

    model_config = ConfigDict(frozen=True)

    start: Point3D
    end: Point3D

    @model_validator(mode="after")
    def start_and_end_differ(self) -> LinearSegment:
        if self.start.distance_to(self.end) <= TOLERANCE:
            raise ValueError("Segment start and end points must be different")
        return self

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Point3D:
        return self.start.midpoint(self.end)

    def endpoint(self, index: int) -> Point3D:
        """Endpoint 0 (start) or 1 (end)."""
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError(f"Segment endpoint index must be 0 or 1, got {index}")
