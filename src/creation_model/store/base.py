"""Contracts of the collaborators the generators drive.

The generators never touch a document directly. They query and mutate it
through a :class:`ModelStore` and group mutations with a
:class:`TransactionService`. Handles passed in and out are the element
models from :mod:`creation_model.models`.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence

from creation_model.models.elements import (
    Category,
    ExtrusionRoof,
    FamilyInstance,
    FamilyType,
    Level,
    RoofType,
    StructuralType,
    Wall,
    WorkingPlane,
)
from creation_model.models.geometry import LinearSegment, Point3D


class ModelStore(Protocol):
    def find_levels_by_name(self, names: Iterable[str]) -> dict[str, Level | None]: ...

    def create_wall(self, curve: LinearSegment, base_level: Level, structural: bool) -> Wall: ...

    def set_top_level(self, wall: Wall, level: Level) -> None: ...

    def find_family_type(
        self, category: Category, type_name: str, family_name: str
    ) -> FamilyType | None: ...

    def is_active(self, family_type: FamilyType) -> bool: ...

    def activate(self, family_type: FamilyType) -> None: ...

    def create_family_instance(
        self,
        point: Point3D,
        family_type: FamilyType,
        host_wall: Wall,
        level: Level,
        structural_type: StructuralType,
    ) -> FamilyInstance: ...

    def default_roof_type(self) -> RoofType: ...

    def create_working_plane(self, origin: Point3D, normal: Point3D, up: Point3D) -> WorkingPlane: ...

    def create_extrusion_roof(
        self,
        footprint: Sequence[LinearSegment],
        plane: WorkingPlane,
        level: Level,
        roof_type: RoofType,
        start_offset: float,
        depth: float,
    ) -> ExtrusionRoof:
        """Build an extrusion roof. Raises GeometryRejectedError on a bad profile."""
        ...


class TransactionService(Protocol):
    def run_in_mutation_scope(self, label: str, body: Callable[[], None]) -> None:
        """Run ``body`` atomically: commit if it returns, roll back if it raises."""
        ...
