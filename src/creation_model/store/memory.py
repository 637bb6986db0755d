"""In-process model store over a :class:`Document`.

Implements both collaborator contracts (:class:`ModelStore` and
:class:`TransactionService`). Mutations are only allowed inside a mutation
scope; a scope whose body raises restores the document to the state it had
when the scope opened.

Incoming handles are resolved by id against the live document, so a handle
obtained before a rolled-back scope stays usable.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Sequence

from creation_model.errors import GeometryRejectedError, PreconditionError, TransactionError
from creation_model.models.document import Document
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
from creation_model.units import mm

logger = logging.getLogger(__name__)

# Unconnected height of a wall before its top constraint is set (10 ft)
DEFAULT_WALL_HEIGHT = 10.0
DEFAULT_WALL_WIDTH = mm(200)
GEOMETRY_TOLERANCE = 1e-6


def _unit(vector: Point3D) -> Point3D:
    length = math.sqrt(vector.dot(vector))
    if length <= GEOMETRY_TOLERANCE:
        raise ValueError("Direction vector must not be zero")
    return vector / length


class InMemoryModelStore:
    """Model store and transaction service for a single open document."""

    def __init__(
        self,
        document: Document | None = None,
        wall_width: float = DEFAULT_WALL_WIDTH,
    ):
        self.document = document if document is not None else Document()
        self.wall_width = wall_width
        self.mutation_log: list[str] = []
        self.committed_scopes: list[str] = []
        self._scope: str | None = None

    # ── Transactions ──────────────────────────────────────────────────

    @property
    def scope_open(self) -> bool:
        return self._scope is not None

    def run_in_mutation_scope(self, label: str, body: Callable[[], None]) -> None:
        """Run ``body`` as one atomic change. Rolls back and re-raises on error."""
        if self._scope is not None:
            raise TransactionError(
                f"Cannot start '{label}': scope '{self._scope}' is already open"
            )
        backup = self.document.model_copy(deep=True)
        self._scope = label
        try:
            body()
        except Exception:
            self.document = backup
            logger.debug("Rolled back mutation scope '%s'", label)
            raise
        finally:
            self._scope = None
        self.committed_scopes.append(label)
        logger.debug("Committed mutation scope '%s'", label)

    def _mutating(self, operation: str) -> None:
        if self._scope is None:
            raise TransactionError(f"{operation} requires an open mutation scope")
        self.mutation_log.append(operation)

    # ── Resolution of incoming handles ────────────────────────────────

    def _require_level(self, level: Level) -> Level:
        live = self.document.get_level(level.id)
        if live is None:
            raise ValueError(f"Level '{level.name}' is not part of this document")
        return live

    def _require_wall(self, wall: Wall) -> Wall:
        live = self.document.get_wall(wall.id)
        if live is None:
            raise ValueError(f"Wall {wall.id} is not part of this document")
        return live

    def _require_family_type(self, family_type: FamilyType) -> FamilyType:
        live = self.document.get_family_type(family_type.id)
        if live is None:
            raise ValueError(f"Family type '{family_type.label}' is not part of this document")
        return live

    # ── Levels ────────────────────────────────────────────────────────

    def find_levels_by_name(self, names: Iterable[str]) -> dict[str, Level | None]:
        """First level with each exact display name, or None."""
        found: dict[str, Level | None] = {}
        for name in names:
            matches = [lv for lv in self.document.levels if lv.name == name]
            if len(matches) > 1:
                logger.warning(
                    "Level name '%s' is ambiguous (%d matches); using the first",
                    name, len(matches),
                )
            found[name] = matches[0] if matches else None
        return found

    # ── Walls ─────────────────────────────────────────────────────────

    def create_wall(self, curve: LinearSegment, base_level: Level, structural: bool) -> Wall:
        self._mutating("create_wall")
        base = self._require_level(base_level)
        wall = Wall(
            curve=curve,
            base_level_id=base.id,
            structural=structural,
            height=DEFAULT_WALL_HEIGHT,
            width=self.wall_width,
        )
        self.document.walls.append(wall)
        return wall

    def set_top_level(self, wall: Wall, level: Level) -> None:
        """Constrain the wall top to ``level``; the height parameter follows."""
        self._mutating("set_top_level")
        live = self._require_wall(wall)
        top = self._require_level(level)
        base = self.document.get_level(live.base_level_id)
        height = top.elevation - base.elevation
        if height <= GEOMETRY_TOLERANCE:
            raise ValueError(
                f"Top level '{top.name}' must be above base level '{base.name}'"
            )
        live.top_level_id = top.id
        live.height = height
        if wall is not live:
            wall.top_level_id = top.id
            wall.height = height

    # ── Catalog ───────────────────────────────────────────────────────

    def find_family_type(
        self, category: Category, type_name: str, family_name: str
    ) -> FamilyType | None:
        matches = [
            t for t in self.document.family_types
            if t.category == category
            and t.type_name == type_name
            and t.family_name == family_name
        ]
        if len(matches) > 1:
            logger.warning(
                "Family type '%s: %s' is ambiguous (%d matches); using the first",
                family_name, type_name, len(matches),
            )
        return matches[0] if matches else None

    def is_active(self, family_type: FamilyType) -> bool:
        return self._require_family_type(family_type).is_active

    def activate(self, family_type: FamilyType) -> None:
        self._mutating("activate")
        live = self._require_family_type(family_type)
        live.is_active = True

    def create_family_instance(
        self,
        point: Point3D,
        family_type: FamilyType,
        host_wall: Wall,
        level: Level,
        structural_type: StructuralType,
    ) -> FamilyInstance:
        self._mutating("create_family_instance")
        live_type = self._require_family_type(family_type)
        if not live_type.is_active:
            raise ValueError(f"Family type '{live_type.label}' is not active")
        wall = self._require_wall(host_wall)
        lv = self._require_level(level)
        instance = FamilyInstance(
            type_id=live_type.id,
            host_wall_id=wall.id,
            level_id=lv.id,
            point=point,
            structural_type=structural_type,
        )
        self.document.instances.append(instance)
        return instance

    # ── Roofs ─────────────────────────────────────────────────────────

    def default_roof_type(self) -> RoofType:
        type_id = self.document.default_roof_type_id
        roof_type = self.document.get_roof_type(type_id) if type_id else None
        if roof_type is None:
            raise PreconditionError("Document has no default roof type")
        return roof_type

    def create_working_plane(self, origin: Point3D, normal: Point3D, up: Point3D) -> WorkingPlane:
        """Reference plane through ``origin``; ``up`` is squared against ``normal``."""
        self._mutating("create_working_plane")
        n = _unit(normal)
        u = _unit(up - n * up.dot(n))
        plane = WorkingPlane(origin=origin, normal=n, up=u)
        self.document.planes.append(plane)
        return plane

    def create_extrusion_roof(
        self,
        footprint: Sequence[LinearSegment],
        plane: WorkingPlane,
        level: Level,
        roof_type: RoofType,
        start_offset: float,
        depth: float,
    ) -> ExtrusionRoof:
        self._mutating("create_extrusion_roof")
        lv = self._require_level(level)
        live_plane = self.document.get_plane(plane.id)
        if live_plane is None:
            raise ValueError(f"Working plane {plane.id} is not part of this document")
        if self.document.get_roof_type(roof_type.id) is None:
            raise ValueError(f"Roof type '{roof_type.name}' is not part of this document")
        self._check_profile(footprint, live_plane, depth)
        roof = ExtrusionRoof(
            footprint=tuple(footprint),
            plane_id=live_plane.id,
            level_id=lv.id,
            roof_type_id=roof_type.id,
            start_offset=start_offset,
            depth=depth,
        )
        self.document.roofs.append(roof)
        return roof

    @staticmethod
    def _check_profile(
        footprint: Sequence[LinearSegment], plane: WorkingPlane, depth: float
    ) -> None:
        if not footprint:
            raise GeometryRejectedError("Roof profile is empty")
        if depth <= GEOMETRY_TOLERANCE:
            raise GeometryRejectedError(f"Extrusion depth must be positive, got {depth}")
        for i, segment in enumerate(footprint):
            if segment.length <= GEOMETRY_TOLERANCE:
                raise GeometryRejectedError(f"Profile segment {i} is degenerate")
            if i > 0 and footprint[i - 1].end.distance_to(segment.start) > GEOMETRY_TOLERANCE:
                raise GeometryRejectedError(
                    f"Profile segment {i} does not continue from segment {i - 1}"
                )
            for point in (segment.start, segment.end):
                offset = plane.distance_to(point)
                if abs(offset) > GEOMETRY_TOLERANCE:
                    raise GeometryRejectedError(
                        f"Profile point {point.as_tuple()} lies {offset:.4f} "
                        f"off the working plane"
                    )
