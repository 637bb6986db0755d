"""Gable roof generator.

The roof profile is a two-segment gable drawn between the front and back
walls of the loop:

              ridge
             /     \\
           p1       p2

``p1`` and ``p2`` are the start points of the front and back centerlines
raised by each wall's height; the ridge sits a fixed rise above their
midpoint. The profile is extruded from a vertical working plane through the
origin whose normal is the X axis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from creation_model.errors import Failure, GeometryRejectedError
from creation_model.generators.walls import WallLoop
from creation_model.models.elements import ExtrusionRoof, Level, RoofType, WorkingPlane
from creation_model.models.geometry import ORIGIN, LinearSegment, Point3D
from creation_model.store.base import ModelStore, TransactionService

logger = logging.getLogger(__name__)

RIDGE_RISE = 5.0
SCOPE_LABEL = "Build roof"

PLANE_NORMAL = Point3D(x=1.0, y=0.0, z=0.0)
PLANE_UP = Point3D(x=0.0, y=0.0, z=1.0)


@dataclass
class RoofResult:
    """Outcome of a roof attempt. ``roof`` is None when creation was rejected."""

    footprint: tuple[LinearSegment, ...]
    max_wall_length: float
    plane: WorkingPlane | None = None
    roof: ExtrusionRoof | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.roof is not None


def max_wall_length(loop: WallLoop) -> float:
    """Longest centerline in the loop."""
    return max(wall.length for wall in loop)


def build_gable_footprint(
    loop: WallLoop, ridge_rise: float = RIDGE_RISE
) -> tuple[LinearSegment, LinearSegment]:
    """Profile segments ``p1 -> ridge`` and ``ridge -> p2``."""
    p1 = loop.front.curve.endpoint(0).raised(loop.front.height)
    p2 = loop.back.curve.endpoint(0).raised(loop.back.height)
    ridge = p1.midpoint(p2).raised(ridge_rise)
    return (
        LinearSegment(start=p1, end=ridge),
        LinearSegment(start=ridge, end=p2),
    )


def build_roof(
    store: ModelStore,
    transactions: TransactionService,
    loop: WallLoop,
    level: Level,
    depth: float,
    ridge_rise: float = RIDGE_RISE,
    roof_type: RoofType | None = None,
) -> RoofResult:
    """Create the working plane and attempt the extrusion roof.

    A rejection by the geometry engine is logged and returned as a failure;
    the scope still commits the working plane. ``depth`` is in internal units.
    """
    if roof_type is None:
        roof_type = store.default_roof_type()
    footprint = build_gable_footprint(loop, ridge_rise)
    result = RoofResult(footprint=footprint, max_wall_length=max_wall_length(loop))
    start_offset = footprint[0].start.x

    def body() -> None:
        result.plane = store.create_working_plane(ORIGIN, PLANE_NORMAL, PLANE_UP)
        try:
            result.roof = store.create_extrusion_roof(
                list(footprint), result.plane, level, roof_type, start_offset, depth
            )
        except GeometryRejectedError as e:
            logger.warning("Roof creation rejected: %s", e)
            result.failure = Failure(stage="roof", kind="geometry", message=str(e))

    transactions.run_in_mutation_scope(SCOPE_LABEL, body)
    if result.roof is not None:
        logger.info("Built gable roof '%s' on '%s'", roof_type.name, level.name)
    return result
