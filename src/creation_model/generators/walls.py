"""Rectangular wall loop generator.

Given a footprint width and depth, builds four walls centered on the origin,
bound to a base level and constrained to a top level:

    back (2)
  +---------+
  |         |  right (1)
  +---------+
    front (0)

Edges run counter-clockwise starting at the front-left corner.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from creation_model.models.elements import Level, Wall
from creation_model.models.geometry import LinearSegment, Point3D
from creation_model.store.base import ModelStore, TransactionService

logger = logging.getLogger(__name__)

SCOPE_LABEL = "Build walls"


class WallLoop(NamedTuple):
    """The four walls of the loop, in creation order."""

    front: Wall
    right: Wall
    back: Wall
    left: Wall


def rectangle_corners(width: float, depth: float) -> list[Point3D]:
    """Closed corner list of a rectangle centered on the origin (5 points)."""
    if width <= 0 or depth <= 0:
        raise ValueError(f"Footprint must be positive, got {width} x {depth}")
    dx = width / 2
    dy = depth / 2
    corners = [
        Point3D(x=-dx, y=-dy, z=0.0),
        Point3D(x=dx, y=-dy, z=0.0),
        Point3D(x=dx, y=dy, z=0.0),
        Point3D(x=-dx, y=dy, z=0.0),
    ]
    return corners + [corners[0]]


def loop_segments(width: float, depth: float) -> list[LinearSegment]:
    """The four centerlines front, right, back, left."""
    points = rectangle_corners(width, depth)
    return [
        LinearSegment(start=points[i], end=points[i + 1])
        for i in range(len(points) - 1)
    ]


def build_wall_loop(
    store: ModelStore,
    transactions: TransactionService,
    width: float,
    depth: float,
    base: Level,
    top: Level,
) -> WallLoop:
    """Create the four walls and constrain their tops, in one mutation scope.

    Width and depth are in internal units.
    """
    segments = loop_segments(width, depth)
    walls: list[Wall] = []

    def body() -> None:
        for segment in segments:
            wall = store.create_wall(segment, base, structural=False)
            store.set_top_level(wall, top)
            walls.append(wall)

    transactions.run_in_mutation_scope(SCOPE_LABEL, body)
    logger.info(
        "Built wall loop %.3f x %.3f between '%s' and '%s'",
        width, depth, base.name, top.name,
    )
    return WallLoop(*walls)
