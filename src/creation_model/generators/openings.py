"""Door and window placement on loop walls.

Openings are anchored on the host wall's location curve: a door at the
midpoint of the centerline, a window at the midpoint of the two endpoints
after each is raised by a fixed offset.
"""

from __future__ import annotations

import logging

from creation_model.config import FamilyTypeRef
from creation_model.errors import MissingFamilyTypeError
from creation_model.models.elements import (
    Category,
    FamilyInstance,
    FamilyType,
    Level,
    StructuralType,
    Wall,
)
from creation_model.models.geometry import Point3D
from creation_model.store.base import ModelStore, TransactionService

logger = logging.getLogger(__name__)

WINDOW_OFFSET = 0.5


def find_family_type(store: ModelStore, category: Category, ref: FamilyTypeRef) -> FamilyType:
    """Catalog entry matching ``ref`` exactly.

    Raises:
        MissingFamilyTypeError: no entry with that type and family name.
    """
    family_type = store.find_family_type(category, ref.type_name, ref.family_name)
    if family_type is None:
        raise MissingFamilyTypeError(category.value, ref.type_name, ref.family_name)
    return family_type


def door_insertion_point(wall: Wall) -> Point3D:
    """Midpoint of the wall centerline."""
    return wall.curve.endpoint(0).midpoint(wall.curve.endpoint(1))


def window_insertion_point(wall: Wall, offset: float = WINDOW_OFFSET) -> Point3D:
    """Midpoint of the wall centerline endpoints, each raised by ``offset``."""
    start = wall.curve.endpoint(0).raised(offset)
    end = wall.curve.endpoint(1).raised(offset)
    return start.midpoint(end)


def _place(
    store: ModelStore,
    transactions: TransactionService,
    label: str,
    point: Point3D,
    family_type: FamilyType,
    wall: Wall,
    level: Level,
) -> FamilyInstance:
    placed: list[FamilyInstance] = []

    def body() -> None:
        if not store.is_active(family_type):
            store.activate(family_type)
        placed.append(
            store.create_family_instance(
                point, family_type, wall, level, StructuralType.NON_STRUCTURAL
            )
        )

    transactions.run_in_mutation_scope(label, body)
    logger.info("Placed %s on wall %s at %s", family_type.label, wall.id, point.as_tuple())
    return placed[0]


def place_door(
    store: ModelStore,
    transactions: TransactionService,
    wall: Wall,
    door_type: FamilyType,
    level: Level,
) -> FamilyInstance:
    """Activate the door type if needed and insert a door mid-wall."""
    return _place(
        store, transactions, "Place door",
        door_insertion_point(wall), door_type, wall, level,
    )


def place_window(
    store: ModelStore,
    transactions: TransactionService,
    wall: Wall,
    window_type: FamilyType,
    level: Level,
    offset: float = WINDOW_OFFSET,
) -> FamilyInstance:
    """Activate the window type if needed and insert a window mid-wall."""
    return _place(
        store, transactions, "Place window",
        window_insertion_point(wall, offset), window_type, wall, level,
    )
