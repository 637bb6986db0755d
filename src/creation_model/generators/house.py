"""One-shot house generation.

Sequence: resolve levels and catalog entries, build the wall loop, put a
door in the front wall and a window in each other wall, then the gable roof.

Precondition failures are reported before any mutation scope opens. A roof
rejection is reported after walls and openings are committed. Any other
error from the store propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from creation_model.config import GenerationConfig
from creation_model.errors import Failure, MissingLevelError, PreconditionError
from creation_model.generators.levels import resolve_levels
from creation_model.generators.openings import find_family_type, place_door, place_window
from creation_model.generators.roof import RoofResult, build_roof
from creation_model.generators.walls import WallLoop, build_wall_loop
from creation_model.models.elements import Category, FamilyInstance, Level
from creation_model.store.base import ModelStore, TransactionService

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """What one run produced, and what failed."""

    base_level: Level | None = None
    top_level: Level | None = None
    walls: WallLoop | None = None
    door: FamilyInstance | None = None
    windows: list[FamilyInstance] = field(default_factory=list)
    roof: RoofResult | None = None
    failures: list[Failure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def precondition_failed(self) -> bool:
        return any(f.kind == "precondition" for f in self.failures)

    def to_dict(self) -> dict:
        """JSON-ready summary."""
        data: dict = {
            "ok": self.ok,
            "levels": {
                "base": self.base_level.name if self.base_level else None,
                "top": self.top_level.name if self.top_level else None,
            },
            "walls": [w.id for w in self.walls] if self.walls else [],
            "door": self.door.id if self.door else None,
            "windows": [w.id for w in self.windows],
            "roof": None,
            "failures": [f.to_dict() for f in self.failures],
        }
        if self.roof is not None:
            data["roof"] = {
                "id": self.roof.roof.id if self.roof.roof else None,
                "footprint": [
                    [seg.start.as_tuple(), seg.end.as_tuple()] for seg in self.roof.footprint
                ],
                "max_wall_length": self.roof.max_wall_length,
            }
        return data


def generate_house(
    store: ModelStore,
    transactions: TransactionService,
    config: GenerationConfig | None = None,
) -> GenerationReport:
    """Build walls, openings and roof into the store's document."""
    if config is None:
        config = GenerationConfig()
    report = GenerationReport()

    base, top = resolve_levels(store, config.base_level_name, config.top_level_name)
    report.base_level, report.top_level = base, top
    try:
        missing = [
            name for name, level in (
                (config.base_level_name, base),
                (config.top_level_name, top),
            )
            if level is None
        ]
        if missing:
            raise MissingLevelError(missing)
        door_type = find_family_type(store, Category.DOORS, config.door)
        window_type = find_family_type(store, Category.WINDOWS, config.window)
        roof_type = store.default_roof_type()
    except PreconditionError as e:
        stage = "levels" if isinstance(e, MissingLevelError) else "catalog"
        logger.error("Generation aborted before any change: %s", e)
        report.failures.append(Failure(stage=stage, kind="precondition", message=str(e)))
        return report

    loop = build_wall_loop(store, transactions, config.width, config.depth, base, top)
    report.walls = loop

    report.door = place_door(store, transactions, loop.front, door_type, base)
    for wall in (loop.right, loop.back, loop.left):
        report.windows.append(
            place_window(store, transactions, wall, window_type, base, config.window_offset)
        )

    report.roof = build_roof(
        store, transactions, loop, top,
        depth=config.roof_depth,
        ridge_rise=config.ridge_rise,
        roof_type=roof_type,
    )
    if report.roof.failure is not None:
        report.failures.append(report.roof.failure)

    logger.info(
        "Generated %d walls, %d openings, roof %s",
        len(loop), 1 + len(report.windows), "built" if report.roof.ok else "rejected",
    )
    return report
