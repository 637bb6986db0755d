"""The architectural document: every element held by the model store.

Persists as JSON. ``Document.seed`` builds the starter document the CLI
writes with ``init``: two levels, a door and a window catalog entry, and a
default roof type.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from creation_model.models.elements import (
    Category,
    ExtrusionRoof,
    FamilyInstance,
    FamilyType,
    Level,
    RoofType,
    Wall,
    WorkingPlane,
)
from creation_model.models.ifc_id import generate_ifc_id
from creation_model.units import mm


class Document(BaseModel):
    """An open document. Lengths in internal units."""

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    name: str = Field(default="Untitled Project")
    levels: list[Level] = Field(default_factory=list)
    walls: list[Wall] = Field(default_factory=list)
    family_types: list[FamilyType] = Field(default_factory=list)
    instances: list[FamilyInstance] = Field(default_factory=list)
    roof_types: list[RoofType] = Field(default_factory=list)
    default_roof_type_id: str | None = None
    planes: list[WorkingPlane] = Field(default_factory=list)
    roofs: list[ExtrusionRoof] = Field(default_factory=list)

    # ── File I/O ──────────────────────────────────────────────────────

    @classmethod
    def load(cls, path: str | Path) -> Document:
        """Load a document from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text(encoding="utf-8"))

    def save(self, path: str | Path) -> Path:
        """Save the document to a JSON file. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    # ── Lookups ───────────────────────────────────────────────────────

    def get_level(self, level_id: str) -> Level | None:
        return next((lv for lv in self.levels if lv.id == level_id), None)

    def get_wall(self, wall_id: str) -> Wall | None:
        return next((w for w in self.walls if w.id == wall_id), None)

    def get_family_type(self, type_id: str) -> FamilyType | None:
        return next((t for t in self.family_types if t.id == type_id), None)

    def get_roof_type(self, type_id: str) -> RoofType | None:
        return next((t for t in self.roof_types if t.id == type_id), None)

    def get_plane(self, plane_id: str) -> WorkingPlane | None:
        return next((p for p in self.planes if p.id == plane_id), None)

    def instances_on(self, wall_id: str) -> list[FamilyInstance]:
        """Family instances hosted by a wall."""
        return [i for i in self.instances if i.host_wall_id == wall_id]

    def instances_of(self, category: Category) -> list[FamilyInstance]:
        """Family instances whose type belongs to ``category``."""
        type_ids = {t.id for t in self.family_types if t.category == category}
        return [i for i in self.instances if i.type_id in type_ids]

    # ── Seeding ───────────────────────────────────────────────────────

    @classmethod
    def seed(
        cls,
        name: str = "Untitled Project",
        base_level_name: str = "Level 1",
        top_level_name: str = "Level 2",
        top_elevation_mm: float = 3000.0,
        door: tuple[str, str] = ("0915 x 2134mm", "Single-Flush"),
        window: tuple[str, str] = ("0610 x 1220mm", "Fixed"),
    ) -> Document:
        """Starter document with levels, an inactive catalog and a roof type.

        ``door`` and ``window`` are (type name, family name) pairs.
        """
        roof_type = RoofType(name="Generic - 300mm", thickness=mm(300))
        return cls(
            name=name,
            levels=[
                Level(name=base_level_name, elevation=0.0),
                Level(name=top_level_name, elevation=mm(top_elevation_mm)),
            ],
            family_types=[
                FamilyType(
                    category=Category.DOORS,
                    type_name=door[0],
                    family_name=door[1],
                    width=mm(915),
                    height=mm(2134),
                ),
                FamilyType(
                    category=Category.WINDOWS,
                    type_name=window[0],
                    family_name=window[1],
                    width=mm(610),
                    height=mm(1220),
                ),
            ],
            roof_types=[roof_type],
            default_roof_type_id=roof_type.id,
        )
