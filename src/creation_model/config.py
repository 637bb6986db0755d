"""Generation settings.

Defaults reproduce the stock house: a 10 x 5 m box between "Level 1" and
"Level 2", a single flush door, fixed windows and a gable roof extruded 5 m.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from creation_model.units import mm


class FamilyTypeRef(BaseModel):
    """Catalog key: exact type name within an exact family name."""

    type_name: str
    family_name: str


class GenerationConfig(BaseModel):
    """Inputs of one generation run. Real-world lengths in millimeters."""

    base_level_name: str = "Level 1"
    top_level_name: str = "Level 2"
    width_mm: float = Field(default=10000.0, gt=0, description="Footprint size along X")
    depth_mm: float = Field(default=5000.0, gt=0, description="Footprint size along Y")
    door: FamilyTypeRef = FamilyTypeRef(type_name="0915 x 2134mm", family_name="Single-Flush")
    window: FamilyTypeRef = FamilyTypeRef(type_name="0610 x 1220mm", family_name="Fixed")
    window_offset: float = Field(
        default=0.5, description="Raise of window insertion points, internal units"
    )
    ridge_rise: float = Field(
        default=5.0, gt=0, description="Ridge height above the eaves, internal units"
    )
    roof_depth_mm: float = Field(default=5000.0, gt=0, description="Roof extrusion depth")

    @property
    def width(self) -> float:
        return mm(self.width_mm)

    @property
    def depth(self) -> float:
        return mm(self.depth_mm)

    @property
    def roof_depth(self) -> float:
        return mm(self.roof_depth_mm)

    @classmethod
    def load(cls, path: str | Path) -> GenerationConfig:
        """Load settings from a JSON file; missing keys keep their defaults."""
        path = Path(path)
        return cls.model_validate_json(path.read_text(encoding="utf-8"))
