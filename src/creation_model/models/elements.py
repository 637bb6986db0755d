"""Model store elements: levels, walls, family types and instances, roofs.

Elements are owned by the model store once created. Cross references
(host wall, level, type) are stored by id.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from creation_model.models.geometry import LinearSegment, Point3D
from creation_model.models.ifc_id import generate_ifc_id


class Level(BaseModel):
    """A named horizontal reference plane."""

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    name: str = Field(description="Display name, unique within a document")
    elevation: float = Field(default=0.0, description="Elevation in internal units")


class Wall(BaseModel):
    """A straight wall bound to a base level.

    ``height`` mirrors the host's height parameter: it follows the top
    constraint once one is set.
    """

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    curve: LinearSegment = Field(description="Location curve (centerline)")
    base_level_id: str
    top_level_id: str | None = None
    structural: bool = False
    height: float = Field(gt=0, description="Height parameter in internal units")
    width: float = Field(gt=0, description="Wall type thickness in internal units")

    @property
    def length(self) -> float:
        """Centerline length."""
        return self.curve.length


class Category(str, Enum):
    """Catalog categories the generator instantiates."""

    DOORS = "doors"
    WINDOWS = "windows"


class StructuralType(str, Enum):
    """Structural role of a placed family instance."""

    NON_STRUCTURAL = "non_structural"


class FamilyType(BaseModel):
    """A catalog entry identified by (type name, family name).

    Must be active before the first instance of it is placed.
    """

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    category: Category
    type_name: str
    family_name: str
    is_active: bool = False
    width: float = Field(gt=0, description="Nominal width in internal units")
    height: float = Field(gt=0, description="Nominal height in internal units")

    @property
    def label(self) -> str:
        return f"{self.family_name}: {self.type_name}"


class FamilyInstance(BaseModel):
    """A door or window placed in a host wall."""

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    type_id: str
    host_wall_id: str
    level_id: str
    point: Point3D = Field(description="Insertion point")
    structural_type: StructuralType = StructuralType.NON_STRUCTURAL


class RoofType(BaseModel):
    """A roof type definition."""

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    name: str
    thickness: float = Field(gt=0, description="Roof thickness in internal units")


class WorkingPlane(BaseModel):
    """A vertical reference plane used as the sketch plane of an extrusion.

    ``normal`` and ``up`` are unit vectors and perpendicular to each other.
    """

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    origin: Point3D
    normal: Point3D
    up: Point3D

    @model_validator(mode="after")
    def orthonormal(self) -> WorkingPlane:
        for name, vector in (("normal", self.normal), ("up", self.up)):
            if abs(vector.dot(vector) - 1.0) > 1e-6:
                raise ValueError(f"Working plane {name} must be a unit vector")
        if abs(self.normal.dot(self.up)) > 1e-6:
            raise ValueError("Working plane normal and up must be perpendicular")
        return self

    def distance_to(self, point: Point3D) -> float:
        """Signed distance of ``point`` from the plane along its normal."""
        return (point - self.origin).dot(self.normal)


class ExtrusionRoof(BaseModel):
    """A roof extruded from a profile along its working plane normal."""

    id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    footprint: tuple[LinearSegment, ...]
    plane_id: str
    level_id: str
    roof_type_id: str
    start_offset: float = Field(description="Extrusion start along the plane normal")
    depth: float = Field(gt=0, description="Extrusion depth in internal units")

    @property
    def end_offset(self) -> float:
        return self.start_offset + self.depth
