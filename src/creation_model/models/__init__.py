"""Document data models."""

from creation_model.models.ifc_id import generate_ifc_id
from creation_model.models.geometry import ORIGIN, LinearSegment, Point3D
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
from creation_model.models.document import Document

__all__ = [
    "generate_ifc_id",
    "ORIGIN",
    "LinearSegment",
    "Point3D",
    "Category",
    "ExtrusionRoof",
    "FamilyInstance",
    "FamilyType",
    "Level",
    "RoofType",
    "StructuralType",
    "Wall",
    "WorkingPlane",
    "Document",
]
