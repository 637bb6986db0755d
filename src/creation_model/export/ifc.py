"""IFC export via ifcopenshell.

Writes a generated document as IFC 2x3: one storey per level, walls as
extruded wall solids, doors and windows filling openings in their host walls,
and extrusion roofs swept from their working plane. Lengths are converted
from internal units to metres.
"""

from __future__ import annotations

from pathlib import Path

import ifcopenshell
import numpy as np

from creation_model.models.document import Document
from creation_model.models.elements import (
    Category,
    ExtrusionRoof,
    FamilyInstance,
    FamilyType,
    Level,
    Wall,
)
from creation_model.models.ifc_id import generate_ifc_id
from creation_model.units import UnitType, convert_from_internal


def _m(value: float) -> float:
    """Internal length to metres."""
    return convert_from_internal(value, UnitType.METERS)


def _vec(point) -> np.ndarray:
    return np.array(point.as_tuple(), dtype=float)


def _wall_direction(wall: Wall) -> np.ndarray:
    """Unit direction vector of a wall centerline (XY)."""
    d = _vec(wall.curve.end) - _vec(wall.curve.start)
    d[2] = 0.0
    return d / np.linalg.norm(d)


def _wall_normal(wall: Wall) -> np.ndarray:
    """Left-hand normal of the wall direction."""
    dx, dy, _ = _wall_direction(wall)
    return np.array([-dy, dx, 0.0])


class IFCExporter:
    """Export a Document to an IFC file."""

    def __init__(self, document: Document):
        self.document = document
        self.file = ifcopenshell.file(schema="IFC2X3")
        self._setup_header()
        self._context: ifcopenshell.entity_instance | None = None
        self._body_context: ifcopenshell.entity_instance | None = None

    def _setup_header(self) -> None:
        """Set IFC file header metadata."""
        header = self.file.wrapped_data.header()
        file_name = header.file_name_py()
        file_name.name = f"{self.document.name}.ifc"
        file_name.author = ("creation-model",)
        file_name.organization = ("",)

    def export(self, output_path: str | Path) -> Path:
        """Export the document to an IFC file. Returns the output path."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self._create_contexts()

        # IFC hierarchy: Project → Site → Building → Storeys
        ifc_project = self._create_project()
        ifc_site = self._create_site(ifc_project)
        ifc_building = self._create_building(ifc_site)

        for level in self.document.levels:
            self._export_level(level, ifc_building)

        self.file.write(str(output_path))
        return output_path

    def _create_contexts(self) -> None:
        """Create geometric representation contexts."""
        self._context = self.file.createIfcGeometricRepresentationContext(
            ContextIdentifier="3D",
            ContextType="Model",
            CoordinateSpaceDimension=3,
            Precision=1e-5,
            WorldCoordinateSystem=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint((0.0, 0.0, 0.0)),
            ),
            TrueNorth=self.file.createIfcDirection((0.0, 1.0)),
        )
        self._body_context = self.file.createIfcGeometricRepresentationSubContext(
            ContextIdentifier="Body",
            ContextType="Model",
            ParentContext=self._context,
            TargetView="MODEL_VIEW",
        )

    def _create_project(self) -> ifcopenshell.entity_instance:
        """Create IfcProject with SI units."""
        units = [
            self.file.createIfcSIUnit(UnitType="LENGTHUNIT", Name="METRE"),
            self.file.createIfcSIUnit(UnitType="AREAUNIT", Name="SQUARE_METRE"),
            self.file.createIfcSIUnit(UnitType="VOLUMEUNIT", Name="CUBIC_METRE"),
            self.file.createIfcSIUnit(UnitType="PLANEANGLEUNIT", Name="RADIAN"),
        ]
        return self.file.createIfcProject(
            GlobalId=self.document.id,
            Name=self.document.name,
            UnitsInContext=self.file.createIfcUnitAssignment(Units=units),
            RepresentationContexts=[self._context],
        )

    def _create_site(self, project: ifcopenshell.entity_instance) -> ifcopenshell.entity_instance:
        site = self.file.createIfcSite(
            GlobalId=generate_ifc_id(),
            Name="Default Site",
            CompositionType="ELEMENT",
        )
        self.file.createIfcRelAggregates(
            GlobalId=generate_ifc_id(),
            RelatingObject=project,
            RelatedObjects=[site],
        )
        return site

    def _create_building(self, site: ifcopenshell.entity_instance) -> ifcopenshell.entity_instance:
        ifc_building = self.file.createIfcBuilding(
            GlobalId=generate_ifc_id(),
            Name=self.document.name,
            CompositionType="ELEMENT",
        )
        self.file.createIfcRelAggregates(
            GlobalId=generate_ifc_id(),
            RelatingObject=site,
            RelatedObjects=[ifc_building],
        )
        return ifc_building

    def _export_level(self, level: Level, ifc_building: ifcopenshell.entity_instance) -> None:
        """Export a level as a storey with the elements based on it."""
        ifc_storey = self.file.createIfcBuildingStorey(
            GlobalId=level.id,
            Name=level.name,
            CompositionType="ELEMENT",
            Elevation=_m(level.elevation),
        )
        self.file.createIfcRelAggregates(
            GlobalId=generate_ifc_id(),
            RelatingObject=ifc_building,
            RelatedObjects=[ifc_storey],
        )

        products: list[ifcopenshell.entity_instance] = []
        wall_map: dict[str, ifcopenshell.entity_instance] = {}
        for wall in self.document.walls:
            if wall.base_level_id != level.id:
                continue
            ifc_wall = self._create_wall(wall, level)
            wall_map[wall.id] = ifc_wall
            products.append(ifc_wall)

        # Openings are linked to host walls via IfcRelVoidsElement only,
        # not contained in the storey.
        for instance in self.document.instances:
            if instance.level_id != level.id:
                continue
            wall = self.document.get_wall(instance.host_wall_id)
            family_type = self.document.get_family_type(instance.type_id)
            if wall is None or family_type is None:
                continue
            ifc_filling = self._create_filling(instance, family_type, wall, level)
            host = wall_map.get(wall.id)
            if host is not None:
                opening = self._create_opening(instance, family_type, wall, level)
                self.file.createIfcRelVoidsElement(
                    GlobalId=generate_ifc_id(),
                    RelatingBuildingElement=host,
                    RelatedOpeningElement=opening,
                )
                self.file.createIfcRelFillsElement(
                    GlobalId=generate_ifc_id(),
                    RelatingOpeningElement=opening,
                    RelatedBuildingElement=ifc_filling,
                )
            products.append(ifc_filling)

        for roof in self.document.roofs:
            if roof.level_id == level.id:
                products.append(self._create_roof(roof))

        if products:
            self.file.createIfcRelContainedInSpatialStructure(
                GlobalId=generate_ifc_id(),
                RelatingStructure=ifc_storey,
                RelatedElements=products,
            )

    def _extruded_shape(
        self,
        profile: ifcopenshell.entity_instance,
        depth: float,
    ) -> ifcopenshell.entity_instance:
        """Body representation: ``profile`` swept along local Z by ``depth`` metres."""
        solid = self.file.createIfcExtrudedAreaSolid(
            SweptArea=profile,
            Position=self.file.createIfcAxis2Placement3D(
                Location=self.file.createIfcCartesianPoint((0.0, 0.0, 0.0)),
            ),
            ExtrudedDirection=self.file.createIfcDirection((0.0, 0.0, 1.0)),
            Depth=depth,
        )
        shape = self.file.createIfcShapeRepresentation(
            ContextOfItems=self._body_context,
            RepresentationIdentifier="Body",
            RepresentationType="SweptSolid",
            Items=[solid],
        )
        return self.file.createIfcProductDefinitionShape(Representations=[shape])

    def _box_profile(self, x_dim: float, y_dim: float) -> ifcopenshell.entity_instance:
        """Rectangle with its corner at the local origin (metres)."""
        return self.file.createIfcRectangleProfileDef(
            ProfileType="AREA",
            XDim=x_dim,
            YDim=y_dim,
            Position=self.file.createIfcAxis2Placement2D(
                Location=self.file.createIfcCartesianPoint((x_dim / 2, y_dim / 2)),
            ),
        )

    def _create_wall(self, wall: Wall, level: Level) -> ifcopenshell.entity_instance:
        """Create an IfcWallStandardCase with extruded geometry."""
        direction = _wall_direction(wall)
        normal = _wall_normal(wall)

        # Placement at start point, offset by half thickness along normal
        origin = _vec(wall.curve.start) - normal * wall.width / 2
        origin[2] = level.elevation + wall.curve.start.z

        ifc_wall = self.file.createIfcWallStandardCase(
            GlobalId=wall.id,
            Name="Wall",
            ObjectPlacement=self._create_local_placement(
                origin=tuple(_m(v) for v in origin),
                x_dir=tuple(direction),
            ),
            Representation=self._extruded_shape(
                self._box_profile(_m(wall.length), _m(wall.width)),
                _m(wall.height),
            ),
        )

        props = [
            self.file.createIfcPropertySingleValue(
                Name="LoadBearing",
                NominalValue=self.file.create_entity("IfcBoolean", wall.structural),
            ),
            self.file.createIfcPropertySingleValue(
                Name="IsExternal",
                NominalValue=self.file.create_entity("IfcBoolean", True),
            ),
        ]
        pset = self.file.createIfcPropertySet(
            GlobalId=generate_ifc_id(),
            Name="Pset_WallCommon",
            HasProperties=props,
        )
        self.file.createIfcRelDefinesByProperties(
            GlobalId=generate_ifc_id(),
            RelatedObjects=[ifc_wall],
            RelatingPropertyDefinition=pset,
        )
        return ifc_wall

    def _opening_origin(
        self,
        instance: FamilyInstance,
        family_type: FamilyType,
        wall: Wall,
        level: Level,
        clearance: float = 0.0,
    ) -> tuple[float, float, float]:
        """Lower corner of an opening box centered on the insertion point (metres)."""
        direction = _wall_direction(wall)
        normal = _wall_normal(wall)
        origin = (
            _vec(instance.point)
            - direction * family_type.width / 2
            - normal * (wall.width + clearance) / 2
        )
        origin[2] = level.elevation + instance.point.z
        return tuple(_m(v) for v in origin)

    def _create_filling(
        self,
        instance: FamilyInstance,
        family_type: FamilyType,
        wall: Wall,
        level: Level,
    ) -> ifcopenshell.entity_instance:
        """Create the IfcDoor or IfcWindow for a family instance."""
        placement = self._create_local_placement(
            origin=self._opening_origin(instance, family_type, wall, level),
            x_dir=tuple(_wall_direction(wall)),
        )
        shape = self._extruded_shape(
            self._box_profile(_m(family_type.width), _m(wall.width)),
            _m(family_type.height),
        )
        create = (
            self.file.createIfcDoor
            if family_type.category == Category.DOORS
            else self.file.createIfcWindow
        )
        return create(
            GlobalId=instance.id,
            Name=family_type.label,
            ObjectPlacement=placement,
            Representation=shape,
            OverallHeight=_m(family_type.height),
            OverallWidth=_m(family_type.width),
        )

    def _create_opening(
        self,
        instance: FamilyInstance,
        family_type: FamilyType,
        wall: Wall,
        level: Level,
    ) -> ifcopenshell.entity_instance:
        """Create the IfcOpeningElement voiding the host wall."""
        # Slightly thicker than the wall for a clean boolean cut
        clearance = 0.01 / _m(1.0)
        placement = self._create_local_placement(
            origin=self._opening_origin(instance, family_type, wall, level, clearance),
            x_dir=tuple(_wall_direction(wall)),
        )
        shape = self._extruded_shape(
            self._box_profile(_m(family_type.width), _m(wall.width + clearance)),
            _m(family_type.height),
        )
        kind = "Door" if family_type.category == Category.DOORS else "Window"
        return self.file.createIfcOpeningElement(
            GlobalId=generate_ifc_id(),
            Name=f"{kind} Opening",
            ObjectPlacement=placement,
            Representation=shape,
        )

    def _create_roof(self, roof: ExtrusionRoof) -> ifcopenshell.entity_instance:
        """Create an IfcRoof swept from its working plane.

        The open gable profile is closed by offsetting it up by the roof
        type thickness. Local axes: X = up x normal, Y = up, Z = normal.
        """
        plane = self.document.get_plane(roof.plane_id)
        roof_type = self.document.get_roof_type(roof.roof_type_id)
        origin = _vec(plane.origin)
        normal = _vec(plane.normal)
        up = _vec(plane.up)
        x_axis = np.cross(up, normal)

        points = [roof.footprint[0].start] + [seg.end for seg in roof.footprint]
        lower = [
            (_m(float(np.dot(_vec(p) - origin, x_axis))), _m(float(np.dot(_vec(p) - origin, up))))
            for p in points
        ]
        thickness = _m(roof_type.thickness)
        upper = [(u, v + thickness) for u, v in reversed(lower)]
        outline = lower + upper
        ifc_points = [self.file.createIfcCartesianPoint(p) for p in outline]
        ifc_points.append(ifc_points[0])
        profile = self.file.createIfcArbitraryClosedProfileDef(
            ProfileType="AREA",
            OuterCurve=self.file.createIfcPolyline(Points=ifc_points),
        )

        start = origin + normal * roof.start_offset
        placement = self._create_local_placement(
            origin=tuple(_m(v) for v in start),
            z_dir=tuple(normal),
            x_dir=tuple(x_axis),
        )
        return self.file.createIfcRoof(
            GlobalId=roof.id,
            Name=roof_type.name,
            ObjectPlacement=placement,
            Representation=self._extruded_shape(profile, _m(roof.depth)),
            ShapeType="GABLE_ROOF",
        )

    def _create_local_placement(
        self,
        origin: tuple[float, float, float] = (0.0, 0.0, 0.0),
        z_dir: tuple[float, float, float] = (0.0, 0.0, 1.0),
        x_dir: tuple[float, float, float] = (1.0, 0.0, 0.0),
    ) -> ifcopenshell.entity_instance:
        """Create an IfcLocalPlacement."""
        axis2 = self.file.createIfcAxis2Placement3D(
            Location=self.file.createIfcCartesianPoint(tuple(float(v) for v in origin)),
            Axis=self.file.createIfcDirection(tuple(float(v) for v in z_dir)),
            RefDirection=self.file.createIfcDirection(tuple(float(v) for v in x_dir)),
        )
        return self.file.createIfcLocalPlacement(RelativePlacement=axis2)
