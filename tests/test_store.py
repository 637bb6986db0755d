"""Tests for the in-memory model store and its mutation scopes."""

import logging
import math

import pytest

from creation_model.errors import GeometryRejectedError, PreconditionError, TransactionError
from creation_model.models import (
    Category,
    Document,
    Level,
    LinearSegment,
    Point3D,
    StructuralType,
)
from creation_model.store.memory import DEFAULT_WALL_HEIGHT, InMemoryModelStore
from creation_model.units import mm


def _store() -> InMemoryModelStore:
    return InMemoryModelStore(Document.seed(top_elevation_mm=3000))


def _segment(x0=0.0, y0=0.0, x1=10.0, y1=0.0) -> LinearSegment:
    return LinearSegment(start=Point3D(x=x0, y=y0), end=Point3D(x=x1, y=y1))


def _fail():
    raise RuntimeError("boom")


def _in_scope(store, fn):
    """Run ``fn`` in a scope and return its result."""
    out = []
    store.run_in_mutation_scope("test", lambda: out.append(fn()))
    return out[0]


def _yz_plane(store):
    return _in_scope(store, lambda: store.create_working_plane(
        Point3D(x=0, y=0), Point3D(x=1, y=0, z=0), Point3D(x=0, y=0, z=1),
    ))


class TestMutationScopes:
    def test_mutation_outside_scope_rejected(self):
        store = _store()
        with pytest.raises(TransactionError, match="requires an open mutation scope"):
            store.create_wall(_segment(), store.document.levels[0], False)
        assert store.document.walls == []

    def test_nested_scope_rejected(self):
        store = _store()
        with pytest.raises(TransactionError, match="already open"):
            store.run_in_mutation_scope(
                "outer", lambda: store.run_in_mutation_scope("inner", lambda: None)
            )
        assert store.committed_scopes == []

    def test_commit(self):
        store = _store()
        base = store.document.levels[0]
        _in_scope(store, lambda: store.create_wall(_segment(), base, False))
        assert len(store.document.walls) == 1
        assert store.committed_scopes == ["test"]
        assert store.mutation_log == ["create_wall"]
        assert not store.scope_open

    def test_rollback_on_error(self):
        store = _store()
        base = store.document.levels[0]
        door = store.find_family_type(Category.DOORS, "0915 x 2134mm", "Single-Flush")

        def body():
            store.create_wall(_segment(), base, False)
            store.activate(door)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.run_in_mutation_scope("failing", body)
        assert store.document.walls == []
        assert not store.document.get_family_type(door.id).is_active
        assert store.committed_scopes == []
        assert not store.scope_open
        assert not store.is_active(door)

    def test_handles_survive_rollback(self):
        store = _store()
        base, top = store.document.levels
        wall = _in_scope(store, lambda: store.create_wall(_segment(), base, False))
        with pytest.raises(RuntimeError):
            store.run_in_mutation_scope("failing", _fail)
        _in_scope(store, lambda: store.set_top_level(wall, top))
        assert store.document.get_wall(wall.id).top_level_id == top.id


class TestLevelsAndWalls:
    def test_find_levels_by_name(self):
        store = _store()
        found = store.find_levels_by_name(["Level 1", "Nope"])
        assert found["Level 1"].name == "Level 1"
        assert found["Nope"] is None

    def test_duplicate_level_name_takes_first(self, caplog):
        doc = Document(levels=[
            Level(name="L1", elevation=0.0),
            Level(name="L1", elevation=5.0),
        ])
        store = InMemoryModelStore(doc)
        with caplog.at_level(logging.WARNING):
            found = store.find_levels_by_name(["L1"])
        assert found["L1"].elevation == 0.0
        assert "ambiguous" in caplog.text

    def test_new_wall_has_unconnected_height(self):
        store = _store()
        wall = _in_scope(store, lambda: store.create_wall(_segment(), store.document.levels[0], False))
        assert wall.height == DEFAULT_WALL_HEIGHT
        assert wall.top_level_id is None
        assert math.isclose(wall.width, mm(200))

    def test_set_top_level_updates_height(self):
        store = _store()
        base, top = store.document.levels

        def body():
            wall = store.create_wall(_segment(), base, False)
            store.set_top_level(wall, top)
            return wall

        wall = _in_scope(store, body)
        assert wall.top_level_id == top.id
        assert math.isclose(wall.height, mm(3000))

    def test_top_level_below_base_rejected(self):
        store = _store()
        base, top = store.document.levels

        def body():
            wall = store.create_wall(_segment(), top, False)
            store.set_top_level(wall, base)

        with pytest.raises(ValueError, match="must be above"):
            store.run_in_mutation_scope("test", body)
        assert store.document.walls == []

    def test_foreign_level_rejected(self):
        store = _store()
        stranger = Level(name="Elsewhere")
        with pytest.raises(ValueError, match="not part of this document"):
            store.run_in_mutation_scope(
                "test", lambda: store.create_wall(_segment(), stranger, False)
            )


class TestCatalog:
    def test_find_family_type(self):
        store = _store()
        door = store.find_family_type(Category.DOORS, "0915 x 2134mm", "Single-Flush")
        assert door is not None
        assert store.find_family_type(Category.WINDOWS, "0915 x 2134mm", "Single-Flush") is None
        assert store.find_family_type(Category.DOORS, "0915 x 2134mm", "Other") is None

    def test_activate_is_idempotent(self):
        store = _store()
        door = store.find_family_type(Category.DOORS, "0915 x 2134mm", "Single-Flush")
        _in_scope(store, lambda: store.activate(door))
        _in_scope(store, lambda: store.activate(door))
        assert store.is_active(door)
        assert store.document.get_family_type(door.id).is_active

    def test_inactive_type_cannot_be_placed(self):
        store = _store()
        base = store.document.levels[0]
        door = store.find_family_type(Category.DOORS, "0915 x 2134mm", "Single-Flush")

        def body():
            wall = store.create_wall(_segment(), base, False)
            store.create_family_instance(
                Point3D(x=5, y=0), door, wall, base, StructuralType.NON_STRUCTURAL
            )

        with pytest.raises(ValueError, match="not active"):
            store.run_in_mutation_scope("test", body)
        assert store.document.instances == []

    def test_default_roof_type_missing(self):
        store = InMemoryModelStore(Document())
        with pytest.raises(PreconditionError, match="no default roof type"):
            store.default_roof_type()


class TestWorkingPlane:
    def test_vectors_normalized_and_squared(self):
        store = _store()
        plane = _in_scope(store, lambda: store.create_working_plane(
            Point3D(x=0, y=0), Point3D(x=0, y=0, z=20), Point3D(x=0, y=20, z=20),
        ))
        assert plane.normal == Point3D(x=0, y=0, z=1)
        assert plane.up == Point3D(x=0, y=1, z=0)

    def test_zero_normal_rejected(self):
        store = _store()
        with pytest.raises(ValueError):
            store.run_in_mutation_scope("test", lambda: store.create_working_plane(
                Point3D(x=0, y=0), Point3D(x=0, y=0, z=0), Point3D(x=0, y=0, z=1),
            ))


class TestExtrusionRoof:
    def _profile(self, x=0.0):
        p1 = Point3D(x=x, y=-5, z=10)
        ridge = Point3D(x=x, y=0, z=15)
        p2 = Point3D(x=x, y=5, z=10)
        return [LinearSegment(start=p1, end=ridge), LinearSegment(start=ridge, end=p2)]

    def _create(self, store, footprint, depth=16.0):
        plane = _yz_plane(store)
        top = store.document.levels[1]
        roof_type = store.default_roof_type()
        return _in_scope(store, lambda: store.create_extrusion_roof(
            footprint, plane, top, roof_type, -8.0, depth,
        ))

    def test_in_plane_profile_accepted(self):
        store = _store()
        roof = self._create(store, self._profile())
        assert len(roof.footprint) == 2
        assert roof.start_offset == -8.0
        assert roof.end_offset == 8.0
        assert store.document.roofs == [roof]

    def test_off_plane_profile_rejected(self):
        store = _store()
        with pytest.raises(GeometryRejectedError, match="off the working plane"):
            self._create(store, self._profile(x=3.0))
        assert store.document.roofs == []

    def test_disconnected_profile_rejected(self):
        store = _store()
        a, b = self._profile()
        shifted = LinearSegment(start=b.start.raised(1.0), end=b.end)
        with pytest.raises(GeometryRejectedError, match="does not continue"):
            self._create(store, [a, shifted])

    def test_empty_profile_rejected(self):
        store = _store()
        with pytest.raises(GeometryRejectedError, match="empty"):
            self._create(store, [])

    def test_zero_depth_rejected(self):
        store = _store()
        with pytest.raises(GeometryRejectedError, match="depth"):
            self._create(store, self._profile(), depth=0.0)
