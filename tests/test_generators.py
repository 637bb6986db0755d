"""Tests for the generation steps: levels, wall loop, openings, roof."""

import math

import pytest

from creation_model.config import FamilyTypeRef
from creation_model.errors import MissingFamilyTypeError
from creation_model.generators.levels import resolve_levels
from creation_model.generators.openings import (
    door_insertion_point,
    find_family_type,
    place_door,
    place_window,
    window_insertion_point,
)
from creation_model.generators.roof import (
    build_gable_footprint,
    build_roof,
    max_wall_length,
)
from creation_model.generators.walls import build_wall_loop, loop_segments, rectangle_corners
from creation_model.models import Category, Document, Point3D, StructuralType
from creation_model.store.memory import InMemoryModelStore
from creation_model.units import mm

W = mm(10000)
D = mm(5000)

DOOR = FamilyTypeRef(type_name="0915 x 2134mm", family_name="Single-Flush")
WINDOW = FamilyTypeRef(type_name="0610 x 1220mm", family_name="Fixed")


def _store() -> InMemoryModelStore:
    return InMemoryModelStore(Document.seed(top_elevation_mm=3000))


def _loop(store):
    base, top = store.document.levels
    return build_wall_loop(store, store, W, D, base, top)


class TestResolveLevels:
    def test_both_found(self):
        store = _store()
        base, top = resolve_levels(store, "Level 1", "Level 2")
        assert base.name == "Level 1"
        assert top.name == "Level 2"

    def test_missing_is_none(self):
        store = _store()
        base, top = resolve_levels(store, "Level 1", "Roof")
        assert base is not None
        assert top is None

    def test_exact_match_only(self):
        store = _store()
        base, top = resolve_levels(store, "level 1", "Level 2 ")
        assert base is None
        assert top is None

    def test_no_side_effects(self):
        store = _store()
        resolve_levels(store, "Level 1", "Level 2")
        assert store.mutation_log == []


class TestWallLoopGeometry:
    def test_corners_closed(self):
        pts = rectangle_corners(4.0, 2.0)
        assert len(pts) == 5
        assert pts[0] == pts[-1]
        assert pts[:4] == [
            Point3D(x=-2, y=-1), Point3D(x=2, y=-1),
            Point3D(x=2, y=1), Point3D(x=-2, y=1),
        ]

    def test_segments_chain(self):
        segs = loop_segments(4.0, 2.0)
        assert len(segs) == 4
        for a, b in zip(segs, segs[1:] + segs[:1]):
            assert a.end == b.start

    @pytest.mark.parametrize("width,depth", [(0, 2), (4, 0), (-1, 2)])
    def test_non_positive_rejected(self, width, depth):
        with pytest.raises(ValueError, match="must be positive"):
            rectangle_corners(width, depth)


class TestBuildWallLoop:
    def test_four_walls_in_one_scope(self):
        store = _store()
        loop = _loop(store)
        assert len(loop) == 4
        assert store.committed_scopes == ["Build walls"]
        assert len(store.document.walls) == 4

    def test_named_edges(self):
        store = _store()
        loop = _loop(store)
        assert loop.front.curve.start == Point3D(x=-W / 2, y=-D / 2)
        assert loop.right.curve.start == Point3D(x=W / 2, y=-D / 2)
        assert loop.back.curve.start == Point3D(x=W / 2, y=D / 2)
        assert loop.left.curve.start == Point3D(x=-W / 2, y=D / 2)
        assert [w.id for w in loop] == [w.id for w in store.document.walls]

    def test_closed_loop(self):
        loop = _loop(_store())
        walls = list(loop)
        for a, b in zip(walls, walls[1:] + walls[:1]):
            assert a.curve.end == b.curve.start
        assert loop.left.curve.end == loop.front.curve.start

    def test_levels_assigned(self):
        store = _store()
        base, top = store.document.levels
        loop = _loop(store)
        for wall in loop:
            assert wall.base_level_id == base.id
            assert wall.top_level_id == top.id
            assert wall.structural is False
            assert math.isclose(wall.height, mm(3000))

    def test_wall_lengths(self):
        loop = _loop(_store())
        assert math.isclose(loop.front.length, W)
        assert math.isclose(loop.right.length, D)
        assert math.isclose(loop.back.length, W)
        assert math.isclose(loop.left.length, D)

    def test_failure_rolls_back_all_walls(self):
        store = _store()
        base, top = store.document.levels
        # Top below base: the first set_top_level fails
        with pytest.raises(ValueError):
            build_wall_loop(store, store, W, D, top, base)
        assert store.document.walls == []
        assert store.committed_scopes == []


class TestFindFamilyType:
    def test_found(self):
        store = _store()
        door = find_family_type(store, Category.DOORS, DOOR)
        assert door.type_name == DOOR.type_name

    def test_missing_raises(self):
        store = _store()
        ref = FamilyTypeRef(type_name="0915 x 2134mm", family_name="Double-Glass")
        with pytest.raises(MissingFamilyTypeError) as exc:
            find_family_type(store, Category.DOORS, ref)
        assert exc.value.category == "doors"
        assert "Double-Glass" in str(exc.value)

    def test_category_must_match(self):
        store = _store()
        with pytest.raises(MissingFamilyTypeError):
            find_family_type(store, Category.WINDOWS, DOOR)


class TestInsertionPoints:
    def test_door_at_exact_midpoint(self):
        loop = _loop(_store())
        assert door_insertion_point(loop.front) == Point3D(x=0.0, y=-D / 2, z=0.0)

    def test_window_raised_by_offset(self):
        loop = _loop(_store())
        for wall in loop:
            diff = window_insertion_point(wall) - door_insertion_point(wall)
            assert diff == Point3D(x=0.0, y=0.0, z=0.5)

    def test_window_custom_offset(self):
        loop = _loop(_store())
        assert window_insertion_point(loop.right, 1.25).z == 1.25


class TestPlaceOpenings:
    def test_place_door_activates_and_hosts(self):
        store = _store()
        loop = _loop(store)
        base = store.document.levels[0]
        door_type = find_family_type(store, Category.DOORS, DOOR)
        assert not door_type.is_active

        door = place_door(store, store, loop.front, door_type, base)

        assert door.host_wall_id == loop.front.id
        assert door.level_id == base.id
        assert door.type_id == door_type.id
        assert door.structural_type == StructuralType.NON_STRUCTURAL
        assert door.point == door_insertion_point(loop.front)
        assert store.document.get_family_type(door_type.id).is_active
        assert store.committed_scopes == ["Build walls", "Place door"]
        assert store.mutation_log[-2:] == ["activate", "create_family_instance"]

    def test_window_type_activated_once(self):
        store = _store()
        loop = _loop(store)
        base = store.document.levels[0]
        window_type = find_family_type(store, Category.WINDOWS, WINDOW)
        for wall in (loop.right, loop.back, loop.left):
            place_window(store, store, wall, window_type, base)
        assert store.mutation_log.count("activate") == 1
        assert store.mutation_log.count("create_family_instance") == 3
        hosts = [i.host_wall_id for i in store.document.instances]
        assert hosts == [loop.right.id, loop.back.id, loop.left.id]

    def test_window_retry_after_rolled_back_activation(self):
        class FlakyStore(InMemoryModelStore):
            failures = 1

            def create_family_instance(self, *args, **kwargs):
                if self.failures:
                    self.failures -= 1
                    raise RuntimeError("host rejected instance")
                return super().create_family_instance(*args, **kwargs)

        store = FlakyStore(Document.seed(top_elevation_mm=3000))
        loop = _loop(store)
        base = store.document.levels[0]
        window_type = find_family_type(store, Category.WINDOWS, WINDOW)

        with pytest.raises(RuntimeError, match="host rejected instance"):
            place_window(store, store, loop.right, window_type, base)
        assert not store.is_active(window_type)

        window = place_window(store, store, loop.right, window_type, base)
        assert window.host_wall_id == loop.right.id
        assert store.is_active(window_type)
        assert store.mutation_log.count("activate") == 2
        assert store.committed_scopes == ["Build walls", "Place window"]

    def test_window_point(self):
        store = _store()
        loop = _loop(store)
        window_type = find_family_type(store, Category.WINDOWS, WINDOW)
        window = place_window(store, store, loop.back, window_type, store.document.levels[0])
        assert window.point == Point3D(x=0.0, y=D / 2, z=0.5)


class TestGableFootprint:
    def test_two_segments(self):
        loop = _loop(_store())
        footprint = build_gable_footprint(loop)
        assert len(footprint) == 2
        assert footprint[0].end == footprint[1].start

    def test_apex_bases_from_front_and_back_starts(self):
        loop = _loop(_store())
        h = mm(3000)
        first, second = build_gable_footprint(loop)
        assert first.start == Point3D(x=-W / 2, y=-D / 2, z=h)
        assert second.end == Point3D(x=W / 2, y=D / 2, z=h)

    def test_ridge_rise(self):
        loop = _loop(_store())
        first, second = build_gable_footprint(loop)
        ridge = first.end
        assert math.isclose(ridge.z - first.start.z, 5.0)
        assert math.isclose(ridge.z - second.end.z, 5.0)
        assert ridge == first.start.midpoint(second.end).raised(5.0)

    def test_custom_rise(self):
        loop = _loop(_store())
        first, _ = build_gable_footprint(loop, ridge_rise=2.0)
        assert math.isclose(first.end.z - first.start.z, 2.0)

    def test_max_wall_length(self):
        loop = _loop(_store())
        assert math.isclose(max_wall_length(loop), W)


class PermissiveStore(InMemoryModelStore):
    """Store whose geometry engine accepts any roof profile."""

    @staticmethod
    def _check_profile(footprint, plane, depth):
        return None


class TestBuildRoof:
    def test_rejection_reported_and_plane_committed(self):
        store = _store()
        loop = _loop(store)
        top = store.document.levels[1]

        result = build_roof(store, store, loop, top, depth=mm(5000))

        assert not result.ok
        assert result.roof is None
        assert result.failure.stage == "roof"
        assert result.failure.kind == "geometry"
        assert "working plane" in result.failure.message
        assert store.committed_scopes[-1] == "Build roof"
        assert len(store.document.planes) == 1
        assert store.document.roofs == []

    def test_working_plane_orientation(self):
        store = _store()
        result = build_roof(store, store, _loop(store), store.document.levels[1], depth=mm(5000))
        assert result.plane.origin == Point3D(x=0, y=0, z=0)
        assert result.plane.normal == Point3D(x=1, y=0, z=0)
        assert result.plane.up == Point3D(x=0, y=0, z=1)

    def test_extrusion_arguments(self):
        store = PermissiveStore(Document.seed(top_elevation_mm=3000))
        loop = _loop(store)
        top = store.document.levels[1]

        result = build_roof(store, store, loop, top, depth=mm(5000))

        assert result.ok
        roof = result.roof
        assert roof.level_id == top.id
        assert roof.roof_type_id == store.document.default_roof_type_id
        assert math.isclose(roof.start_offset, -W / 2)
        assert math.isclose(roof.depth, mm(5000))
        assert list(roof.footprint) == list(result.footprint)
        assert math.isclose(result.max_wall_length, W)

    def test_other_errors_propagate(self):
        class BrokenStore(InMemoryModelStore):
            def create_extrusion_roof(self, *args, **kwargs):
                raise ValueError("invalid roof type")

        store = BrokenStore(Document.seed(top_elevation_mm=3000))
        loop = _loop(store)
        with pytest.raises(ValueError, match="invalid roof type"):
            build_roof(store, store, loop, store.document.levels[1], depth=mm(5000))
        assert store.document.planes == []
