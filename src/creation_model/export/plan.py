"""Plan and section rendering using matplotlib.

Two panels side by side, in metres:
- Plan (XY): walls as thick lines, doors as swing arcs, windows as
  double lines
- Section (YZ): levels, wall heights and the roof profile
"""

from __future__ import annotations

from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.pyplot as plt
from matplotlib.patches import Arc
import numpy as np

from creation_model.models.document import Document
from creation_model.models.elements import Category, FamilyInstance, FamilyType, Wall
from creation_model.units import UnitType, convert_from_internal

_WALL_COLOR = "#2E7D32"
_DOOR_COLOR = "#6D4C41"
_WINDOW_COLOR = "#1565C0"
_ROOF_COLOR = "#C62828"


def _m(value: float) -> float:
    return convert_from_internal(value, UnitType.METERS)


def render_document(
    document: Document,
    output_path: str | Path,
    title: str | None = None,
    dpi: int = 150,
) -> Path:
    """Render plan and section of a document to PNG.

    Args:
        document: The document to render.
        output_path: Output image path.
        title: Figure title (defaults to the document name).
        dpi: Image resolution.

    Returns:
        Path to the output image.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig, (plan_ax, section_ax) = plt.subplots(1, 2, figsize=(16, 7))
    fig.patch.set_facecolor("white")

    _draw_plan(plan_ax, document)
    _draw_section(section_ax, document)

    fig.suptitle(title or document.name, fontsize=16, fontweight="bold")
    plt.tight_layout()
    fig.savefig(str(output_path), dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return output_path


def _draw_plan(ax: plt.Axes, document: Document) -> None:
    ax.set_aspect("equal")
    ax.set_facecolor("#FAFAFA")
    ax.set_title("Plan")

    for wall in document.walls:
        start, end = wall.curve.start, wall.curve.end
        ax.plot(
            [_m(start.x), _m(end.x)], [_m(start.y), _m(end.y)],
            color=_WALL_COLOR, linewidth=6, solid_capstyle="projecting", zorder=5,
        )

    for instance in document.instances:
        wall = document.get_wall(instance.host_wall_id)
        family_type = document.get_family_type(instance.type_id)
        if wall is None or family_type is None:
            continue
        if family_type.category == Category.DOORS:
            _draw_door(ax, instance, family_type, wall)
        else:
            _draw_window(ax, instance, family_type, wall)

    ax.grid(True, alpha=0.2, linestyle="--")
    ax.set_xlabel("X (meters)", fontsize=10)
    ax.set_ylabel("Y (meters)", fontsize=10)


def _wall_frame(wall: Wall) -> tuple[np.ndarray, np.ndarray]:
    """Unit direction and left normal of a wall in plan (metres are irrelevant)."""
    d = np.array([wall.curve.end.x - wall.curve.start.x, wall.curve.end.y - wall.curve.start.y])
    d = d / np.linalg.norm(d)
    return d, np.array([-d[1], d[0]])


def _draw_door(ax: plt.Axes, door: FamilyInstance, family_type: FamilyType, wall: Wall) -> None:
    """Door leaf and swing arc, hinged at the left jamb, swinging inward."""
    direction, normal = _wall_frame(wall)
    center = np.array([_m(door.point.x), _m(door.point.y)])
    width = _m(family_type.width)
    hinge = center - direction * width / 2
    leaf_end = hinge + normal * width
    ax.plot([hinge[0], leaf_end[0]], [hinge[1], leaf_end[1]], color=_DOOR_COLOR, linewidth=1.5, zorder=6)
    start_angle = float(np.degrees(np.arctan2(direction[1], direction[0])))
    ax.add_patch(Arc(
        tuple(hinge), 2 * width, 2 * width,
        theta1=start_angle, theta2=start_angle + 90,
        color=_DOOR_COLOR, linewidth=1.0, zorder=6,
    ))


def _draw_window(ax: plt.Axes, window: FamilyInstance, family_type: FamilyType, wall: Wall) -> None:
    """Two parallel glass lines across the wall thickness."""
    direction, normal = _wall_frame(wall)
    center = np.array([_m(window.point.x), _m(window.point.y)])
    half = direction * _m(family_type.width) / 2
    for side in (-1, 1):
        shift = normal * side * _m(wall.width) / 4
        a, b = center - half + shift, center + half + shift
        ax.plot([a[0], b[0]], [a[1], b[1]], color=_WINDOW_COLOR, linewidth=2, zorder=7)


def _draw_section(ax: plt.Axes, document: Document) -> None:
    ax.set_aspect("equal")
    ax.set_facecolor("#FAFAFA")
    ax.set_title("Section (looking along X)")

    for level in document.levels:
        z = _m(level.elevation)
        ax.axhline(z, color="#9E9E9E", linestyle="--", linewidth=0.8)
        ax.text(0.01, z, f" {level.name}", transform=ax.get_yaxis_transform(),
                fontsize=8, va="bottom", color="#616161")

    for wall in document.walls:
        base = document.get_level(wall.base_level_id)
        z0 = _m(base.elevation if base else 0.0)
        ys = [_m(wall.curve.start.y), _m(wall.curve.end.y)]
        y_min, y_max = min(ys), max(ys)
        if y_max - y_min < 1e-9:
            ax.plot([y_min, y_min], [z0, z0 + _m(wall.height)], color=_WALL_COLOR, linewidth=4)
        else:
            ax.fill(
                [y_min, y_max, y_max, y_min], [z0, z0, z0 + _m(wall.height), z0 + _m(wall.height)],
                color=_WALL_COLOR, alpha=0.15,
            )

    for roof in document.roofs:
        points = [roof.footprint[0].start] + [seg.end for seg in roof.footprint]
        ax.plot([_m(p.y) for p in points], [_m(p.z) for p in points],
                color=_ROOF_COLOR, linewidth=3, zorder=8)

    ax.grid(True, alpha=0.2, linestyle="--")
    ax.set_xlabel("Y (meters)", fontsize=10)
    ax.set_ylabel("Z (meters)", fontsize=10)
