"""creation-model CLI.

Usage:
    python -m creation_model <command> <document.json> [options]

``init`` writes a starter document, ``generate`` builds the house into it.
Every command prints JSON on stdout; logs go to stderr.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from creation_model.config import GenerationConfig
from creation_model.generators.house import generate_house
from creation_model.models.document import Document
from creation_model.models.elements import Category
from creation_model.store.memory import InMemoryModelStore
from creation_model.units import UnitType, convert_from_internal

app = typer.Typer(
    name="creation_model",
    help="Generate a walled, windowed, gable-roofed house into a document.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_document(path: Path) -> Document:
    if not path.exists():
        _output({"ok": False, "error": f"Document not found: {path}"})
        raise typer.Exit(1)
    return Document.load(path)


def _load_config(path: Optional[Path]) -> GenerationConfig:
    if path is None:
        return GenerationConfig()
    if not path.exists():
        _output({"ok": False, "error": f"Config not found: {path}"})
        raise typer.Exit(1)
    return GenerationConfig.load(path)


def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _mm(value: float) -> float:
    return round(convert_from_internal(value, UnitType.MILLIMETERS), 1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def init(
    document: Path = typer.Argument(..., help="Path of the document to create"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Generation config JSON"),
    top_elevation_mm: float = typer.Option(3000.0, "--top-elevation-mm", help="Elevation of the top level"),
    name: str = typer.Option("Untitled Project", "--name", "-n", help="Project name"),
):
    """Write a starter document: two levels, door/window catalog, roof type."""
    cfg = _load_config(config)
    doc = Document.seed(
        name=name,
        base_level_name=cfg.base_level_name,
        top_level_name=cfg.top_level_name,
        top_elevation_mm=top_elevation_mm,
        door=(cfg.door.type_name, cfg.door.family_name),
        window=(cfg.window.type_name, cfg.window.family_name),
    )
    path = doc.save(document)
    _output({"ok": True, "document": str(path), "levels": [lv.name for lv in doc.levels]})


@app.command()
def generate(
    document: Path = typer.Argument(..., help="Document to build into"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Generation config JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save to this path instead"),
    ifc: Optional[Path] = typer.Option(None, "--ifc", help="Also export the result to IFC"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Build walls, door, windows and roof into a document."""
    _setup_logging(verbose)
    cfg = _load_config(config)
    store = InMemoryModelStore(_load_document(document))

    report = generate_house(store, store, cfg)
    result = report.to_dict()

    if report.precondition_failed:
        _output(result)
        raise typer.Exit(1)

    result["saved"] = str(store.document.save(output or document))
    if ifc is not None:
        from creation_model.export.ifc import IFCExporter

        result["ifc"] = str(IFCExporter(store.document).export(ifc))
    _output(result)


@app.command("list")
def list_cmd(
    document: Path = typer.Argument(..., help="Document to inspect"),
    what: str = typer.Argument(..., help="What to list: levels, walls, openings, roofs"),
):
    """List document elements (lengths in millimeters)."""
    doc = _load_document(document)
    result: dict = {"ok": True}

    if what == "levels":
        result["levels"] = [
            {"name": lv.name, "elevation_mm": _mm(lv.elevation)} for lv in doc.levels
        ]
    elif what == "walls":
        result["walls"] = [
            {
                "id": w.id,
                "start_mm": [_mm(v) for v in w.curve.start.as_tuple()],
                "end_mm": [_mm(v) for v in w.curve.end.as_tuple()],
                "length_mm": _mm(w.length),
                "height_mm": _mm(w.height),
                "openings": len(doc.instances_on(w.id)),
            }
            for w in doc.walls
        ]
    elif what == "openings":
        openings = []
        for category in Category:
            for inst in doc.instances_of(category):
                family_type = doc.get_family_type(inst.type_id)
                openings.append({
                    "id": inst.id,
                    "category": category.value,
                    "type": family_type.label if family_type else None,
                    "wall": inst.host_wall_id,
                    "point_mm": [_mm(v) for v in inst.point.as_tuple()],
                })
        result["openings"] = openings
    elif what == "roofs":
        result["roofs"] = [
            {"id": r.id, "segments": len(r.footprint), "depth_mm": _mm(r.depth)}
            for r in doc.roofs
        ]
    else:
        _output({"ok": False, "error": f"Unknown list target: {what}. Use: levels, walls, openings, roofs"})
        raise typer.Exit(1)

    _output(result)


@app.command()
def render(
    document: Path = typer.Argument(..., help="Document to draw"),
    output: Path = typer.Argument(..., help="PNG path"),
):
    """Render plan and section to PNG."""
    from creation_model.export.plan import render_document

    doc = _load_document(document)
    path = render_document(doc, output)
    _output({"ok": True, "rendered": str(path)})


@app.command("export")
def export_cmd(
    document: Path = typer.Argument(..., help="Document to export"),
    output: Path = typer.Argument(..., help="IFC path"),
):
    """Export a document to IFC."""
    from creation_model.export.ifc import IFCExporter

    doc = _load_document(document)
    path = IFCExporter(doc).export(output)
    _output({"ok": True, "exported": str(path), "format": "ifc"})


@app.command()
def version() -> None:
    """Show version."""
    from creation_model import __version__

    typer.echo(f"creation-model v{__version__}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
