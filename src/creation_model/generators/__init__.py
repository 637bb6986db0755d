"""Building generation steps.

Functions that drive a model store to author geometry:
- Level resolution: named levels -> handles
- Wall loop: rectangular footprint -> four walls between two levels
- Openings: door and windows anchored on wall centerlines
- Roof: gable profile from opposite walls -> extrusion roof
- House: the whole sequence with failure reporting
"""

from creation_model.generators.levels import resolve_levels
from creation_model.generators.walls import WallLoop, build_wall_loop
from creation_model.generators.openings import find_family_type, place_door, place_window
from creation_model.generators.roof import RoofResult, build_gable_footprint, build_roof
from creation_model.generators.house import GenerationReport, generate_house

__all__ = [
    "resolve_levels",
    "WallLoop",
    "build_wall_loop",
    "find_family_type",
    "place_door",
    "place_window",
    "RoofResult",
    "build_gable_footprint",
    "build_roof",
    "GenerationReport",
    "generate_house",
]
