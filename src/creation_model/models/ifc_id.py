"""IFC GlobalId generation.

Elements created in the model store get 22-character compressed GUIDs, so the
same id shows up in the saved JSON document and in the exported IFC file.
"""

from __future__ import annotations

import uuid

import ifcopenshell.guid


def generate_ifc_id() -> str:
    """Generate a new IFC-compatible GlobalId (22 characters)."""
    return ifcopenshell.guid.compress(uuid.uuid4().hex)
