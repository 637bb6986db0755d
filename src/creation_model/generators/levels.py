"""Level resolution by display name."""

from __future__ import annotations

from creation_model.models.elements import Level
from creation_model.store.base import ModelStore


def resolve_levels(
    store: ModelStore, base_name: str, top_name: str
) -> tuple[Level | None, Level | None]:
    """Look up the base and top levels by exact display name.

    Returns ``(base, top)``; either may be None. Callers must check both
    before building anything.
    """
    found = store.find_levels_by_name({base_name, top_name})
    return found.get(base_name), found.get(top_name)
