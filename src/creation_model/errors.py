"""Errors raised by the generators and the model store."""

from __future__ import annotations

from dataclasses import dataclass


class CreationModelError(Exception):
    """Base class for all generator and store errors."""


class PreconditionError(CreationModelError):
    """A required input is missing; nothing was mutated."""


class MissingLevelError(PreconditionError):
    def __init__(self, names: list[str]):
        self.names = list(names)
        super().__init__(f"Level(s) not found: {', '.join(repr(n) for n in self.names)}")


class MissingFamilyTypeError(PreconditionError):
    def __init__(self, category: str, type_name: str, family_name: str):
        self.category = category
        self.type_name = type_name
        self.family_name = family_name
        super().__init__(
            f"No {category} type '{type_name}' in family '{family_name}'"
        )


class GeometryRejectedError(CreationModelError):
    """The geometry engine refused to build an element from the given profile."""


class TransactionError(CreationModelError):
    """Mutation scope misuse: nested scope or mutation outside a scope."""


@dataclass
class Failure:
    """A reported, non-fatal failure of one generation stage."""

    stage: str  # "levels" | "catalog" | "roof"
    kind: str  # "precondition" | "geometry"
    message: str

    def to_dict(self) -> dict:
        return {"stage": self.stage, "kind": self.kind, "message": self.message}
