"""Shared type definitions for pedigree-layout.

Enums used across the model, parsers, layout, and renderers.
"""

from __future__ import annotations

from enum import Enum, auto


class Sex(Enum):
    Male = auto()  # square
    Female = auto()  # circle
    Unknown = auto()  # diamond

    @classmethod
    def default(cls) -> Sex:
        return cls.Unknown


class Phenotype(Enum):
    Unknown = auto()
    Unaffected = auto()
    Affected = auto()
    Carrier = auto()

    @classmethod
    def default(cls) -> Phenotype:
        return cls.Unknown


class RelationshipType(Enum):
    Spouse = auto()  # single line
    Consanguineous = auto()  # double line


class PartnershipStatus(Enum):
    Married = auto()
    Separated = auto()
    Divorced = auto()
    Unmarried = auto()  # living together, not married


class ChildlessReason(Enum):
    ByChoice = auto()
    Infertility = auto()


class TwinType(Enum):
    Monozygotic = auto()  # identical, connectors meet at one point
    Dizygotic = auto()  # fraternal
