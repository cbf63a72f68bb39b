"""Family graph model: editable records and the read-only layout snapshot."""

from pedigree_layout.model.graph import PedigreeGraph, Union
from pedigree_layout.model.pedigree import (
    Pedigree,
    Person,
    PersonStatus,
    Relationship,
    create_pedigree,
    create_person,
    create_relationship,
)

__all__ = [
    "Pedigree",
    "PedigreeGraph",
    "Person",
    "PersonStatus",
    "Relationship",
    "Union",
    "create_pedigree",
    "create_person",
    "create_relationship",
]
