"""Write a Pedigree back out as PED text."""

from __future__ import annotations

from datetime import datetime

from pedigree_layout.layout.generations import assign_generations
from pedigree_layout.model.graph import PedigreeGraph
from pedigree_layout.model.pedigree import Pedigree, Person
from pedigree_layout.parsers.ped import MISSING_PARENT
from pedigree_layout.types import Phenotype, Sex

_SEX_OUT: dict[Sex, str] = {Sex.Male: "1", Sex.Female: "2"}
# Carrier has no PED code of its own; it is written as unaffected
_PHENOTYPE_OUT: dict[Phenotype, str] = {
    Phenotype.Unaffected: "1",
    Phenotype.Carrier: "1",
    Phenotype.Affected: "2",
}


def _format_line(person: Person, labels: dict[str, str]) -> str:
    def ref(person_id: str | None) -> str:
        if person_id is None:
            return MISSING_PARENT
        return labels.get(person_id, person_id)

    phenotype = person.phenotypes[0] if person.phenotypes else Phenotype.Unknown
    fields = [
        person.family_id,
        labels.get(person.id, person.id),
        ref(person.father_id),
        ref(person.mother_id),
        _SEX_OUT.get(person.sex, "0"),
        _PHENOTYPE_OUT.get(phenotype, "-9"),
    ]
    return "\t".join(fields)


def write_ped(pedigree: Pedigree, header: bool = True, generated_at: datetime | None = None) -> str:
    """Render a pedigree as PED text, founders first, then by generation and id.

    Person labels, when set, replace ids in every column.
    """
    lines: list[str] = []
    if header:
        stamp = (generated_at or datetime.now()).isoformat(timespec="seconds")
        lines.append(f"# Pedigree: {pedigree.family_id}")
        lines.append(f"# Generated: {stamp}")
        lines.append("# Format: FamilyID IndividualID PaternalID MaternalID Sex Phenotype")
        lines.append("")

    labels = {pid: person.label for pid, person in pedigree.persons.items() if person.label}
    generations = assign_generations(PedigreeGraph.from_pedigree(pedigree))
    ordered = sorted(pedigree.persons.values(), key=lambda p: (generations.get(p.id, 0), p.id))
    lines.extend(_format_line(person, labels) for person in ordered)
    return "\n".join(lines) + "\n"
