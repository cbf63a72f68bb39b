"""PED (linkage) pedigree format.

Six whitespace-separated columns per line:

    family  individual  father  mother  sex  phenotype

Father/mother "0" means unknown (founder). Sex: 1 = male, 2 = female, anything
else unknown. Phenotype: 1 = unaffected, 2 = affected, 0/-9/other unknown.
Blank lines and lines starting with '#' are ignored; extra columns are
ignored too.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pedigree_layout.model.pedigree import Pedigree, create_pedigree, create_person, create_relationship
from pedigree_layout.types import Phenotype, Sex

logger = logging.getLogger(__name__)

MISSING_PARENT = "0"
_FIELD_SPLIT = re.compile(r"\s+")

_SEX_CODES: dict[str, Sex] = {"1": Sex.Male, "2": Sex.Female}
_PHENOTYPE_CODES: dict[str, Phenotype] = {"1": Phenotype.Unaffected, "2": Phenotype.Affected}


class PedFormatError(ValueError):
    """Raised by strict parsing when any line is malformed."""


@dataclass
class PedRecord:
    family_id: str
    individual_id: str
    paternal_id: str
    maternal_id: str
    sex: Sex
    phenotype: Phenotype
    raw_sex: str
    raw_phenotype: str


@dataclass
class PedParseError:
    line: int
    message: str
    raw_line: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


@dataclass
class PedParseResult:
    records: list[PedRecord] = field(default_factory=list)
    errors: list[PedParseError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise PedFormatError listing every malformed line, if there are any."""
        if self.errors:
            details = "\n".join(str(e) for e in self.errors)
            raise PedFormatError(f"{len(self.errors)} malformed PED line(s):\n{details}")


class PedParser:
    """Parse PED text into records and convert records into a Pedigree."""

    def parse(self, src: str) -> PedParseResult:
        result = PedParseResult()
        for index, line in enumerate(src.splitlines()):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            try:
                result.records.append(self._parse_line(stripped))
            except ValueError as e:
                result.errors.append(PedParseError(line=index + 1, message=str(e), raw_line=line))
        result.warnings.extend(self._validate(result.records))
        for warning in result.warnings:
            logger.warning("PED: %s", warning)
        return result

    def _parse_line(self, line: str) -> PedRecord:
        fields = _FIELD_SPLIT.split(line)
        if len(fields) < 6:
            raise ValueError(f"expected at least 6 columns, got {len(fields)}")
        family_id, individual_id, paternal_id, maternal_id, raw_sex, raw_phenotype = fields[:6]
        if family_id.startswith("#") or individual_id.startswith("#"):
            raise ValueError("IDs cannot start with '#'")
        return PedRecord(
            family_id=family_id,
            individual_id=individual_id,
            paternal_id=paternal_id,
            maternal_id=maternal_id,
            sex=_SEX_CODES.get(raw_sex, Sex.Unknown),
            phenotype=_PHENOTYPE_CODES.get(raw_phenotype, Phenotype.Unknown),
            raw_sex=raw_sex,
            raw_phenotype=raw_phenotype,
        )

    def _validate(self, records: list[PedRecord]) -> list[str]:
        warnings: list[str] = []
        seen: set[tuple[str, str]] = set()
        ids: set[str] = set()
        for record in records:
            key = (record.family_id, record.individual_id)
            if key in seen:
                warnings.append(f"Duplicate individual ID: {record.individual_id} in family {record.family_id}")
            seen.add(key)
            ids.add(record.individual_id)
        for record in records:
            if record.paternal_id != MISSING_PARENT and record.paternal_id not in ids:
                warnings.append(f"Father {record.paternal_id} of {record.individual_id} not found in pedigree")
            if record.maternal_id != MISSING_PARENT and record.maternal_id not in ids:
                warnings.append(f"Mother {record.maternal_id} of {record.individual_id} not found in pedigree")
        return warnings

    def records_to_pedigree(self, records: list[PedRecord]) -> Pedigree:
        """Build persons, parent links, and one relationship per parent pair."""
        if not records:
            return create_pedigree("unknown")

        pedigree = create_pedigree(records[0].family_id)
        kept: list[PedRecord] = []  # first record per id; later duplicates are ignored entirely
        for record in records:
            if record.individual_id in pedigree.persons:
                continue
            person = create_person(record.individual_id, record.family_id, record.sex)
            person.phenotypes = [record.phenotype]
            pedigree.persons[person.id] = person
            kept.append(record)

        for record in kept:
            person = pedigree.persons[record.individual_id]
            if record.paternal_id != MISSING_PARENT:
                person.father_id = record.paternal_id
                father = pedigree.get_person(record.paternal_id)
                if father is not None:
                    father.add_child(person.id)
            if record.maternal_id != MISSING_PARENT:
                person.mother_id = record.maternal_id
                mother = pedigree.get_person(record.maternal_id)
                if mother is not None:
                    mother.add_child(person.id)

        couples: dict[tuple[str, str], list[str]] = {}
        for person in pedigree.persons.values():
            if person.father_id and person.mother_id:
                couples.setdefault((person.father_id, person.mother_id), []).append(person.id)

        for (father_id, mother_id), children in couples.items():
            if pedigree.relationship_between(father_id, mother_id) is not None:
                continue
            rel = create_relationship(father_id, mother_id, relationship_id=f"{father_id}+{mother_id}")
            rel.children_ids = children
            pedigree.relationships[rel.id] = rel
            for a, b in ((father_id, mother_id), (mother_id, father_id)):
                partner = pedigree.get_person(a)
                if partner is not None:
                    partner.add_spouse(b)

        return pedigree

    def parse_to_pedigree(self, src: str) -> tuple[Pedigree, PedParseResult]:
        result = self.parse(src)
        return self.records_to_pedigree(result.records), result


def parse_ped(src: str, strict: bool = False) -> tuple[Pedigree, PedParseResult]:
    """Parse PED text into a Pedigree.

    Args:
        src: PED file contents.
        strict: Raise instead of skipping malformed lines.

    Returns:
        The pedigree and the parse result (records, line errors, warnings).

    Raises:
        PedFormatError: In strict mode, if any line is malformed.
    """
    pedigree, result = PedParser().parse_to_pedigree(src)
    if strict:
        result.raise_for_errors()
    return pedigree, result
