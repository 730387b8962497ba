#!/usr/bin/env python3
"""
Records produced by the match and verification pipelines
"""
from collections import Counter
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Any, Optional

from rnamatch.exceptions import DataError
from .location import Location

GTI_COLUMNS = 5


@dataclass(frozen=True)
class Protein:
    """A protein translated from an extended profile hit"""
    protein_id: str
    rna_location: Location
    sequence: str


@dataclass
class CompositeLocus:
    """Merged span of nearby protein hits and the proteins found in it"""
    location: Location
    proteins: List[Protein] = field(default_factory=list)


@dataclass(frozen=True)
class Fragment:
    """Slice of an RNA sequence covering one composite locus"""
    fragment_id: str
    loc: Location
    dna: str


@dataclass
class GenomicRecord:
    """A fragment anchored on the genome, the unit written to GTI files"""
    sample_id: str
    fragment_id: str
    location: Location
    dna: str
    proteins: List[str] = field(default_factory=list)
    # Full protein records, only available before serialization
    protein_details: List[Protein] = field(default_factory=list, compare=False, repr=False)

    def to_line(self) -> str:
        """Serialize as one tab-separated GTI line (no newline)"""
        return '\t'.join([self.sample_id, self.fragment_id, str(self.location),
                          self.dna, ','.join(self.proteins)])

    @classmethod
    def from_line(cls, line: str) -> 'GenomicRecord':
        """Parse a GTI line

        Raises:
            DataError: If the line does not have five columns or the location is invalid
        """
        parts = line.rstrip('\r\n').split('\t')
        if len(parts) != GTI_COLUMNS:
            raise DataError(f"GTI line has {len(parts)} columns, expected {GTI_COLUMNS}",
                            {'line': line[:80]})
        sample_id, fragment_id, loc_string, dna, prot_string = parts
        try:
            location = Location.parse(loc_string)
        except ValueError as e:
            raise DataError(str(e), {'fragment_id': fragment_id}) from e
        proteins = [p for p in prot_string.split(',') if p]
        return cls(sample_id, fragment_id, location, dna, proteins)


class ErrorKind(Enum):
    """How a found protein differs from the closest annotated one"""
    EXACT = "exact"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    CHANGED = "changed"
    NOT_FOUND = "not_found"


@dataclass
class VerificationRecord:
    """Comparison of one found protein with the genome annotation"""
    sample_id: str
    protein_id: str
    fragment_id: str
    genome_location: Location
    best_feature_id: str
    distance: float
    error_kind: ErrorKind
    note: str = ""
    orf: Optional[Location] = None

    def to_row(self) -> List[str]:
        return [self.sample_id, self.protein_id, self.fragment_id, str(self.genome_location),
                self.best_feature_id, f"{self.distance:4.4f}", self.note,
                str(self.orf) if self.orf else ""]


@dataclass
class MatchCounters:
    """Per-sample counters for a match run

    One instance belongs to one sample's run, so samples never share state.
    """
    protein_num: int = 0
    batch_num: int = 0
    sequences: int = 0
    profile_hits: int = 0
    extension_failures: int = 0
    redundant_hits: int = 0
    internal_stops: int = 0
    proteins: int = 0
    fragments: int = 0
    unanchored: int = 0
    records: int = 0
    record_proteins: int = 0

    def next_protein_id(self, profile_id: str) -> str:
        self.protein_num += 1
        return f"{profile_id}.{self.protein_num:04d}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VerificationCounters:
    """Totals for one verified sample"""
    records: int = 0
    proteins: int = 0
    kinds: Counter = field(default_factory=Counter)
    features: Counter = field(default_factory=Counter)

    def count(self, kind: ErrorKind) -> int:
        return self.kinds.get(kind, 0)
