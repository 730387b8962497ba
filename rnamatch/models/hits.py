#!/usr/bin/env python3
"""
Alignment hit models.

AlignmentHit is the record returned by the external aligner. ProteinHit is a
profile hit against an RNA sequence, normalized onto the forward strand of
the working sequence.
"""
from dataclasses import dataclass

from .location import Location


@dataclass(frozen=True)
class AlignmentHit:
    """One scored hit from the aligner (read-only)"""
    query_id: str
    query_len: int
    query_loc: Location
    subject_id: str
    subject_len: int
    subject_loc: Location
    subject_def: str
    evalue: float
    percent_identity: float
    bit_score: float
    identities: int = 0
    align_len: int = 0

    @property
    def query_bit_score(self) -> float:
        """Bit score scaled by query length"""
        if self.query_len <= 0:
            return 0.0
        return self.bit_score / self.query_len

    @property
    def query_identity(self) -> float:
        """Fraction of the query matched identically"""
        if self.query_len <= 0:
            return 0.0
        return self.identities / self.query_len

    @property
    def query_coverage(self) -> float:
        """Percent of the query covered by the alignment"""
        if self.query_len <= 0:
            return 0.0
        return self.query_loc.length * 100.0 / self.query_len

    @property
    def subject_coverage(self) -> float:
        """Percent of the subject covered by the alignment"""
        if self.subject_len <= 0:
            return 0.0
        return self.subject_loc.length * 100.0 / self.subject_len

    @property
    def length(self) -> int:
        """Alignment length, measured on the subject when the aligner omits it"""
        return self.align_len or self.subject_loc.length


@dataclass(frozen=True)
class ProteinHit:
    """A profile hit in the forward frame of its RNA sequence"""
    profile_id: str
    loc: Location
    origin_length: int

    @classmethod
    def from_alignment(cls, hit: AlignmentHit) -> 'ProteinHit':
        """Convert a profile-vs-RNA hit; the RNA is the subject"""
        loc = hit.subject_loc
        if loc.strand == '-':
            loc = loc.converse(hit.subject_len)
        return cls(hit.query_id, loc, hit.subject_len)

    def with_location(self, loc: Location) -> 'ProteinHit':
        return ProteinHit(self.profile_id, loc, self.origin_length)

    def __str__(self) -> str:
        return f"{self.profile_id}->{self.loc}"
