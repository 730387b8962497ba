#!/usr/bin/env python3
"""
Sequence locations.

A Location is a span of a named sequence on one strand, 1-based and
inclusive at both ends. Locations are immutable values: every operation
that changes the span returns a new Location, so they are safe to use as
dictionary keys.

The string form is ``<sequence_id>_<begin><strand><length>``, where begin is
the left end on the plus strand and the right end on the minus strand.
"""
import re
import sys
from dataclasses import dataclass
from typing import Tuple

from rnamatch.utils.sequence import reverse_complement

_LOCATION_PATTERN = re.compile(r'^(.+)_(\d+)([+-])(\d+)$')

# Distance reported between locations on different sequences
FAR_AWAY = sys.maxsize


@dataclass(frozen=True)
class Location:
    """A stranded span of a sequence"""
    sequence_id: str
    left: int
    right: int
    strand: str = '+'

    def __post_init__(self):
        if self.strand not in ('+', '-'):
            raise ValueError(f"Invalid strand {self.strand!r} for location on {self.sequence_id}")
        if self.left > self.right:
            raise ValueError(f"Invalid location {self.sequence_id}:{self.left}-{self.right} (left > right)")

    @classmethod
    def create(cls, sequence_id: str, strand: str, begin: int, end: int) -> 'Location':
        """Create a location from strand-relative begin and end points"""
        return cls(sequence_id, min(begin, end), max(begin, end), strand)

    @classmethod
    def parse(cls, descriptor: str) -> 'Location':
        """Parse the string form produced by ``str(location)``

        Raises:
            ValueError: If the descriptor is malformed
        """
        match = _LOCATION_PATTERN.match(descriptor.strip())
        if not match:
            raise ValueError(f"Invalid location string: {descriptor!r}")
        sequence_id, begin, strand, length = match.groups()
        begin, length = int(begin), int(length)
        if length < 1:
            raise ValueError(f"Invalid location length in {descriptor!r}")
        if strand == '+':
            return cls(sequence_id, begin, begin + length - 1, strand)
        return cls(sequence_id, begin - length + 1, begin, strand)

    @property
    def length(self) -> int:
        return self.right - self.left + 1

    @property
    def begin(self) -> int:
        """First base in the direction of the strand"""
        return self.left if self.strand == '+' else self.right

    @property
    def end(self) -> int:
        """Last base in the direction of the strand"""
        return self.right if self.strand == '+' else self.left

    @property
    def span(self) -> Tuple[int, int]:
        return (self.left, self.right)

    def contains(self, other: 'Location') -> bool:
        """True if the other location lies entirely inside this one (any strand)"""
        return (self.sequence_id == other.sequence_id and
                self.left <= other.left and other.right <= self.right)

    def contains_position(self, position: int) -> bool:
        return self.left <= position <= self.right

    def overlaps(self, other: 'Location') -> bool:
        return (self.sequence_id == other.sequence_id and
                self.left <= other.right and other.left <= self.right)

    def distance(self, other: 'Location') -> int:
        """Number of bases between the two spans

        Overlapping and adjacent spans are at distance 0. Spans on different
        sequences are at distance FAR_AWAY.
        """
        if self.sequence_id != other.sequence_id:
            return FAR_AWAY
        gap = max(other.left - self.right, self.left - other.right) - 1
        return max(gap, 0)

    def merge(self, other: 'Location') -> 'Location':
        """Union of the two spans, keeping this location's strand"""
        if self.sequence_id != other.sequence_id:
            raise ValueError(f"Cannot merge locations on {self.sequence_id} and {other.sequence_id}")
        return Location(self.sequence_id, min(self.left, other.left),
                        max(self.right, other.right), self.strand)

    def expand(self, left_pad: int, right_pad: int, seq_len: int) -> 'Location':
        """Widen the span on each side, clipped to the sequence bounds"""
        left = max(1, self.left - left_pad)
        right = min(seq_len, self.right + right_pad)
        return Location(self.sequence_id, min(left, right), max(left, right), self.strand)

    def converse(self, seq_len: int) -> 'Location':
        """The same bases viewed from the reverse complement of the sequence"""
        strand = '-' if self.strand == '+' else '+'
        return Location(self.sequence_id, seq_len - self.right + 1, seq_len - self.left + 1, strand)

    def get_dna(self, sequence_text: str) -> str:
        """Extract this location's nucleotides from the sequence text"""
        dna = sequence_text[self.left - 1:self.right]
        if self.strand == '-':
            dna = reverse_complement(dna)
        return dna

    def __str__(self) -> str:
        return f"{self.sequence_id}_{self.begin}{self.strand}{self.length}"
