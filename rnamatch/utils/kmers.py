#!/usr/bin/env python3
"""
Protein k-mer sets and the distance between them
"""
from typing import FrozenSet

DEFAULT_KMER_SIZE = 8


class ProteinKmers:
    """The set of distinct k-mers in a protein sequence"""

    def __init__(self, sequence: str, k: int = DEFAULT_KMER_SIZE):
        if k < 1:
            raise ValueError(f"Invalid k-mer size {k}")
        self.sequence = sequence.upper()
        self.k = k
        self.kmers: FrozenSet[str] = frozenset(
            self.sequence[i:i + k] for i in range(len(self.sequence) - k + 1)
        )

    def __len__(self) -> int:
        return len(self.kmers)

    def similarity(self, other: 'ProteinKmers') -> int:
        """Number of k-mers in common"""
        return len(self.kmers & other.kmers)

    def distance(self, other: 'ProteinKmers') -> float:
        """Jaccard distance between the k-mer sets

        Returns 1.0 when neither protein is long enough to have a k-mer.
        """
        common = self.similarity(other)
        union = len(self.kmers) + len(other.kmers) - common
        if union == 0:
            return 1.0
        return 1.0 - common / union

    def __repr__(self) -> str:
        return f"ProteinKmers(k={self.k}, kmers={len(self.kmers)})"
