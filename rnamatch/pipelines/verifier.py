#!/usr/bin/env python3
"""
Verification of found proteins against the genome annotation.

Each protein of a genomic record is compared with the annotated proteins
overlapping the record's location. The closest one by k-mer distance is
reported together with the kind of discrepancy between the two.
"""
import logging
from typing import Dict, Iterator, List, Optional, Tuple

import Levenshtein

from rnamatch.models.genome import Genome
from rnamatch.models.location import Location
from rnamatch.models.records import (
    ErrorKind, GenomicRecord, VerificationCounters, VerificationRecord
)
from rnamatch.utils.kmers import ProteinKmers, DEFAULT_KMER_SIZE
from rnamatch.utils.sequence import calculate_md5

logger = logging.getLogger("rnamatch.pipelines.verifier")

NO_MATCH_NOTE = "No match found."


def edit_counts(source: str, target: str) -> Tuple[int, int, int]:
    """Insertions, deletions and substitutions turning source into target"""
    inserts = deletes = substitutions = 0
    for op, _, _ in Levenshtein.editops(source, target):
        if op == 'insert':
            inserts += 1
        elif op == 'delete':
            deletes += 1
        else:
            substitutions += 1
    return inserts, deletes, substitutions


def classify(protein: str, feature_protein: str) -> Tuple[ErrorKind, str]:
    """Describe how a found protein differs from an annotated one

    The leading residue is ignored when testing for a pure length change,
    since an alternative start codon still translates to M.

    Returns:
        Tuple of (error kind, note)
    """
    if protein == feature_protein:
        return ErrorKind.EXACT, ""
    inserts, deletes, substitutions = edit_counts(feature_protein, protein)
    kind = ErrorKind.CHANGED
    note = (f"Found sequence has {inserts} insertions, {deletes} deletions, "
            f"and {substitutions} substitutions.")
    prot_codons = protein[1:]
    feat_codons = feature_protein[1:]
    if len(protein) > len(feature_protein):
        if prot_codons.endswith(feat_codons):
            kind = ErrorKind.TOO_LONG
            note = f"Found sequence has {len(protein) - len(feature_protein)} extra codons."
    elif feat_codons.endswith(prot_codons):
        kind = ErrorKind.TOO_SHORT
        note = f"Found sequence has {len(feature_protein) - len(protein)} fewer codons."
    return kind, note


class ProteinVerifier:
    """Compares the proteins of genomic records with a genome's annotation"""

    def __init__(self, genome: Genome, kmer_size: int = DEFAULT_KMER_SIZE):
        self.genome = genome
        self.kmer_size = kmer_size
        self.counters = VerificationCounters()
        self._feature_kmers: Dict[str, ProteinKmers] = {}

    def _region_kmers(self, loc: Location) -> List[Tuple[str, ProteinKmers]]:
        found = []
        for feature in self.genome.features_in_region(loc):
            if not feature.protein_translation:
                continue
            kmers = self._feature_kmers.get(feature.id)
            if kmers is None:
                kmers = ProteinKmers(feature.protein_translation, self.kmer_size)
                self._feature_kmers[feature.id] = kmers
            found.append((feature.id, kmers))
        return found

    def verify_record(self, record: GenomicRecord) -> Iterator[VerificationRecord]:
        """Verify every protein of one record"""
        self.counters.records += 1
        candidates = self._region_kmers(record.location)
        for protein in record.proteins:
            result = self.verify_protein(record, protein, candidates)
            self.counters.proteins += 1
            self.counters.kinds[result.error_kind] += 1
            self.counters.features[result.best_feature_id] += 1
            yield result

    def verify_protein(self, record: GenomicRecord, protein: str,
                       candidates: List[Tuple[str, ProteinKmers]]) -> VerificationRecord:
        kmers = ProteinKmers(protein, self.kmer_size)
        distance = 1.0
        best: Optional[Tuple[str, ProteinKmers]] = None
        for feature_id, feature_kmers in candidates:
            new_distance = kmers.distance(feature_kmers)
            if new_distance < distance:
                distance = new_distance
                best = (feature_id, feature_kmers)

        result = VerificationRecord(
            sample_id=record.sample_id,
            protein_id=calculate_md5(protein),
            fragment_id=record.fragment_id,
            genome_location=record.location,
            best_feature_id="",
            distance=distance,
            error_kind=ErrorKind.NOT_FOUND,
            note=NO_MATCH_NOTE
        )
        if best is None:
            return result

        feature_id, feature_kmers = best
        result.best_feature_id = feature_id
        if distance == 0.0:
            result.error_kind = ErrorKind.EXACT
            result.note = ""
            return result
        result.error_kind, result.note = classify(kmers.sequence, feature_kmers.sequence)
        feature = self.genome.get_feature(feature_id)
        result.orf = self.genome.extend_to_orf(feature.location)
        return result

    def verify(self, records) -> Iterator[VerificationRecord]:
        for record in records:
            yield from self.verify_record(record)
