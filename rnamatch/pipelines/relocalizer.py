#!/usr/bin/env python3
"""
Relocalization of RNA fragments onto the reference genome
"""
import logging
from typing import Dict, List, Optional, Tuple

from rnamatch.blast.aligner import Aligner, BlastParameters
from rnamatch.models.genome import Genome
from rnamatch.models.hits import AlignmentHit
from rnamatch.models.records import Fragment, GenomicRecord, MatchCounters, Protein
from rnamatch.reports.hit_log import GenomeHitLog

logger = logging.getLogger("rnamatch.pipelines.relocalizer")


def longest_hits(hits: List[AlignmentHit]) -> Dict[str, AlignmentHit]:
    """The longest hit for each query; the earlier hit wins a tie"""
    best: Dict[str, AlignmentHit] = {}
    for hit in hits:
        current = best.get(hit.query_id)
        if current is None or hit.length > current.length:
            best[hit.query_id] = hit
    return best


class GenomeRelocalizer:
    """Anchors batches of RNA fragments on genome DNA

    Args:
        aligner: Aligner used to search the genome database
        genome: Genome whose contigs were loaded into ``database``
        database: Handle from ``aligner.make_database`` for the contigs
        params: Identity and coverage limits for fragment hits
        extend: Flank added on each side of the winning hit
        hit_log: Optional log receiving each winning hit
    """

    def __init__(self, aligner: Aligner, genome: Genome, database: str,
                 params: BlastParameters, extend: int = 50,
                 hit_log: Optional[GenomeHitLog] = None):
        self.aligner = aligner
        self.genome = genome
        self.database = database
        self.params = params
        self.extend = extend
        self.hit_log = hit_log

    def relocalize(self, batch: List[Tuple[Fragment, List[Protein]]], sample_id: str,
                   counters: Optional[MatchCounters] = None) -> List[GenomicRecord]:
        """Align a batch of fragments and build a genomic record for each anchored one

        Fragments without a hit are dropped and counted as unanchored.
        Records come out in batch order.
        """
        if not batch:
            return []
        queries = {fragment.fragment_id: fragment.dna for fragment, _ in batch}
        best = longest_hits(self.aligner.search(queries, self.database, self.params))

        records = []
        for fragment, proteins in batch:
            hit = best.get(fragment.fragment_id)
            if hit is None:
                logger.debug(f"No genome hit for fragment {fragment.fragment_id}")
                if counters is not None:
                    counters.unanchored += 1
                continue
            contig_len = self.genome.contig_length(hit.subject_loc.sequence_id)
            loc = hit.subject_loc.expand(self.extend, self.extend, contig_len)
            records.append(GenomicRecord(
                sample_id=sample_id,
                fragment_id=fragment.fragment_id,
                location=loc,
                dna=self.genome.get_dna(loc),
                proteins=[p.sequence for p in proteins],
                protein_details=list(proteins)
            ))
            if self.hit_log is not None:
                self.hit_log.add(sample_id, hit)
        if counters is not None:
            counters.records += len(records)
            counters.record_proteins += sum(len(r.proteins) for r in records)
        logger.info(f"Batch of {len(batch)} fragments produced {len(records)} genome records")
        return records
