#!/usr/bin/env python3
"""
Hit consolidation for one RNA sequence.

Profile hits on a sequence are nearly always on one strand. A majority vote
picks the working strand; hits on the other strand are dropped, and when
the minus strand wins the sequence is reverse-complemented so that every
kept hit is on the plus strand of the working text.
"""
import logging
from typing import List, Tuple

from rnamatch.models.hits import AlignmentHit, ProteinHit
from rnamatch.utils.sequence import reverse_complement

logger = logging.getLogger("rnamatch.pipelines.consolidator")


def strand_vote(hits: List[AlignmentHit]) -> int:
    """+1 per plus-strand hit, -1 per minus-strand hit"""
    return sum(1 if hit.subject_loc.strand == '+' else -1 for hit in hits)


def consolidate_hits(hits: List[AlignmentHit], sequence_text: str) -> Tuple[List[ProteinHit], str]:
    """Keep the hits on the dominant strand, converted to the working frame

    Args:
        hits: Profile hits whose subject is the sequence
        sequence_text: Nucleotides of the sequence

    Returns:
        Tuple of (forward-frame protein hits, lowercase working text). A tied
        vote keeps the plus strand.
    """
    text = sequence_text.lower()
    if strand_vote(hits) >= 0:
        kept = [ProteinHit.from_alignment(hit) for hit in hits if hit.subject_loc.strand == '+']
        logger.debug(f"{len(kept)} forward hits kept of {len(hits)}")
    else:
        text = reverse_complement(text)
        kept = [ProteinHit.from_alignment(hit) for hit in hits if hit.subject_loc.strand == '-']
        logger.debug(f"{len(kept)} backward hits kept of {len(hits)}")
    return kept, text
