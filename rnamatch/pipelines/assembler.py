#!/usr/bin/env python3
"""
Operon assembly for one RNA sequence.

Extended hits are deduplicated by stop codon, translated, and grouped into
composite loci: hits whose spans lie within ``max_gap`` bases of each other
are treated as one operon. Each locus then becomes one RNA fragment.
"""
import logging
from typing import List, Optional, Tuple

from rnamatch.models.hits import ProteinHit
from rnamatch.models.location import Location
from rnamatch.models.records import CompositeLocus, Fragment, MatchCounters, Protein
from .orf import OrfExtender

logger = logging.getLogger("rnamatch.pipelines.assembler")


def resolve_redundancy(hits: List[ProteinHit]) -> List[ProteinHit]:
    """Keep one hit per stop coordinate, the longest

    A hit only replaces an earlier one with the same stop when it is
    strictly longer, so the first seen wins ties. A replacing hit moves to
    the end of the list.
    """
    processed: List[ProteinHit] = []
    for hit in hits:
        rival = next((i for i, other in enumerate(processed)
                      if other.loc.right == hit.loc.right), None)
        if rival is None:
            processed.append(hit)
        elif processed[rival].loc.length < hit.loc.length:
            del processed[rival]
            processed.append(hit)
    return processed


class OperonAssembler:
    """Merges nearby protein locations into composite loci

    Loci live in an arena of slots. Merging tombstones the absorbed slots and
    appends the merged locus as a new slot, so the scan never mutates the
    structure it is walking. A new protein is checked once against every
    live locus. Live loci are always at least ``max_gap`` apart, and a merge
    cannot bring the result within range of a locus it was not already in
    range of, so the single pass leaves no mergeable pair behind.
    """

    def __init__(self, max_gap: int):
        self.max_gap = max_gap
        self._slots: List[Optional[CompositeLocus]] = []
        # accepted proteins in the order they were found
        self.proteins: List[Protein] = []

    def add(self, loc: Location, protein: Protein) -> CompositeLocus:
        """Place a protein, merging its location with every locus in range

        Returns:
            The locus now holding the protein
        """
        proteins: List[Protein] = []
        for i, slot in enumerate(self._slots):
            if slot is not None and slot.location.distance(loc) < self.max_gap:
                loc = loc.merge(slot.location)
                proteins.extend(slot.proteins)
                self._slots[i] = None
        proteins.append(protein)
        locus = CompositeLocus(loc, proteins)
        self._slots.append(locus)
        return locus

    @property
    def loci(self) -> List[CompositeLocus]:
        """Live loci in creation order"""
        return [slot for slot in self._slots if slot is not None]

    def __len__(self) -> int:
        return len(self.loci)

    def assemble(self, hits: List[ProteinHit], text: str, extender: OrfExtender,
                 counters: MatchCounters, reverse: bool = False) -> List[CompositeLocus]:
        """Translate extended hits and group them into loci

        A translation with an internal stop is dropped and counted. The stop
        codon itself is not translated. When ``reverse`` is set the text is
        the reverse complement of the input sequence, and each protein's RNA
        location is converted back to the input orientation.
        """
        for hit in hits:
            sequence = extender.translate(text, hit.loc.left, hit.loc.length - 3)
            if '*' in sequence:
                counters.internal_stops += 1
                logger.debug(f"Internal stop in translation of {hit}, skipped")
                continue
            rna_loc = hit.loc.converse(len(text)) if reverse else hit.loc
            protein = Protein(counters.next_protein_id(hit.profile_id), rna_loc, sequence)
            counters.proteins += 1
            self.proteins.append(protein)
            self.add(hit.loc, protein)
        return self.loci


def emit_fragments(sequence_id: str, text: str,
                   loci: List[CompositeLocus]) -> List[Tuple[Fragment, List[Protein]]]:
    """Slice each locus out of the working text as a numbered fragment

    Fragment ids are ``r.<sequence_id>.<NNNN>``, numbered from 1 within the
    sequence.
    """
    fragments = []
    for num, locus in enumerate(loci, start=1):
        fragment = Fragment(f"r.{sequence_id}.{num:04d}", locus.location,
                            locus.location.get_dna(text))
        fragments.append((fragment, list(locus.proteins)))
    return fragments
