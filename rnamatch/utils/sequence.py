#!/usr/bin/env python3
"""
Sequence utilities for the RNA match pipeline
Functions for working with nucleotide and protein sequences
"""
import re
import logging
import hashlib
from functools import lru_cache
from typing import FrozenSet

from Bio.Seq import reverse_complement as _bio_reverse_complement
from Bio.Seq import translate as _bio_translate
from Bio.Data import CodonTable

from rnamatch.exceptions import ValidationError

logger = logging.getLogger("rnamatch.utils.sequence")

DEFAULT_GENETIC_CODE = 11


def calculate_md5(sequence: str) -> str:
    """Calculate MD5 hash of a sequence

    Args:
        sequence: Protein sequence

    Returns:
        MD5 hash as hexadecimal string
    """
    clean_seq = re.sub(r'\s+', '', sequence.upper())
    return hashlib.md5(clean_seq.encode('utf-8')).hexdigest()


def reverse_complement(dna: str) -> str:
    """Reverse complement of a nucleotide string, case preserved"""
    return _bio_reverse_complement(dna)


@lru_cache(maxsize=None)
def stop_codons(genetic_code: int = DEFAULT_GENETIC_CODE) -> FrozenSet[str]:
    """Lowercase stop codons for an NCBI genetic code"""
    try:
        table = CodonTable.unambiguous_dna_by_id[genetic_code]
    except KeyError:
        raise ValidationError(f"Unknown genetic code {genetic_code}")
    return frozenset(codon.lower() for codon in table.stop_codons)


def translate_dna(dna: str, genetic_code: int = DEFAULT_GENETIC_CODE, peg: bool = True) -> str:
    """Translate a nucleotide string into protein

    Args:
        dna: Nucleotide string; trailing partial codons are ignored
        genetic_code: NCBI translation table
        peg: If True the first residue is forced to M, since any start codon
            is read as methionine at the start of a protein

    Returns:
        Protein string, stops rendered as ``*``
    """
    usable = len(dna) - len(dna) % 3
    if usable <= 0:
        return ""
    protein = str(_bio_translate(dna[:usable].upper(), table=genetic_code))
    if peg and protein:
        protein = 'M' + protein[1:]
    return protein
