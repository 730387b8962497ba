#!/usr/bin/env python3
"""
Utility functions for the RNA match pipeline
"""
from .sequence import (
    calculate_md5, reverse_complement, stop_codons, translate_dna,
    DEFAULT_GENETIC_CODE
)
from .kmers import ProteinKmers

__all__ = [
    'calculate_md5', 'reverse_complement', 'stop_codons', 'translate_dna',
    'DEFAULT_GENETIC_CODE', 'ProteinKmers'
]
