#!/usr/bin/env python3
"""
Data models for the RNA match pipeline
"""
from .location import Location
from .hits import AlignmentHit, ProteinHit
from .records import (
    Protein, CompositeLocus, Fragment, GenomicRecord, ErrorKind,
    VerificationRecord, MatchCounters, VerificationCounters
)
from .genome import Genome, Feature

__all__ = [
    'Location', 'AlignmentHit', 'ProteinHit',
    'Protein', 'CompositeLocus', 'Fragment', 'GenomicRecord', 'ErrorKind',
    'VerificationRecord', 'MatchCounters', 'VerificationCounters',
    'Genome', 'Feature'
]
