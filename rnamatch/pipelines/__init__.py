#!/usr/bin/env python3
"""
RNA match pipelines: from profile hits to verified genomic records
"""
from .consolidator import consolidate_hits
from .orf import OrfExtender, create_extender, STRATEGIES
from .assembler import OperonAssembler, resolve_redundancy, emit_fragments
from .relocalizer import GenomeRelocalizer
from .verifier import ProteinVerifier
from .match import MatchProcessor

__all__ = [
    'consolidate_hits', 'OrfExtender', 'create_extender', 'STRATEGIES',
    'OperonAssembler', 'resolve_redundancy', 'emit_fragments',
    'GenomeRelocalizer', 'ProteinVerifier', 'MatchProcessor'
]
