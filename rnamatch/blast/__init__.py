#!/usr/bin/env python3
"""
Alignment collaborators: BLAST+ wrappers and the interfaces the pipelines use
"""
from .aligner import Aligner, BlastAligner, BlastParameters
from .parser import BlastXmlParser
from .profiles import ProfileSearcher, BlastProfileSearcher, group_by_subject

__all__ = [
    'Aligner', 'BlastAligner', 'BlastParameters', 'BlastXmlParser',
    'ProfileSearcher', 'BlastProfileSearcher', 'group_by_subject'
]
