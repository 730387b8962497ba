#!/usr/bin/env python3
"""
File formats read and written by the RNA match pipeline
"""
from .gti import GtiReader, GtiWriter, read_gti, GTI_SUFFIX
from .outputs import (
    MatchOutputStream, GtiMatchOutputStream, FastaMatchOutputStream, create_output
)

__all__ = [
    'GtiReader', 'GtiWriter', 'read_gti', 'GTI_SUFFIX',
    'MatchOutputStream', 'GtiMatchOutputStream', 'FastaMatchOutputStream', 'create_output'
]
