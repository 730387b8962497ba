#!/usr/bin/env python3
"""
rnamatch - protein calls from assembled RNA, anchored on a reference genome

Profile hits in RNA sequences are extended to full open reading frames,
grouped into operons, located on the genome and verified against the
genome's annotation.
"""

__version__ = '0.1.0'

from .exceptions import RnaMatchError
from .core.errors import handle_exceptions

__all__ = ['RnaMatchError', 'handle_exceptions']
