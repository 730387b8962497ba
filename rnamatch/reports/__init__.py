#!/usr/bin/env python3
"""
Tab-separated reports for match and verification runs
"""
from .hit_log import GenomeHitLog
from .summary import SummaryReporter
from .verify import VerifyReporter

__all__ = ['GenomeHitLog', 'SummaryReporter', 'VerifyReporter']
