#!/usr/bin/env python3
"""
Detail report of protein verification, one line per protein
"""
from typing import TextIO

from rnamatch.models.records import VerificationRecord

VERIFY_HEADER = ["sample", "prot_id", "rna_id", "location", "best_peg", "distance", "notes", "ORF"]


class VerifyReporter:
    """Writes verification records to a text stream"""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def start(self) -> None:
        self.stream.write('\t'.join(VERIFY_HEADER) + '\n')

    def add(self, record: VerificationRecord) -> None:
        self.stream.write('\t'.join(record.to_row()) + '\n')
        self.count += 1

    def finish(self) -> None:
        self.stream.flush()
