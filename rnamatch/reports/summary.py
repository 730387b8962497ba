#!/usr/bin/env python3
"""
Summary report of a match run: records and proteins per sample, with totals
"""
from typing import TextIO

SUMMARY_HEADER = ["sample_id", "genome_id", "genome_name", "gen_code", "rna_count", "prot_count"]


class SummaryReporter:
    """Writes one line per sample and a TOTAL line

    ``rna_count`` is the number of genome records written for the sample and
    ``prot_count`` the number of proteins in them.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.sample_count = 0
        self.rna_total = 0
        self.prot_total = 0

    def start(self) -> None:
        self.stream.write('\t'.join(SUMMARY_HEADER) + '\n')

    def add(self, result) -> None:
        """Report a SampleResult; failed samples are not listed"""
        if not result.success:
            return
        rna_count = result.counters.records
        prot_count = result.counters.record_proteins
        self.stream.write(f"{result.sample_id}\t{result.genome_id}\t{result.genome_name}\t"
                          f"{result.genetic_code}\t{rna_count}\t{prot_count}\n")
        self.sample_count += 1
        self.rna_total += rna_count
        self.prot_total += prot_count

    def finish(self) -> None:
        self.stream.write(f"TOTAL\t{self.sample_count}\t\t\t{self.rna_total}\t{self.prot_total}\n")
        self.stream.flush()
