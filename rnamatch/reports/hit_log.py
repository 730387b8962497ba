#!/usr/bin/env python3
"""
Log of the genome hits that anchored RNA fragments, one line per fragment
"""
import threading
from typing import TextIO

from rnamatch.models.hits import AlignmentHit

HIT_LOG_HEADER = ["sample_id", "rna_id", "genome_loc", "e_value", "p_ident", "q_ident"]


class GenomeHitLog:
    """Writes winning fragment-to-genome hits to a text stream

    One log may be shared by samples running in parallel.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0
        self._lock = threading.Lock()

    def start(self) -> None:
        self.stream.write('\t'.join(HIT_LOG_HEADER) + '\n')

    def add(self, sample_id: str, hit: AlignmentHit) -> None:
        line = (f"{sample_id}\t{hit.query_id}\t{hit.subject_loc}\t{hit.evalue:6.4g}\t"
                f"{hit.percent_identity:6.3f}\t{hit.query_identity:6.3f}\n")
        with self._lock:
            self.stream.write(line)
            self.count += 1

    def finish(self) -> None:
        self.stream.flush()
