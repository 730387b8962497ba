#!/usr/bin/env python3
"""
Output streams for match results.

A match run feeds each genomic record to one or more output streams: the
GTI file of records and a FASTA file of the proteins found.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Type

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from rnamatch.exceptions import ConfigurationError, FileOperationError
from rnamatch.models.records import GenomicRecord, Protein
from .gti import GtiWriter

logger = logging.getLogger("rnamatch.io.outputs")


class MatchOutputStream(ABC):
    """Destination for the records of one sample"""

    def __init__(self, path: str, sample_id: str):
        self.path = path
        self.sample_id = sample_id

    @abstractmethod
    def process(self, record: GenomicRecord) -> None:
        """Write one genomic record"""

    def record_protein(self, protein: Protein) -> None:
        """Called for each protein as it is found, before genome anchoring"""

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self) -> 'MatchOutputStream':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class GtiMatchOutputStream(MatchOutputStream):
    """Records as GTI lines"""

    def __init__(self, path: str, sample_id: str):
        super().__init__(path, sample_id)
        self.writer = GtiWriter(path)

    def process(self, record: GenomicRecord) -> None:
        self.writer.write(record)

    def close(self) -> None:
        self.writer.close()


class FastaMatchOutputStream(MatchOutputStream):
    """Every protein found, as FASTA described by its location in the RNA"""

    def __init__(self, path: str, sample_id: str):
        super().__init__(path, sample_id)
        try:
            self._handle = open(path, 'w')
        except OSError as e:
            raise FileOperationError(f"Cannot create FASTA file {path}: {str(e)}") from e

    def record_protein(self, protein: Protein) -> None:
        seq_record = SeqRecord(Seq(protein.sequence), id=protein.protein_id,
                               description=str(protein.rna_location))
        SeqIO.write(seq_record, self._handle, 'fasta')

    def process(self, record: GenomicRecord) -> None:
        pass

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


OUTPUT_TYPES: Dict[str, Type[MatchOutputStream]] = {
    'gti': GtiMatchOutputStream,
    'fasta': FastaMatchOutputStream,
}


def create_output(kind: str, path: str, sample_id: str) -> MatchOutputStream:
    try:
        stream_class = OUTPUT_TYPES[kind.lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown output type {kind}", {'valid': sorted(OUTPUT_TYPES)})
    return stream_class(path, sample_id)
