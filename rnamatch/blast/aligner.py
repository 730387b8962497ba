#!/usr/bin/env python3
"""
Aligner interface and its BLAST+ implementation.

The pipelines only see the Aligner interface, so tests can substitute a stub
that returns synthetic hits instead of calling the BLAST binaries.
"""
import os
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from rnamatch.core.command_utils import run_command_with_retry
from rnamatch.exceptions import AlignmentError
from rnamatch.models.hits import AlignmentHit
from .parser import BlastXmlParser

logger = logging.getLogger("rnamatch.blast.aligner")

DB_TYPES = ('nucl', 'prot')


@dataclass
class BlastParameters:
    """Search limits and hit filters

    ``max_evalue`` and ``max_hits_per_query`` are passed to the search
    itself; the remaining thresholds are applied to each returned hit by
    ``accepts``. A threshold of 0 disables its filter.
    """
    max_evalue: float = 1e-10
    min_percent_identity: float = 0.0
    min_query_coverage: float = 0.0
    min_subject_coverage: float = 0.0
    max_hits_per_query: Optional[int] = None
    min_query_bit_score: float = 0.0
    min_query_identity: float = 0.0

    def accepts(self, hit: AlignmentHit) -> bool:
        return (hit.evalue <= self.max_evalue and
                hit.percent_identity >= self.min_percent_identity and
                hit.query_coverage >= self.min_query_coverage and
                hit.subject_coverage >= self.min_subject_coverage and
                hit.query_bit_score >= self.min_query_bit_score and
                hit.query_identity >= self.min_query_identity)

    def filter(self, hits: List[AlignmentHit]) -> List[AlignmentHit]:
        return [hit for hit in hits if self.accepts(hit)]

    def to_args(self) -> List[str]:
        """Command-line arguments for a BLAST+ search program"""
        args = ["-evalue", f"{self.max_evalue:g}"]
        if self.max_hits_per_query:
            args.extend(["-max_target_seqs", str(self.max_hits_per_query)])
        return args


class Aligner(ABC):
    """Builds sequence databases and searches them"""

    @abstractmethod
    def make_database(self, sequences: Dict[str, str], name: str, dbtype: str = 'nucl') -> str:
        """Create a database from sequences keyed by id

        Returns:
            Handle to pass to ``search``

        Raises:
            AlignmentError: If the database cannot be created
        """

    @abstractmethod
    def search(self, queries: Dict[str, str], database: str,
               params: BlastParameters) -> List[AlignmentHit]:
        """Align the queries against a database

        Returns:
            Hits that pass ``params.accepts``

        Raises:
            AlignmentError: If the search fails
        """


class BlastAligner(Aligner):
    """Aligner running the BLAST+ command-line programs

    Databases and intermediate files are written to ``work_dir``, which the
    caller owns and removes.
    """

    def __init__(self, work_dir: str, makeblastdb_path: str = "makeblastdb",
                 blastn_path: str = "blastn", tblastn_path: str = "tblastn",
                 timeout: Optional[float] = None, retries: int = 0):
        self.work_dir = work_dir
        self.makeblastdb_path = makeblastdb_path
        self.blastn_path = blastn_path
        self.tblastn_path = tblastn_path
        self.timeout = timeout
        self.retries = retries
        self.parser = BlastXmlParser(logger)
        self._search_num = 0
        os.makedirs(work_dir, exist_ok=True)

    @classmethod
    def from_config(cls, config_manager, work_dir: str) -> 'BlastAligner':
        return cls(
            work_dir,
            makeblastdb_path=config_manager.get_tool_path('makeblastdb', 'makeblastdb'),
            blastn_path=config_manager.get_tool_path('blastn', 'blastn'),
            tblastn_path=config_manager.get_tool_path('tblastn', 'tblastn'),
            timeout=config_manager.get('pipeline.timeout'),
            retries=config_manager.get('pipeline.retries', 0)
        )

    def write_fasta(self, sequences: Dict[str, str], file_name: str) -> str:
        path = os.path.join(self.work_dir, file_name)
        records = (SeqRecord(Seq(seq), id=seq_id, description="")
                   for seq_id, seq in sequences.items())
        with open(path, 'w') as f:
            SeqIO.write(records, f, 'fasta')
        return path

    def make_database(self, sequences: Dict[str, str], name: str, dbtype: str = 'nucl') -> str:
        if dbtype not in DB_TYPES:
            raise AlignmentError(f"Invalid database type {dbtype}", {'valid': list(DB_TYPES)})
        fasta_path = self.write_fasta(sequences, f"{name}.fasta")
        db_path = os.path.join(self.work_dir, name)
        cmd = [self.makeblastdb_path, "-in", fasta_path, "-dbtype", dbtype, "-out", db_path]
        self._run(cmd, f"database creation for {name}")
        logger.info(f"Created {dbtype} BLAST database {db_path} with {len(sequences)} sequences")
        return db_path

    def search(self, queries: Dict[str, str], database: str,
               params: BlastParameters) -> List[AlignmentHit]:
        if not queries:
            return []
        self._search_num += 1
        query_path = self.write_fasta(queries, f"query{self._search_num}.fasta")
        cmd = [self.blastn_path, "-query", query_path, "-db", database]
        return self._search(cmd, params)

    def profile_search(self, profile_path: str, database: str,
                       params: BlastParameters) -> List[AlignmentHit]:
        """Search a nucleotide database with a protein profile (PSSM)"""
        self._search_num += 1
        cmd = [self.tblastn_path, "-in_pssm", profile_path, "-db", database]
        return self._search(cmd, params)

    def _search(self, cmd: List[str], params: BlastParameters) -> List[AlignmentHit]:
        out_path = os.path.join(self.work_dir, f"search{self._search_num}.xml")
        cmd = cmd + params.to_args() + ["-outfmt", "5", "-out", out_path]
        self._run(cmd, f"{os.path.basename(cmd[0])} search")
        hits = self.parser.parse(out_path)
        kept = params.filter(hits)
        logger.debug(f"{len(kept)} of {len(hits)} hits passed the filters")
        return kept

    def _run(self, cmd: List[str], description: str) -> None:
        try:
            run_command_with_retry(cmd, max_retries=self.retries, timeout=self.timeout)
        except subprocess.CalledProcessError as e:
            raise AlignmentError(f"BLAST {description} failed: {e.stderr.strip() if e.stderr else e}",
                                 {'command': ' '.join(cmd), 'returncode': e.returncode}) from e
        except subprocess.TimeoutExpired as e:
            raise AlignmentError(f"BLAST {description} timed out after {e.timeout} seconds",
                                 {'command': ' '.join(cmd)}) from e
        except OSError as e:
            raise AlignmentError(f"Cannot run {cmd[0]}: {str(e)}", {'command': ' '.join(cmd)}) from e
