#!/usr/bin/env python3
"""
Shared fixtures for the rnamatch test suite.

The aligners here stand in for BLAST: ExactMatchAligner finds queries as
exact substrings of the database sequences on either strand, and
StubProfileSearcher returns prepared profile hits.
"""
import os
import shutil
from typing import Dict, List

import pytest

from rnamatch.blast.aligner import Aligner, BlastParameters
from rnamatch.blast.profiles import ProfileSearcher
from rnamatch.core.options import MatchOptions
from rnamatch.models.genome import Genome
from rnamatch.models.hits import AlignmentHit
from rnamatch.models.location import Location
from rnamatch.utils.sequence import reverse_complement

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

# Codons of a small gene: MKVLAAGIRESTQWHPFDNY followed by a TAA stop
GENE_CODONS = ['atg', 'aaa', 'gtt', 'ctg', 'gct', 'gca', 'ggc', 'att', 'cgt', 'gaa',
               'agc', 'acc', 'cag', 'tgg', 'cat', 'ccg', 'ttt', 'gat', 'aac', 'tac', 'taa']
GENE = ''.join(GENE_CODONS)
GENE_PROTEIN = "MKVLAAGIRESTQWHPFDNY"

# In-frame stop, then two plain codons before the gene
RNA_UPSTREAM = "tgacccggg"
RNA_DOWNSTREAM = "ccgcccggg"
RNA_SEQUENCE = RNA_UPSTREAM + GENE + RNA_DOWNSTREAM
# The gene occupies 10..72 of RNA_SEQUENCE
GENE_LEFT = len(RNA_UPSTREAM) + 1
GENE_RIGHT = GENE_LEFT + len(GENE) - 1

GENOME_CONTIG = "559292.28.con.0001"
GENOME_FEATURE = "fig|559292.28.peg.17"


def make_hit(subject_id: str, subject_len: int, left: int, right: int, strand: str = '+',
             query_id: str = "PF00001", query_len: int = 15, bit_score: float = 50.0,
             identities: int = 15, align_len: int = 0) -> AlignmentHit:
    """A profile hit on an RNA sequence; the alignment length defaults to the query length"""
    return AlignmentHit(
        query_id=query_id,
        query_len=query_len,
        query_loc=Location(query_id, 1, query_len, '+'),
        subject_id=subject_id,
        subject_len=subject_len,
        subject_loc=Location(subject_id, left, right, strand),
        subject_def="",
        evalue=1e-20,
        percent_identity=100.0,
        bit_score=bit_score,
        identities=identities,
        align_len=align_len or query_len
    )


class ExactMatchAligner(Aligner):
    """Finds each query as an exact substring of the database sequences"""

    def __init__(self):
        self.databases: Dict[str, Dict[str, str]] = {}
        self.searches: List[Dict[str, str]] = []

    def make_database(self, sequences: Dict[str, str], name: str, dbtype: str = 'nucl') -> str:
        self.databases[name] = {k: v.lower() for k, v in sequences.items()}
        return name

    def search(self, queries: Dict[str, str], database: str,
               params: BlastParameters) -> List[AlignmentHit]:
        self.searches.append(dict(queries))
        hits = []
        for query_id, query in queries.items():
            query = query.lower()
            for subject_id, subject in self.databases[database].items():
                for strand, needle in (('+', query), ('-', reverse_complement(query))):
                    pos = subject.find(needle)
                    if pos < 0:
                        continue
                    hits.append(AlignmentHit(
                        query_id=query_id,
                        query_len=len(query),
                        query_loc=Location(query_id, 1, len(query), '+'),
                        subject_id=subject_id,
                        subject_len=len(subject),
                        subject_loc=Location(subject_id, pos + 1, pos + len(query), strand),
                        subject_def="",
                        evalue=0.0,
                        percent_identity=100.0,
                        bit_score=2.0 * len(query),
                        identities=len(query),
                        align_len=len(query)
                    ))
        return params.filter(hits)


class StubProfileSearcher(ProfileSearcher):
    """Returns prepared hits grouped by RNA sequence id"""

    def __init__(self, hit_map: Dict[str, List[AlignmentHit]]):
        self.hit_map = hit_map
        self.calls = 0

    def profile(self, database: str, params: BlastParameters) -> Dict[str, List[AlignmentHit]]:
        self.calls += 1
        return {k: params.filter(v) for k, v in self.hit_map.items()}


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def genome():
    """The reference genome of sample1"""
    return Genome.load(os.path.join(DATA_DIR, "sample1.gto"))


@pytest.fixture
def gti_path():
    return os.path.join(DATA_DIR, "sample1.gti")


@pytest.fixture
def options():
    return MatchOptions(extend=5)


@pytest.fixture
def gene_hit():
    """Profile hit covering codons 3..17 of the gene in RNA_SEQUENCE"""
    return make_hit("rna1", len(RNA_SEQUENCE), GENE_LEFT + 9, GENE_LEFT + 53)


@pytest.fixture
def run_dir(tmp_path):
    """A run directory holding sample1's genome and GTI file"""
    run = tmp_path / "run"
    run.mkdir()
    shutil.copy(os.path.join(DATA_DIR, "sample1.gto"), run / "sample1.gto")
    shutil.copy(os.path.join(DATA_DIR, "sample1.gti"), run / "sample1.gti")
    return run
