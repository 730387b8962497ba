#!/usr/bin/env python3
"""
Tests for sample match processing and directory runs
"""
import io
import os
import shutil

import pytest
from Bio import SeqIO

from rnamatch.core.options import MatchOptions
from rnamatch.exceptions import FileOperationError
from rnamatch.io.outputs import FastaMatchOutputStream, MatchOutputStream
from rnamatch.models.genome import Genome
from rnamatch.models.location import Location
from rnamatch.pipelines.match import MatchProcessor, load_rna, sample_output_paths
from rnamatch.pipelines.runner import find_samples, run_directory
from rnamatch.reports.hit_log import GenomeHitLog
from rnamatch.utils.sequence import reverse_complement
from .conftest import (
    DATA_DIR, GENE_LEFT, GENE_PROTEIN, GENE_RIGHT, GENOME_CONTIG, RNA_SEQUENCE,
    ExactMatchAligner, StubProfileSearcher, make_hit
)

# No stop codon anywhere, so a hit here cannot be extended
OPEN_RNA = "atg" + "aaa" * 20


def gene_hit_on(seq_id):
    return make_hit(seq_id, len(RNA_SEQUENCE), GENE_LEFT + 9, GENE_LEFT + 53)


class ListOutput(MatchOutputStream):
    """Keeps records in memory"""

    def __init__(self):
        super().__init__("memory", "sample1")
        self.records = []
        self.proteins = []

    def process(self, record):
        self.records.append(record)

    def record_protein(self, protein):
        self.proteins.append(protein)

    def close(self):
        pass


class TestMatchProcessor:

    def run(self, genome, rna, hit_map, **option_values):
        aligner = ExactMatchAligner()
        processor = MatchProcessor(MatchOptions(extend=5, **option_values), aligner,
                                   StubProfileSearcher(hit_map))
        output = ListOutput()
        counters = processor.run_sample("sample1", genome, rna, [output])
        return counters, output.records, aligner

    def test_single_sequence(self, genome):
        counters, records, aligner = self.run(genome, {"rna1": RNA_SEQUENCE},
                                              {"rna1": [gene_hit_on("rna1")]})
        assert set(aligner.databases) == {"sample1.rna", "sample1.genome"}
        assert len(records) == 1
        record = records[0]
        assert str(record.location) == f"{GENOME_CONTIG}_7+73"
        assert record.fragment_id == "r.rna1.0001"
        assert record.proteins == [GENE_PROTEIN]
        protein = record.protein_details[0]
        assert protein.protein_id == "PF00001.0001"
        assert protein.rna_location == Location("rna1", GENE_LEFT, GENE_RIGHT, '+')
        assert counters.sequences == 1
        assert counters.proteins == 1
        assert counters.fragments == 1
        assert counters.records == 1
        assert counters.batch_num == 1

    def test_batches_flush_at_size(self, genome):
        rna = {"rna1": RNA_SEQUENCE, "rna2": RNA_SEQUENCE}
        hit_map = {"rna1": [gene_hit_on("rna1")], "rna2": [gene_hit_on("rna2")]}
        counters, records, aligner = self.run(genome, rna, hit_map, batch_size=1)
        assert counters.batch_num == 2
        assert len(aligner.searches) == 2
        assert [r.fragment_id for r in records] == ["r.rna1.0001", "r.rna2.0001"]
        assert [r.protein_details[0].protein_id for r in records] == ["PF00001.0001", "PF00001.0002"]

    def test_one_batch_when_large_enough(self, genome):
        rna = {"rna1": RNA_SEQUENCE, "rna2": RNA_SEQUENCE}
        hit_map = {"rna1": [gene_hit_on("rna1")], "rna2": [gene_hit_on("rna2")]}
        counters, records, aligner = self.run(genome, rna, hit_map)
        assert counters.batch_num == 1
        assert len(aligner.searches) == 1
        assert len(records) == 2

    def test_sequences_without_hits_are_skipped(self, genome):
        counters, records, _ = self.run(genome, {"rna1": RNA_SEQUENCE, "rna9": OPEN_RNA},
                                        {"rna1": [gene_hit_on("rna1")]})
        assert counters.sequences == 1
        assert len(records) == 1

    def test_extension_failure_counted(self, genome):
        hit = make_hit("rna3", len(OPEN_RNA), 4, 30)
        counters, records, _ = self.run(genome, {"rna3": OPEN_RNA}, {"rna3": [hit]})
        assert counters.extension_failures == 1
        assert counters.proteins == 0
        assert counters.batch_num == 0
        assert records == []

    def test_weak_profile_hits_filtered(self, genome):
        weak = make_hit("rna1", len(RNA_SEQUENCE), GENE_LEFT + 9, GENE_LEFT + 53, bit_score=5.0)
        counters, records, _ = self.run(genome, {"rna1": RNA_SEQUENCE}, {"rna1": [weak]})
        assert counters.sequences == 0
        assert records == []


    def test_proteins_recorded_without_anchor(self, tmp_path):
        elsewhere = Genome.from_dict({
            'id': '99.1', 'contigs': [{'id': '99.1.con.0001', 'dna': "acgt" * 30}], 'features': []
        })
        faa_path = tmp_path / "sample1.faa"
        processor = MatchProcessor(MatchOptions(extend=5), ExactMatchAligner(),
                                   StubProfileSearcher({"rna1": [gene_hit_on("rna1")]}))
        with FastaMatchOutputStream(str(faa_path), "sample1") as faa_out:
            counters = processor.run_sample("sample1", elsewhere, {"rna1": RNA_SEQUENCE}, [faa_out])
        assert counters.proteins == 1
        assert counters.unanchored == 1
        assert counters.records == 0
        proteins = list(SeqIO.parse(str(faa_path), "fasta"))
        assert [p.id for p in proteins] == ["PF00001.0001"]
        assert str(proteins[0].seq) == GENE_PROTEIN

    def test_minus_strand_sequence(self, genome):
        rna = reverse_complement(RNA_SEQUENCE)
        hit = make_hit("rna1", len(rna), len(rna) - GENE_LEFT - 52, len(rna) - GENE_LEFT - 8, '-')
        processor = MatchProcessor(MatchOptions(extend=5), ExactMatchAligner(),
                                   StubProfileSearcher({"rna1": [hit]}))
        output = ListOutput()
        processor.run_sample("sample1", genome, {"rna1": rna}, [output])
        assert [str(p.rna_location) for p in output.proteins] == ["rna1_81-63"]
        assert output.proteins[0].sequence == GENE_PROTEIN
        assert [str(r.location) for r in output.records] == [f"{GENOME_CONTIG}_7+73"]


class TestLoadRna:

    def test_order_kept(self, tmp_path):
        path = tmp_path / "s.assembled.fasta"
        path.write_text(">b desc\nacgt\n>a\nggcc\n")
        assert list(load_rna(str(path)).items()) == [("b", "acgt"), ("a", "ggcc")]

    def test_missing(self, tmp_path):
        with pytest.raises(FileOperationError):
            load_rna(str(tmp_path / "absent.fasta"))


@pytest.fixture
def in_dir(tmp_path):
    """sample1 is complete, sample2 lacks RNA, sample3 has a broken genome"""
    directory = tmp_path / "in"
    directory.mkdir()
    shutil.copy(os.path.join(DATA_DIR, "sample1.gto"), directory / "sample1.gto")
    (directory / "sample1.assembled.fasta").write_text(f">rna1\n{RNA_SEQUENCE}\n")
    shutil.copy(os.path.join(DATA_DIR, "sample1.gto"), directory / "sample2.gto")
    (directory / "sample3.gto").write_text("{broken")
    (directory / "sample3.assembled.fasta").write_text(f">rna1\n{RNA_SEQUENCE}\n")
    return directory


def stub_factory(work_dir):
    return ExactMatchAligner(), StubProfileSearcher({"rna1": [gene_hit_on("rna1")]})


class TestDirectoryRun:

    def test_find_samples(self, in_dir):
        assert [s.sample_id for s in find_samples(str(in_dir))] == ["sample1", "sample3"]

    def test_requested_sample_missing(self, in_dir):
        with pytest.raises(FileOperationError):
            find_samples(str(in_dir), ["sample9"])

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileOperationError):
            find_samples(str(tmp_path / "nowhere"))

    @pytest.mark.parametrize("workers", [1, 2])
    def test_run_directory(self, in_dir, tmp_path, workers):
        results = run_directory(str(in_dir), MatchOptions(extend=5), stub_factory,
                                str(tmp_path / "temp"), workers=workers)
        assert [r.sample_id for r in results] == ["sample1", "sample3"]
        good, bad = results
        assert good.success
        assert good.genome_id == "559292.28"
        assert good.counters.records == 1
        assert not bad.success
        assert bad.error

        gti_path, faa_path = sample_output_paths(str(in_dir), "sample1")
        with open(gti_path) as f, open(os.path.join(DATA_DIR, "sample1.gti")) as expected:
            assert f.read().splitlines() == expected.read().splitlines()
        with open(faa_path) as f:
            fasta = f.read()
        assert fasta.startswith(f">PF00001.0001 rna1_{GENE_LEFT}+{GENE_RIGHT - GENE_LEFT + 1}\n")
        assert GENE_PROTEIN in fasta
        # temporary work directories are removed
        assert os.listdir(tmp_path / "temp") == []

    def test_restricted_run(self, in_dir, tmp_path):
        results = run_directory(str(in_dir), MatchOptions(extend=5), stub_factory,
                                str(tmp_path / "temp"), sample_ids=["sample1"])
        assert [r.sample_id for r in results] == ["sample1"]

    def test_genome_hits_logged(self, in_dir, tmp_path):
        stream = io.StringIO()
        hit_log = GenomeHitLog(stream)
        hit_log.start()
        run_directory(str(in_dir), MatchOptions(extend=5), stub_factory, str(tmp_path / "temp"),
                      workers=2, hit_log=hit_log)
        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[1].split('\t')[:3] == ["sample1", "r.rna1.0001", f"{GENOME_CONTIG}_12+63"]
