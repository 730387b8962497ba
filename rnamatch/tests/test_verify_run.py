#!/usr/bin/env python3
"""
Tests for run directory verification and the command line
"""
import io
import json
import os

import pandas as pd
import pytest

from rnamatch.cli.main import build_parser, main
from rnamatch.exceptions import FileOperationError
from rnamatch.pipelines.verify_run import RESULT_COLUMNS, RESULTS_FILE, verify_directory
from rnamatch.reports.verify import VERIFY_HEADER


def read_results(run_dir):
    return pd.read_csv(os.path.join(run_dir, RESULTS_FILE), sep='\t', dtype=str, keep_default_na=False)


def add_eukaryote(run_dir):
    """sample2: the sample1 data under a eukaryotic genome"""
    with open(run_dir / "sample1.gto") as f:
        data = json.load(f)
    data['domain'] = 'Eukaryota'
    data['id'] = '4932.1'
    with open(run_dir / "sample2.gto", 'w') as f:
        json.dump(data, f)
    (run_dir / "sample2.gti").write_text((run_dir / "sample1.gti").read_text())


class TestVerifyDirectory:

    def test_exact_sample(self, run_dir):
        report = io.StringIO()
        results = verify_directory(str(run_dir), report)
        lines = report.getvalue().splitlines()
        assert lines[0].split('\t') == VERIFY_HEADER
        assert len(lines) == 2
        row = lines[1].split('\t')
        assert row[0] == "sample1"
        assert row[4] == "fig|559292.28.peg.17"
        assert row[5] == "0.0000"

        assert list(results.columns) == RESULT_COLUMNS
        table = read_results(run_dir)
        assert list(table.columns) == RESULT_COLUMNS
        first = table.iloc[0]
        assert first['sample'] == "sample1"
        assert first['genome_id'] == "559292.28"
        assert first['gc'] == "11"
        assert first['records'] == "1"
        assert first['proteins'] == "1"
        assert first['exact'] == "1"
        assert first['not_found'] == "0"

    def test_eukaryote_only_counted(self, run_dir):
        add_eukaryote(run_dir)
        report = io.StringIO()
        verify_directory(str(run_dir), report)
        # only the prokaryote reaches the detail report
        assert len(report.getvalue().splitlines()) == 2
        table = read_results(run_dir)
        assert list(table['sample']) == ["sample1", "sample2"]
        euk = table.iloc[1]
        assert euk['records'] == "1"
        assert euk['proteins'] == "1"
        assert euk['exact'] == ""
        assert euk['changed'] == ""

    def test_sample_without_gti_skipped(self, run_dir):
        os.remove(run_dir / "sample1.gti")
        results = verify_directory(str(run_dir), io.StringIO())
        assert len(results) == 0
        assert read_results(run_dir).columns.tolist() == RESULT_COLUMNS

    def test_custom_results_path(self, run_dir, tmp_path):
        target = tmp_path / "summary.tsv"
        verify_directory(str(run_dir), io.StringIO(), results_path=str(target))
        assert target.exists()
        assert not (run_dir / RESULTS_FILE).exists()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileOperationError):
            verify_directory(str(tmp_path / "nowhere"), io.StringIO())


class TestCommandLine:

    def test_parser_maps_threshold_flags(self):
        args = build_parser().parse_args(
            ['run', 'profiles', 'in', '--min-pct', '80', '--min-query', '50', '--starts', 'biased',
             '--rna-log', 'hits.tsv'])
        assert args.min_query_coverage == 80.0
        assert args.min_profile_coverage == 50.0
        assert args.starts == 'biased'
        assert args.batch_size is None
        assert args.rna_log == 'hits.tsv'

    def test_verify_command(self, run_dir, capsys):
        assert main(['verify', str(run_dir)]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0].split('\t') == VERIFY_HEADER
        assert (run_dir / RESULTS_FILE).exists()

    def test_verify_json(self, run_dir, capsys):
        assert main(['--json', 'verify', str(run_dir)]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload[0]['sample'] == "sample1"
        assert payload[0]['exact'] == 1
        assert (run_dir / "verify_report.txt").exists()

    def test_missing_directory_fails(self, tmp_path):
        assert main(['verify', str(tmp_path / "nowhere")]) == 1

    def test_missing_profile_directory_fails(self, run_dir, tmp_path):
        assert main(['run', str(tmp_path / "no_profiles"), str(run_dir)]) == 1

    def test_invalid_threshold_fails(self, run_dir):
        assert main(['run', str(run_dir), str(run_dir), '--max-evalue', '2']) == 1

    def test_no_command(self):
        assert main([]) == 1
