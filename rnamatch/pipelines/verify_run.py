#!/usr/bin/env python3
"""
Verification of a finished run directory.

Every ``<sample>.gto`` with a matching ``<sample>.gti`` is verified. The
per-protein detail goes to a report stream and the per-sample totals to
``results.txt`` in the run directory. Genomes outside the prokaryotic
domains are only counted, since their annotation is not expected to match
proteins read straight off the RNA.
"""
import os
import glob
import logging
from typing import Dict, Any, List, Optional, TextIO, Tuple

import pandas as pd

from rnamatch.exceptions import FileOperationError
from rnamatch.io.gti import GtiReader
from rnamatch.models.genome import Genome
from rnamatch.models.records import ErrorKind, VerificationCounters
from rnamatch.reports.verify import VerifyReporter
from rnamatch.utils.kmers import DEFAULT_KMER_SIZE
from .runner import GENOME_SUFFIX
from .verifier import ProteinVerifier

logger = logging.getLogger("rnamatch.pipelines.verify_run")

RESULTS_FILE = "results.txt"
INFO_COLUMNS = ["sample", "genome_id", "genome_name", "gc", "records", "proteins"]
KIND_COLUMNS = [ErrorKind.EXACT, ErrorKind.TOO_SHORT, ErrorKind.TOO_LONG,
                ErrorKind.CHANGED, ErrorKind.NOT_FOUND]
RESULT_COLUMNS = INFO_COLUMNS + [kind.value for kind in KIND_COLUMNS]


def count_sample(gti_path: str) -> Tuple[int, int]:
    """Number of records and proteins in a GTI file"""
    records = proteins = 0
    with GtiReader(gti_path) as reader:
        for record in reader:
            records += 1
            proteins += len(record.proteins)
    return records, proteins


def verify_sample(sample_id: str, genome: Genome, gti_path: str, reporter: VerifyReporter,
                  kmer_size: int = DEFAULT_KMER_SIZE) -> VerificationCounters:
    """Verify the records of one GTI file, reporting each protein"""
    logger.info(f"Verifying proteins in {gti_path}.")
    verifier = ProteinVerifier(genome, kmer_size)
    with GtiReader(gti_path) as reader:
        for result in verifier.verify(reader):
            reporter.add(result)
    return verifier.counters


def verify_directory(run_dir: str, report_stream: TextIO,
                     kmer_size: int = DEFAULT_KMER_SIZE,
                     results_path: Optional[str] = None) -> pd.DataFrame:
    """Verify every sample of a run directory

    Args:
        run_dir: Directory with the GTO and GTI files
        report_stream: Destination of the per-protein report
        kmer_size: Protein k-mer length for distances
        results_path: Summary table location, ``results.txt`` in the run
            directory by default

    Returns:
        The summary table that was written
    """
    if not os.path.isdir(run_dir):
        raise FileOperationError(f"Input directory {run_dir} not found or invalid")
    genome_files = sorted(glob.glob(os.path.join(run_dir, f"*{GENOME_SUFFIX}")))
    logger.info(f"{len(genome_files)} genomes found in {run_dir}.")

    reporter = VerifyReporter(report_stream)
    reporter.start()
    rows: List[Dict[str, Any]] = []
    for genome_file in genome_files:
        sample_id = os.path.basename(genome_file)[:-len(GENOME_SUFFIX)]
        gti_path = os.path.join(run_dir, f"{sample_id}.gti")
        if not os.path.isfile(gti_path):
            logger.warning(f"No GTI file for sample {sample_id}: skipping.")
            continue
        genome = Genome.load(genome_file)
        logger.info(f"Genome is {genome}.")
        row: Dict[str, Any] = {
            'sample': sample_id,
            'genome_id': genome.id,
            'genome_name': genome.name,
            'gc': genome.genetic_code,
        }
        if genome.is_prokaryotic:
            counters = verify_sample(sample_id, genome, gti_path, reporter, kmer_size)
            row['records'] = counters.records
            row['proteins'] = counters.proteins
            for kind in KIND_COLUMNS:
                row[kind.value] = counters.count(kind)
        else:
            logger.info(f"Counting proteins in {gti_path}.")
            row['records'], row['proteins'] = count_sample(gti_path)
        rows.append(row)
    reporter.finish()

    results = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    count_columns = RESULT_COLUMNS[4:]
    results[count_columns] = results[count_columns].astype('Int64')
    results_path = results_path or os.path.join(run_dir, RESULTS_FILE)
    results.to_csv(results_path, sep='\t', index=False, na_rep='')
    logger.info(f"Verification summary for {len(rows)} samples written to {results_path}")
    return results
