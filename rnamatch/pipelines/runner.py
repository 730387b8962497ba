#!/usr/bin/env python3
"""
Directory runs: every sample of an input directory.

A sample is a genome file ``<sample>.gto`` with its RNA assembly
``<sample>.assembled.fasta`` in the same directory. Each sample writes
``<sample>.gti`` and ``<sample>.faa`` next to its inputs. Samples share no
state, so they may run in parallel, each with its own temporary BLAST
databases.
"""
import os
import glob
import time
import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from rnamatch.blast.aligner import Aligner, BlastAligner
from rnamatch.blast.profiles import BlastProfileSearcher, ProfileSearcher
from rnamatch.core.options import MatchOptions
from rnamatch.exceptions import FileOperationError, RnaMatchError
from rnamatch.io.outputs import create_output
from rnamatch.models.genome import Genome
from rnamatch.models.records import MatchCounters
from rnamatch.reports.hit_log import GenomeHitLog
from .match import MatchProcessor, load_rna, sample_output_paths

logger = logging.getLogger("rnamatch.pipelines.runner")

GENOME_SUFFIX = ".gto"
RNA_SUFFIX = ".assembled.fasta"

# Builds the aligner and profile searcher for one sample's work directory
ComponentFactory = Callable[[str], Tuple[Aligner, ProfileSearcher]]


@dataclass
class SampleFiles:
    """Input and output files of one sample"""
    sample_id: str
    directory: str

    @property
    def genome_path(self) -> str:
        return os.path.join(self.directory, self.sample_id + GENOME_SUFFIX)

    @property
    def rna_path(self) -> str:
        return os.path.join(self.directory, self.sample_id + RNA_SUFFIX)

    @property
    def gti_path(self) -> str:
        return sample_output_paths(self.directory, self.sample_id)[0]

    @property
    def faa_path(self) -> str:
        return sample_output_paths(self.directory, self.sample_id)[1]


@dataclass
class SampleResult:
    """Outcome of one sample's run"""
    sample_id: str
    genome_id: str = ""
    genome_name: str = ""
    genetic_code: int = 0
    counters: MatchCounters = field(default_factory=MatchCounters)
    elapsed: float = 0.0
    success: bool = True
    error: Optional[str] = None


class BlastComponentFactory:
    """Creates BLAST+ components from the configuration"""

    def __init__(self, config_manager, profile_dir: str):
        self.config_manager = config_manager
        self.profile_dir = profile_dir

    def __call__(self, work_dir: str) -> Tuple[Aligner, ProfileSearcher]:
        aligner = BlastAligner.from_config(self.config_manager, work_dir)
        return aligner, BlastProfileSearcher(self.profile_dir, aligner)


def find_samples(in_dir: str, sample_ids: Optional[Sequence[str]] = None) -> List[SampleFiles]:
    """Samples in a directory that have both a genome and an RNA file

    Args:
        in_dir: Input directory
        sample_ids: Restrict to these samples; all samples if omitted

    Raises:
        FileOperationError: If the directory does not exist, or a requested
            sample has no genome file
    """
    if not os.path.isdir(in_dir):
        raise FileOperationError(f"Input directory {in_dir} not found or invalid")
    if sample_ids:
        candidates = list(sample_ids)
        for sample_id in candidates:
            if not os.path.isfile(os.path.join(in_dir, sample_id + GENOME_SUFFIX)):
                raise FileOperationError(f"Genome file for sample {sample_id} not found in {in_dir}")
    else:
        candidates = sorted(os.path.basename(path)[:-len(GENOME_SUFFIX)]
                            for path in glob.glob(os.path.join(in_dir, f"*{GENOME_SUFFIX}")))
        logger.info(f"{len(candidates)} GTO files found in {in_dir}.")

    samples = []
    for sample_id in candidates:
        sample = SampleFiles(sample_id, in_dir)
        if not os.access(sample.rna_path, os.R_OK):
            logger.warning(f"RNA file {sample.rna_path} for {sample_id} not found or unreadable: skipping.")
            continue
        samples.append(sample)
    return samples


def run_sample(sample: SampleFiles, options: MatchOptions, factory: ComponentFactory,
               temp_dir: str, hit_log: Optional[GenomeHitLog] = None) -> SampleResult:
    """Run one sample in a private temporary directory

    Raises:
        RnaMatchError: If the sample's inputs or its BLAST runs fail
    """
    start = time.time()
    genome = Genome.load(sample.genome_path)
    logger.info(f"Processing RNA file {sample.rna_path} for genome {genome}.")
    rna = load_rna(sample.rna_path)

    os.makedirs(temp_dir, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=f"{sample.sample_id}.", dir=temp_dir) as work_dir:
        aligner, profiler = factory(work_dir)
        processor = MatchProcessor(options, aligner, profiler, hit_log)
        with create_output('gti', sample.gti_path, sample.sample_id) as gti_out, \
                create_output('fasta', sample.faa_path, sample.sample_id) as faa_out:
            counters = processor.run_sample(sample.sample_id, genome, rna, [gti_out, faa_out])

    elapsed = time.time() - start
    logger.info(f"{sample.sample_id} took {elapsed:.0f} seconds.")
    return SampleResult(
        sample_id=sample.sample_id,
        genome_id=genome.id,
        genome_name=genome.name,
        genetic_code=genome.genetic_code,
        counters=counters,
        elapsed=elapsed
    )


def _run_sample_safely(sample: SampleFiles, options: MatchOptions, factory: ComponentFactory,
                       temp_dir: str, hit_log: Optional[GenomeHitLog] = None) -> SampleResult:
    try:
        return run_sample(sample, options, factory, temp_dir, hit_log)
    except RnaMatchError as e:
        logger.error(f"Sample {sample.sample_id} failed: {e.message}")
        if e.details:
            logger.debug(f"Error details: {e.details}")
        return SampleResult(sample_id=sample.sample_id, success=False, error=str(e))


def run_directory(in_dir: str, options: MatchOptions, factory: ComponentFactory,
                  temp_dir: str, workers: int = 1,
                  sample_ids: Optional[Sequence[str]] = None,
                  hit_log: Optional[GenomeHitLog] = None) -> List[SampleResult]:
    """Run every sample of a directory

    A failing sample is logged and reported as unsuccessful; the other
    samples still run. Results come back in sample order.

    Args:
        in_dir: Directory holding the sample files
        options: Validated match options
        factory: Builds the aligner and profile searcher for a work directory
        temp_dir: Parent of the per-sample temporary directories
        workers: Number of samples processed concurrently
        sample_ids: Restrict the run to these samples
        hit_log: Optional log of the genome hits anchoring each fragment
    """
    samples = find_samples(in_dir, sample_ids)
    if not samples:
        logger.warning(f"No samples to process in {in_dir}")
        return []

    if workers <= 1 or len(samples) == 1:
        results = [_run_sample_safely(s, options, factory, temp_dir, hit_log) for s in samples]
    else:
        max_workers = min(workers, len(samples))
        by_sample = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_sample = {
                executor.submit(_run_sample_safely, sample, options, factory, temp_dir, hit_log): sample
                for sample in samples
            }
            completed = 0
            for future in as_completed(future_to_sample):
                sample = future_to_sample[future]
                by_sample[sample.sample_id] = future.result()
                completed += 1
                logger.info(f"Completed {completed}/{len(samples)} samples")
        results = [by_sample[s.sample_id] for s in samples]

    succeeded = sum(1 for r in results if r.success)
    logger.info(f"{succeeded} of {len(results)} samples processed.")
    return results
