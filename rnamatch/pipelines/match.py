#!/usr/bin/env python3
"""
Match processing for one sample.

The RNA sequences of a sample are profiled for protein hits. Each sequence
with hits is turned into RNA fragments (one per operon); fragments are
collected into batches and each batch is anchored on the genome. The
resulting genomic records go to the sample's output streams.
"""
import os
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from Bio import SeqIO

from rnamatch.blast.aligner import Aligner, BlastParameters
from rnamatch.blast.profiles import ProfileSearcher
from rnamatch.core.options import MatchOptions
from rnamatch.exceptions import FileOperationError
from rnamatch.io.outputs import MatchOutputStream
from rnamatch.models.genome import Genome
from rnamatch.models.hits import AlignmentHit
from rnamatch.models.records import Fragment, MatchCounters, Protein
from rnamatch.reports.hit_log import GenomeHitLog
from .assembler import OperonAssembler, emit_fragments, resolve_redundancy
from .consolidator import consolidate_hits, strand_vote
from .orf import OrfExtender, create_extender
from .relocalizer import GenomeRelocalizer

logger = logging.getLogger("rnamatch.pipelines.match")

FragmentBatch = List[Tuple[Fragment, List[Protein]]]


def load_rna(path: str) -> Dict[str, str]:
    """Read RNA sequences from a FASTA file, keeping file order

    Raises:
        FileOperationError: If the file cannot be read
    """
    try:
        with open(path, 'r') as f:
            return {record.id: str(record.seq) for record in SeqIO.parse(f, 'fasta')}
    except OSError as e:
        raise FileOperationError(f"RNA input file {path} not found or unreadable: {str(e)}") from e


class MatchProcessor:
    """Finds proteins in a sample's RNA and anchors them on its genome

    One processor handles one sample at a time. Everything that changes
    during a run lives in the MatchCounters returned by ``run_sample``.
    """

    def __init__(self, options: MatchOptions, aligner: Aligner, profiler: ProfileSearcher,
                 hit_log: Optional[GenomeHitLog] = None):
        self.options = options
        self.aligner = aligner
        self.profiler = profiler
        self.hit_log = hit_log

    def profile_parameters(self) -> BlastParameters:
        """Limits for profile hits against the RNA"""
        return BlastParameters(
            max_evalue=self.options.max_evalue,
            min_query_coverage=self.options.min_profile_coverage,
            min_query_bit_score=self.options.min_query_bit_score,
            min_query_identity=self.options.min_query_identity
        )

    def genome_parameters(self) -> BlastParameters:
        """Limits for fragment hits against the genome"""
        return BlastParameters(
            max_evalue=self.options.max_evalue,
            min_query_coverage=self.options.min_query_coverage,
            min_percent_identity=self.options.min_percent_identity
        )

    def run_sample(self, sample_id: str, genome: Genome, rna: Dict[str, str],
                   outputs: Sequence[MatchOutputStream]) -> MatchCounters:
        """Process all RNA sequences of a sample

        Args:
            sample_id: Sample identifier written to every record
            genome: Reference genome of the sample
            rna: RNA sequences keyed by id, in input order
            outputs: Streams receiving each genomic record

        Returns:
            Counters for the run
        """
        counters = MatchCounters()
        extender = create_extender(self.options.starts, genome.genetic_code)

        logger.info(f"Building BLAST databases for sample {sample_id}")
        rna_db = self.aligner.make_database(rna, f"{sample_id}.rna", 'nucl')
        genome_db = self.aligner.make_database(genome.contigs, f"{sample_id}.genome", 'nucl')

        logger.info("Profiling the RNA sequences for protein regions.")
        hit_map = self.profiler.profile(rna_db, self.profile_parameters())
        logger.info(f"{len(hit_map)} RNA sequences contained proteins.")

        relocalizer = GenomeRelocalizer(self.aligner, genome, genome_db,
                                        self.genome_parameters(), self.options.extend, self.hit_log)
        batch: FragmentBatch = []
        for seq_id, text in rna.items():
            hits = hit_map.get(seq_id)
            if not hits:
                continue
            if len(batch) >= self.options.batch_size:
                self._process_batch(batch, relocalizer, sample_id, counters, outputs)
                batch = []
            batch.extend(self.process_sequence(seq_id, text, hits, extender, counters, outputs))
        self._process_batch(batch, relocalizer, sample_id, counters, outputs)

        logger.info(f"Sample {sample_id}: {counters.proteins} proteins in "
                    f"{counters.records} records from {counters.sequences} sequences")
        return counters

    def process_sequence(self, seq_id: str, text: str, hits: List[AlignmentHit],
                         extender: OrfExtender, counters: MatchCounters,
                         outputs: Sequence[MatchOutputStream] = ()) -> FragmentBatch:
        """Turn the profile hits of one RNA sequence into fragments

        Every accepted protein goes to the output streams as soon as it is
        found, whether or not its fragment is later anchored on the genome.
        """
        logger.debug(f"Processing RNA sequence {seq_id}.")
        counters.sequences += 1
        counters.profile_hits += len(hits)
        reverse = strand_vote(hits) < 0
        kept, working_text = consolidate_hits(hits, text)

        extended = []
        for hit in kept:
            loc = extender.extend(hit.loc, working_text)
            if loc is None:
                counters.extension_failures += 1
            else:
                extended.append(hit.with_location(loc))
        resolved = resolve_redundancy(extended)
        counters.redundant_hits += len(extended) - len(resolved)

        assembler = OperonAssembler(self.options.max_gap)
        loci = assembler.assemble(resolved, working_text, extender, counters, reverse)
        for protein in assembler.proteins:
            for output in outputs:
                output.record_protein(protein)
        fragments = emit_fragments(seq_id, working_text, loci)
        counters.fragments += len(fragments)
        logger.debug(f"{len(resolved)} proteins and {len(fragments)} operons found in {seq_id}.")
        return fragments

    def _process_batch(self, batch: FragmentBatch, relocalizer: GenomeRelocalizer,
                       sample_id: str, counters: MatchCounters,
                       outputs: Sequence[MatchOutputStream]) -> None:
        if not batch:
            return
        counters.batch_num += 1
        logger.debug(f"Processing RNA batch {counters.batch_num} with {len(batch)} fragments.")
        records = relocalizer.relocalize(batch, sample_id, counters)
        for record in records:
            for output in outputs:
                output.process(record)


def sample_output_paths(directory: str, sample_id: str) -> Tuple[str, str]:
    """GTI and protein FASTA paths for a sample"""
    return (os.path.join(directory, f"{sample_id}.gti"),
            os.path.join(directory, f"{sample_id}.faa"))
