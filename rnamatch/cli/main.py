# rnamatch/cli/main.py
import argparse
import json
import os
import sys
import logging
from typing import List, Optional

from rnamatch.config import ConfigManager
from rnamatch.core.command_utils import check_tool_requirements
from rnamatch.core.errors import handle_exceptions
from rnamatch.core.logging_config import LoggingManager
from rnamatch.core.options import MatchOptions
from rnamatch.exceptions import ConfigurationError, FileOperationError
from rnamatch.pipelines.runner import BlastComponentFactory, SampleResult, run_directory
from rnamatch.pipelines.verify_run import verify_directory
from rnamatch.reports.hit_log import GenomeHitLog
from rnamatch.reports.summary import SummaryReporter

VERIFY_REPORT_FILE = "verify_report.txt"


def add_match_options(parser: argparse.ArgumentParser) -> None:
    """Threshold flags; each overrides the configured value when given"""
    group = parser.add_argument_group('match options')
    group.add_argument('-b', '--batch-size', type=int,
                       help='Number of RNA fragments submitted to each genome search')
    group.add_argument('-x', '--extend', type=int,
                       help='Distance to extend the genome hit on either side')
    group.add_argument('--max-evalue', type=float,
                       help='Maximum permissible e-value for a match')
    group.add_argument('--min-pct', dest='min_query_coverage', type=float,
                       help='Minimum percent of an RNA fragment that must match genome DNA')
    group.add_argument('--min-ident', dest='min_percent_identity', type=float,
                       help='Minimum percent identity for a genome hit')
    group.add_argument('--max-gap', type=int,
                       help='Maximum gap between proteins joined into an operon')
    group.add_argument('--min-query', dest='min_profile_coverage', type=float,
                       help='Minimum percent of a profile that must match in a protein hit')
    group.add_argument('--min-qbsc', dest='min_query_bit_score', type=float,
                       help='Minimum query-scaled bit score for profile hits')
    group.add_argument('--min-qident', dest='min_query_identity', type=float,
                       help='Minimum query identity fraction for profile hits')
    group.add_argument('--starts', type=str,
                       help='Algorithm for finding start codons (nearest, longest, biased)')
    group.add_argument('--temp-dir', type=str,
                       help='Directory for temporary BLAST databases')
    group.add_argument('--rna-log', type=str,
                       help='File to receive the genome hit anchoring each RNA fragment')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Find proteins in assembled RNA and anchor them on the reference genome')

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stderr')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')
    parser.add_argument('--json', action='store_true',
                        help='Output results as JSON')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    match_parser = subparsers.add_parser('match', help='Process selected samples of a directory')
    match_parser.add_argument('profile_dir', help='Protein profile directory')
    match_parser.add_argument('in_dir', help='Directory containing sample FASTA files and genomes')
    match_parser.add_argument('samples', nargs='+', help='IDs of the samples to process')
    add_match_options(match_parser)

    run_parser = subparsers.add_parser('run', help='Process every sample of a directory')
    run_parser.add_argument('profile_dir', help='Protein profile directory')
    run_parser.add_argument('in_dir', help='Directory containing sample FASTA files and genomes')
    run_parser.add_argument('--workers', type=int,
                            help='Number of samples processed in parallel')
    run_parser.add_argument('--verify', action='store_true',
                            help='Produce verification reports after the run')
    add_match_options(run_parser)

    verify_parser = subparsers.add_parser('verify', help='Verify the proteins found in a run directory')
    verify_parser.add_argument('run_dir', help='Directory containing GTI and GTO files')
    verify_parser.add_argument('--report', type=str,
                               help='Write the per-protein report to this file instead of stdout')
    verify_parser.add_argument('--kmer-size', type=int,
                               help='Protein k-mer length for distances')

    return parser


def print_results(results: List[SampleResult], as_json: bool) -> None:
    if as_json:
        payload = [{
            'sample_id': r.sample_id,
            'genome_id': r.genome_id,
            'success': r.success,
            'error': r.error,
            'elapsed': round(r.elapsed, 1),
            'counters': r.counters.to_dict()
        } for r in results]
        print(json.dumps(payload, indent=2))
        return
    reporter = SummaryReporter(sys.stdout)
    reporter.start()
    for result in results:
        reporter.add(result)
    reporter.finish()


def run_match(args, config_manager: ConfigManager, logger: logging.Logger) -> int:
    overrides = {name: getattr(args, name, None) for name in (
        'batch_size', 'extend', 'max_evalue', 'min_query_coverage', 'min_percent_identity',
        'max_gap', 'min_profile_coverage', 'min_query_bit_score', 'min_query_identity', 'starts')}
    options = MatchOptions.from_config(config_manager.config, overrides)
    options.validate()

    if not os.path.isdir(args.profile_dir):
        raise FileOperationError(f"Profile directory {args.profile_dir} not found or invalid")
    logger.info(f"Input sequences will be profiled from {args.profile_dir}.")

    tools = [config_manager.get_tool_path(name) for name in ('makeblastdb', 'blastn', 'tblastn')]
    available, missing = check_tool_requirements(tools)
    if not available:
        raise ConfigurationError(f"Required BLAST+ tools not found: {', '.join(missing)}",
                                 {'missing': missing})

    temp_dir = args.temp_dir or config_manager.get_path('temp_dir', './Temp')
    workers = getattr(args, 'workers', None) or config_manager.get('pipeline.workers', 1)
    samples = args.samples if args.command == 'match' else None

    factory = BlastComponentFactory(config_manager, args.profile_dir)
    if args.rna_log:
        try:
            log_stream = open(args.rna_log, 'w')
        except OSError as e:
            raise FileOperationError(f"Cannot create RNA hit log {args.rna_log}: {str(e)}") from e
        with log_stream:
            hit_log = GenomeHitLog(log_stream)
            hit_log.start()
            results = run_directory(args.in_dir, options, factory, temp_dir,
                                    workers=workers, sample_ids=samples, hit_log=hit_log)
            hit_log.finish()
        logger.info(f"{hit_log.count} genome hits logged to {args.rna_log}")
    else:
        results = run_directory(args.in_dir, options, factory, temp_dir,
                                workers=workers, sample_ids=samples)
    print_results(results, args.json)

    if getattr(args, 'verify', False):
        logger.info("Producing verification reports.")
        report_path = os.path.join(args.in_dir, VERIFY_REPORT_FILE)
        with open(report_path, 'w') as report:
            verify_directory(args.in_dir, report, config_manager.get('verify.kmer_size', 8))
        logger.info(f"Verification report written to {report_path}")

    failed = [r.sample_id for r in results if not r.success]
    if failed:
        logger.error(f"{len(failed)} samples failed: {', '.join(failed)}")
        return 1
    return 0


def run_verify(args, config_manager: ConfigManager, logger: logging.Logger) -> int:
    kmer_size = args.kmer_size or config_manager.get('verify.kmer_size', 8)
    report_path = args.report
    if args.json and not report_path:
        report_path = os.path.join(args.run_dir, VERIFY_REPORT_FILE)

    if report_path:
        with open(report_path, 'w') as report:
            results = verify_directory(args.run_dir, report, kmer_size)
        logger.info(f"Verification report written to {report_path}")
    else:
        results = verify_directory(args.run_dir, sys.stdout, kmer_size)

    if args.json:
        print(results.to_json(orient='records', indent=2))
    return 0


@handle_exceptions
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config_manager = ConfigManager(args.config)

    logger = LoggingManager.configure(
        verbose=args.verbose > 0,
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="rnamatch",
        config=config_manager.config
    )
    if args.config:
        logger.info(f"Configuration loaded from {args.config}")

    if args.command in ('match', 'run'):
        return run_match(args, config_manager, logger)
    elif args.command == 'verify':
        return run_verify(args, config_manager, logger)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
