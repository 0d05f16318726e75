#! /usr/bin/env python

"""
Command-line interface for olcontig: assemble overlapping fragments from a
FASTA or FASTQ file into contigs.
"""

import argparse
import logging.config
import os
import sys
from pathlib import Path
from typing import Sequence

from olcontig.core.assemble import assemble
from olcontig.core.overlap_graph import DEFAULT_TERM_IGNORE_LENGTH
from olcontig.utils.user_error import UserError, GraphInconsistency
try:
    from olcontig.utils.logging_override import LOGGING  # type: ignore[import]
except ImportError:
    from olcontig.utils.logging_config import LOGGING

logger = logging.getLogger('olcontig')


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='olcontig',
        description='Assemble overlapping fragments into contigs.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('fragments',
                        type=Path,
                        help='FASTA or FASTQ file with the fragments to assemble, '
                             'optionally gzipped.')
    parser.add_argument('contigs',
                        type=argparse.FileType('w'),
                        nargs='?',
                        default='-',
                        help='Output FASTA file for assembled contigs.')
    parser.add_argument('--term-ignore-length',
                        type=int,
                        default=DEFAULT_TERM_IGNORE_LENGTH,
                        help='Longest clip that still counts as reaching the '
                             'end of a fragment.')
    parser.add_argument('--min-length',
                        type=int,
                        default=0,
                        help='Drop contigs shorter than this.')
    parser.add_argument('--threads',
                        type=int,
                        default=os.environ.get('OLCONTIG_THREADS', 1),
                        help='Number of aligner threads.')
    parser.add_argument('--bwa',
                        default=os.environ.get('OLCONTIG_BWA', 'bwa'),
                        help='Name or path of the bwa executable.')
    parser.add_argument('--work-dir',
                        type=Path,
                        default=os.environ.get('OLCONTIG_WORK_DIR'),
                        help='Folder for temporary files.')
    parser.add_argument('--keep-work-dir',
                        action='store_true',
                        help='Keep temporary files after the run.')
    parser.add_argument('--skip-inconsistent',
                        action='store_true',
                        help='Skip graph components that break the overlap '
                             'rules, instead of stopping.')

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument('--verbose', action='store_true', help='Increase output verbosity.')
    verbosity_group.add_argument('--debug', action='store_true', help='Maximum output verbosity.')
    verbosity_group.add_argument('--quiet', action='store_true', help='Minimize output verbosity.')

    args = parser.parse_args(argv)
    if args.term_ignore_length < 1:
        parser.error('--term-ignore-length must be at least 1.')
    if args.threads < 1:
        parser.error('--threads must be at least 1.')
    return args


def main(argv: Sequence[str]) -> int:
    args = parse_args(argv)

    logging.config.dictConfig(LOGGING)
    if args.quiet:
        logger.setLevel(logging.ERROR)
    elif args.verbose:
        logger.setLevel(logging.INFO)
    elif args.debug:
        logger.setLevel(logging.DEBUG)

    try:
        assemble(args.fragments,
                 args.contigs,
                 work_dir=args.work_dir,
                 term_ignore_length=args.term_ignore_length,
                 min_length=args.min_length,
                 threads=args.threads,
                 bwa_execname=args.bwa,
                 skip_inconsistent=args.skip_inconsistent,
                 keep_work_dir=args.keep_work_dir)
    except UserError as ex:
        logger.error('%s', ex)
        return ex.code
    except GraphInconsistency as ex:
        logger.error('Overlap graph is inconsistent: %s', ex)
        return 1
    finally:
        if args.contigs is not sys.stdout:
            args.contigs.close()
    return 0


def cli() -> None:
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        sys.exit(1)


if __name__ == '__main__': cli()  # noqa
