""" Read pairwise fragment alignments from the aligner's SAM output. """

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Tuple

from aligntools import Cigar, CigarActions
import pysam

logger = logging.getLogger(__name__)

SCORE_TAG = 'AS'


@dataclass(frozen=True)
class AlignmentRecord:
    """
    One alignment of a query fragment against a reference fragment.

    `reference_start` is 1-based, as in the SAM POS column. `cigar` holds
    (length, action) pairs in the aligned query's orientation.
    """

    reference_name: str
    query_name: str
    is_reverse: bool
    reference_start: int
    cigar: Sequence[Tuple[int, CigarActions]]
    score: int

    @staticmethod
    def make(reference_name: str,
             query_name: str,
             cigar: str,
             reference_start: int = 1,
             score: int = 0,
             is_reverse: bool = False) -> 'AlignmentRecord':
        """ Build a record from a CIGAR string, for scripts and tests. """
        return AlignmentRecord(reference_name=reference_name,
                               query_name=query_name,
                               is_reverse=is_reverse,
                               reference_start=reference_start,
                               cigar=run_lengths(Cigar.coerce(cigar)),
                               score=score)


def run_lengths(cigar: Cigar) -> Tuple[Tuple[int, CigarActions], ...]:
    return tuple((sum(1 for _ in group), action)
                 for action, group in groupby(cigar.iterate_operations()))


def convert_segment(segment: pysam.AlignedSegment) -> Optional[AlignmentRecord]:
    """ Convert a pysam segment, or return None if it isn't usable. """
    if segment.is_unmapped or not segment.cigartuples:
        return None
    if not segment.has_tag(SCORE_TAG):
        logger.debug('Skipping alignment of %s to %s without %s tag.',
                     segment.query_name,
                     segment.reference_name,
                     SCORE_TAG)
        return None
    cigar = tuple((length, CigarActions(operation))
                  for operation, length in segment.cigartuples)
    return AlignmentRecord(reference_name=segment.reference_name,
                           query_name=segment.query_name,
                           is_reverse=segment.is_reverse,
                           reference_start=segment.reference_start + 1,
                           cigar=cigar,
                           score=int(segment.get_tag(SCORE_TAG)))


def iterate_records(alignments: pysam.AlignmentFile) -> Iterator[AlignmentRecord]:
    for segment in alignments:
        record = convert_segment(segment)
        if record is not None:
            yield record


@contextmanager
def open_alignments(sam_path: Path) -> Iterator[Tuple[Dict[str, int],
                                                      Iterator[AlignmentRecord]]]:
    """ Open a SAM file for one pass.

    Yields the fragment length table from the header, and an iterator of
    records in file order. The iterator is only valid inside the context.
    """
    with pysam.AlignmentFile(str(sam_path), 'r') as alignments:
        lengths = dict(zip(alignments.references, alignments.lengths))
        logger.debug('Read %d reference lengths from %s.',
                     len(lengths),
                     sam_path)
        yield lengths, iterate_records(alignments)
