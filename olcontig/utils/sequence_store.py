""" Load fragments from FASTA or FASTQ files, and write sequences back out.

Plain and gzip-compressed files are both accepted. The format is detected
from the first record marker, not from the file name.
"""

import gzip
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, TextIO, IO

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from olcontig.utils.contig import Contig
from olcontig.utils.fragment import Fragment
from olcontig.utils.user_error import UserError, SequenceFormatError, DuplicateFragmentError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
FORMAT_MARKERS = {'>': 'fasta', '@': 'fastq'}


def open_sequence_file(path: Path) -> IO[str]:
    with path.open('rb') as raw:
        magic = raw.read(2)
    if magic == GZIP_MAGIC:
        return gzip.open(path, 'rt')
    return path.open()


def detect_format(path: Path) -> str:
    """ Return the Biopython format name for a fragment file.

    :raises SequenceFormatError: if the file is empty or its first record
        is neither FASTA nor FASTQ.
    """
    with open_sequence_file(path) as f:
        for line in f:
            if line.strip():
                marker = line[0]
                break
        else:
            raise SequenceFormatError('No sequence records found in %s.', path)
    try:
        return FORMAT_MARKERS[marker]
    except KeyError:
        raise SequenceFormatError(
            'Unknown sequence format in %s: expected FASTA or FASTQ.',
            path) from None


def read_fragments(path: Path) -> Iterator[Fragment]:
    file_format = detect_format(path)
    with open_sequence_file(path) as f:
        try:
            for record in SeqIO.parse(f, file_format):
                yield Fragment(record.id, str(record.seq).upper())
        except ValueError as ex:
            raise SequenceFormatError('Invalid %s file %s: %s',
                                      file_format.upper(),
                                      path,
                                      ex) from ex


def load_fragments(path: Path) -> Dict[str, Fragment]:
    """ Read all fragments from a FASTA or FASTQ file.

    :param path: the file to read, optionally gzip-compressed
    :return: {fragment_id: fragment} in file order
    :raises SequenceFormatError: for anything but FASTA or FASTQ
    :raises DuplicateFragmentError: if two records share an id
    """
    if not path.is_file():
        raise UserError('Fragment file %s does not exist.', path)
    fragments: Dict[str, Fragment] = {}
    for fragment in read_fragments(path):
        if fragment.name in fragments:
            raise DuplicateFragmentError(fragment.name, path)
        fragments[fragment.name] = fragment
    logger.info('Loaded %d fragments from %s.', len(fragments), path)
    return fragments


def write_fragments(fragments: Iterable[Fragment], fasta: TextIO) -> int:
    """ Write fragments as plain FASTA, the input the aligner expects. """
    records = (SeqRecord(Seq(fragment.seq),
                         id=fragment.name,
                         name=fragment.name,
                         description='')
               for fragment in fragments)
    return SeqIO.write(records, fasta, 'fasta')


def write_contigs(contigs: Iterable[Contig], fasta: TextIO) -> int:
    records = (SeqRecord(Seq(contig.seq),
                         id=contig.name,
                         name=contig.name,
                         description=contig.description)
               for contig in contigs)
    return SeqIO.write(records, fasta, 'fasta')
