""" Assemble overlapping fragments into contigs.

The fragments are aligned against each other with BWA, the alignments
become an overlap graph, and each linear component of the graph is merged
into one contig.
"""

import logging
from datetime import datetime
from pathlib import Path
from shutil import rmtree
from tempfile import mkdtemp
from typing import Iterable, Iterator, Mapping, Optional, TextIO

import networkx as nx

from olcontig.core.contig_synthesizer import synthesize_contig
from olcontig.core.linearizer import linearize
from olcontig.core.overlap_graph import build_overlap_graph, DEFAULT_TERM_IGNORE_LENGTH
from olcontig.core.path_walker import extract_path
from olcontig.utils.alignment_source import AlignmentRecord, open_alignments
from olcontig.utils.assembly_context import AssemblyContext, log
import olcontig.utils.assembly_events as events
from olcontig.utils.contig import Contig
from olcontig.utils.externals import Bwa
from olcontig.utils.fragment import Fragment
from olcontig.utils.sequence_store import load_fragments, write_fragments, write_contigs
from olcontig.utils.user_error import GraphInconsistency

logger = logging.getLogger(__name__)

CONTIG_NAME_FORMAT = 'contig.{:05d}'


def assemble_graph(graph: nx.Graph,
                   fragments: Mapping[str, Fragment],
                   skip_inconsistent: bool = False) -> Iterator[Contig]:
    """ Turn each component of a linearized graph into a contig.

    The graph is consumed: a path's vertices are removed once its contig is
    built. Components come out in no particular order.
    :param skip_inconsistent: drop a component that breaks the graph's
        invariants, instead of raising GraphInconsistency.
    """
    contig_count = 0
    while True:
        try:
            path = extract_path(graph)
            if not path:
                return
            contig = synthesize_contig(path,
                                       graph,
                                       fragments,
                                       CONTIG_NAME_FORMAT.format(contig_count + 1))
        except GraphInconsistency as ex:
            if not skip_inconsistent:
                raise
            component = nx.node_connected_component(graph, ex.vertex)
            log(logger,
                events.ComponentSkipped(ex.vertex, len(component), str(ex)),
                logging.WARNING)
            graph.remove_nodes_from(component)
            continue
        graph.remove_nodes_from(path)
        contig_count += 1
        log(logger,
            events.PathAssembled(contig.name, len(contig.layout), len(contig.seq)),
            logging.INFO)
        yield contig


def filter_contigs(contigs: Iterable[Contig], min_length: int) -> Iterator[Contig]:
    for contig in contigs:
        if len(contig.seq) < min_length:
            log(logger,
                events.ContigTooShort(contig.name, len(contig.seq), min_length),
                logging.INFO)
        else:
            yield contig


def assemble_alignments(records: Iterable[AlignmentRecord],
                        lengths: Mapping[str, int],
                        fragments: Mapping[str, Fragment],
                        term_ignore_length: int = DEFAULT_TERM_IGNORE_LENGTH,
                        skip_inconsistent: bool = False) -> Iterator[Contig]:
    """ Build, repair, and walk the overlap graph for a set of alignments. """
    graph = build_overlap_graph(records, lengths, term_ignore_length)
    linearize(graph)
    return assemble_graph(graph, fragments, skip_inconsistent)


def align_fragments(fragments: Iterable[Fragment],
                    tmp_dir: Path,
                    bwa: Bwa,
                    threads: int = 1) -> Path:
    """ Align all fragments against each other, and return the SAM path. """
    fasta_path = tmp_dir / 'fragments.fasta'
    with fasta_path.open('w') as fasta:
        write_fragments(fragments, fasta)
    sam_path = tmp_dir / 'overlaps.sam'
    bwa.index(fasta_path)
    bwa.mem(fasta_path, sam_path, threads)
    return sam_path


def assemble(fragments_path: Path,
             contigs_fasta: TextIO,
             work_dir: Optional[Path] = None,
             term_ignore_length: int = DEFAULT_TERM_IGNORE_LENGTH,
             min_length: int = 0,
             threads: int = 1,
             bwa_execname: str = 'bwa',
             skip_inconsistent: bool = False,
             keep_work_dir: bool = False) -> int:
    """ Assemble fragments from a FASTA or FASTQ file into contigs.

    :param fragments_path: FASTA or FASTQ file, optionally gzipped
    :param contigs_fasta: open file to write contigs to
    :param work_dir: folder for the aligner's temporary files (default is
        the system's temporary folder)
    :param term_ignore_length: longest clip that still counts as reaching
        the end of a fragment
    :param min_length: contigs shorter than this are dropped
    :param threads: number of aligner threads
    :param bwa_execname: name or path of the bwa executable
    :param skip_inconsistent: drop components that break the graph's
        invariants instead of aborting
    :param keep_work_dir: leave the temporary files for inspection
    :return: the number of contigs written
    """
    start_time = datetime.now()
    fragments = load_fragments(fragments_path)
    bwa = Bwa(execname=bwa_execname, logger=logger)
    logger.debug('Using bwa %s from %s.', bwa.version, bwa.path)

    tmp_dir = Path(mkdtemp(dir=work_dir, prefix='olcontig_'))
    with AssemblyContext.fresh() as ctx:
        try:
            sam_path = align_fragments(fragments.values(), tmp_dir, bwa, threads)
            with open_alignments(sam_path) as (lengths, records):
                contigs = assemble_alignments(records,
                                              lengths,
                                              fragments,
                                              term_ignore_length,
                                              skip_inconsistent)
                contigs = filter_contigs(contigs, min_length)
                contig_count = write_contigs(contigs, contigs_fasta)
        finally:
            if keep_work_dir:
                logger.info('Kept temporary files in %s.', tmp_dir)
            else:
                rmtree(tmp_dir, ignore_errors=True)

        dropped = {event.contig_name for event in ctx.find(events.ContigTooShort)}
        lengths_written = [event.length
                           for event in ctx.find(events.PathAssembled)
                           if event.contig_name not in dropped]
        anomalies = ctx.anomalies
    duration = datetime.now() - start_time
    logger.info('Assembled %d contigs from %d fragments in %s, '
                '%d bases in total, longest %d, %d anomalies.',
                contig_count,
                len(fragments),
                duration,
                sum(lengths_written),
                max(lengths_written, default=0),
                len(anomalies))
    return contig_count
