""" Build the overlap graph from pairwise fragment alignments.

Vertices are fragment ends. Each fragment has an internal edge between its
two ends, and accepted dovetail overlaps join the ends of two different
fragments. Every vertex keeps at most one overlap edge: when two alignments
compete for a fragment end, the higher score wins, and the incumbent wins
a tie.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional, Sequence, Tuple

from aligntools import CigarActions
import networkx as nx

from olcontig.utils.alignment_source import AlignmentRecord
from olcontig.utils.assembly_context import log
import olcontig.utils.assembly_events as events
from olcontig.utils.fragment import Offset

logger = logging.getLogger(__name__)

# Clips shorter than this still count as reaching the end of a fragment.
DEFAULT_TERM_IGNORE_LENGTH = 10

CLIP_ACTIONS = (CigarActions.SOFT_CLIPPED, CigarActions.HARD_CLIPPED)
REFERENCE_ACTIONS = (CigarActions.MATCH,
                     CigarActions.SEQ_MATCH,
                     CigarActions.MISMATCH,
                     CigarActions.DELETE)


class End(IntEnum):
    FIVE_PRIME = 0
    THREE_PRIME = 1

    def __str__(self) -> str:
        return "5'" if self is End.FIVE_PRIME else "3'"

    @property
    def other(self) -> 'End':
        return End.THREE_PRIME if self is End.FIVE_PRIME else End.FIVE_PRIME


class Vertex(NamedTuple):
    fragment_id: str
    end: End

    def __str__(self) -> str:
        return f'{self.fragment_id}/{str(self.end)}'

    @property
    def partner(self) -> 'Vertex':
        """ The other end of the same fragment. """
        return Vertex(self.fragment_id, self.end.other)


@dataclass(frozen=True)
class Overlap:
    """ An accepted overlap between a query and a reference fragment end. """

    score: int
    reverse: bool  # The query aligned to the reverse strand.
    query: Vertex
    reference: Vertex
    query_offset: Offset
    reference_offset: Offset

    def offset_for(self, vertex: Vertex) -> Offset:
        if vertex == self.query:
            return self.query_offset
        if vertex == self.reference:
            return self.reference_offset
        raise KeyError(vertex)

    def is_reversed_for(self, vertex: Vertex) -> bool:
        """ Whether the alignment used this end's fragment reversed. """
        if vertex == self.query:
            return self.reverse
        if vertex == self.reference:
            return False
        raise KeyError(vertex)


def clip_lengths(cigar: Sequence[Tuple[int, CigarActions]]) -> Tuple[int, int]:
    """ Total size of the clips before and after the aligned query span. """
    leading = trailing = 0
    for size, action in cigar:
        if action not in CLIP_ACTIONS:
            break
        leading += size
    for size, action in reversed(cigar):
        if action not in CLIP_ACTIONS:
            break
        trailing += size
    return leading, trailing


def overlap_length(cigar: Sequence[Tuple[int, CigarActions]]) -> int:
    """ Number of reference positions covered by the alignment. """
    return sum(size for size, action in cigar if action in REFERENCE_ACTIONS)


def find_overlap(graph: nx.Graph,
                 vertex: Vertex) -> Optional[Tuple[Vertex, Overlap]]:
    if vertex not in graph:
        return None
    for neighbour, data in graph.adj[vertex].items():
        overlap = data.get('overlap')
        if overlap is not None:
            return neighbour, overlap
    return None


def iterate_overlaps(graph: nx.Graph) -> Iterator[Overlap]:
    for _, _, overlap in graph.edges(data='overlap'):
        if overlap is not None:
            yield overlap


def is_internal(graph: nx.Graph, vertex1: Vertex, vertex2: Vertex) -> bool:
    return bool(graph.edges[vertex1, vertex2].get('internal'))


def add_alignment(graph: nx.Graph,
                  record: AlignmentRecord,
                  lengths: Mapping[str, int],
                  term_ignore_length: int = DEFAULT_TERM_IGNORE_LENGTH) -> bool:
    """ Add one alignment's overlap to the graph, if it earns a place.

    :return: True if an overlap edge was added.
    """
    if record.reference_name == record.query_name:
        return False
    for fragment_id in (record.reference_name, record.query_name):
        if fragment_id not in lengths:
            log(logger, events.UnknownFragment(fragment_id), logging.WARNING)
            return False

    qprel, qsufl = clip_lengths(record.cigar)
    q5 = qprel < term_ignore_length
    q3 = qsufl < term_ignore_length
    if q5 == q3:
        # Contained, or not reaching either end.
        return False

    # The reference ends mirror the query ends at the same junction.
    r3, r5 = q5, q3
    query_offset: Offset = (-qsufl,) if q5 else (0, qprel)
    if record.is_reverse:
        q5, q3 = q3, q5

    query = Vertex(record.query_name, End.FIVE_PRIME if q5 else End.THREE_PRIME)
    reference = Vertex(record.reference_name,
                       End.FIVE_PRIME if r5 else End.THREE_PRIME)

    incumbents = []
    for vertex in (query, reference):
        found = find_overlap(graph, vertex)
        if found is None:
            continue
        neighbour, incumbent = found
        if incumbent.score >= record.score:
            return False
        incumbents.append((vertex, neighbour, incumbent))
    for vertex, neighbour, incumbent in incumbents:
        if graph.has_edge(vertex, neighbour):
            graph.remove_edge(vertex, neighbour)
            log(logger, events.OverlapReplaced(vertex, incumbent.score, record.score))

    skipped = record.reference_start - 1
    reference_offset: Offset
    if reference.end == End.FIVE_PRIME:
        uncovered = (lengths[record.reference_name] - skipped -
                     overlap_length(record.cigar))
        reference_offset = (-uncovered,)
    else:
        reference_offset = (0, skipped)

    graph.add_edge(query,
                   reference,
                   internal=False,
                   overlap=Overlap(score=record.score,
                                   reverse=record.is_reverse,
                                   query=query,
                                   reference=reference,
                                   query_offset=query_offset,
                                   reference_offset=reference_offset))
    return True


def add_internal_edges(graph: nx.Graph, fragment_ids: Iterable[str]) -> None:
    for fragment_id in fragment_ids:
        graph.add_edge(Vertex(fragment_id, End.FIVE_PRIME),
                       Vertex(fragment_id, End.THREE_PRIME),
                       internal=True,
                       overlap=None)


def build_overlap_graph(records: Iterable[AlignmentRecord],
                        lengths: Mapping[str, int],
                        term_ignore_length: int = DEFAULT_TERM_IGNORE_LENGTH,
                        ) -> nx.Graph:
    """ Turn an alignment stream into an overlap graph.

    :param records: alignments in the order the aligner wrote them
    :param lengths: {fragment_id: length} for every known fragment
    :param term_ignore_length: longest clip that still counts as reaching
        the end of a fragment
    :return: a graph with an internal edge for every fragment in lengths,
        and at most one overlap edge at each vertex
    """
    graph = nx.Graph()
    record_count = accepted_count = 0
    for record in records:
        record_count += 1
        if add_alignment(graph, record, lengths, term_ignore_length):
            accepted_count += 1
    add_internal_edges(graph, lengths)

    overlap_count = sum(1 for _ in iterate_overlaps(graph))
    logger.debug('Accepted %d of %d alignments, %d replaced later.',
                 accepted_count,
                 record_count,
                 accepted_count - overlap_count)
    log(logger,
        events.GraphBuilt(record_count, len(lengths), overlap_count),
        logging.INFO)
    return graph
