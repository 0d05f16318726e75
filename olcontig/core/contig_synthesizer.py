import logging
from typing import Mapping, Sequence

import networkx as nx

from olcontig.core.overlap_graph import End, Overlap, Vertex
from olcontig.utils.contig import Contig
from olcontig.utils.fragment import Fragment, negate_offset
from olcontig.utils.user_error import GraphInconsistency

logger = logging.getLogger(__name__)


def get_fragment(fragments: Mapping[str, Fragment], vertex: Vertex) -> Fragment:
    """ Fresh copy of a vertex's fragment, turned to be entered at vertex. """
    try:
        fragment = fragments[vertex.fragment_id].copy()
    except KeyError:
        raise GraphInconsistency(
            f'Fragment {vertex.fragment_id!r} is in the graph, but was not loaded.',
            vertex) from None
    if vertex.end == End.THREE_PRIME:
        fragment.reverse_complement()
    return fragment


def get_overlap(graph: nx.Graph, left: Vertex, right: Vertex) -> Overlap:
    overlap = None
    if graph.has_edge(left, right):
        overlap = graph.edges[left, right].get('overlap')
    if overlap is None:
        raise GraphInconsistency(f'No overlap between {left} and {right}.', right)
    return overlap


def check_path(path: Sequence[Vertex]) -> None:
    if not path:
        raise ValueError('Cannot build a contig from an empty path.')
    if len(path) % 2:
        raise GraphInconsistency(
            f'Path from {path[0]} has an odd number of vertices: {len(path)}.',
            path[0])
    for i in range(0, len(path), 2):
        if path[i + 1] != path[i].partner:
            raise GraphInconsistency(
                f'Path leaves fragment {path[i].fragment_id} at {path[i + 1]}.',
                path[i])


def synthesize_contig(path: Sequence[Vertex],
                      graph: nx.Graph,
                      fragments: Mapping[str, Fragment],
                      name: str) -> Contig:
    """ Merge the fragments along a path into one sequence.

    Each fragment after the first contributes only the part that extends
    past its overlap with the previous fragment.
    :param path: vertices from one free end to the other, two per fragment
    :param graph: the overlap graph that holds the path's overlap edges
    :param fragments: {fragment_id: fragment}, left unchanged
    :param name: the contig's name
    """
    check_path(path)
    merged = get_fragment(fragments, path[0])
    layout = [merged.name + merged.strand]
    for i in range(2, len(path), 2):
        previous, current = path[i - 1], path[i]
        overlap = get_overlap(graph, previous, current)
        fragment = get_fragment(fragments, current)
        offset = overlap.offset_for(current)
        if fragment.is_reversed != overlap.is_reversed_for(current):
            offset = negate_offset(offset)
        extension = fragment.substr_seq(offset)
        logger.debug('Extending %s by %d bases of %s with offset %s.',
                     name,
                     len(extension),
                     current,
                     offset)
        merged = merged.concat(extension)
        layout.append(fragment.name + fragment.strand)
    return Contig(name, merged.seq, tuple(layout))
