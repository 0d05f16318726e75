import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import networkx as nx

from olcontig.core.overlap_graph import Vertex, find_overlap
from olcontig.utils.assembly_context import log
import olcontig.utils.assembly_events as events

logger = logging.getLogger(__name__)


@dataclass
class LinearizationReport:
    isolates: List[Vertex] = field(default_factory=list)
    popped: List[Tuple[Vertex, Vertex]] = field(default_factory=list)
    n_components: int = 0


def report_isolates(graph: nx.Graph) -> List[Vertex]:
    isolates = sorted(nx.isolates(graph))
    if isolates:
        log(logger, events.IsolatedVertices(tuple(isolates)), logging.WARNING)
    return isolates


def report_singletons(graph: nx.Graph) -> None:
    singletons = sorted({vertex.fragment_id
                         for vertex in graph
                         if find_overlap(graph, vertex) is None and
                         find_overlap(graph, vertex.partner) is None})
    if singletons:
        log(logger, events.SingletonFragments(tuple(singletons)), logging.INFO)


def pop_cycle(graph: nx.Graph, cycle: List[Tuple[Vertex, Vertex]]) -> Tuple[Vertex, Vertex]:
    """ Break a cycle by removing one overlap edge from its first vertex.

    This is only a heuristic: any overlap in the cycle would do, and there is
    no attempt to pick the one that is wrong.
    """
    vertex = cycle[0][0]
    for neighbour in sorted(graph.adj[vertex]):
        if neighbour.fragment_id != vertex.fragment_id:
            graph.remove_edge(vertex, neighbour)
            log(logger,
                events.CyclePopped(len(cycle), vertex, neighbour),
                logging.WARNING)
            return vertex, neighbour
    raise ValueError(f'No overlap edge at {vertex} in cycle {cycle!r}.')


def linearize(graph: nx.Graph) -> LinearizationReport:
    """ Reduce the graph to a set of simple paths, in place.

    Isolated vertices and cycles are reported, but not treated as errors.
    """
    report = LinearizationReport()
    report.isolates = report_isolates(graph)
    report_singletons(graph)
    while True:
        try:
            cycle = nx.find_cycle(graph)
        except nx.NetworkXNoCycle:
            break
        report.popped.append(pop_cycle(graph, cycle))

    report.n_components = nx.number_connected_components(graph)
    log(logger, events.ComponentsFound(report.n_components), logging.INFO)
    return report
