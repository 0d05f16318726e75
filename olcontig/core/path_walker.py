import logging
from typing import List

import networkx as nx

from olcontig.core.overlap_graph import Vertex
from olcontig.utils.user_error import GraphInconsistency

logger = logging.getLogger(__name__)


def check_neighbours(graph: nx.Graph, vertex: Vertex) -> List[Vertex]:
    neighbours = sorted(graph.adj[vertex])
    if len(neighbours) > 2:
        names = ', '.join(map(str, neighbours))
        raise GraphInconsistency(
            f'Junction at {vertex}, with neighbours {names}.',
            vertex)
    return neighbours


def walk(graph: nx.Graph, start: Vertex, step: Vertex, max_steps: int) -> List[Vertex]:
    """ Follow the graph away from start, through step, to a free end.

    :return: the vertices visited, beginning with step
    """
    previous, current = start, step
    visited = [current]
    while True:
        neighbours = check_neighbours(graph, current)
        if len(neighbours) < 2:
            return visited
        if len(visited) >= max_steps:
            raise GraphInconsistency(
                f'Walk from {start} did not end after {max_steps} steps.',
                start)
        following = neighbours[0] if neighbours[1] == previous else neighbours[1]
        previous, current = current, following
        visited.append(current)


def extract_path(graph: nx.Graph) -> List[Vertex]:
    """ Find a maximal path through one connected component.

    The walk starts at the smallest vertex, so the result only depends on
    the current state of the graph. The graph is not changed.
    :return: vertices from one free end to the other, or an empty list when
        the graph is empty.
    :raises GraphInconsistency: at a vertex with more than two neighbours.
    """
    if graph.number_of_nodes() == 0:
        return []
    start = min(graph)
    max_steps = len(nx.node_connected_component(graph, start))
    successors = check_neighbours(graph, start)
    if not successors:
        return [start]
    if len(successors) == 1:
        return [start] + walk(graph, start, successors[0], max_steps)
    backward = walk(graph, start, successors[0], max_steps)
    forward = walk(graph, start, successors[1], max_steps)
    backward.reverse()
    return backward + [start] + forward
