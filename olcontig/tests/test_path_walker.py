import networkx as nx
import pytest

from olcontig.core.overlap_graph import build_overlap_graph, add_internal_edges, End, Vertex
from olcontig.core.path_walker import extract_path
from olcontig.utils.alignment_source import AlignmentRecord
from olcontig.utils.user_error import GraphInconsistency


def vertices(*names):
    """ Expand names like 'F1/5' into vertices. """
    result = []
    for name in names:
        fragment_id, end = name.split('/')
        result.append(Vertex(fragment_id, End.FIVE_PRIME if end == '5' else End.THREE_PRIME))
    return result


def dovetail(reference, query):
    """ query's 5' end overlaps reference's 3' end. """
    return AlignmentRecord.make(reference, query, '4M4S', reference_start=5, score=8)


def test_empty_graph():
    assert extract_path(nx.Graph()) == []


def test_singleton():
    graph = build_overlap_graph([], {'F1': 8})

    assert extract_path(graph) == vertices('F1/5', 'F1/3')


def test_chain():
    graph = build_overlap_graph([dovetail('F1', 'F2')],
                                {'F1': 8, 'F2': 8},
                                term_ignore_length=4)

    assert extract_path(graph) == vertices('F1/5', 'F1/3', 'F2/5', 'F2/3')


def test_start_in_middle():
    """ The smallest vertex is F1/5, in the middle of F3-F1-F2. """
    graph = build_overlap_graph([dovetail('F2', 'F1'), dovetail('F1', 'F3')],
                                {'F1': 8, 'F2': 8, 'F3': 8},
                                term_ignore_length=4)

    path = extract_path(graph)

    assert path == vertices('F3/3', 'F3/5', 'F1/3', 'F1/5', 'F2/3', 'F2/5')


def test_graph_unchanged():
    graph = build_overlap_graph([dovetail('F1', 'F2')],
                                {'F1': 8, 'F2': 8, 'F3': 8},
                                term_ignore_length=4)

    path = extract_path(graph)

    assert len(path) == 4
    assert graph.number_of_nodes() == 6
    assert graph.number_of_edges() == 4


def test_one_component_at_a_time():
    graph = build_overlap_graph([dovetail('F1', 'F2'), dovetail('F3', 'F4')],
                                {'F1': 8, 'F2': 8, 'F3': 8, 'F4': 8},
                                term_ignore_length=4)

    first = extract_path(graph)
    graph.remove_nodes_from(first)
    second = extract_path(graph)
    graph.remove_nodes_from(second)

    assert first == vertices('F1/5', 'F1/3', 'F2/5', 'F2/3')
    assert second == vertices('F3/5', 'F3/3', 'F4/5', 'F4/3')
    assert extract_path(graph) == []


def test_junction():
    graph = nx.Graph()
    add_internal_edges(graph, ['F1', 'F2', 'F3'])
    f1_3, f2_5, f3_5 = vertices('F1/3', 'F2/5', 'F3/5')
    graph.add_edge(f1_3, f2_5, internal=False)
    graph.add_edge(f1_3, f3_5, internal=False)

    with pytest.raises(GraphInconsistency, match='Junction') as context:
        extract_path(graph)

    assert context.value.vertex == f1_3


def test_cycle_stops():
    records = [dovetail('A', 'B'), dovetail('B', 'C'), dovetail('C', 'A')]
    graph = build_overlap_graph(records,
                                {'A': 8, 'B': 8, 'C': 8},
                                term_ignore_length=4)

    with pytest.raises(GraphInconsistency, match='did not end'):
        extract_path(graph)


def test_no_repeated_vertices():
    names = [f'F{i:02d}' for i in range(10)]
    records = [dovetail(reference, query)
               for reference, query in zip(names, names[1:])]
    graph = build_overlap_graph(records,
                                {name: 8 for name in names},
                                term_ignore_length=4)

    path = extract_path(graph)

    assert len(path) == 20
    assert len(set(path)) == 20
    assert path[0] == Vertex('F00', End.FIVE_PRIME)
    assert path[-1] == Vertex('F09', End.THREE_PRIME)
