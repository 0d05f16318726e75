from dataclasses import dataclass
from typing import Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from olcontig.core.overlap_graph import Vertex


@dataclass(frozen=True)
class GraphBuilt:
    n_records: int
    n_fragments: int
    n_overlaps: int

    def __str__(self) -> str:
        return f"Built overlap graph with {self.n_fragments} fragments and " \
            f"{self.n_overlaps} overlaps from {self.n_records} alignments."


@dataclass(frozen=True)
class OverlapReplaced:
    vertex: 'Vertex'
    old_score: int
    new_score: int

    def __str__(self) -> str:
        return f"Replaced overlap at {self.vertex} with score {self.old_score}" \
            f" by one with score {self.new_score}."


@dataclass(frozen=True)
class UnknownFragment:
    fragment_id: str

    def __str__(self) -> str:
        return f"Ignoring alignment with fragment {self.fragment_id}," \
            f" which has no length in the alignment header."


@dataclass(frozen=True)
class IsolatedVertices:
    vertices: Tuple['Vertex', ...]

    def __str__(self) -> str:
        names = ', '.join(map(str, self.vertices))
        return f"Found {len(self.vertices)} isolated vertices: {names}."


@dataclass(frozen=True)
class SingletonFragments:
    fragment_ids: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{len(self.fragment_ids)} fragments have no overlaps."


@dataclass(frozen=True)
class CyclePopped:
    cycle_length: int
    left: 'Vertex'
    right: 'Vertex'

    def __str__(self) -> str:
        return f"Popped a cycle of {self.cycle_length} edges by removing" \
            f" the overlap between {self.left} and {self.right}."


@dataclass(frozen=True)
class ComponentsFound:
    n_components: int

    def __str__(self) -> str:
        return f"Graph has {self.n_components} linear components."


@dataclass(frozen=True)
class PathAssembled:
    contig_name: str
    n_fragments: int
    length: int

    def __str__(self) -> str:
        return f"Assembled {self.contig_name} from {self.n_fragments}" \
            f" fragments, length {self.length}."


@dataclass(frozen=True)
class ComponentSkipped:
    vertex: 'Vertex'
    n_vertices: int
    reason: str

    def __str__(self) -> str:
        return f"Skipped component of {self.n_vertices} vertices at" \
            f" {self.vertex}: {self.reason}"


@dataclass(frozen=True)
class ContigTooShort:
    contig_name: str
    length: int
    min_length: int

    def __str__(self) -> str:
        return f"Dropped {self.contig_name} with length {self.length}," \
            f" shorter than {self.min_length}."


EventType = Union[GraphBuilt, OverlapReplaced, UnknownFragment,
                  IsolatedVertices, SingletonFragments, CyclePopped,
                  ComponentsFound, PathAssembled, ComponentSkipped,
                  ContigTooShort]

# Events that signal suspicious input, rather than progress.
ANOMALIES = (UnknownFragment, IsolatedVertices, CyclePopped, ComponentSkipped)
