"""Read-only graph structure consumed by the isomorphism inspectors.

This module defines the Graph dataclass, the GraphKind tag that records
which structures a graph admits, and the adapters that lift edge lists and
networkx graphs into that representation.

The graph stores an integer edge-multiplicity matrix rather than weights:
entry (i, j) counts the edges from vertex i to vertex j. For undirected
kinds the matrix is symmetric and a self-loop is counted once on the
diagonal (contributing 2 to the degree).

Kinds:
- SIMPLE / DIRECTED: at most one edge per vertex pair, no self-loops
- LOOPED / DIRECTED_LOOPED: at most one edge per vertex pair, self-loops
- MULTIGRAPH / DIRECTED_MULTIGRAPH: parallel edges, no self-loops
- PSEUDOGRAPH / DIRECTED_PSEUDOGRAPH: parallel edges and self-loops
"""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple


class GraphKind(Enum):
    """Structural kind of a graph, used to refuse unsupported inputs."""
    SIMPLE = "simple"
    DIRECTED = "directed"
    LOOPED = "looped"
    DIRECTED_LOOPED = "directed_looped"
    MULTIGRAPH = "multigraph"
    DIRECTED_MULTIGRAPH = "directed_multigraph"
    PSEUDOGRAPH = "pseudograph"
    DIRECTED_PSEUDOGRAPH = "directed_pseudograph"

    @property
    def directed(self) -> bool:
        return self in (
            GraphKind.DIRECTED,
            GraphKind.DIRECTED_LOOPED,
            GraphKind.DIRECTED_MULTIGRAPH,
            GraphKind.DIRECTED_PSEUDOGRAPH,
        )

    @property
    def allows_multiple_edges(self) -> bool:
        return self in (
            GraphKind.MULTIGRAPH,
            GraphKind.DIRECTED_MULTIGRAPH,
            GraphKind.PSEUDOGRAPH,
            GraphKind.DIRECTED_PSEUDOGRAPH,
        )

    @property
    def allows_loops(self) -> bool:
        return self in (
            GraphKind.LOOPED,
            GraphKind.DIRECTED_LOOPED,
            GraphKind.PSEUDOGRAPH,
            GraphKind.DIRECTED_PSEUDOGRAPH,
        )

    @classmethod
    def infer(cls, directed: bool, multi: bool, loops: bool) -> "GraphKind":
        """Pick the narrowest kind admitting the given features."""
        if multi and loops:
            return cls.DIRECTED_PSEUDOGRAPH if directed else cls.PSEUDOGRAPH
        if multi:
            return cls.DIRECTED_MULTIGRAPH if directed else cls.MULTIGRAPH
        if loops:
            return cls.DIRECTED_LOOPED if directed else cls.LOOPED
        return cls.DIRECTED if directed else cls.SIMPLE


Edge = Tuple[Hashable, Hashable]


@dataclass(frozen=True, eq=False)
class Graph:
    """Immutable graph over labelled vertices.

    Vertices are addressed by label everywhere in the public API; the
    position of a label in ``labels`` is its row/column in ``adjacency``.

    Attributes:
        adjacency: (n, n) integer edge-multiplicity matrix (read-only copy)
        n_nodes: Number of vertices
        labels: Vertex labels, defaults to 0..n-1
        kind: Declared structural kind (validated against the matrix)
        metadata: Optional metadata about graph origin
    """
    adjacency: np.ndarray
    n_nodes: int = field(init=False)
    labels: Optional[Tuple[Hashable, ...]] = None
    kind: GraphKind = GraphKind.SIMPLE
    metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        A = np.array(self.adjacency, dtype=float)
        if A.size == 0:
            A = np.zeros((0, 0), dtype=np.int64)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError(f"Adjacency must be square, got shape {A.shape}")
        if not np.all(np.equal(np.mod(A, 1), 0)):
            raise ValueError("Adjacency entries must be integral edge counts")
        A = A.astype(np.int64)
        if np.any(A < 0):
            raise ValueError("Adjacency entries must be non-negative")

        kind = GraphKind(self.kind)
        if not kind.directed and not np.array_equal(A, A.T):
            raise ValueError(f"Undirected graph kind {kind.value!r} requires a symmetric adjacency")
        if not kind.allows_loops and np.any(np.diag(A) != 0):
            raise ValueError(f"Graph kind {kind.value!r} does not allow self-loops")
        if not kind.allows_multiple_edges and np.any(A > 1):
            raise ValueError(f"Graph kind {kind.value!r} does not allow parallel edges")

        n = A.shape[0]
        labels = tuple(range(n)) if self.labels is None else tuple(self.labels)
        if len(labels) != n:
            raise ValueError(f"Expected {n} labels, got {len(labels)}")
        index = {label: i for i, label in enumerate(labels)}
        if len(index) != n:
            raise ValueError("Vertex labels must be unique")

        A.setflags(write=False)
        object.__setattr__(self, 'adjacency', A)
        object.__setattr__(self, 'n_nodes', n)
        object.__setattr__(self, 'labels', labels)
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, '_index', index)
        object.__setattr__(self, '_out', np.sum(A, axis=1).tolist())
        object.__setattr__(self, '_in', np.sum(A, axis=0).tolist())
        object.__setattr__(self, '_loops', np.diag(A).tolist())

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Edge],
        vertices: Optional[Sequence[Hashable]] = None,
        kind: GraphKind = GraphKind.SIMPLE,
        metadata: Optional[Dict] = None,
    ) -> "Graph":
        """Build a graph from an edge list.

        Args:
            edges: Iterable of (u, v) pairs; repeated pairs add multiplicity
            vertices: Vertex labels in index order. Labels seen only in
                ``edges`` are appended in order of first appearance.
            kind: Declared graph kind
            metadata: Optional metadata dictionary

        Returns:
            Graph with the given structure
        """
        kind = GraphKind(kind)
        edges = list(edges)
        labels: List[Hashable] = list(vertices) if vertices is not None else []
        index = {label: i for i, label in enumerate(labels)}
        for u, v in edges:
            for label in (u, v):
                if label not in index:
                    index[label] = len(labels)
                    labels.append(label)

        A = np.zeros((len(labels), len(labels)), dtype=np.int64)
        for u, v in edges:
            i, j = index[u], index[v]
            A[i, j] += 1
            if not kind.directed and i != j:
                A[j, i] += 1

        return cls(adjacency=A, labels=tuple(labels), kind=kind, metadata=dict(metadata or {}))

    @property
    def directed(self) -> bool:
        return self.kind.directed

    def index_of(self, vertex: Hashable) -> int:
        """Row/column index of a vertex label."""
        try:
            return self._index[vertex]
        except KeyError:
            raise KeyError(f"Vertex {vertex!r} not in graph") from None

    def vertices(self) -> Tuple[Hashable, ...]:
        return self.labels

    def __contains__(self, vertex: Hashable) -> bool:
        return vertex in self._index

    def __len__(self) -> int:
        return self.n_nodes

    def out_degree(self, vertex: Hashable) -> int:
        return self._out[self.index_of(vertex)]

    def in_degree(self, vertex: Hashable) -> int:
        return self._in[self.index_of(vertex)]

    def degree(self, vertex: Hashable) -> int:
        """Number of edge endpoints at a vertex.

        For directed graphs this is in-degree plus out-degree; for
        undirected graphs a self-loop counts twice.
        """
        i = self.index_of(vertex)
        if self.directed:
            return self._out[i] + self._in[i]
        return self._out[i] + self._loops[i]

    def degrees(self) -> np.ndarray:
        """Degree vector in index order."""
        A = self.adjacency
        if self.directed:
            return np.sum(A, axis=1) + np.sum(A, axis=0)
        return np.sum(A, axis=1) + np.diag(A)

    def degree_sequence(self) -> List[Any]:
        """Sorted degree sequence.

        Directed graphs yield sorted (in_degree, out_degree) pairs so that
        two graphs with equal sequences agree on both directions.
        """
        A = self.adjacency
        if self.directed:
            pairs = zip(np.sum(A, axis=0).tolist(), np.sum(A, axis=1).tolist())
            return sorted(pairs)
        return sorted(self.degrees().tolist())

    def has_edge(self, u: Hashable, v: Hashable) -> bool:
        return bool(self.adjacency[self.index_of(u), self.index_of(v)] > 0)

    def edge_multiplicity(self, u: Hashable, v: Hashable) -> int:
        return int(self.adjacency[self.index_of(u), self.index_of(v)])

    def neighbors(self, vertex: Hashable) -> List[Hashable]:
        """Adjacent vertices (successors for directed graphs)."""
        i = self.index_of(vertex)
        return [self.labels[j] for j in np.flatnonzero(self.adjacency[i, :])]

    def edges(self) -> Iterator[Edge]:
        """Iterate over edges as (u, v) label pairs.

        Undirected graphs yield each edge once with u's index <= v's index.
        Parallel edges are yielded once per multiplicity.
        """
        A = self.adjacency
        for i, j in np.argwhere(A > 0):
            if not self.directed and j < i:
                continue
            for _ in range(int(A[i, j])):
                yield (self.labels[i], self.labels[j])

    def edge_list(self) -> List[Edge]:
        return list(self.edges())

    def n_edges(self) -> int:
        """Count edges including multiplicity."""
        A = self.adjacency
        if self.directed:
            return int(np.sum(A))
        return int((np.sum(A) + np.trace(A)) // 2)

    def density(self) -> float:
        """Fraction of possible simple edges present."""
        n = self.n_nodes
        max_edges = n * (n - 1) if self.directed else n * (n - 1) / 2
        return self.n_edges() / max_edges if max_edges > 0 else 0.0

    def summary(self) -> Dict[str, Any]:
        """Compute summary statistics for the graph."""
        deg = self.degrees()
        return {
            "n_nodes": self.n_nodes,
            "n_edges": self.n_edges(),
            "kind": self.kind.value,
            "density": self.density(),
            "mean_degree": float(np.mean(deg)) if self.n_nodes else 0.0,
            "max_degree": int(np.max(deg)) if self.n_nodes else 0,
        }

    def to_networkx(self):
        """Export to the matching networkx graph class."""
        import networkx as nx

        if self.kind.allows_multiple_edges:
            G = nx.MultiDiGraph() if self.directed else nx.MultiGraph()
        else:
            G = nx.DiGraph() if self.directed else nx.Graph()
        G.add_nodes_from(self.labels)
        G.add_edges_from(self.edges())
        return G


def relabel(graph: Graph, mapping: Dict[Hashable, Hashable]) -> Graph:
    """Return a copy of ``graph`` with vertex labels renamed via ``mapping``.

    Labels missing from ``mapping`` are kept as they are.
    """
    labels = tuple(mapping.get(label, label) for label in graph.labels)
    metadata = dict(graph.metadata)
    metadata["relabeled"] = True
    return Graph(adjacency=graph.adjacency, labels=labels, kind=graph.kind, metadata=metadata)


def is_networkx_graph(obj: Any) -> bool:
    return all(hasattr(obj, attr) for attr in ("is_directed", "is_multigraph", "nodes", "edges"))


def networkx_kind(nx_graph) -> GraphKind:
    """Infer the GraphKind a networkx graph declares.

    A networkx Graph/DiGraph holding self-loops is a looped simple kind;
    MultiGraph/MultiDiGraph classes are multigraphs regardless of whether
    they currently hold parallel edges.
    """
    import networkx as nx

    return GraphKind.infer(
        directed=nx_graph.is_directed(),
        multi=nx_graph.is_multigraph(),
        loops=nx.number_of_selfloops(nx_graph) > 0,
    )


def graph_kind(obj: Any) -> GraphKind:
    """Declared kind of a Graph or networkx graph."""
    if isinstance(obj, Graph):
        return obj.kind
    if is_networkx_graph(obj):
        return networkx_kind(obj)
    raise TypeError(f"Expected a Graph or networkx graph, got {type(obj).__name__}")


def from_networkx(nx_graph, metadata: Optional[Dict] = None) -> Graph:
    """Convert a networkx graph, keeping node order and edge multiplicity."""
    kind = networkx_kind(nx_graph)
    meta = {"source": "from_networkx", "networkx_class": type(nx_graph).__name__}
    meta.update(metadata or {})
    return Graph.from_edges(
        ((u, v) for u, v in nx_graph.edges()),
        vertices=list(nx_graph.nodes()),
        kind=kind,
        metadata=meta,
    )


def as_graph(obj: Any) -> Graph:
    """Accept a Graph as-is or convert a networkx graph."""
    if isinstance(obj, Graph):
        return obj
    if is_networkx_graph(obj):
        return from_networkx(obj)
    raise TypeError(f"Expected a Graph or networkx graph, got {type(obj).__name__}")
