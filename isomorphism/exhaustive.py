"""Exhaustive backtracking isomorphism inspector.

The inspector searches for bijections between the vertex sets of two
graphs that preserve adjacency in both directions and satisfy a vertex
comparator chain (on every mapped vertex pair) and an edge comparator
chain (on every mapped edge pair).

Search outline:
    1. Quick rejection: differing directedness or vertex count always
       rejects; with ``quick_reject`` a differing edge count or sorted
       degree sequence rejects too.
    2. Candidate pools: vertices are bucketed by the vertex chain's
       equivalence hash, bucket sizes must agree, and each graph1 vertex
       draws candidates only from its own bucket.
    3. Iterative depth-first backtracking over a fixed vertex order (most
       already-ordered neighbours first, then fewest candidates, then
       index). A vertex with an ordered neighbour only tries graph2
       neighbours of that neighbour's image. Each pair must pass the
       vertex chain (evaluated once per pair) before adjacency and the
       edge chain are checked against the vertices placed so far.

Mappings are produced lazily; ``is_isomorphic`` stops at the first one.
"""

from __future__ import annotations
import logging
import numpy as np
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator, List, Optional, Tuple

from topology import Graph
from .equivalence import EquivalenceComparatorChain

logger = logging.getLogger(__name__)


@dataclass
class InspectorConfig:
    """Configuration for exhaustive inspectors.

    Attributes:
        quick_reject: Compare edge counts and degree sequences before search
        partition_by_equivalence: Bucket vertices by the vertex chain's
            equivalence hash to narrow candidate sets
        check_edge_chain: Evaluate the edge chain on mapped edges
        max_mappings: Upper bound on mappings yielded by ``mappings()``
    """
    quick_reject: bool = True
    partition_by_equivalence: bool = True
    check_edge_chain: bool = True
    max_mappings: Optional[int] = None


@dataclass(frozen=True)
class GraphMapping:
    """A vertex bijection between two graphs.

    Attributes:
        graph1: Source graph
        graph2: Target graph
        forward: Vertex map graph1 -> graph2
        backward: Vertex map graph2 -> graph1 (derived)
    """
    graph1: Graph
    graph2: Graph
    forward: Dict[Hashable, Hashable]
    backward: Dict[Hashable, Hashable] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'backward', {v: k for k, v in self.forward.items()})

    def vertex_correspondence(self, vertex: Hashable, forward: bool = True) -> Hashable:
        """Vertex of the other graph matched with ``vertex``."""
        return self.forward[vertex] if forward else self.backward[vertex]

    def edge_correspondence(
        self,
        edge: Tuple[Hashable, Hashable],
        forward: bool = True,
    ) -> Optional[Tuple[Hashable, Hashable]]:
        """Edge of the other graph matched with ``edge``, or None if absent."""
        u, v = edge
        target = self.graph2 if forward else self.graph1
        mapped = (self.vertex_correspondence(u, forward), self.vertex_correspondence(v, forward))
        return mapped if target.has_edge(*mapped) else None

    def as_dict(self) -> Dict[Hashable, Hashable]:
        return dict(self.forward)

    def is_valid(self) -> bool:
        """Check totality, injectivity and two-way adjacency preservation."""
        g1, g2 = self.graph1, self.graph2
        if g1.n_nodes != g2.n_nodes or len(self.forward) != g1.n_nodes:
            return False
        if len(self.backward) != len(self.forward):
            return False
        if set(self.forward) != set(g1.labels) or set(self.backward) != set(g2.labels):
            return False
        if g1.n_nodes == 0:
            return True
        perm = np.array([g2.index_of(self.forward[label]) for label in g1.labels])
        return bool(np.array_equal(g1.adjacency, g2.adjacency[np.ix_(perm, perm)]))

    def __len__(self) -> int:
        return len(self.forward)


class ExhaustiveIsomorphismInspector:
    """Backtracking isomorphism inspector driven by comparator chains.

    Usage:
        inspector = ExhaustiveIsomorphismInspector(G1, G2, vertex_chain, edge_chain)
        if inspector.is_isomorphic():
            for mapping in inspector.mappings():
                ...

    Iterating the inspector is the same as iterating ``mappings()``.

    Attributes:
        graph1, graph2: The graphs being compared (never mutated)
        vertex_chain: Chain evaluated on every candidate vertex pair
        edge_chain: Chain evaluated on every mapped edge pair
        config: Search configuration
        nodes_visited: Candidate pairs tried by the backtracking so far
    """

    def __init__(
        self,
        graph1: Graph,
        graph2: Graph,
        vertex_chain: Optional[EquivalenceComparatorChain] = None,
        edge_chain: Optional[EquivalenceComparatorChain] = None,
        config: Optional[InspectorConfig] = None,
    ):
        self.graph1 = graph1
        self.graph2 = graph2
        self.vertex_chain = vertex_chain if vertex_chain is not None else EquivalenceComparatorChain().freeze()
        self.edge_chain = edge_chain if edge_chain is not None else EquivalenceComparatorChain().freeze()
        self.config = config or InspectorConfig()
        self.nodes_visited = 0
        self._verdict: Optional[bool] = None
        self._first: Optional[GraphMapping] = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n1={self.graph1.n_nodes}, n2={self.graph2.n_nodes}, "
            f"vertex_chain={len(self.vertex_chain)}, edge_chain={len(self.edge_chain)})"
        )

    def is_isomorphic(self) -> bool:
        """Whether at least one valid mapping exists (computed once)."""
        if self._verdict is None:
            self._first = next(self._search(), None)
            self._verdict = self._first is not None
            logger.info(
                "Isomorphism verdict %s after %d candidate pairs (n=%d)",
                self._verdict, self.nodes_visited, self.graph1.n_nodes,
            )
        return self._verdict

    def first_mapping(self) -> Optional[GraphMapping]:
        self.is_isomorphic()
        return self._first

    def mappings(self) -> Iterator[GraphMapping]:
        """Lazily enumerate valid mappings in deterministic order."""
        limit = self.config.max_mappings
        if limit is not None and limit <= 0:
            return
        for count, mapping in enumerate(self._search(), start=1):
            yield mapping
            if limit is not None and count >= limit:
                return

    def __iter__(self) -> Iterator[GraphMapping]:
        return self.mappings()

    def _quick_reject(self) -> Optional[str]:
        g1, g2 = self.graph1, self.graph2
        if g1.directed != g2.directed:
            return "directedness differs"
        if g1.n_nodes != g2.n_nodes:
            return "vertex counts differ"
        if self.config.quick_reject:
            if g1.n_edges() != g2.n_edges():
                return "edge counts differ"
            if g1.degree_sequence() != g2.degree_sequence():
                return "degree sequences differ"
        return None

    def _candidate_pools(self) -> Optional[Tuple[List[List[int]], List[int], List[int]]]:
        """Graph2 candidate pools per graph1 vertex, plus a class id per vertex.

        Returns None if the equivalence classes of the two graphs differ in size.
        """
        g1, g2 = self.graph1, self.graph2
        if not self.config.partition_by_equivalence:
            everything = list(range(g2.n_nodes))
            return [everything] * g1.n_nodes, [0] * g1.n_nodes, [0] * g2.n_nodes

        chain = self.vertex_chain
        keys1 = [chain.equivalence_hash(label, g1) for label in g1.labels]
        keys2 = [chain.equivalence_hash(label, g2) for label in g2.labels]
        members: Dict[Hashable, List[int]] = defaultdict(list)
        for j, key in enumerate(keys2):
            members[key].append(j)
        if Counter(keys1) != Counter(keys2):
            logger.debug("Equivalence class sizes differ: %d vs %d classes", len(set(keys1)), len(members))
            return None

        class_id = {key: c for c, key in enumerate(members)}
        return (
            [members[key] for key in keys1],
            [class_id[key] for key in keys1],
            [class_id[key] for key in keys2],
        )

    def _assignment_order(self, pools: List[List[int]]) -> Tuple[np.ndarray, np.ndarray]:
        """Fix the search order and the anchor of every graph1 vertex.

        The next vertex has the most neighbours already ordered, then the
        fewest candidates, then the lowest index. A vertex's anchor is its
        first ordered neighbour, or -1 if it has none.
        """
        A = self.graph1.adjacency
        links = (A + A.T) > 0
        n = len(pools)
        sizes = np.array([len(pool) for pool in pools])
        connected = np.zeros(n, dtype=np.int64)
        anchor = np.full(n, -1, dtype=np.int64)
        free = np.ones(n, dtype=bool)
        order = np.empty(n, dtype=np.int64)
        for depth in range(n):
            best = free & (connected == connected[free].max())
            best &= sizes == sizes[best].min()
            nxt = int(np.flatnonzero(best)[0])
            order[depth] = nxt
            free[nxt] = False
            connected += links[nxt]
            anchor[free & links[nxt] & (anchor < 0)] = nxt
        return order, anchor

    def _edges_equivalent(self, i: int, j: int, placed: np.ndarray, assignment: np.ndarray) -> bool:
        """Evaluate the edge chain on every edge closed by mapping i to j."""
        g1, g2 = self.graph1, self.graph2
        A1 = g1.adjacency
        chain = self.edge_chain
        li, lj = g1.labels[i], g2.labels[j]
        if A1[i, i] > 0 and not chain.evaluate((li, li), g1, (lj, lj), g2):
            return False
        for k in placed[A1[placed, i] > 0]:
            if not chain.evaluate((g1.labels[k], li), g1, (g2.labels[assignment[k]], lj), g2):
                return False
        if g1.directed:
            for k in placed[A1[i, placed] > 0]:
                if not chain.evaluate((li, g1.labels[k]), g1, (lj, g2.labels[assignment[k]]), g2):
                    return False
        return True

    def _search(self) -> Iterator[GraphMapping]:
        g1, g2 = self.graph1, self.graph2
        reason = self._quick_reject()
        if reason is not None:
            logger.debug("Quick rejection: %s", reason)
            return

        n = g1.n_nodes
        if n == 0:
            yield GraphMapping(g1, g2, {})
            return

        partition = self._candidate_pools()
        if partition is None:
            return
        pools, class1, class2 = partition

        order, anchor = self._assignment_order(pools)
        A1, A2 = g1.adjacency, g2.adjacency
        neighbours2 = [np.flatnonzero(row).tolist() for row in (A2 + A2.T) > 0]
        chain = self.vertex_chain
        accepted: Dict[Tuple[int, int], bool] = {}
        assignment = np.full(n, -1, dtype=np.int64)
        used = np.zeros(n, dtype=bool)
        check_edges = self.config.check_edge_chain and len(self.edge_chain) > 0

        def pool_at(depth: int) -> Iterator[int]:
            i = int(order[depth])
            p = anchor[i]
            if p < 0:
                return iter(pools[i])
            # an anchored vertex must land next to its anchor's image
            return (j for j in neighbours2[assignment[p]] if class2[j] == class1[i])

        stack = [pool_at(0)]
        while stack:
            depth = len(stack) - 1
            i = int(order[depth])
            if assignment[i] >= 0:
                used[assignment[i]] = False
                assignment[i] = -1
            placed = order[:depth]
            images = assignment[placed]

            for j in stack[-1]:
                if used[j]:
                    continue
                self.nodes_visited += 1
                if (i, j) not in accepted:
                    accepted[i, j] = chain.evaluate(g1.labels[i], g1, g2.labels[j], g2)
                if not accepted[i, j]:
                    continue
                if A1[i, i] != A2[j, j]:
                    continue
                if depth and not (
                    np.array_equal(A1[i, placed], A2[j, images])
                    and np.array_equal(A1[placed, i], A2[images, j])
                ):
                    continue
                if check_edges and not self._edges_equivalent(i, j, placed, assignment):
                    continue
                assignment[i] = j
                used[j] = True
                break
            else:
                stack.pop()
                continue

            if depth + 1 == n:
                forward = {g1.labels[k]: g2.labels[assignment[k]] for k in range(n)}
                yield GraphMapping(g1, g2, forward)
            else:
                stack.append(pool_at(depth + 1))
