"""Graph family samplers for isomorphism experiments and tests.

This module provides samplers for generating simple undirected graphs from
well-known families, plus the two transformations the isomorphism sweeps
need: a random vertex relabeling (which must preserve isomorphism) and a
single-edge rewiring (which usually breaks it).

Supported families:
- Path, cycle, star, complete: deterministic shapes
- Ring lattice: Regular ring with k neighbors on each side
- Erdos-Renyi (ER): Random graphs with edge probability p
- Barabasi-Albert (BA): Scale-free preferential attachment
- Watts-Strogatz (WS): Small-world with rewiring
- Random tree: Each new vertex attaches to a uniformly chosen earlier one
- Random regular: Every vertex has exactly d neighbors
"""

from __future__ import annotations
import numpy as np
from typing import Optional, Dict, Tuple, Hashable
from enum import Enum

from .graph import Graph, GraphKind


class GraphFamily(Enum):
    """Enumeration of supported graph families."""
    PATH = "path"
    CYCLE = "cycle"
    STAR = "star"
    COMPLETE = "complete"
    RING_LATTICE = "ring_lattice"
    ERDOS_RENYI = "erdos_renyi"
    BARABASI_ALBERT = "barabasi_albert"
    WATTS_STROGATZ = "watts_strogatz"
    RANDOM_TREE = "random_tree"
    RANDOM_REGULAR = "random_regular"


def _add_edge(A: np.ndarray, i: int, j: int) -> None:
    if i != j:
        A[i, j] = A[j, i] = 1


def _path(n: int) -> np.ndarray:
    A = np.zeros((n, n), dtype=np.int64)
    for i in range(n - 1):
        _add_edge(A, i, i + 1)
    return A


def _cycle(n: int) -> np.ndarray:
    A = _path(n)
    if n > 2:
        _add_edge(A, n - 1, 0)
    return A


def _star(n: int) -> np.ndarray:
    A = np.zeros((n, n), dtype=np.int64)
    for i in range(1, n):
        _add_edge(A, 0, i)
    return A


def _complete(n: int) -> np.ndarray:
    return np.ones((n, n), dtype=np.int64) - np.eye(n, dtype=np.int64)


def _ring_lattice(n: int, k: int) -> np.ndarray:
    """Regular ring lattice with k neighbors on each side."""
    A = np.zeros((n, n), dtype=np.int64)
    for i in range(n):
        for j in range(1, k + 1):
            _add_edge(A, i, (i + j) % n)
    return A


def _erdos_renyi(n: int, p: float, rng: np.random.Generator) -> np.ndarray:
    """Generate Erdos-Renyi random graph G(n, p)."""
    A = np.zeros((n, n), dtype=np.int64)
    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                _add_edge(A, i, j)
    return A


def _barabasi_albert(n: int, m: int, rng: np.random.Generator) -> np.ndarray:
    """Generate Barabasi-Albert scale-free graph.

    Starts with m+1 connected nodes, then adds n-(m+1) nodes,
    each connecting to m existing nodes with probability proportional to degree.
    """
    A = np.zeros((n, n), dtype=np.int64)

    m0 = min(m + 1, n)
    for i in range(m0):
        for j in range(i + 1, m0):
            _add_edge(A, i, j)

    for new_node in range(m0, n):
        degrees = np.sum(A[:new_node, :new_node], axis=1).astype(float)
        total_degree = np.sum(degrees)

        if total_degree > 0:
            probs = degrees / total_degree
        else:
            probs = np.ones(new_node) / new_node

        targets = rng.choice(new_node, size=min(m, new_node), replace=False, p=probs)
        for t in targets:
            _add_edge(A, new_node, int(t))

    return A


def _watts_strogatz(n: int, k: int, p: float, rng: np.random.Generator) -> np.ndarray:
    """Generate Watts-Strogatz small-world graph.

    Starts with ring lattice of k neighbors, then rewires edges with probability p.
    """
    A = _ring_lattice(n, k // 2)

    for i in range(n):
        for j in range(1, k // 2 + 1):
            if rng.random() < p:
                neighbor = (i + j) % n
                if A[i, neighbor] > 0:
                    candidates = [c for c in range(n) if c != i and A[i, c] == 0]
                    if candidates:
                        A[i, neighbor] = A[neighbor, i] = 0
                        _add_edge(A, i, int(rng.choice(candidates)))

    return A


def _random_tree(n: int, rng: np.random.Generator) -> np.ndarray:
    A = np.zeros((n, n), dtype=np.int64)
    for i in range(1, n):
        _add_edge(A, i, int(rng.integers(0, i)))
    return A


def _random_regular(n: int, d: int, rng: np.random.Generator, max_attempts: int = 1000) -> np.ndarray:
    """Generate random d-regular graph (each node has exactly d neighbors).

    Uses a simple pairing algorithm with rejection sampling. If every
    attempt fails, returns the circulant graph made of a ring lattice with
    d // 2 neighbors per side plus, for odd d, the n / 2 antipodal chords.
    """
    if (n * d) % 2 != 0 or d >= n:
        raise ValueError(f"No {d}-regular graph on {n} vertices")

    for _ in range(max_attempts):
        A = np.zeros((n, n), dtype=np.int64)

        stubs = []
        for i in range(n):
            stubs.extend([i] * d)

        rng.shuffle(stubs)

        valid = True
        for k in range(0, len(stubs), 2):
            i, j = stubs[k], stubs[k + 1]
            if i == j or A[i, j] > 0:
                valid = False
                break
            _add_edge(A, i, j)

        if valid:
            return A

    A = _ring_lattice(n, d // 2)
    if d % 2:
        for i in range(n // 2):
            _add_edge(A, i, i + n // 2)
    return A


def sample_graph_family(
    family: GraphFamily,
    n: int,
    params: Optional[Dict] = None,
    seed: Optional[int] = None,
) -> Tuple[GraphFamily, Dict, Graph]:
    """Sample a graph from a specified family.

    Args:
        family: Which graph family to sample from
        n: Number of nodes
        params: Family-specific parameters
        seed: Random seed for reproducibility

    Returns:
        Tuple of (family, params_used, Graph)
    """
    rng = np.random.default_rng(seed)
    params = params or {}

    if family == GraphFamily.PATH:
        A = _path(n)
        params_used = {}

    elif family == GraphFamily.CYCLE:
        A = _cycle(n)
        params_used = {}

    elif family == GraphFamily.STAR:
        A = _star(n)
        params_used = {}

    elif family == GraphFamily.COMPLETE:
        A = _complete(n)
        params_used = {}

    elif family == GraphFamily.RING_LATTICE:
        k = params.get("k", 2)
        A = _ring_lattice(n, k)
        params_used = {"k": k}

    elif family == GraphFamily.ERDOS_RENYI:
        p = params.get("p", 0.3)
        A = _erdos_renyi(n, p, rng)
        params_used = {"p": p}

    elif family == GraphFamily.BARABASI_ALBERT:
        m = params.get("m", 2)
        A = _barabasi_albert(n, m, rng)
        params_used = {"m": m}

    elif family == GraphFamily.WATTS_STROGATZ:
        k = params.get("k", 4)
        p = params.get("p", 0.3)
        A = _watts_strogatz(n, k, p, rng)
        params_used = {"k": k, "p": p}

    elif family == GraphFamily.RANDOM_TREE:
        A = _random_tree(n, rng)
        params_used = {}

    elif family == GraphFamily.RANDOM_REGULAR:
        d = params.get("d", 3 if n % 2 == 0 else 2)
        A = _random_regular(n, d, rng)
        params_used = {"d": d}

    else:
        raise ValueError(f"Unknown graph family: {family}")

    metadata = {
        "family": family.value,
        "params": params_used,
        "n": n,
        "seed": seed,
        "source": "sample_graph_family",
    }

    return (family, params_used, Graph(adjacency=A, kind=GraphKind.SIMPLE, metadata=metadata))


def sample_all_families(
    n: int,
    seed: int = 0,
) -> Dict[str, Graph]:
    """Sample one graph from each family with default parameters."""
    results = {}
    for family in GraphFamily:
        _, _, G = sample_graph_family(family, n, seed=seed)
        results[family.value] = G
    return results


def random_relabeling(
    graph: Graph,
    seed: Optional[int] = None,
) -> Tuple[Graph, Dict[Hashable, Hashable]]:
    """Permute the vertex order of a graph and rename its vertices.

    The returned graph is isomorphic to the input by construction. Vertex
    k of the new graph is the old vertex ``perm[k]``, renamed to ``"v{k}"``
    so that labels carry no information about the original order.

    Returns:
        Tuple of (relabeled graph, mapping old label -> new label)
    """
    rng = np.random.default_rng(seed)
    perm = rng.permutation(graph.n_nodes)
    A = graph.adjacency[np.ix_(perm, perm)]
    labels = tuple(f"v{k}" for k in range(graph.n_nodes))
    mapping = {graph.labels[int(old)]: labels[k] for k, old in enumerate(perm)}
    metadata = dict(graph.metadata)
    metadata["source"] = "random_relabeling"
    return Graph(adjacency=A, labels=labels, kind=graph.kind, metadata=metadata), mapping


def rewire_one_edge(graph: Graph, seed: Optional[int] = None) -> Graph:
    """Move one randomly chosen edge to a randomly chosen non-adjacent pair.

    The edge count is preserved but the degree sequence usually changes.
    Graphs with no edge, or no free pair, are returned unchanged.
    """
    rng = np.random.default_rng(seed)
    A = np.array(graph.adjacency)
    n = graph.n_nodes
    present = [(i, j) for i in range(n) for j in range(i + 1, n) if A[i, j] > 0]
    absent = [(i, j) for i in range(n) for j in range(i + 1, n) if A[i, j] == 0]
    if not present or not absent:
        return graph

    i, j = present[int(rng.integers(len(present)))]
    k, m = absent[int(rng.integers(len(absent)))]
    A[i, j] = A[j, i] = 0
    A[k, m] = A[m, k] = 1
    metadata = dict(graph.metadata)
    metadata["source"] = "rewire_one_edge"
    return Graph(adjacency=A, labels=graph.labels, kind=graph.kind, metadata=metadata)
