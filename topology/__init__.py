"""Topology module - read-only graph structures for isomorphism inspection.

This module provides the canonical Graph object consumed by the
isomorphism package, adapters from edge lists and networkx graphs, and
samplers used by the tests and the family sweep experiment.

Key exports:
- Graph: Frozen dataclass over an integer edge-multiplicity matrix
- GraphKind: Structural kind tag (simple, directed, multigraph, ...)
- as_graph / from_networkx / graph_kind: Input normalisation
- GraphFamily: Samplers for discrete graph families
- random_relabeling / rewire_one_edge: Isomorphism-preserving and
  -breaking transformations
"""

from .graph import (
    Graph,
    GraphKind,
    as_graph,
    from_networkx,
    graph_kind,
    relabel,
)
from .graph_families import (
    GraphFamily,
    sample_graph_family,
    sample_all_families,
    random_relabeling,
    rewire_one_edge,
)

__all__ = [
    "Graph",
    "GraphKind",
    "as_graph",
    "from_networkx",
    "graph_kind",
    "relabel",
    "GraphFamily",
    "sample_graph_family",
    "sample_all_families",
    "random_relabeling",
    "rewire_one_edge",
]
