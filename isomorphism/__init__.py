"""Adaptive graph isomorphism inspection.

This module provides:
- AdaptiveIsomorphismInspectorFactory: Classifies a graph pair, refuses
  unsupported graph kinds and builds a comparator-chained inspector
- create_isomorphism_inspector / create_isomorphism_inspector_by_type /
  is_isomorphic: Module-level entry points using a default factory
- TopologyCategory, classify_graphs: Topology categories and classifier
- UnsupportedGraphType, CategoryNotImplemented: Construction-time errors
- EquivalenceComparatorChain and comparators: Pruning predicates
- ExhaustiveIsomorphismInspector, GraphMapping, InspectorConfig:
  Backtracking search and its results
"""

from .classification import (
    TopologyCategory,
    UnsupportedGraphType,
    assert_supported_graph_types,
    classify_graphs,
)
from .equivalence import (
    EquivalenceComparator,
    EquivalenceComparatorChain,
    FunctionComparator,
    UniformEquivalenceComparator,
    VertexDegreeEquivalenceComparator,
    as_comparator,
)
from .exhaustive import (
    ExhaustiveIsomorphismInspector,
    GraphMapping,
    InspectorConfig,
)
from .factory import (
    AdaptiveIsomorphismInspectorFactory,
    CategoryNotImplemented,
    create_isomorphism_inspector,
    create_isomorphism_inspector_by_type,
    is_isomorphic,
)

__all__ = [
    "TopologyCategory",
    "UnsupportedGraphType",
    "assert_supported_graph_types",
    "classify_graphs",
    "EquivalenceComparator",
    "EquivalenceComparatorChain",
    "FunctionComparator",
    "UniformEquivalenceComparator",
    "VertexDegreeEquivalenceComparator",
    "as_comparator",
    "ExhaustiveIsomorphismInspector",
    "GraphMapping",
    "InspectorConfig",
    "AdaptiveIsomorphismInspectorFactory",
    "CategoryNotImplemented",
    "create_isomorphism_inspector",
    "create_isomorphism_inspector_by_type",
    "is_isomorphic",
]
