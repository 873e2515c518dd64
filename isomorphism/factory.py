"""Adaptive factory for isomorphism inspectors.

The factory can be used in two ways:
- Let it classify the graph pair and pick the inspector
  (``create_isomorphism_inspector``).
- Assert the topology category yourself and skip classification
  (``create_isomorphism_inspector_by_type``).

Either way the request runs through one dispatcher:
    1. The supported-type guard rejects multigraphs and pseudographs.
    2. ARBITRARY, PLANAR and TREE all map to the topological exhaustive
       inspector; no category-specific algorithm exists yet, so adding
       one is a change to a single branch.
    3. MULTIGRAPH and unrecognised categories raise
       CategoryNotImplemented; no inspector is returned.

The topological exhaustive inspector puts a vertex-degree comparator ahead
of the caller's vertex comparator. The caller's edge comparator, if any,
forms the edge chain on its own. Both chains are frozen before the
inspector receives them.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Any, Optional, Union

from topology import as_graph
from .classification import (
    TopologyCategory,
    assert_supported_graph_types,
    classify_graphs,
)
from .equivalence import (
    ComparatorLike,
    EquivalenceComparatorChain,
    VertexDegreeEquivalenceComparator,
)
from .exhaustive import ExhaustiveIsomorphismInspector, InspectorConfig

logger = logging.getLogger(__name__)

_TOPOLOGICAL_CATEGORIES = (
    TopologyCategory.ARBITRARY,
    TopologyCategory.PLANAR,
    TopologyCategory.TREE,
)


class CategoryNotImplemented(NotImplementedError):
    """Raised when no inspector exists for a topology category."""

    def __init__(self, category: Any):
        self.category = category
        label = category.value if isinstance(category, TopologyCategory) else category
        super().__init__(f"No isomorphism inspector available for graph category {label!r}")


class AdaptiveIsomorphismInspectorFactory:
    """Builds isomorphism inspectors for graph pairs.

    Args:
        config: Configuration copied into every inspector built (defaults if None)
    """

    def __init__(self, config: Optional[InspectorConfig] = None):
        self.config = config or InspectorConfig()

    def create_isomorphism_inspector(
        self,
        graph1: Any,
        graph2: Any,
        vertex_comparator: ComparatorLike = None,
        edge_comparator: ComparatorLike = None,
    ) -> ExhaustiveIsomorphismInspector:
        """Create an inspector, letting the factory classify the graphs.

        Args:
            graph1, graph2: Graph or networkx graph instances
            vertex_comparator: Optional extra vertex comparator (or predicate)
            edge_comparator: Optional edge comparator (or predicate)

        Raises:
            UnsupportedGraphType: If either graph admits parallel edges
            CategoryNotImplemented: If the classified category has no inspector
        """
        category = classify_graphs(graph1, graph2)
        return self._create_appropriate_inspector(
            category, graph1, graph2, vertex_comparator, edge_comparator
        )

    def create_isomorphism_inspector_by_type(
        self,
        category: Union[TopologyCategory, str],
        graph1: Any,
        graph2: Any,
        vertex_comparator: ComparatorLike = None,
        edge_comparator: ComparatorLike = None,
    ) -> ExhaustiveIsomorphismInspector:
        """Create an inspector for a caller-asserted topology category.

        ``category`` may be a TopologyCategory or its name/value string.
        """
        return self._create_appropriate_inspector(
            category, graph1, graph2, vertex_comparator, edge_comparator
        )

    def _create_appropriate_inspector(
        self,
        category: Any,
        graph1: Any,
        graph2: Any,
        vertex_comparator: ComparatorLike,
        edge_comparator: ComparatorLike,
    ) -> ExhaustiveIsomorphismInspector:
        assert_supported_graph_types(graph1, graph2)

        resolved = TopologyCategory.resolve(category)
        if resolved in _TOPOLOGICAL_CATEGORIES:
            return self._create_topological_exhaustive_inspector(
                graph1, graph2, vertex_comparator, edge_comparator
            )
        raise CategoryNotImplemented(resolved if resolved is not None else category)

    def _create_topological_exhaustive_inspector(
        self,
        graph1: Any,
        graph2: Any,
        vertex_comparator: ComparatorLike,
        edge_comparator: ComparatorLike,
    ) -> ExhaustiveIsomorphismInspector:
        vertex_chain = EquivalenceComparatorChain(VertexDegreeEquivalenceComparator())
        vertex_chain.append(vertex_comparator)
        edge_chain = EquivalenceComparatorChain(edge_comparator)

        logger.debug(
            "Building exhaustive inspector with %d vertex and %d edge comparators",
            len(vertex_chain), len(edge_chain),
        )
        return ExhaustiveIsomorphismInspector(
            as_graph(graph1),
            as_graph(graph2),
            vertex_chain.freeze(),
            edge_chain.freeze(),
            config=replace(self.config),
        )


_default_factory = AdaptiveIsomorphismInspectorFactory()


def _factory_for(config: Optional[InspectorConfig]) -> AdaptiveIsomorphismInspectorFactory:
    return _default_factory if config is None else AdaptiveIsomorphismInspectorFactory(config)


def create_isomorphism_inspector(
    graph1: Any,
    graph2: Any,
    vertex_comparator: ComparatorLike = None,
    edge_comparator: ComparatorLike = None,
    config: Optional[InspectorConfig] = None,
) -> ExhaustiveIsomorphismInspector:
    """Module-level shortcut for AdaptiveIsomorphismInspectorFactory.create_isomorphism_inspector."""
    return _factory_for(config).create_isomorphism_inspector(
        graph1, graph2, vertex_comparator, edge_comparator
    )


def create_isomorphism_inspector_by_type(
    category: Union[TopologyCategory, str],
    graph1: Any,
    graph2: Any,
    vertex_comparator: ComparatorLike = None,
    edge_comparator: ComparatorLike = None,
    config: Optional[InspectorConfig] = None,
) -> ExhaustiveIsomorphismInspector:
    return _factory_for(config).create_isomorphism_inspector_by_type(
        category, graph1, graph2, vertex_comparator, edge_comparator
    )


def is_isomorphic(
    graph1: Any,
    graph2: Any,
    vertex_comparator: ComparatorLike = None,
    edge_comparator: ComparatorLike = None,
    config: Optional[InspectorConfig] = None,
) -> bool:
    """Whether two graphs are isomorphic under the optional comparators."""
    return create_isomorphism_inspector(
        graph1, graph2, vertex_comparator, edge_comparator, config=config
    ).is_isomorphic()
