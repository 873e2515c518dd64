"""Topology categories and the supported-type guard.

The factory classifies each graph pair into a TopologyCategory before it
picks an inspector. Classification is currently a placeholder that always
answers ARBITRARY: no planarity or tree detection is performed. Callers
who know their topology can assert a category through
``create_isomorphism_inspector_by_type`` instead.

The guard refuses graphs whose kind admits parallel edges (multigraphs and
pseudographs). Self-loops alone are accepted.
The exhaustive matcher compares edge presence only, not multiplicity.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Optional

from topology import graph_kind

logger = logging.getLogger(__name__)


class TopologyCategory(Enum):
    """Coarse structural category of a graph pair."""
    ARBITRARY = "arbitrary"
    PLANAR = "planar"
    TREE = "tree"
    MULTIGRAPH = "multigraph"

    @classmethod
    def resolve(cls, value: Any) -> Optional["TopologyCategory"]:
        """Look up a category by member, value or name.

        Returns None for anything unrecognised.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value, member.name.lower()):
                    return member
        return None


class UnsupportedGraphType(ValueError):
    """Raised when an input graph allows parallel edges."""

    def __init__(self, graph: Any, position: int):
        self.graph = graph
        self.position = position
        kind = graph_kind(graph)
        super().__init__(
            f"graph type not supported for graph{position}: kind {kind.value!r} "
            f"allows multiple edges"
        )


def classify_graphs(graph1: Any, graph2: Any) -> TopologyCategory:
    """Assign a topology category to a graph pair.

    Always ARBITRARY for now.
    """
    category = TopologyCategory.ARBITRARY
    logger.debug("Classified graph pair as %s", category.value)
    return category


def assert_supported_graph_types(graph1: Any, graph2: Any) -> None:
    """Raise UnsupportedGraphType if either graph admits multiple edges.

    graph1 is checked before graph2.

    Raises:
        UnsupportedGraphType: For multigraph and pseudograph kinds
        TypeError: If an argument is not a Graph or networkx graph
    """
    for position, graph in enumerate((graph1, graph2), start=1):
        kind = graph_kind(graph)
        if kind.allows_multiple_edges:
            logger.warning("Rejecting graph%d of unsupported kind %s", position, kind.value)
            raise UnsupportedGraphType(graph, position)
