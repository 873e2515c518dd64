"""Tests for topology classification and the supported-type guard."""

import logging

import networkx as nx
import pytest

from topology import Graph, GraphKind
from isomorphism import (
    TopologyCategory,
    UnsupportedGraphType,
    assert_supported_graph_types,
    classify_graphs,
)


def _simple():
    return Graph.from_edges([(0, 1), (1, 2)])


def _multi():
    return Graph.from_edges([(0, 1), (0, 1)], kind=GraphKind.MULTIGRAPH)


class TestClassifier:
    """Tests for classify_graphs and TopologyCategory."""

    def test_always_arbitrary(self):
        """Test the classifier answers ARBITRARY for any pair."""
        tree = _simple()
        cycle = Graph.from_edges([(0, 1), (1, 2), (2, 0)])

        assert classify_graphs(tree, tree) == TopologyCategory.ARBITRARY
        assert classify_graphs(cycle, tree) == TopologyCategory.ARBITRARY

    @pytest.mark.parametrize("value, expected", [
        (TopologyCategory.TREE, TopologyCategory.TREE),
        ("tree", TopologyCategory.TREE),
        ("PLANAR", TopologyCategory.PLANAR),
        (" arbitrary ", TopologyCategory.ARBITRARY),
        ("multigraph", TopologyCategory.MULTIGRAPH),
        ("hypercube", None),
        (3, None),
        (None, None),
    ])
    def test_resolve(self, value, expected):
        """Test categories resolve from members, names and values."""
        assert TopologyCategory.resolve(value) is expected


class TestUnsupportedTypeGuard:
    """Tests for assert_supported_graph_types."""

    def test_simple_graphs_pass(self):
        """Test simple and directed graphs pass the guard."""
        directed = Graph.from_edges([(0, 1)], kind=GraphKind.DIRECTED)

        assert assert_supported_graph_types(_simple(), _simple()) is None
        assert assert_supported_graph_types(directed, directed) is None

    def test_first_graph_rejected(self):
        """Test a multigraph in first position is reported as graph1."""
        multi = _multi()

        with pytest.raises(UnsupportedGraphType) as exc_info:
            assert_supported_graph_types(multi, _simple())

        assert exc_info.value.graph is multi
        assert exc_info.value.position == 1

    def test_second_graph_rejected(self):
        """Test a multigraph in second position is reported as graph2."""
        multi = _multi()

        with pytest.raises(UnsupportedGraphType) as exc_info:
            assert_supported_graph_types(_simple(), multi)

        assert exc_info.value.graph is multi
        assert exc_info.value.position == 2

    @pytest.mark.parametrize("kind", [
        GraphKind.MULTIGRAPH,
        GraphKind.DIRECTED_MULTIGRAPH,
        GraphKind.PSEUDOGRAPH,
        GraphKind.DIRECTED_PSEUDOGRAPH,
    ])
    def test_kind_rejected_even_without_parallel_edges(self, kind):
        """The declared kind decides, not the current edge set."""
        G = Graph.from_edges([(0, 1)], kind=kind)

        with pytest.raises(UnsupportedGraphType):
            assert_supported_graph_types(G, G)

    def test_networkx_multigraph_rejected(self):
        """Test networkx MultiGraph inputs are refused."""
        with pytest.raises(UnsupportedGraphType):
            assert_supported_graph_types(nx.path_graph(3), nx.MultiGraph([(0, 1), (1, 2)]))

    def test_networkx_selfloop_accepted(self):
        """Test a plain networkx graph holding a self-loop passes the guard."""
        looped = nx.Graph([(0, 0), (0, 1)])

        assert assert_supported_graph_types(looped, nx.path_graph(2)) is None

    @pytest.mark.parametrize("kind", [GraphKind.LOOPED, GraphKind.DIRECTED_LOOPED])
    def test_loop_kinds_accepted(self, kind):
        """Test kinds allowing self-loops but not parallel edges pass the guard."""
        G = Graph.from_edges([(0, 0), (0, 1)], kind=kind)

        assert assert_supported_graph_types(G, G) is None

    def test_is_value_error(self):
        """Test UnsupportedGraphType is a ValueError."""
        with pytest.raises(ValueError):
            assert_supported_graph_types(_multi(), _multi())

    def test_non_graph_rejected(self):
        """Test non-graph inputs raise TypeError."""
        with pytest.raises(TypeError):
            assert_supported_graph_types("graph", _simple())

    def test_rejection_logged(self, caplog):
        """Test a refusal is logged at WARNING."""
        with caplog.at_level(logging.WARNING, logger="isomorphism.classification"):
            with pytest.raises(UnsupportedGraphType):
                assert_supported_graph_types(_simple(), _multi())

        assert "graph2" in caplog.text
