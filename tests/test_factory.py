"""Tests for the adaptive isomorphism inspector factory.

Tests cover:
- Reflexivity, relabel invariance and symmetry over graph families
- Degree-first pruning of caller comparators
- Rejection of unsupported graph kinds and unimplemented categories
- Chain construction and freezing
"""

import networkx as nx
import numpy as np
import pytest

import isomorphism.factory as factory_module
from topology import Graph, GraphKind, GraphFamily, sample_graph_family, random_relabeling
from isomorphism import (
    AdaptiveIsomorphismInspectorFactory,
    CategoryNotImplemented,
    EquivalenceComparatorChain,
    ExhaustiveIsomorphismInspector,
    FunctionComparator,
    InspectorConfig,
    TopologyCategory,
    UniformEquivalenceComparator,
    UnsupportedGraphType,
    VertexDegreeEquivalenceComparator,
    create_isomorphism_inspector,
    create_isomorphism_inspector_by_type,
    is_isomorphic,
)


SMALL_FAMILIES = [
    GraphFamily.PATH,
    GraphFamily.CYCLE,
    GraphFamily.STAR,
    GraphFamily.RING_LATTICE,
    GraphFamily.ERDOS_RENYI,
    GraphFamily.BARABASI_ALBERT,
    GraphFamily.WATTS_STROGATZ,
    GraphFamily.RANDOM_TREE,
    GraphFamily.RANDOM_REGULAR,
]


def _triangle():
    return Graph.from_edges([(0, 1), (1, 2), (2, 0)])


def _path3():
    return Graph.from_edges([(0, 1), (1, 2)])


def _multigraph():
    return Graph.from_edges([(0, 1), (0, 1), (1, 2)], kind=GraphKind.MULTIGRAPH)


class TestIsomorphismProperties:
    """Properties every inspector built by the factory must satisfy."""

    @pytest.mark.parametrize("family", list(GraphFamily))
    def test_reflexive(self, family):
        """Test every family graph is isomorphic to itself."""
        _, _, G = sample_graph_family(family, n=8, seed=1)

        assert create_isomorphism_inspector(G, G).is_isomorphic()

    def test_identity_is_a_witness(self):
        """Test the identity is among the mappings of a graph onto itself."""
        _, _, G = sample_graph_family(GraphFamily.PATH, n=5)
        identity = {v: v for v in G.vertices()}
        mappings = [m.as_dict() for m in create_isomorphism_inspector(G, G).mappings()]

        assert identity in mappings
        assert len(mappings) == 2

    @pytest.mark.parametrize("family", SMALL_FAMILIES)
    def test_relabeled_graphs_isomorphic(self, family):
        """Test relabeled copies match through degree-preserving mappings."""
        _, _, G = sample_graph_family(family, n=9 if family != GraphFamily.RANDOM_REGULAR else 10, seed=4)
        H, _ = random_relabeling(G, seed=8)
        inspector = create_isomorphism_inspector(G, H, config=InspectorConfig(max_mappings=20))

        assert inspector.is_isomorphic()
        for mapping in inspector.mappings():
            assert mapping.is_valid()
            for v in G.vertices():
                assert G.degree(v) == H.degree(mapping.vertex_correspondence(v))

    def test_differing_vertex_count(self):
        """Test graphs of different order are not isomorphic."""
        _, _, C5 = sample_graph_family(GraphFamily.CYCLE, n=5)
        _, _, C6 = sample_graph_family(GraphFamily.CYCLE, n=6)

        assert not create_isomorphism_inspector(C5, C6).is_isomorphic()

    def test_differing_degree_sequence(self):
        """Test equal edge counts with different degrees are not isomorphic."""
        _, _, P = sample_graph_family(GraphFamily.PATH, n=6)
        _, _, S = sample_graph_family(GraphFamily.STAR, n=6)

        assert P.n_edges() == S.n_edges()
        assert not create_isomorphism_inspector(P, S).is_isomorphic()

    @pytest.mark.parametrize("seed", range(5))
    def test_symmetry(self, seed):
        """Test the verdict does not depend on argument order."""
        _, _, G1 = sample_graph_family(GraphFamily.ERDOS_RENYI, n=7, params={"p": 0.5}, seed=seed)
        _, _, G2 = sample_graph_family(GraphFamily.ERDOS_RENYI, n=7, params={"p": 0.5}, seed=seed + 50)

        assert is_isomorphic(G1, G2) == is_isomorphic(G2, G1)
        assert is_isomorphic(G1, G2) == nx.is_isomorphic(G1.to_networkx(), G2.to_networkx())


class TestScenarios:
    """Concrete scenarios."""

    def test_triangle_vs_path(self):
        """Test a triangle does not match a three-vertex path."""
        assert not create_isomorphism_inspector(_triangle(), _path3()).is_isomorphic()

    def test_four_cycle_vs_permuted_four_cycle(self):
        """Test a 4-cycle matches a relabeled 4-cycle with all edges preserved."""
        C4 = Graph.from_edges([(0, 1), (1, 2), (2, 3), (3, 0)])
        permuted = Graph.from_edges([("c", "a"), ("a", "d"), ("d", "b"), ("b", "c")])
        inspector = create_isomorphism_inspector(C4, permuted)

        assert inspector.is_isomorphic()
        mapping = inspector.first_mapping()
        preserved = [mapping.edge_correspondence(e) for e in C4.edges()]
        assert len(preserved) == 4
        assert all(e is not None for e in preserved)

    def test_networkx_inputs(self):
        """Test networkx graphs are accepted directly."""
        C = nx.cycle_graph(6)
        shuffled = nx.relabel_nodes(C, {i: f"n{(i * 5) % 6}" for i in range(6)})

        assert is_isomorphic(C, shuffled)
        assert not is_isomorphic(C, nx.path_graph(6))

    def test_networkx_self_loops_accepted(self):
        """Test simple graphs holding self-loops are compared, not refused."""
        looped = nx.Graph([(0, 1), (1, 1)])
        shifted = nx.Graph([("a", "a"), ("a", "b")])

        assert is_isomorphic(looped, looped)
        assert is_isomorphic(looped, shifted)
        assert not is_isomorphic(looped, nx.Graph([(0, 1), (0, 0), (1, 1)]))


class TestDegreeFirstChain:
    """The degree comparator runs before caller comparators."""

    def test_vertex_chain_layout(self):
        """Test the vertex chain is [degree, caller] and both chains are frozen."""
        extra = UniformEquivalenceComparator()
        inspector = create_isomorphism_inspector(_triangle(), _triangle(), vertex_comparator=extra)
        members = inspector.vertex_chain.comparators

        assert isinstance(members[0], VertexDegreeEquivalenceComparator)
        assert members[1] is extra
        assert inspector.vertex_chain.frozen
        assert inspector.edge_chain.frozen

    def test_default_chains(self):
        """Test the chains hold only the degree comparator without caller input."""
        inspector = create_isomorphism_inspector(_triangle(), _triangle())

        assert len(inspector.vertex_chain) == 1
        assert len(inspector.edge_chain) == 0

    def test_edge_chain_holds_caller_comparator(self):
        """Test the caller edge comparator forms the edge chain alone."""
        edge = UniformEquivalenceComparator()
        inspector = create_isomorphism_inspector(_triangle(), _triangle(), edge_comparator=edge)

        assert inspector.edge_chain.comparators == (edge,)

    def test_caller_comparator_only_sees_equal_degrees(self):
        """Test the degree comparator screens pairs before the caller comparator."""
        _, _, G = sample_graph_family(GraphFamily.BARABASI_ALBERT, n=9, seed=2)
        H, _ = random_relabeling(G, seed=3)
        calls = []

        def spy(u, g1, v, g2):
            calls.append((u, v))
            return True

        config = InspectorConfig(quick_reject=False, partition_by_equivalence=False)
        assert create_isomorphism_inspector(G, H, vertex_comparator=spy, config=config).is_isomorphic()
        assert calls
        assert all(G.degree(u) == H.degree(v) for u, v in calls)

    def test_rejecting_vertex_comparator(self):
        """Test a comparator rejecting everything makes the result False."""
        _, _, G = sample_graph_family(GraphFamily.CYCLE, n=5)
        inspector = create_isomorphism_inspector(G, G, vertex_comparator=lambda u, g1, v, g2: False)

        assert not inspector.is_isomorphic()

    def test_comparator_errors_propagate(self):
        """Test comparator exceptions reach the caller unchanged."""
        def broken(u, g1, v, g2):
            raise RuntimeError("comparator failure")

        inspector = create_isomorphism_inspector(_triangle(), _triangle(), vertex_comparator=broken)

        with pytest.raises(RuntimeError, match="comparator failure"):
            inspector.is_isomorphic()

    def test_invalid_comparator(self):
        """Test a non-callable comparator is refused."""
        with pytest.raises(TypeError):
            create_isomorphism_inspector(_triangle(), _triangle(), vertex_comparator=42)

    def test_caller_chain_mutation_not_observed(self):
        """Test appending to the caller chain after creation has no effect."""
        caller_chain = EquivalenceComparatorChain(UniformEquivalenceComparator())
        inspector = create_isomorphism_inspector(_triangle(), _triangle(), vertex_comparator=caller_chain)
        caller_chain.append(FunctionComparator(lambda u, g1, v, g2: False))

        assert inspector.is_isomorphic()


class TestUnsupportedGraphs:
    """Multigraph inputs are refused before any inspector exists."""

    @pytest.fixture
    def no_inspector(self, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("inspector must not be constructed")
        monkeypatch.setattr(factory_module, "ExhaustiveIsomorphismInspector", fail)

    @pytest.mark.parametrize("position", [1, 2])
    def test_multigraph_rejected(self, no_inspector, position):
        """Test a multigraph is refused in either position."""
        graphs = [_triangle(), _triangle()]
        graphs[position - 1] = _multigraph()

        with pytest.raises(UnsupportedGraphType) as exc_info:
            create_isomorphism_inspector(*graphs)

        assert exc_info.value.position == position

    @pytest.mark.parametrize("category", list(TopologyCategory))
    def test_rejected_for_every_category(self, no_inspector, category):
        """Test the guard runs before category dispatch."""
        with pytest.raises(UnsupportedGraphType):
            create_isomorphism_inspector_by_type(category, _triangle(), _multigraph())

    def test_networkx_multigraph_rejected(self, no_inspector):
        """Test networkx MultiGraph inputs are refused."""
        with pytest.raises(UnsupportedGraphType):
            create_isomorphism_inspector(nx.MultiGraph([(0, 1)]), nx.Graph([(0, 1)]))


class TestCategoryDispatch:
    """Tests for create_isomorphism_inspector_by_type."""

    @pytest.mark.parametrize("category", [
        TopologyCategory.ARBITRARY,
        TopologyCategory.PLANAR,
        TopologyCategory.TREE,
        "tree",
    ])
    def test_topological_categories(self, category):
        """Test arbitrary, planar and tree categories build an inspector."""
        _, _, T = sample_graph_family(GraphFamily.RANDOM_TREE, n=8, seed=0)
        H, _ = random_relabeling(T, seed=1)
        inspector = create_isomorphism_inspector_by_type(category, T, H)

        assert isinstance(inspector, ExhaustiveIsomorphismInspector)
        assert inspector.is_isomorphic()

    def test_multigraph_category_not_implemented(self):
        """Test the multigraph category raises instead of returning nothing."""
        with pytest.raises(CategoryNotImplemented) as exc_info:
            create_isomorphism_inspector_by_type(TopologyCategory.MULTIGRAPH, _triangle(), _triangle())

        assert exc_info.value.category is TopologyCategory.MULTIGRAPH
        assert isinstance(exc_info.value, NotImplementedError)

    @pytest.mark.parametrize("category", ["multigraph", "hypercube", 7, None])
    def test_unknown_categories_not_implemented(self, category):
        """Test unrecognised categories raise CategoryNotImplemented."""
        with pytest.raises(CategoryNotImplemented):
            create_isomorphism_inspector_by_type(category, _triangle(), _triangle())


class TestFactoryConfiguration:
    """Tests for factory instances."""

    def test_config_passed_to_inspector(self):
        """Test each inspector gets an equal copy of the factory config."""
        config = InspectorConfig(max_mappings=2)
        factory = AdaptiveIsomorphismInspectorFactory(config)
        inspector = factory.create_isomorphism_inspector(_triangle(), _triangle())

        assert inspector.config == config
        assert inspector.config is not config
        assert len(list(inspector.mappings())) == 2

    def test_config_not_shared_between_calls(self):
        """Test changing one inspector's config leaves later calls alone."""
        C4 = Graph.from_edges([(0, 1), (1, 2), (2, 3), (3, 0)])
        create_isomorphism_inspector(C4, C4).config.max_mappings = 1

        assert len(list(create_isomorphism_inspector(C4, C4).mappings())) == 8

    def test_factory_config_not_mutated_by_inspector(self):
        """Test inspector config changes do not reach the factory."""
        config = InspectorConfig()
        factory = AdaptiveIsomorphismInspectorFactory(config)
        factory.create_isomorphism_inspector(_triangle(), _triangle()).config.quick_reject = False

        assert config.quick_reject
        assert factory.create_isomorphism_inspector(_triangle(), _triangle()).config.quick_reject

    def test_inputs_not_copied(self):
        """Test Graph inputs are handed to the inspector as they are."""
        G = _triangle()
        inspector = create_isomorphism_inspector(G, G)

        assert inspector.graph1 is G
        assert inspector.graph2 is G

    def test_empty_graphs(self):
        """Test two empty graphs are isomorphic."""
        E = Graph(adjacency=np.zeros((0, 0)))

        assert is_isomorphic(E, E)
