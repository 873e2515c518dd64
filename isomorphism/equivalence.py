"""Equivalence comparators and comparator chains.

An equivalence comparator decides whether an element of one graph (a
vertex label, or an edge given as a (u, v) label pair) may correspond to an
element of another graph under a candidate isomorphism. Comparators are
necessary-but-not-sufficient filters: answering True only keeps a pairing
alive, answering False removes it from the search.

Each comparator also provides an equivalence hash. Two elements the
comparator would call equivalent must receive equal hashes, which lets an
inspector bucket vertices into classes before comparing pairs. A constant
hash is always valid.

For undirected graphs an edge element is passed in the orientation it was
reached by the search, so edge comparators should treat (u, v) and (v, u)
alike.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterator, List, Optional, Protocol, Tuple, Union

from topology import Graph


class EquivalenceComparator(Protocol):
    def equivalent(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool: ...
    def equivalence_hash(self, element: Any, graph: Graph) -> Hashable: ...


ComparatorLike = Union[EquivalenceComparator, Callable[[Any, Graph, Any, Graph], bool], None]


@dataclass(frozen=True)
class VertexDegreeEquivalenceComparator:
    """Vertices are equivalent iff their degrees are equal.

    On directed graphs both the in-degree and the out-degree must match.
    """

    def _key(self, vertex: Any, graph: Graph) -> Hashable:
        if graph.directed:
            return (graph.in_degree(vertex), graph.out_degree(vertex))
        return graph.degree(vertex)

    def equivalent(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool:
        return self._key(a, graph_a) == self._key(b, graph_b)

    def equivalence_hash(self, element: Any, graph: Graph) -> Hashable:
        return self._key(element, graph)


@dataclass(frozen=True)
class UniformEquivalenceComparator:
    """Every pair is equivalent."""

    def equivalent(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool:
        return True

    def equivalence_hash(self, element: Any, graph: Graph) -> Hashable:
        return 0


@dataclass(frozen=True)
class FunctionComparator:
    """Adapter turning a plain predicate into a comparator.

    Attributes:
        predicate: Callable (a, graph_a, b, graph_b) -> bool
        hash_fn: Optional callable (element, graph) -> hashable; must give
            equal values to any two elements ``predicate`` accepts
    """
    predicate: Callable[[Any, Graph, Any, Graph], bool]
    hash_fn: Optional[Callable[[Any, Graph], Hashable]] = None

    def equivalent(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool:
        return bool(self.predicate(a, graph_a, b, graph_b))

    def equivalence_hash(self, element: Any, graph: Graph) -> Hashable:
        if self.hash_fn is None:
            return 0
        return self.hash_fn(element, graph)


def as_comparator(obj: ComparatorLike) -> Optional[EquivalenceComparator]:
    """Normalise a comparator argument.

    ``None`` stays ``None``. Objects with both ``equivalent`` and
    ``equivalence_hash`` are used as they are, objects with only
    ``equivalent`` and bare callables are wrapped in FunctionComparator.

    Raises:
        TypeError: If ``obj`` is none of the above
    """
    if obj is None:
        return None
    if hasattr(obj, "equivalent") and hasattr(obj, "equivalence_hash"):
        return obj
    if hasattr(obj, "equivalent"):
        return FunctionComparator(obj.equivalent)
    if callable(obj):
        return FunctionComparator(obj)
    raise TypeError(f"Expected an equivalence comparator or callable, got {type(obj).__name__}")


class EquivalenceComparatorChain:
    """Ordered conjunction of comparators with short-circuit evaluation.

    The chain accepts a pair iff every member accepts it. Members are
    evaluated in the order they were added and evaluation stops at the
    first rejection, so cheap discriminators should come first. An empty
    chain accepts every pair.

    The chain is itself a comparator; its equivalence hash is the tuple of
    its members' hashes.

    Usage:
        chain = EquivalenceComparatorChain(VertexDegreeEquivalenceComparator())
        chain.append(my_label_comparator)   # None is ignored
        frozen = chain.freeze()             # immutable snapshot
        frozen.evaluate(u, G1, v, G2)
    """

    def __init__(self, *comparators: ComparatorLike):
        self._comparators: Union[List[EquivalenceComparator], Tuple[EquivalenceComparator, ...]] = []
        self._frozen = False
        for comparator in comparators:
            self.append(comparator)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def comparators(self) -> Tuple[EquivalenceComparator, ...]:
        return tuple(self._comparators)

    def __len__(self) -> int:
        return len(self._comparators)

    def __iter__(self) -> Iterator[EquivalenceComparator]:
        return iter(tuple(self._comparators))

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"{type(self).__name__}({list(self._comparators)!r}, {state})"

    def append(self, comparator: ComparatorLike) -> "EquivalenceComparatorChain":
        """Add a comparator after the existing ones. ``None`` is a no-op.

        Raises:
            TypeError: If the chain is frozen or ``comparator`` is not
                comparator-like
        """
        if self._frozen:
            raise TypeError("Cannot append to a frozen comparator chain")
        comparator = as_comparator(comparator)
        if comparator is not None:
            self._comparators.append(comparator)
        return self

    def evaluate(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool:
        for comparator in self._comparators:
            if not comparator.equivalent(a, graph_a, b, graph_b):
                return False
        return True

    def equivalent(self, a: Any, graph_a: Graph, b: Any, graph_b: Graph) -> bool:
        return self.evaluate(a, graph_a, b, graph_b)

    def equivalence_hash(self, element: Any, graph: Graph) -> Hashable:
        return tuple(c.equivalence_hash(element, graph) for c in self._comparators)

    def freeze(self) -> "EquivalenceComparatorChain":
        """Return an immutable snapshot of this chain.

        Nested chains are frozen too, so appending to this chain (or to
        any chain it contains) afterwards does not affect the snapshot.
        Freezing an already frozen chain returns it unchanged.
        """
        if self._frozen:
            return self
        snapshot = EquivalenceComparatorChain()
        snapshot._comparators = tuple(
            c.freeze() if isinstance(c, EquivalenceComparatorChain) else c
            for c in self._comparators
        )
        snapshot._frozen = True
        return snapshot
