"""Experiments package for the adaptive isomorphism inspector.

Key experiments:
- isomorphism_family_sweep: Reflexive, relabeled and rewired checks across
  graph families, with networkx as an oracle
"""

__all__ = [
    "isomorphism_family_sweep",
]
