"""Dependency-graph parsing, normalization and diffing.

This package holds the pure core of depdelta:
- coordinates.py: component identifiers and the Maven coordinate shapes
- models.py: nodes, relationships and diff results
- parser.py: dot-format dump to subgraph roots
- normalizer.py: roots to a classified forest
- differ.py: baseline vs. candidate comparison

Nothing here performs I/O or keeps state between calls.
"""

from .coordinates import MAVEN, ComponentIdentifier, ParseError, parse_coordinates
from .models import DependencyDiff, DependencyNode, Relationship, Upgrade
from .parser import parse_dependency_graph, parse_subgraph, split_subgraphs
from .normalizer import normalize_forest
from .differ import diff_forests

__all__ = [
    "MAVEN",
    "ComponentIdentifier",
    "ParseError",
    "parse_coordinates",
    "DependencyDiff",
    "DependencyNode",
    "Relationship",
    "Upgrade",
    "parse_dependency_graph",
    "parse_subgraph",
    "split_subgraphs",
    "normalize_forest",
    "diff_forests",
]
