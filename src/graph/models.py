"""Data models for dependency forests and their differences."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Set

from .coordinates import ComponentIdentifier


class Relationship(Enum):
    """How a node relates to the build being analyzed."""
    MODULE = "module"
    DIRECT = "direct"
    TRANSITIVE = "transitive"
    UNKNOWN = "unknown"  # only between parsing and normalization


@dataclass(eq=False)
class DependencyNode:
    """One vertex of a parsed dependency graph.

    Nodes compare by object identity; identifier equality is what the
    normalizer and differ use to match components.
    """
    identifier: ComponentIdentifier
    scope: Optional[str] = None
    children: List["DependencyNode"] = field(default_factory=list)
    is_module: bool = False
    relationship: Relationship = Relationship.UNKNOWN

    @property
    def name(self) -> Optional[str]:
        return self.identifier.name

    @property
    def version(self) -> str:
        return self.identifier.version

    @property
    def key(self) -> str:
        """Diff key: artifact name and version."""
        return f"{self.name}@{self.version}"

    def walk(self) -> Iterator["DependencyNode"]:
        """Yield this node and every descendant once, depth first.

        Memoized by identity string, so shared sub-trees and cycles are
        visited a single time.
        """
        seen: Set[str] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            ident = node.identifier.identity
            if ident in seen:
                continue
            seen.add(ident)
            yield node
            stack.extend(reversed(node.children))

    def descendants(self) -> List["DependencyNode"]:
        """Every node reachable below this one, excluding itself."""
        return list(self.walk())[1:]


@dataclass
class Upgrade:
    """A component whose version differs between baseline and candidate."""
    name: str
    from_node: DependencyNode
    to_node: DependencyNode


@dataclass
class DependencyDiff:
    """Result of comparing a baseline forest with a candidate forest."""
    introduced: List[DependencyNode] = field(default_factory=list)
    removed: List[DependencyNode] = field(default_factory=list)
    upgraded: List[Upgrade] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.introduced or self.removed or self.upgraded)
