"""Post-processing of a parsed forest into a classified one."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Set

from constants import Constants
from .coordinates import ComponentIdentifier
from .models import DependencyNode, Relationship

logger = logging.getLogger(__name__)


def _is_packaging_descriptor(node: DependencyNode) -> bool:
    return node.identifier.extension == Constants.PACKAGING_DESCRIPTOR_TYPE


def _mark_transitive(forest: List[DependencyNode]) -> None:
    """Classify every still-unknown node object reachable from ``forest``.

    Tracks visited objects rather than identity strings: the direct copies of
    a single root's children share their identity with the originals, and a
    cycle can lead back to an original.
    """
    seen: Set[int] = set()
    stack = list(forest)
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.relationship is Relationship.UNKNOWN:
            node.relationship = Relationship.TRANSITIVE
        stack.extend(node.children)


def _promote_modules(roots: List[DependencyNode]) -> List[DependencyNode]:
    module_ids: Set[ComponentIdentifier] = {root.identifier for root in roots}
    for module in roots:
        # A module depending on a sibling module would repeat the sibling's subtree
        module.children = [
            child for child in module.children if child.identifier not in module_ids
        ]
        module.is_module = True
        module.relationship = Relationship.MODULE
        for child in module.children:
            child.relationship = Relationship.DIRECT
    return roots


def normalize_forest(roots: List[DependencyNode]) -> List[DependencyNode]:
    """Turn parsed subgraph roots into the classified forest for one side.

    Packaging-descriptor roots (``pom``) are dropped first; only the root
    list is filtered. Several remaining roots become modules whose immediate
    children are direct. A single remaining root is replaced by copies of its
    children, marked direct. Every other reachable node becomes transitive.

    A forest whose roots are all classified already is returned after the
    filter alone, so normalizing twice gives the same classification. The
    check is all-or-nothing: when only some roots are classified the whole
    list is normalized again from scratch, and a warning is logged.

    Args:
        roots: Subgraph roots from the parser.

    Returns:
        The classified forest; empty when nothing is left to analyze.
    """
    kept = [root for root in roots if not _is_packaging_descriptor(root)]
    dropped = len(roots) - len(kept)
    if dropped:
        logger.debug("Dropped %d packaging-descriptor roots", dropped)

    classified = sum(1 for root in kept if root.relationship is not Relationship.UNKNOWN)
    if kept and classified == len(kept):
        return kept
    if classified:
        logger.warning(
            "%d of %d roots are already classified; normalizing all of them again",
            classified,
            len(kept),
        )

    if len(kept) > 1:
        forest = _promote_modules(kept)
        logger.info("Detected multi-module build with %d modules", len(forest))
    elif len(kept) == 1:
        forest = [
            dataclasses.replace(child, relationship=Relationship.DIRECT)
            for child in kept[0].children
        ]
        logger.info("Detected single-module build %s", kept[0].identifier)
    else:
        logger.info("No analyzable dependencies found")
        return []

    _mark_transitive(forest)
    return forest
