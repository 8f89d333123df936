"""Root-level comparison of two classified forests."""

from __future__ import annotations

import logging
from typing import Dict, List, Set

from common.logging_utils import extra_context
from .models import DependencyDiff, DependencyNode, Upgrade

logger = logging.getLogger(__name__)


def diff_forests(master: List[DependencyNode], source: List[DependencyNode]) -> DependencyDiff:
    """Compute introduced, removed and upgraded components.

    Only the forests' root lists are compared, keyed by ``name@version``.
    Children travel along with their root for reporting. A name present on
    both sides with different versions is an upgrade and is reported only
    there. When several baseline roots share a name, the last one wins.

    Args:
        master: Baseline forest.
        source: Candidate forest.

    Returns:
        DependencyDiff with lists in the forests' own order.
    """
    master_keys: Set[str] = {node.key for node in master}
    source_keys: Set[str] = {node.key for node in source}

    master_by_name: Dict[str, DependencyNode] = {}
    for node in master:
        master_by_name[node.name] = node

    upgraded: List[Upgrade] = []
    for node in source:
        previous = master_by_name.get(node.name)
        if previous is not None and previous.version != node.version:
            upgraded.append(Upgrade(name=node.name, from_node=previous, to_node=node))

    upgraded_to = {upgrade.to_node.key for upgrade in upgraded}
    upgraded_from = {upgrade.from_node.key for upgrade in upgraded}

    introduced = [
        node for node in source
        if node.key not in master_keys and node.key not in upgraded_to
    ]
    removed = [
        node for node in master
        if node.key not in source_keys and node.key not in upgraded_from
    ]

    logger.info(
        "Dependency diff: %d introduced, %d removed, %d upgraded",
        len(introduced),
        len(removed),
        len(upgraded),
        extra=extra_context(event="diff", component="differ", action="diff_forests")
    )
    return DependencyDiff(introduced=introduced, removed=removed, upgraded=upgraded)
