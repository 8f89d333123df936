"""Parser for `mvn dependency:tree -DoutputType=dot` console output.

The build log holds one ``digraph`` block per module. Each block lists the
module's dependency edges as quoted coordinate pairs::

    [INFO] digraph "com.example:app:jar:1.0" {
    [INFO] 	"com.example:app:jar:1.0" -> "org.slf4j:slf4j-api:jar:2.0.9:compile" ;
    [INFO]  }

Everything outside the blocks, and every line inside that is not an edge,
is ignored.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .coordinates import parse_coordinates
from .models import DependencyNode

logger = logging.getLogger(__name__)

EDGE_PATTERN = re.compile(r'"([^"]+)" -> "([^"]+)"')
_LINE_SPLITTER = re.compile(r"\r?\n")


def split_subgraphs(
    text: str,
    start_marker: str = Constants.SUBGRAPH_START,
    end_marker: str = Constants.SUBGRAPH_END,
) -> List[List[str]]:
    """Collect the raw lines of every complete subgraph block.

    Args:
        text: Full dump text.
        start_marker: Prefix of a line opening a block.
        end_marker: Exact content of a line closing a block.

    Returns:
        One list of verbatim lines per closed block, in order.
    """
    subgraphs: List[List[str]] = []
    current: Optional[List[str]] = None
    for line in _LINE_SPLITTER.split(text):
        if line.startswith(start_marker):
            if current is not None and is_debug_enabled(logger):
                logger.debug("Discarding unterminated subgraph (%d lines)", len(current))
            current = []
            continue
        if line == end_marker:
            if current is not None:
                subgraphs.append(current)
            current = None
            continue
        if current is not None:
            current.append(line)
    if current is not None:
        logger.debug("Dump ended inside a subgraph; %d lines dropped", len(current))
    return subgraphs


def _resolve(coordinate: str, nodes: Dict[str, DependencyNode]) -> DependencyNode:
    node = nodes.get(coordinate)
    if node is None:
        identifier, scope = parse_coordinates(coordinate.split(Constants.COORDINATE_SEPARATOR))
        node = DependencyNode(identifier=identifier, scope=scope)
        nodes[coordinate] = node
    return node


def parse_subgraph(lines: List[str]) -> List[DependencyNode]:
    """Build the node graph for one subgraph block.

    Repeated mentions of a coordinate string resolve to the same node. A
    coordinate first met as the source of an edge is a root of the block.

    Raises:
        ParseError: If an edge endpoint is not a 4, 5 or 6 part coordinate.
    """
    nodes: Dict[str, DependencyNode] = {}
    roots: List[DependencyNode] = []
    for line in lines:
        match = EDGE_PATTERN.search(line)
        if not match:
            continue
        left, right = match.group(1), match.group(2)

        is_new = left not in nodes
        parent = _resolve(left, nodes)
        if is_new:
            roots.append(parent)
        parent.children.append(_resolve(right, nodes))
    return roots


def parse_dependency_graph(
    text: str,
    start_marker: str = Constants.SUBGRAPH_START,
    end_marker: str = Constants.SUBGRAPH_END,
) -> List[DependencyNode]:
    """Parse a whole dump into the roots of all of its subgraphs.

    Args:
        text: Full dump text.
        start_marker: Prefix of a line opening a subgraph.
        end_marker: Exact content of a line closing a subgraph.

    Returns:
        Root nodes of every subgraph, in first-seen order.

    Raises:
        ParseError: If any edge endpoint has an unsupported coordinate shape.
    """
    roots: List[DependencyNode] = []
    subgraphs = split_subgraphs(text, start_marker, end_marker)
    for lines in subgraphs:
        roots.extend(parse_subgraph(lines))
    logger.debug(
        "Parsed dependency graph",
        extra=extra_context(
            event="parse",
            component="parser",
            action="parse_dependency_graph",
            count=len(roots)
        )
    )
    return roots
