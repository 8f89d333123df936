"""Tests for the dot-format dependency graph parser."""

import pytest

from graph.coordinates import ParseError
from graph.models import Relationship
from graph.parser import parse_dependency_graph, parse_subgraph, split_subgraphs


class TestSplitSubgraphs:
    """Test subgraph block detection."""

    def test_lines_outside_blocks_are_ignored(self, single_module_dump):
        blocks = split_subgraphs(single_module_dump)
        assert len(blocks) == 1
        assert len(blocks[0]) == 5
        assert all("BUILD SUCCESS" not in line for line in blocks[0])

    def test_one_block_per_module(self, multi_module_dump):
        blocks = split_subgraphs(multi_module_dump)
        assert [len(block) for block in blocks] == [1, 2, 4]

    def test_end_marker_must_match_exactly(self):
        text = '[INFO] digraph "g:a:jar:1" { \n[INFO] \t"g:a:jar:1" -> "g:b:jar:1:compile" ; \n[INFO]  }\n'
        # no trailing space on the closing line, so the block never closes
        assert split_subgraphs(text) == []

    def test_crlf_line_endings(self):
        text = '[INFO] digraph "g:a:jar:1" { \r\n[INFO] \t"g:a:jar:1" -> "g:b:jar:1:compile" ; \r\n[INFO]  } \r\n'
        blocks = split_subgraphs(text)
        assert blocks == [['[INFO] \t"g:a:jar:1" -> "g:b:jar:1:compile" ; ']]

    def test_new_start_discards_unterminated_block(self):
        text = "\n".join([
            '[INFO] digraph "g:a:jar:1" { ',
            '[INFO] \t"g:a:jar:1" -> "g:b:jar:1:compile" ; ',
            '[INFO] digraph "g:c:jar:1" { ',
            '[INFO] \t"g:c:jar:1" -> "g:d:jar:1:compile" ; ',
            "[INFO]  } ",
        ])
        blocks = split_subgraphs(text)
        assert len(blocks) == 1
        assert '"g:c:jar:1"' in blocks[0][0]

    def test_custom_markers(self):
        text = 'digraph "g:a:jar:1" {\n  "g:a:jar:1" -> "g:b:jar:1:compile" ;\n}\n'
        blocks = split_subgraphs(text, start_marker="digraph", end_marker="}")
        assert len(blocks) == 1


class TestParseSubgraph:
    """Test edge parsing within one block."""

    def test_first_left_endpoint_is_root(self):
        roots = parse_subgraph([
            '"g:app:jar:1" -> "g:lib:jar:1:compile" ;',
            '"g:lib:jar:1:compile" -> "g:dep:jar:1:compile" ;',
        ])
        assert [root.name for root in roots] == ["app"]
        assert [child.name for child in roots[0].children] == ["lib"]
        assert [child.name for child in roots[0].children[0].children] == ["dep"]

    def test_repeated_coordinates_share_one_node(self):
        roots = parse_subgraph([
            '"g:app:jar:1" -> "g:a:jar:1:compile" ;',
            '"g:app:jar:1" -> "g:b:jar:1:compile" ;',
            '"g:a:jar:1:compile" -> "g:shared:jar:1:compile" ;',
            '"g:b:jar:1:compile" -> "g:shared:jar:1:compile" ;',
        ])
        a, b = roots[0].children
        assert a.children[0] is b.children[0]

    def test_duplicate_edges_are_tolerated(self):
        roots = parse_subgraph([
            '"g:app:jar:1" -> "g:a:jar:1:compile" ;',
            '"g:app:jar:1" -> "g:a:jar:1:compile" ;',
        ])
        assert len(roots[0].children) == 2
        assert roots[0].children[0] is roots[0].children[1]

    def test_non_edge_lines_are_skipped(self):
        roots = parse_subgraph([
            "// comment",
            '  node [shape=box];',
            '"g:app:jar:1" "g:a:jar:1:compile"',
            '"g:app:jar:1 -> "g:a:jar:1:compile"',
            '"g:app:jar:1" -> "g:a:jar:1:compile" ;',
        ])
        assert len(roots) == 1
        assert len(roots[0].children) == 1

    def test_nodes_start_unclassified(self):
        roots = parse_subgraph(['"g:app:jar:1" -> "g:a:jar:1:compile" ;'])
        assert roots[0].relationship is Relationship.UNKNOWN
        assert roots[0].children[0].relationship is Relationship.UNKNOWN
        assert roots[0].children[0].scope == "compile"
        assert roots[0].scope is None

    def test_empty_block_yields_no_roots(self):
        assert parse_subgraph([]) == []
        assert parse_subgraph(["{", "}"]) == []

    def test_three_part_coordinate_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_subgraph(['"g:app:jar:1" -> "g:bad:1" ;'])
        assert exc_info.value.coordinate == "g:bad:1"


class TestParseDependencyGraph:
    """Test whole-dump parsing."""

    def test_single_module(self, single_module_dump):
        roots = parse_dependency_graph(single_module_dump)
        assert len(roots) == 1
        app = roots[0]
        assert app.name == "app"
        assert [child.name for child in app.children] == ["slf4j-api", "guava", "junit"]

    def test_roots_from_every_subgraph(self, multi_module_dump):
        roots = parse_dependency_graph(multi_module_dump)
        assert [root.name for root in roots] == ["parent", "core", "web"]

    def test_subgraphs_do_not_share_nodes(self, multi_module_dump):
        roots = parse_dependency_graph(multi_module_dump)
        core_slf4j = roots[1].children[0]
        web_core = roots[2].children[0]
        assert core_slf4j.name == "slf4j-api"
        assert web_core.children[0].name == "slf4j-api"
        assert web_core.children[0] is not core_slf4j

    def test_empty_subgraph_contributes_nothing(self, make_digraph):
        text = make_digraph(root="g:empty:jar:1") + make_digraph(("g:app:jar:1", "g:a:jar:1:compile"))
        roots = parse_dependency_graph(text)
        assert [root.name for root in roots] == ["app"]

    def test_no_subgraphs(self):
        assert parse_dependency_graph("[INFO] BUILD FAILURE\n") == []

    def test_parse_error_names_coordinate(self, make_digraph):
        text = make_digraph(("g:app:jar:1", "g:a:jar:1:compile"), ("g:a:jar:1:compile", "broken:coordinate:x"))
        with pytest.raises(ParseError, match="broken:coordinate:x"):
            parse_dependency_graph(text)

    def test_calls_are_independent(self, single_module_dump):
        first = parse_dependency_graph(single_module_dump)
        second = parse_dependency_graph(single_module_dump)
        assert first[0] is not second[0]
        assert first[0].identifier == second[0].identifier
