from collections.abc import Callable

import pytest
from tree_sitter import Node as TSNode

from meteor_package_parser.services.package_parser.tree_walker import iter_nodes, parse_source


@pytest.fixture
def first_node() -> Callable[[str, str], TSNode]:
    """Parse a JavaScript snippet and return its first node of the given type."""

    def _first_node(source: str, node_type: str) -> TSNode:
        tree = parse_source(source)
        for node in iter_nodes(tree):
            if node.type == node_type:
                return node
        raise AssertionError(f"No {node_type} node in: {source}")

    return _first_node
