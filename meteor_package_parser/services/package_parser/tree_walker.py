import logging
from collections.abc import Iterator

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Node as TSNode, Parser, Tree

from meteor_package_parser.services.package_parser.errors import BundleSyntaxError

logger = logging.getLogger(__name__)

JAVASCRIPT: Language = Language(tsjavascript.language())


def parse_source(source: str, *, allow_errors: bool = False) -> Tree:
    """Parse bundle source code into a tree-sitter tree.

    A new parser is created for every call so that separate extractions never
    share parser state.

    Args:
        source: JavaScript source of the compiled bundle.
        allow_errors: Return trees containing syntax errors instead of raising.

    Returns:
        The parsed syntax tree.

    Raises:
        BundleSyntaxError: If the source contains syntax errors and
            ``allow_errors`` is false.
    """

    parser = Parser(JAVASCRIPT)
    tree: Tree = parser.parse(source.encode("utf-8"))

    if tree.root_node.has_error:
        error_node: TSNode = _first_error_node(tree)
        if not allow_errors:
            raise BundleSyntaxError("Bundle source contains a syntax error", error_node)
        row, column = error_node.start_point
        logger.warning(
            f"Bundle source contains a syntax error at {row + 1}:{column + 1}, "
            "extracting from the partial tree"
        )
    return tree


def iter_nodes(tree: Tree, named_only: bool = True) -> Iterator[TSNode]:
    """Walk a tree depth-first, yielding every node before its children."""

    cursor = tree.walk()
    while True:
        node: TSNode | None = cursor.node
        if node is not None and (node.is_named or not named_only):
            yield node
        if cursor.goto_first_child():
            continue
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                return


def _first_error_node(tree: Tree) -> TSNode:
    for node in iter_nodes(tree, named_only=False):
        if node.type == "ERROR" or node.is_missing:
            return node
    return tree.root_node
