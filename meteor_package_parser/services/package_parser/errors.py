from tree_sitter import Node as TSNode

from meteor_package_parser.utils.treesitter_helpers import describe_node


class ParserError(Exception):
    """Base class for every failure raised while parsing a Meteor package."""


class ModuleExportsError(ParserError):
    """A recognized call or literal had an unexpected shape.

    Attributes:
        description: Human readable explanation of what was expected.
        node: The tree-sitter node that violated the expected shape.
    """

    def __init__(self, description: str, node: TSNode) -> None:
        self.description: str = description
        self.node: TSNode = node
        super().__init__(f"{description} ({describe_node(node)})")


class BundleSyntaxError(ParserError):
    """The bundle source could not be parsed as JavaScript."""

    def __init__(self, description: str, node: TSNode) -> None:
        self.description: str = description
        self.node: TSNode = node
        super().__init__(f"{description} ({describe_node(node)})")


class PackageNameError(ParserError):
    pass


class EmptyPackageError(ParserError):
    pass
