from tree_sitter import Node as TSNode

FUNCTION_NODE_TYPES: frozenset[str] = frozenset(
    {
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
    }
)


def node_text(node: TSNode) -> str:
    text: bytes | None = node.text
    if text is None:
        return ""
    return text.decode("utf-8")


def named_children(node: TSNode) -> list[TSNode]:
    """Return the named children of a node, skipping comments.

    Comments are extras in the JavaScript grammar and can show up between any
    two statements, arguments or object properties.
    """

    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parentheses(node: TSNode | None) -> TSNode | None:
    while node is not None and node.type == "parenthesized_expression":
        inner: list[TSNode] = named_children(node)
        if not inner:
            return node
        node = inner[0]
    return node


def is_identifier(node: TSNode | None, name: str) -> bool:
    return node is not None and node.type == "identifier" and node_text(node) == name


_SINGLE_CHARACTER_ESCAPES: dict[str, str] = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_CONTINUATIONS: frozenset[str] = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})
_OCTAL_DIGITS: frozenset[str] = frozenset("01234567")


def decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence, leading backslash included.

    Raises:
        ValueError: If the sequence is malformed or names an invalid code point.
    """

    body: str = sequence[1:]
    if body in _LINE_CONTINUATIONS:
        return ""
    if body.startswith("u{") and body.endswith("}"):
        code_point: int = int(body[2:-1], 16)
        if code_point > 0x10FFFF:
            raise ValueError(f"Code point out of range in escape sequence {sequence!r}")
        return chr(code_point)
    if len(body) > 1 and body[0] in {"u", "x"}:
        return chr(int(body[1:], 16))
    if body and set(body) <= _OCTAL_DIGITS:
        return chr(int(body, 8))
    return _SINGLE_CHARACTER_ESCAPES.get(body, body)


def string_value(node: TSNode) -> str:
    """Decode the value of a ``string`` node without its quotes.

    Escapes follow JavaScript rules, and ``\\uD83D\\uDE00`` style surrogate
    pairs are joined into a single character.

    Raises:
        ValueError: If an escape cannot be decoded or a surrogate is unpaired.
    """

    parts: list[str] = []
    for child in node.children:
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(decode_escape(node_text(child)))
    value: str = "".join(parts)

    try:
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as error:
        raise ValueError(f"Unpaired surrogate in string literal: {value!r}") from error


def number_value(node: TSNode) -> int | float:
    """Read a numeric literal. BigInt literals such as ``1n`` raise ValueError."""

    raw: str = node_text(node).replace("_", "")
    try:
        return int(raw, 0)
    except ValueError:
        return float(raw)


def call_arguments(call_node: TSNode) -> list[TSNode]:
    """Return the argument expressions of a ``call_expression``.

    Tagged template calls have no ``arguments`` node and yield an empty list.
    """

    arguments: TSNode | None = call_node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return named_children(arguments)


def member_parts(node: TSNode | None) -> tuple[TSNode, TSNode] | None:
    """Split a ``member_expression`` into its object and property nodes."""

    if node is None or node.type != "member_expression":
        return None
    obj: TSNode | None = node.child_by_field_name("object")
    prop: TSNode | None = node.child_by_field_name("property")
    if obj is None or prop is None:
        return None
    return obj, prop


def function_body(node: TSNode | None) -> TSNode | None:
    """Return the block body of a function value, or None for anything else."""

    if node is None or node.type not in FUNCTION_NODE_TYPES:
        return None
    body: TSNode | None = node.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        return None
    return body


def describe_node(node: TSNode, limit: int = 80) -> str:
    row, column = node.start_point
    snippet: str = " ".join(node_text(node).split())
    if len(snippet) > limit:
        snippet = f"{snippet[:limit]}..."
    return f"{node.type} at line {row + 1}, column {column + 1}: {snippet}"
