import logging
import re
from functools import cached_property

from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Node as TSNode

from meteor_package_parser.models.exports import (
    DefaultExport,
    GlobalBinding,
    ModuleExport,
    NamedExport,
    ReExport,
)
from meteor_package_parser.services.package_parser.config import ParserConfig
from meteor_package_parser.services.package_parser.consts import (
    EXPORT_DEFAULT_METHOD,
    EXPORT_METHOD,
    LINK_METHOD,
    MAIN_MODULE_BINDING,
    MAIN_MODULE_OPERATOR,
    METEOR_KEY,
    NODE_MODULES_KEY,
    PACKAGE_DEFINE_METHOD,
    REQUIRE_FUNCTION,
)
from meteor_package_parser.services.package_parser.errors import ModuleExportsError
from meteor_package_parser.services.package_parser.types import (
    InstallResult,
    MainModuleResult,
    PackageScopeResult,
)
from meteor_package_parser.utils.treesitter_helpers import (
    FUNCTION_NODE_TYPES,
    call_arguments,
    function_body,
    is_identifier,
    member_parts,
    named_children,
    node_text,
    number_value,
    string_value,
    unwrap_parentheses,
)

logger = logging.getLogger(__name__)


def literal_string(node: TSNode) -> str:
    try:
        return string_value(node)
    except ValueError as error:
        raise ModuleExportsError(f"Undecodable string literal: {error}", node) from error


def property_key(prop: TSNode) -> str:
    """Read the key of an object literal property.

    Args:
        prop: A ``pair``, ``method_definition`` or shorthand property node.

    Returns:
        The key as a plain string.

    Raises:
        ModuleExportsError: For spread elements, computed keys and any other
            key that is not an identifier or a string literal.
    """

    if prop.type == "shorthand_property_identifier":
        return node_text(prop)

    if prop.type == "pair":
        key: TSNode | None = prop.child_by_field_name("key")
    elif prop.type == "method_definition":
        key = prop.child_by_field_name("name")
    else:
        raise ModuleExportsError("Unexpected property type!", prop)

    if key is not None and key.type == "property_identifier":
        return node_text(key)
    if key is not None and key.type == "string":
        return literal_string(key)

    raise ModuleExportsError("Unsupported property key type!", prop)


class NodeProcessor(BaseModel):
    """Recognizers for the call shapes Meteor emits into a package bundle.

    Each ``read_*`` method inspects a single node and returns a partial result
    when the node has the shape it is looking for, or None otherwise. A node
    that matches the outer shape of a recognizer but not its inner shape is a
    structural defect and raises ``ModuleExportsError``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: ParserConfig = Field(default_factory=ParserConfig)

    @cached_property
    def _module_binding(self) -> re.Pattern[str]:
        return re.compile(self.config.module_binding_pattern)

    def read_meteor_install(self, node: TSNode) -> InstallResult | None:
        """Read the package name and module tree from ``meteorInstall({...})``.

        The argument always starts with the same three levels:
        ``{"node_modules": {"meteor": {"<package name>": {...}}}}``. Below the
        package name, objects are directories and functions are modules.
        """

        if node.type != "call_expression":
            return None
        if not is_identifier(
            node.child_by_field_name("function"), self.config.installer_identifier
        ):
            return None

        args: list[TSNode] = call_arguments(node)
        if not args:
            raise ModuleExportsError("Expected a module tree argument for the installer!", node)

        _, meteor = self.__prefix_entry(args[0], NODE_MODULES_KEY)
        _, package = self.__prefix_entry(meteor, METEOR_KEY)
        package_name, package_modules = self.__prefix_entry(package, None)
        if package_modules.type != "object":
            raise ModuleExportsError("Expected an object of package modules!", package_modules)

        modules: dict[str, list[ModuleExport]] = {}
        self.__traverse_modules(package_modules, "", modules)
        logger.debug(f"Read {len(modules)} modules from the module tree of {package_name}")

        return InstallResult(name=package_name, modules=modules, node=node)

    def read_package_scope(self, node: TSNode) -> PackageScopeResult | None:
        """Read package-scope exports from ``Package._define(name, exports, {...})``.

        Core packages that do not use the module system pass the package-scope
        exports as the second and last argument.
        """

        if node.type != "call_expression":
            return None
        callee = member_parts(node.child_by_field_name("function"))
        if callee is None:
            return None
        obj, prop = callee
        if not is_identifier(obj, self.config.registry_identifier):
            return None
        if prop.type != "property_identifier" or node_text(prop) != PACKAGE_DEFINE_METHOD:
            return None

        args: list[TSNode] = call_arguments(node)
        package_exports: TSNode | None = args[2] if len(args) > 2 else None

        if package_exports is None and len(args) == 2 and args[1].type == "object":
            package_exports = args[1]

        if package_exports is None:
            return None
        if package_exports.type != "object":
            raise ModuleExportsError(
                "Unexpected type received for package-scope exports argument!",
                package_exports,
            )

        package_name: TSNode = args[0]
        if package_name.type != "string":
            raise ModuleExportsError("Unexpected type received for package name!", package_name)

        exports: list[str] = []
        for entry in named_children(package_exports):
            exports.append(property_key(entry))

        return PackageScopeResult(
            name=literal_string(package_name),
            exports=tuple(dict.fromkeys(exports)),
        )

    def read_main_module_path(self, node: TSNode) -> MainModuleResult | None:
        # var exports = require("/node_modules/meteor/<package>/<main module>");
        if node.type != "variable_declarator":
            return None
        if not is_identifier(node.child_by_field_name("name"), MAIN_MODULE_BINDING):
            return None
        value: TSNode | None = node.child_by_field_name("value")
        if value is None or value.type != "call_expression":
            return None
        if not is_identifier(value.child_by_field_name("function"), REQUIRE_FUNCTION):
            return None
        args: list[TSNode] = call_arguments(value)
        if not args or args[0].type != "string":
            return None

        return MainModuleResult(path=literal_string(args[0]))

    def read_module_exports(self, node: TSNode) -> list[ModuleExport]:
        """Read the exports declared by one statement of a module body.

        Args:
            node: A statement from a module function's body.

        Returns:
            The statement's exports in source order. Statements that do not
            declare anything yield an empty list.
        """

        if node.type != "expression_statement":
            return []
        expressions: list[TSNode] = named_children(node)
        if not expressions:
            return []
        expression = unwrap_parentheses(expressions[0])
        if expression is None:
            return []

        if expression.type == "unary_expression":
            return self.__read_main_module(expression)
        if expression.type != "call_expression":
            return []

        callee = member_parts(expression.child_by_field_name("function"))
        if callee is None:
            return []
        obj, prop = callee

        # Meteor's module object, `module.` or one of its numbered aliases.
        if obj.type != "identifier" or not self._module_binding.fullmatch(node_text(obj)):
            return []
        if prop.type != "property_identifier":
            return []

        method: str = node_text(prop)
        args: list[TSNode] = call_arguments(expression)

        if method == EXPORT_DEFAULT_METHOD:
            return [self.__read_default_export(expression, args)]
        if method == EXPORT_METHOD:
            return self.__read_named_exports(expression, args)
        if method == LINK_METHOD:
            return self.__read_links(expression, args)
        return []

    def __prefix_entry(self, node: TSNode, expected_key: str | None) -> tuple[str, TSNode]:
        if node.type != "object":
            raise ModuleExportsError(
                f"Expected an object literal holding '{expected_key or 'package name'}'"
                " in the module tree!",
                node,
            )

        properties: list[TSNode] = named_children(node)
        if not properties or properties[0].type != "pair":
            raise ModuleExportsError("Unexpected module tree layout!", node)

        entry: TSNode = properties[0]
        key: str = property_key(entry)
        if expected_key is not None and key != expected_key:
            raise ModuleExportsError(
                f"Expected '{expected_key}' in the module tree, got '{key}'!", entry
            )

        value = unwrap_parentheses(entry.child_by_field_name("value"))
        if value is None:
            raise ModuleExportsError("Module tree entry has no value!", entry)
        return key, value

    def __traverse_modules(
        self, directory: TSNode, parent_path: str, modules: dict[str, list[ModuleExport]]
    ) -> None:
        for entry in named_children(directory):
            if entry.type != "pair":
                raise ModuleExportsError("Unexpected property type in module tree!", entry)

            path: str = f"{parent_path}{property_key(entry)}"
            value = unwrap_parentheses(entry.child_by_field_name("value"))
            if value is None:
                raise ModuleExportsError("Module tree entry has no value!", entry)

            if value.type == "object":
                self.__traverse_modules(value, f"{path}/", modules)
                continue

            body: TSNode | None = function_body(value)
            if body is None:
                raise ModuleExportsError(
                    "Expected a module function or a directory object in the module tree!",
                    value,
                )
            if path in modules:
                raise ModuleExportsError(f"Duplicate module path in module tree: {path}", entry)

            exports: list[ModuleExport] = []
            for statement in named_children(body):
                exports.extend(self.read_module_exports(statement))
            modules[path] = exports

    def __read_main_module(self, expression: TSNode) -> list[ModuleExport]:
        # !function (module1) { ... }.call(this, module)
        operator: TSNode | None = expression.child_by_field_name("operator")
        if operator is None or operator.type != MAIN_MODULE_OPERATOR:
            return []
        call = unwrap_parentheses(expression.child_by_field_name("argument"))
        if call is None or call.type != "call_expression":
            return []
        callee = member_parts(call.child_by_field_name("function"))
        if callee is None:
            return []

        body: TSNode | None = function_body(unwrap_parentheses(callee[0]))
        if body is None:
            return []

        exports: list[ModuleExport] = []
        for statement in named_children(body):
            exports.extend(self.read_module_exports(statement))
        return exports

    def __read_default_export(self, expression: TSNode, args: list[TSNode]) -> DefaultExport:
        if not args or args[0].type != "identifier":
            raise ModuleExportsError(
                "Unexpected default export value!", args[0] if args else expression
            )
        return DefaultExport(name=node_text(args[0]))

    def __read_named_exports(self, expression: TSNode, args: list[TSNode]) -> list[ModuleExport]:
        if not args or args[0].type != "object":
            raise ModuleExportsError("Unexpected export type!", args[0] if args else expression)
        return [NamedExport(name=property_key(entry)) for entry in named_children(args[0])]

    def __read_links(self, expression: TSNode, args: list[TSNode]) -> list[ModuleExport]:
        if not args or args[0].type != "string":
            raise ModuleExportsError(
                "Expected string as the first argument in module.link()!",
                args[0] if args else expression,
            )
        source: str = literal_string(args[0])

        # module.link("./side-effects") imports without binding anything.
        if len(args) == 1:
            return []

        if args[1].type != "object":
            raise ModuleExportsError(
                "Expected an object as the second argument in module.link()!", args[1]
            )

        link_id: int | None = None
        if len(args) > 2:
            if args[2].type != "number":
                raise ModuleExportsError(
                    "Expected a number as the last argument in module.link()!", args[2]
                )
            try:
                link_id = int(number_value(args[2]))
            except (ValueError, OverflowError) as error:
                raise ModuleExportsError(
                    "Expected a number as the last argument in module.link()!", args[2]
                ) from error

        return [
            self.__read_link_binding(entry, source, link_id)
            for entry in named_children(args[1])
        ]

    def __read_link_binding(
        self, entry: TSNode, source: str, link_id: int | None
    ) -> ModuleExport:
        name: str = property_key(entry)

        if entry.type == "method_definition":
            return GlobalBinding(name=name, from_=source, link_id=link_id)

        if entry.type == "pair":
            value = unwrap_parentheses(entry.child_by_field_name("value"))
            if value is not None and value.type in FUNCTION_NODE_TYPES:
                return GlobalBinding(name=name, from_=source, link_id=link_id)
            if value is not None and value.type == "string":
                alias: str = literal_string(value)
                return ReExport(
                    name=name,
                    from_=source,
                    as_=alias if alias != name else None,
                    link_id=link_id,
                )

        raise ModuleExportsError("Received unsupported result type in re-export!", entry)
