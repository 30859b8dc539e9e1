from dataclasses import dataclass

from tree_sitter import Node as TSNode

from meteor_package_parser.models.exports import ModuleExport


@dataclass(frozen=True)
class InstallResult:
    """Package name and module tree read from one installer call."""

    name: str
    modules: dict[str, list[ModuleExport]]
    node: TSNode


@dataclass(frozen=True)
class PackageScopeResult:
    name: str
    exports: tuple[str, ...]


@dataclass(frozen=True)
class MainModuleResult:
    path: str


type RecognizerResult = InstallResult | PackageScopeResult | MainModuleResult
