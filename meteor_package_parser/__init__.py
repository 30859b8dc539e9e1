from .entrypoints.base import (
    parse_meteor_package,
    parse_meteor_package_async,
    parse_meteor_packages,
)
from .models import (
    DefaultExport,
    ExportType,
    GlobalBinding,
    MeteorPackage,
    ModuleExport,
    ModuleList,
    NamedExport,
    PackageMetadata,
    PackageScopeExports,
    ReExport,
)
from .services.package_parser.config import ParserConfig
from .services.package_parser.errors import (
    BundleSyntaxError,
    EmptyPackageError,
    ModuleExportsError,
    PackageNameError,
    ParserError,
)

__all__ = [
    "parse_meteor_package",
    "parse_meteor_package_async",
    "parse_meteor_packages",
    "DefaultExport",
    "ExportType",
    "GlobalBinding",
    "MeteorPackage",
    "ModuleExport",
    "ModuleList",
    "NamedExport",
    "PackageMetadata",
    "PackageScopeExports",
    "ReExport",
    "ParserConfig",
    "BundleSyntaxError",
    "EmptyPackageError",
    "ModuleExportsError",
    "PackageNameError",
    "ParserError",
]
