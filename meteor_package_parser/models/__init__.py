from .exports import (
    DefaultExport,
    ExportType,
    GlobalBinding,
    ModuleExport,
    NamedExport,
    ReExport,
)
from .package import (
    MeteorPackage,
    ModuleList,
    PackageMeta,
    PackageMetadata,
    PackageScopeExports,
)

__all__ = [
    "DefaultExport",
    "ExportType",
    "GlobalBinding",
    "ModuleExport",
    "NamedExport",
    "ReExport",
    "MeteorPackage",
    "ModuleList",
    "PackageMeta",
    "PackageMetadata",
    "PackageScopeExports",
]
