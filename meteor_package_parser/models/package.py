from collections.abc import Mapping
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from meteor_package_parser.models.exports import GlobalBinding, ModuleExport
from meteor_package_parser.services.package_parser.consts import METEOR_MODULE_ROOT

ModuleList = Mapping[str, tuple[ModuleExport, ...]]
PackageScopeExports = Mapping[str, tuple[str, ...]]


class PackageMetadata(BaseModel):
    """Everything that could be recovered from one compiled Meteor package."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Atmosphere package name, e.g. ostrio:cookies, accounts-base, ddp",
    )
    modules: ModuleList = Field(
        default_factory=dict,
        validate_default=True,
        description="Exports of every module in the package keyed by module path",
    )
    main_module_path: str | None = Field(
        default=None,
        alias="mainModulePath",
        description="Path of the module registered with api.mainModule()",
    )
    package_scope_exports: PackageScopeExports = Field(
        default_factory=dict,
        validate_default=True,
        alias="packageScopeExports",
        description="Symbols exported with api.export(), keyed by package name",
    )

    @field_validator("modules", "package_scope_exports", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("modules")
    def _dump_modules(self, value: ModuleList) -> dict[str, tuple[ModuleExport, ...]]:
        return dict(value)

    @field_serializer("package_scope_exports")
    def _dump_package_scope_exports(
        self, value: PackageScopeExports
    ) -> dict[str, tuple[str, ...]]:
        return dict(value)


class PackageMeta(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time_spent: str = Field(..., alias="timeSpent")


class MeteorPackage(PackageMetadata):
    """Parsed package handed to callers, along with parse telemetry."""

    meta: PackageMeta

    @property
    def package_id(self) -> str:
        return f"meteor/{self.name}"

    @property
    def main_module(self) -> tuple[ModuleExport, ...] | None:
        """Exports of the package's main module, if it declares one."""

        if not self.main_module_path:
            return None
        return self.get_module(self.main_module_path)

    def get_module(self, path: str) -> tuple[ModuleExport, ...] | None:
        """Look up a module's exports by path.

        Accepts paths relative to the package root (``index.js``,
        ``./index.js``), import paths (``meteor/<name>/index``) and absolute
        virtual paths (``/node_modules/meteor/<name>/index.js``). The file
        extension may be omitted.

        Args:
            path: Path of the module to look up.

        Returns:
            The module's exports or None if the package has no such module.
        """

        relative: str = self._relative_module_path(path)
        exports = self.modules.get(relative)
        if exports is not None:
            return exports

        wanted: PurePosixPath = PurePosixPath(relative)
        for module_path, module_exports in self.modules.items():
            if PurePosixPath(module_path).with_suffix("") == wanted:
                return module_exports
        return None

    def global_bindings(self) -> dict[str, tuple[GlobalBinding, ...]]:
        bindings: dict[str, tuple[GlobalBinding, ...]] = {}
        for module_path, exports in self.modules.items():
            found = tuple(entry for entry in exports if isinstance(entry, GlobalBinding))
            if found:
                bindings[module_path] = found
        return bindings

    def _relative_module_path(self, path: str) -> str:
        for prefix in (f"{METEOR_MODULE_ROOT}{self.name}/", f"{self.package_id}/", "./", "/"):
            if path.startswith(prefix):
                return path[len(prefix) :]
        return path
