import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Tree

from meteor_package_parser.models.exports import ModuleExport
from meteor_package_parser.models.package import MeteorPackage, PackageMeta, PackageMetadata
from meteor_package_parser.services.package_parser.config import ParserConfig
from meteor_package_parser.services.package_parser.errors import (
    EmptyPackageError,
    ModuleExportsError,
    PackageNameError,
    ParserError,
)
from meteor_package_parser.services.package_parser.node_processor import NodeProcessor
from meteor_package_parser.services.package_parser.tree_walker import iter_nodes, parse_source
from meteor_package_parser.services.package_parser.types import (
    InstallResult,
    MainModuleResult,
    PackageScopeResult,
    RecognizerResult,
)

logger = logging.getLogger(__name__)


@dataclass
class PackageBuilder:
    """Accumulates recognizer results during a single traversal."""

    name: str = ""
    modules: dict[str, list[ModuleExport]] = field(default_factory=dict)
    main_module_path: str | None = None
    package_scope_exports: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def merge(self, result: RecognizerResult) -> None:
        if isinstance(result, InstallResult):
            self._merge_install(result)
        elif isinstance(result, PackageScopeResult):
            self.name = self.name or result.name
            self.package_scope_exports[result.name] = result.exports
        elif isinstance(result, MainModuleResult):
            self.main_module_path = result.path

    def _merge_install(self, result: InstallResult) -> None:
        for path in result.modules:
            if path in self.modules:
                raise ModuleExportsError(f"Duplicate module path in module tree: {path}", result.node)
        self.name = result.name
        self.modules.update(result.modules)

    def build(self) -> PackageMetadata:
        return PackageMetadata(
            name=self.name,
            modules={path: tuple(exports) for path, exports in self.modules.items()},
            main_module_path=self.main_module_path,
            package_scope_exports=dict(self.package_scope_exports),
        )


class MeteorPackageParser(BaseModel):
    """Extract module and export metadata from a Meteor-built package bundle.

    Attributes:
        file_path: Path to the package's compiled JavaScript file. Always used
            in error messages, and read only when no content is provided.
        file_content: Optional source already held in memory.
        config: Identifiers used to recognize Meteor's bundle conventions.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_path: Path
    file_content: str | None = None
    config: ParserConfig = Field(default_factory=ParserConfig)

    def parse(self) -> MeteorPackage:
        """Parse the bundle into a ``MeteorPackage``.

        Returns:
            The package metadata along with the time spent parsing.

        Raises:
            BundleSyntaxError: If the source is not valid JavaScript.
            ModuleExportsError: If a recognized call has an unexpected shape.
            EmptyPackageError: If neither modules nor package-scope exports
                could be found.
            PackageNameError: If the package name is empty.
        """

        start_time: float = time.perf_counter()
        source: str = (
            self.file_content
            if self.file_content is not None
            else self.file_path.read_text(encoding="utf-8")
        )

        try:
            builder: PackageBuilder = self._extract(source)
        except ModuleExportsError as error:
            logger.error(f"Failed to parse Meteor package {self.file_path}: {error}")
            raise

        if not builder.modules and not builder.package_scope_exports:
            logger.warning(
                f"Unable to retrieve any metadata from the provided source code: {self.file_path}"
            )
            raise EmptyPackageError(
                "No modules or package-scope exports could be extracted from package: "
                f"{builder.name or self.file_path}"
            )

        if not builder.name:
            raise PackageNameError(f"Could not extract name from package in: {self.file_path}")

        metadata: PackageMetadata = builder.build()
        time_spent: str = f"{round((time.perf_counter() - start_time) * 1000)}ms"
        logger.debug(f"Parsed Meteor package {metadata.name} in {time_spent}")

        return MeteorPackage(**dict(metadata), meta=PackageMeta(time_spent=time_spent))

    def _extract(self, source: str) -> PackageBuilder:
        tree: Tree = parse_source(source, allow_errors=self.config.allow_syntax_errors)
        processor = NodeProcessor(config=self.config)
        recognizers = (
            processor.read_meteor_install,
            processor.read_package_scope,
            processor.read_main_module_path,
        )

        builder = PackageBuilder()
        for node in iter_nodes(tree):
            for recognize in recognizers:
                result: RecognizerResult | None = recognize(node)
                if result is not None:
                    builder.merge(result)
                    break
        return builder


class MeteorPackageDirectoryParser(BaseModel):
    """Parse every package bundle found in a directory.

    Meteor writes one ``<author>_<package>.js`` file per package into the
    ``packages`` directory of a built program.
    """

    root: Path
    recursive: bool = False
    on_error: Literal["raise", "skip"] = "raise"
    config: ParserConfig = Field(default_factory=ParserConfig)

    def parse(self) -> list[MeteorPackage]:
        """Parse all discovered bundles in a deterministic order.

        Returns:
            The parsed packages, without the bundles that failed when
            ``on_error="skip"``.

        Raises:
            ValueError: If ``root`` does not exist or is not a directory.
            ParserError: Re-raises any parse error if ``on_error="raise"``.
        """

        packages: list[MeteorPackage] = []
        for file_path in self._collect_bundle_files():
            try:
                package = MeteorPackageParser(file_path=file_path, config=self.config).parse()
            except (ParserError, OSError, UnicodeDecodeError):
                if self.on_error == "raise":
                    raise
                logger.exception("Failed to parse Meteor package bundle: %s", file_path)
                continue
            packages.append(package)
        return packages

    def _collect_bundle_files(self) -> list[Path]:
        if not self.root.exists():
            raise ValueError(f"Root path does not exist: {self.root}")
        if not self.root.is_dir():
            raise ValueError(f"Root path must be a directory: {self.root}")

        files: list[Path] = []
        if self.recursive:
            for dirpath, _dirnames, filenames in os.walk(self.root):
                for filename in filenames:
                    if filename.endswith(".js"):
                        files.append(Path(dirpath) / filename)
        else:
            for candidate in self.root.iterdir():
                if candidate.is_file() and candidate.name.endswith(".js"):
                    files.append(candidate)

        return sorted(files)
