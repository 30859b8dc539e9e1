from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TypedDict

import yaml

from meteor_package_parser.loaders._serialization import package_rows
from meteor_package_parser.models.package import MeteorPackage

logger = logging.getLogger(__name__)


class PackagesYAML(TypedDict):
    packages: list[dict[str, object]]


class YamlLoader:
    """Persist parsed Meteor packages as YAML.

    The output YAML schema mirrors the JSON loader:
    - packages: list of package dictionaries
    """

    def __init__(self, output_path: str | Path, indent: int = 2) -> None:
        """Create a YAML loader.

        Args:
            output_path: Target file path to write the YAML document into.
            indent: Indentation level for pretty-printing YAML.
        """
        self.output_path: Path = Path(output_path)
        self.indent: int = indent

    def render(self, packages: Iterable[MeteorPackage]) -> str:
        payload: PackagesYAML = {"packages": package_rows(packages)}
        return yaml.safe_dump(
            payload,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
            indent=self.indent,
            width=4096,  # avoid line folding for readability
        )

    def load(self, packages: Iterable[MeteorPackage]) -> None:
        """Write packages to the configured YAML file.

        Args:
            packages: Parsed packages to persist.
        """
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

        text: str = self.render(packages)

        try:
            with self.output_path.open("w", encoding="utf-8") as f:
                f.write(text)
        except OSError:
            logger.exception("Failed to write package metadata YAML to %s", self.output_path)
            raise
