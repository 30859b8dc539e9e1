from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TypedDict

from meteor_package_parser.loaders._serialization import package_rows
from meteor_package_parser.models.package import MeteorPackage

logger = logging.getLogger(__name__)


class PackagesJSON(TypedDict):
    packages: list[dict[str, object]]


class JsonLoader:
    """Persist parsed Meteor packages as JSON.

    The output JSON schema is a single object with one key:
    - "packages": list of package dictionaries

    Example:
    {
      "packages": [
        {
          "name": "check",
          "modules": {"match.js": [{"name": "check", "type": "export"}]},
          "mainModulePath": "/node_modules/meteor/check/match.js",
          "packageScopeExports": {"check": ["check", "Match"]},
          "meta": {"timeSpent": "3ms"}
        }
      ]
    }
    """

    def __init__(self, output_path: str | Path, indent: int = 2) -> None:
        """Create a JSON loader.

        Args:
            output_path: Target file path to write the JSON document into.
            indent: Indentation level for pretty-printing JSON.
        """
        self.output_path: Path = Path(output_path)
        self.indent: int = indent

    def render(self, packages: Iterable[MeteorPackage]) -> str:
        payload: PackagesJSON = {"packages": package_rows(packages)}
        return json.dumps(payload, ensure_ascii=False, indent=self.indent)

    def load(self, packages: Iterable[MeteorPackage]) -> None:
        """Write packages to the configured JSON file.

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
            logger.exception("Failed to write package metadata JSON to %s", self.output_path)
            raise
