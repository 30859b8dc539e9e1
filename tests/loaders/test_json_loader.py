import json
from pathlib import Path
from typing import Any

from meteor_package_parser.loaders.json_loader import JsonLoader
from meteor_package_parser.services.package_parser.package_parser import MeteorPackageParser
from tests.mocks import CHECK, METEOR


def test_json_loader_writes_file(tmp_path: Path) -> None:
    packages = [
        MeteorPackageParser(file_path=CHECK.file_path).parse(),
        MeteorPackageParser(file_path=METEOR.file_path).parse(),
    ]

    out = tmp_path / "nested" / "packages.json"
    loader = JsonLoader(out)
    loader.load(packages)

    assert out.exists(), "Output JSON file should be created"

    raw_obj: Any = json.loads(out.read_text(encoding="utf-8"))
    assert isinstance(raw_obj, dict)
    assert [row["name"] for row in raw_obj["packages"]] == ["check", "meteor"]

    check_row = raw_obj["packages"][0]
    assert check_row["mainModulePath"] == "/node_modules/meteor/check/match.js"
    assert check_row["packageScopeExports"] == {"check": ["check", "Match"]}
    assert check_row["modules"]["match.js"][2] == {
        "name": "isPlainObject",
        "type": "global-binding",
        "from": "./isPlainObject",
        "id": 0,
    }

    meteor_row = raw_obj["packages"][1]
    assert "mainModulePath" not in meteor_row
    assert meteor_row["modules"] == {}


def test_json_loader_writes_escaped_astral_characters(tmp_path: Path) -> None:
    source = (
        r'meteorInstall({"node_modules":{"meteor":{"pkg:emoji":{'
        r'"index.js":function(require,exports,module){'
        r'module.link("./\uD83D\uDE00",{"\u{1F600}":"smile"},0);'
        r"}}}});"
    )
    package = MeteorPackageParser(file_path=Path("memory/emoji.js"), file_content=source).parse()

    out = tmp_path / "packages.json"
    JsonLoader(out).load([package])

    raw_obj: Any = json.loads(out.read_text(encoding="utf-8"))
    assert raw_obj["packages"][0]["modules"]["index.js"] == [
        {
            "name": "\U0001F600",
            "type": "re-export",
            "from": "./\U0001F600",
            "as": "smile",
            "id": 0,
        }
    ]
