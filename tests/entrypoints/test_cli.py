import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from meteor_package_parser.entrypoints.cli import app
from tests.consts import METEOR_BUNDLE_DIR
from tests.mocks import CHECK

runner = CliRunner()


def test_cli_parse__prints_json_metadata() -> None:
    result = runner.invoke(app, ["parse", str(CHECK.file_path)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    (package,) = payload["packages"]
    assert package["name"] == "check"
    assert package["packageScopeExports"] == {"check": ["check", "Match"]}


def test_cli_parse__writes_yaml_output(tmp_path: Path) -> None:
    out = tmp_path / "check.yaml"

    result = runner.invoke(
        app, ["parse", str(CHECK.file_path), "--format", "yaml", "--output", str(out)]
    )

    assert result.exit_code == 0, result.output
    payload = yaml.safe_load(out.read_text(encoding="utf-8"))
    assert payload["packages"][0]["mainModulePath"] == "/node_modules/meteor/check/match.js"


def test_cli_parse__on_invalid_bundle__exits_with_error(tmp_path: Path) -> None:
    bundle = tmp_path / "broken.js"
    bundle.write_text("var answer = 42;", encoding="utf-8")

    result = runner.invoke(app, ["parse", str(bundle)])

    assert result.exit_code == 1
    assert "No modules or package-scope exports" in result.output


def test_cli_parse_dir__skips_broken_bundles(tmp_path: Path) -> None:
    (tmp_path / "check.js").write_text(CHECK.file_content, encoding="utf-8")
    (tmp_path / "broken.js").write_text("var answer = 42;", encoding="utf-8")
    out = tmp_path / "out" / "packages.json"

    result = runner.invoke(
        app, ["parse-dir", str(tmp_path), "--on-error", "skip", "--output", str(out)]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert [package["name"] for package in payload["packages"]] == ["check"]


def test_cli_parse_dir__on_error_raise__exits_with_error(tmp_path: Path) -> None:
    (tmp_path / "broken.js").write_text("var answer = 42;", encoding="utf-8")

    result = runner.invoke(app, ["parse-dir", str(tmp_path)])

    assert result.exit_code == 1


def test_cli_parse_dir__parses_fixture_bundles() -> None:
    result = runner.invoke(app, ["parse-dir", str(METEOR_BUNDLE_DIR), "-f", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert len(payload["packages"]) == 5
