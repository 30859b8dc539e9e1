from pathlib import Path

import pytest

from meteor_package_parser.models import MeteorPackage, NamedExport
from meteor_package_parser.services.package_parser.errors import (
    BundleSyntaxError,
    EmptyPackageError,
    ModuleExportsError,
    PackageNameError,
)
from meteor_package_parser.services.package_parser.package_parser import (
    MeteorPackageDirectoryParser,
    MeteorPackageParser,
)
from tests.consts import METEOR_BUNDLE_DIR
from tests.mocks import ALL_BUNDLES, CHECK, METEOR, TS_MODULES, BundleMock

DEMO_BUNDLE = (
    'var require = meteorInstall({"node_modules":{"meteor":{"pkg:demo":{'
    '"index.js":function module(require,exports,module){module.export({ Foo: "Foo" });}'
    "}}}});"
)


def _parse(source: str, file_path: str = "pkg_demo.js") -> MeteorPackage:
    return MeteorPackageParser(file_path=Path(file_path), file_content=source).parse()


@pytest.mark.parametrize("mock", ALL_BUNDLES, ids=lambda mock: mock.package_name)
def test_meteor_package_parser__on_meteor_bundles__extracts_metadata(mock: BundleMock) -> None:
    package = MeteorPackageParser(file_path=mock.file_path).parse()

    assert package.name == mock.package_name
    assert package.modules == mock.modules
    assert package.package_scope_exports == mock.package_scope_exports
    assert package.main_module_path == mock.main_module_path
    assert package.meta.time_spent.endswith("ms")


def test_meteor_package_parser__keeps_module_order_of_the_bundle() -> None:
    package = MeteorPackageParser(file_path=TS_MODULES.file_path).parse()

    assert list(package.modules) == list(TS_MODULES.modules)


def test_meteor_package_parser__with_file_content__does_not_read_the_file() -> None:
    package = MeteorPackageParser(
        file_path=Path("does/not/exist/check.js"),
        file_content=CHECK.file_content,
    ).parse()

    assert package.name == CHECK.package_name
    assert package.modules == CHECK.modules


def test_meteor_package_parser__on_single_module_package__extracts_named_export() -> None:
    package = _parse(DEMO_BUNDLE)

    assert package.name == "pkg:demo"
    assert package.modules == {"index.js": (NamedExport(name="Foo"),)}
    assert package.package_scope_exports == {}
    assert package.main_module_path is None


def test_meteor_package_parser__is_idempotent() -> None:
    first = MeteorPackageParser(file_path=TS_MODULES.file_path).parse()
    second = MeteorPackageParser(file_path=TS_MODULES.file_path).parse()

    assert first.model_dump(exclude={"meta"}) == second.model_dump(exclude={"meta"})


def test_meteor_package_parser__legacy_define__does_not_touch_modules() -> None:
    package = MeteorPackageParser(file_path=METEOR.file_path).parse()

    assert package.modules == {}
    assert package.package_scope_exports == {"meteor": ("Meteor", "global", "meteorEnv")}


def test_meteor_package_parser__on_repeated_define__last_one_wins() -> None:
    package = _parse(
        'Package._define("meteor", {Meteor: Meteor});\n'
        'Package._define("meteor", {Meteor: Meteor, global: global});\n'
    )

    assert package.package_scope_exports == {"meteor": ("Meteor", "global")}


def test_meteor_package_parser__on_repeated_main_module__last_one_wins() -> None:
    package = _parse(
        DEMO_BUNDLE
        + '\nvar exports = require("/node_modules/meteor/pkg:demo/placeholder.js");'
        + '\nvar exports = require("/node_modules/meteor/pkg:demo/index.js");'
    )

    assert package.main_module_path == "/node_modules/meteor/pkg:demo/index.js"


def test_meteor_package_parser__installer_name__wins_over_define_name() -> None:
    package = _parse(
        'Package._define("other", {Other: Other});\n' + DEMO_BUNDLE,
    )

    assert package.name == "pkg:demo"
    assert package.package_scope_exports == {"other": ("Other",)}


def test_meteor_package_parser__on_repeated_installer_path__raises() -> None:
    with pytest.raises(ModuleExportsError, match="Duplicate module path"):
        _parse(DEMO_BUNDLE + "\n" + DEMO_BUNDLE)


def test_meteor_package_parser__on_computed_package_exports__raises_with_node(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with pytest.raises(ModuleExportsError) as error:
        _parse(DEMO_BUNDLE + '\nPackage._define("pkg:demo", exports, makeExports());')

    assert error.value.node.type == "call_expression"
    assert error.value.node.text == b"makeExports()"
    assert "pkg_demo.js" in caplog.text


def test_meteor_package_parser__on_unrelated_source__raises_empty_result() -> None:
    with pytest.raises(EmptyPackageError):
        _parse("var answer = 42;\nconsole.log(answer);")


def test_meteor_package_parser__on_empty_package_name__raises_name_error() -> None:
    with pytest.raises(PackageNameError, match="pkg_demo.js"):
        _parse('Package._define("", {Meteor: Meteor});')


def test_meteor_package_parser__on_malformed_source__propagates_syntax_error() -> None:
    with pytest.raises(BundleSyntaxError):
        _parse(DEMO_BUNDLE[:-6])


def test_meteor_package_parser__on_missing_file__raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        MeteorPackageParser(file_path=tmp_path / "missing.js").parse()


def test_meteor_package_directory_parser__parses_bundles_in_name_order() -> None:
    packages = MeteorPackageDirectoryParser(root=METEOR_BUNDLE_DIR).parse()

    assert [package.name for package in packages] == [
        "check",
        "meteor",
        "ostrio:cookies",
        "test:lazy",
        "test:ts-modules",
    ]


def test_meteor_package_directory_parser__on_error_skip__omits_broken_bundles(
    tmp_path: Path,
) -> None:
    (tmp_path / "check.js").write_text(CHECK.file_content, encoding="utf-8")
    (tmp_path / "broken.js").write_text("var answer = 42;", encoding="utf-8")
    (tmp_path / "check.js.map").write_text("{}", encoding="utf-8")

    packages = MeteorPackageDirectoryParser(root=tmp_path, on_error="skip").parse()

    assert [package.name for package in packages] == ["check"]


def test_meteor_package_directory_parser__on_error_raise__propagates(tmp_path: Path) -> None:
    (tmp_path / "broken.js").write_text("var answer = 42;", encoding="utf-8")

    with pytest.raises(EmptyPackageError):
        MeteorPackageDirectoryParser(root=tmp_path).parse()


def test_meteor_package_directory_parser__on_missing_root__raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        MeteorPackageDirectoryParser(root=tmp_path / "missing").parse()
