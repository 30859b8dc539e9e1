from collections.abc import Iterable

from meteor_package_parser.models.package import MeteorPackage


def package_rows(packages: Iterable[MeteorPackage]) -> list[dict[str, object]]:
    """Dump packages using the field names downstream tooling expects.

    Aliased names (``from``, ``as``, ``id``, ``mainModulePath``,
    ``packageScopeExports``) are used and unset optional fields are dropped.
    """

    return [
        package.model_dump(mode="json", by_alias=True, exclude_none=True)
        for package in packages
    ]
