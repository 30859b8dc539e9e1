import asyncio
from collections.abc import Awaitable
from pathlib import Path
from typing import Literal

from meteor_package_parser.models.package import MeteorPackage
from meteor_package_parser.services.package_parser.config import ParserConfig
from meteor_package_parser.services.package_parser.package_parser import (
    MeteorPackageDirectoryParser,
    MeteorPackageParser,
)


def parse_meteor_package(
    file_path: str | Path,
    file_content: str | None = None,
    config: ParserConfig | None = None,
) -> MeteorPackage:
    """Parse a single Meteor package bundle.

    Args:
        file_path: Path to the bundle. Used for error messages, and read when
            ``file_content`` is not given.
        file_content: Bundle source already loaded by the caller.
        config: Optional parser configuration.

    Returns:
        The parsed package.
    """
    return MeteorPackageParser(
        file_path=Path(file_path),
        file_content=file_content,
        config=config or ParserConfig(),
    ).parse()


async def parse_meteor_package_async(
    file_path: str | Path,
    file_content: str | Awaitable[str] | None = None,
    config: ParserConfig | None = None,
) -> MeteorPackage:
    """Parse a bundle whose source may still be loading.

    The source is awaited first, then parsing runs in a worker thread so the
    event loop is not blocked by the CPU-bound traversal.

    Args:
        file_path: Path to the bundle.
        file_content: Bundle source, or an awaitable resolving to it.
        config: Optional parser configuration.

    Returns:
        The parsed package.
    """
    source: str | None = None
    if isinstance(file_content, str):
        source = file_content
    elif file_content is not None:
        source = await file_content

    return await asyncio.to_thread(parse_meteor_package, file_path, source, config)


def parse_meteor_packages(
    root: str | Path,
    on_error: Literal["raise", "skip"] = "raise",
    recursive: bool = False,
    config: ParserConfig | None = None,
) -> list[MeteorPackage]:
    """Parse every bundle in a directory of built Meteor packages.

    Args:
        root: Directory containing package bundles.
        on_error: Whether a failing bundle aborts the run or is skipped.
        recursive: Whether to descend into subdirectories.
        config: Optional parser configuration.

    Returns:
        The parsed packages in file name order.

    Raises:
        ValueError: If the path cannot be resolved.
    """
    try:
        resolved_root = Path(root).resolve()
    except (OSError, RuntimeError) as e:
        raise ValueError(f"Invalid path: {root} - {e}") from e

    return MeteorPackageDirectoryParser(
        root=resolved_root,
        on_error=on_error,
        recursive=recursive,
        config=config or ParserConfig(),
    ).parse()
