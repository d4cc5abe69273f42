"""String helpers for module specifiers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator


def package_name(specifier: str) -> str | None:
    """Return the package-name portion of ``specifier``.

    Relative and absolute specifiers have none. Scoped names keep both
    segments: ``@scope/pkg/deep/file`` -> ``@scope/pkg``.
    """
    if not specifier or specifier.startswith((".", "/")) or os.path.isabs(specifier):
        return None
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def replace_package_name(specifier: str, name: str, replacement: str | Path) -> str:
    """Swap the leading package-name segment of ``specifier`` for ``replacement``."""
    return f"{replacement}{specifier[len(name):]}"


def explicit_relative(from_dir: Path, to_path: str | Path) -> str:
    """POSIX relative path from ``from_dir`` to ``to_path``, always starting with ``.``."""
    result = os.path.relpath(to_path, from_dir).replace(os.sep, "/")
    if result in (".", ".."):
        # The directory itself; keep the trailing slash so it reads as a path.
        return result + "/"
    if result.startswith(("./", "../")):
        return result
    return "./" + result


def rename_candidates(specifier: str, extensions: Iterable[str]) -> Iterator[str]:
    """Forms of ``specifier`` that a rename-table key may be written as."""
    yield specifier
    for ext in extensions:
        yield f"{specifier}/index{ext}"
        yield f"{specifier}{ext}"
