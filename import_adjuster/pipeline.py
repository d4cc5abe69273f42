"""Rewrite a batch of files: read -> scan -> rewrite -> write."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

from import_adjuster.errors import OutputCollision
from import_adjuster.models import RewriteConfig, TransformResult
from import_adjuster.packages.graph import PackageGraph
from import_adjuster.resolver.rewriter import SpecifierRewriter
from import_adjuster.walker.transform import FileTransformer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def build_transformer(config: RewriteConfig, graph: PackageGraph | None = None) -> FileTransformer:
    return FileTransformer(SpecifierRewriter(config, graph))


def plan_destinations(files: list[Path], output_dir: Path | None) -> list[Path]:
    """Where each file is written.

    With ``output_dir`` the inputs keep their layout relative to their
    common directory. Two inputs mapping to one destination is an error.
    """
    if output_dir is None:
        return list(files)
    if not files:
        return []
    resolved = [f.resolve() for f in files]
    base = Path(os.path.commonpath([str(f.parent) for f in resolved]))
    destinations = [output_dir / f.relative_to(base) for f in resolved]

    sources: dict[Path, list[str]] = {}
    for src, dest in zip(files, destinations):
        sources.setdefault(dest, []).append(str(src))
    for dest, srcs in sources.items():
        if len(srcs) > 1:
            raise OutputCollision(str(dest), srcs)
    return destinations


def run_rewrite(
    files: Iterable[Path],
    config: RewriteConfig,
    output_dir: Path | None = None,
    progress: ProgressCallback | None = None,
    graph: PackageGraph | None = None,
) -> list[TransformResult]:
    """Transform each file and write it back (or under ``output_dir``).

    A ``BuildError`` stops the run; the failing file is left untouched.
    """
    files = [Path(f) for f in files]
    destinations = plan_destinations(files, output_dir)
    transformer = build_transformer(config, graph)

    results: list[TransformResult] = []
    for i, (path, dest) in enumerate(zip(files, destinations)):
        if progress:
            progress("Rewriting", i, len(files))
        result = transformer.transform_file(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(result.source, encoding="utf-8")
        result.output_path = dest
        results.append(result)

    if progress:
        progress("Rewriting", len(files), len(files))

    logger.info(
        "Rewrote %d file(s): %d specifier(s) changed, %d stub write(s)",
        len(results),
        sum(r.changed_count for r in results),
        transformer.rewriter.emitter.writes,
    )
    return results
