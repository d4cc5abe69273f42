"""Who owns the file being transformed, before and after relocation."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from import_adjuster.models import Package
from import_adjuster.packages.graph import PackageGraph

_UNSET = object()


class FileUnderTransform:
    """One source file for the duration of a single transform pass.

    ``owning_package`` and ``relocated_into_package`` are computed at most
    once and then returned as-is for the rest of the file's processing.
    """

    def __init__(
        self,
        working_path: Path,
        relocated_files: Mapping[Path, Path],
        graph: PackageGraph,
    ):
        self.working_path = Path(working_path)
        original = relocated_files.get(self.working_path)
        if original is None:
            original = relocated_files.get(self.working_path.resolve(), self.working_path)
        self.original_path = Path(original)
        self._graph = graph
        self._owning = _UNSET
        self._relocated_into = _UNSET

    @property
    def is_relocated(self) -> bool:
        return self.original_path != self.working_path

    @property
    def working_dir(self) -> Path:
        """Directory relative specifiers are resolved from."""
        return self.working_path.resolve().parent

    def owning_package(self) -> Package | None:
        if self._owning is _UNSET:
            self._owning = self._graph.owner_of_file(self.original_path)
        return self._owning

    def relocated_into_package(self) -> Package | None:
        if self._relocated_into is _UNSET:
            self._relocated_into = (
                self._graph.owner_of_file(self.working_path) if self.is_relocated else None
            )
        return self._relocated_into

    def __repr__(self) -> str:
        if self.is_relocated:
            return f"FileUnderTransform({self.working_path} <- {self.original_path})"
        return f"FileUnderTransform({self.working_path})"
