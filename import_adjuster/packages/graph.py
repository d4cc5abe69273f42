"""Process-wide, read-mostly cache over the on-disk dependency tree."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from import_adjuster.errors import PackageNotFound
from import_adjuster.models import Package
from import_adjuster.packages.descriptor import DescriptorLoader, load_descriptor

logger = logging.getLogger(__name__)

_MODULES_DIR = "node_modules"


class PackageGraph:
    """Resolve package names the way node does and find the owners of files.

    Packages are cached by canonical root, so repeated lookups return the
    same ``Package`` object. Safe to share between threads.
    """

    def __init__(self, descriptor_loader: DescriptorLoader = load_descriptor):
        self._load = descriptor_loader
        self._by_root: dict[Path, Package | None] = {}
        self._resolutions: dict[tuple[str, Path], Package | None] = {}
        self._owners: dict[Path, Package | None] = {}
        self._lock = threading.RLock()

    def package_at(self, directory: Path) -> Package | None:
        """Return the package rooted exactly at ``directory``, if any."""
        root = Path(directory).resolve()
        with self._lock:
            if root in self._by_root:
                return self._by_root[root]
            descriptor = self._load(root)
            pkg = None
            if descriptor is not None:
                pkg = Package(name=descriptor.name, root=root, meta=descriptor.to_meta())
                logger.debug("Loaded package %s at %s", pkg.name, root)
            self._by_root[root] = pkg
            return pkg

    def resolve(self, package_name: str, from_package: Package) -> Package:
        """Find the package that ``package_name`` means when imported from ``from_package``.

        Walks ``node_modules`` directories from the requester's root upwards.
        Raises ``PackageNotFound`` when nothing is reachable.
        """
        key = (package_name, from_package.root)
        with self._lock:
            if key in self._resolutions:
                found = self._resolutions[key]
            else:
                found = self._search(package_name, from_package.root)
                self._resolutions[key] = found
        if found is None:
            raise PackageNotFound(package_name, str(from_package.root))
        return found

    def owner_of_file(self, path: Path) -> Package | None:
        """Nearest package whose root contains ``path``; None outside any package."""
        path = Path(path).resolve()
        with self._lock:
            if path in self._owners:
                return self._owners[path]
            owner = None
            for directory in (path, *path.parents):
                if directory.name == _MODULES_DIR:
                    # Leaving the package we were in.
                    break
                owner = self.package_at(directory)
                if owner is not None:
                    break
            self._owners[path] = owner
            return owner

    def _search(self, package_name: str, start: Path) -> Package | None:
        for directory in (start, *start.parents):
            if directory.name == _MODULES_DIR:
                continue
            pkg = self.package_at(directory / _MODULES_DIR / package_name)
            if pkg is not None:
                return pkg
        logger.debug("Package %s is not reachable from %s", package_name, start)
        return None
