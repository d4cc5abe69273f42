"""Error kinds raised while adjusting module specifiers."""

from __future__ import annotations


class PackageNotFound(Exception):
    """No package under the requested name is reachable from the requester.

    Recoverable: the rewriter treats this as "try the next strategy".
    """

    def __init__(self, package_name: str, from_root: str):
        self.package_name = package_name
        self.from_root = from_root
        super().__init__(f"Cannot resolve package {package_name!r} from {from_root}")


class BuildError(Exception):
    """Fatal error that aborts the transform of the current file."""


class UnsafeAppTreeImport(BuildError):
    def __init__(self, package_name: str, imported: str):
        self.package_name = package_name
        self.imported = imported
        super().__init__(
            f"{package_name} is trying to import {imported} from within its app tree. "
            f"This is unsafe, because {package_name} can't control which dependencies "
            f"are resolvable from the app"
        )


class UndeclaredDependency(BuildError):
    def __init__(self, package_name: str, imported: str):
        self.package_name = package_name
        self.imported = imported
        super().__init__(
            f"{package_name} is trying to import from {imported} but that is not "
            f"one of its explicit dependencies"
        )


class ForbiddenLegacyDeclaration(BuildError):
    def __init__(self, package_name: str, file_path: str):
        self.package_name = package_name
        self.file_path = file_path
        super().__init__(
            f"The file {file_path} in package {package_name} tried to use AMD define. "
            f"Native V2 Ember addons are forbidden from using AMD define, "
            f"they must use ECMA export only."
        )


class MalformedSpecifierUsage(BuildError):
    def __init__(self, file_path: str, line: int, entry: str):
        self.file_path = file_path
        self.line = line
        self.entry = entry
        super().__init__(
            f"{file_path}:{line}: expected only string literal arguments, got {entry!r}"
        )


class MalformedPackageDescriptor(BuildError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid package descriptor {path}: {reason}")


class ConfigError(BuildError):
    """Invalid rewrite configuration."""


class OutputCollision(BuildError):
    def __init__(self, destination: str, sources: list[str]):
        self.destination = destination
        self.sources = sources
        super().__init__(
            f"{len(sources)} input files would be written to {destination}: {', '.join(sources)}"
        )
