"""
envdoc Package Discovery Module

This module finds the Go packages to document under a directory, following
the rules the go tool uses when it expands a package pattern.

Key Responsibilities:
    1. Treat the given directory as a package (the "." pattern)
    2. Optionally walk the tree below it (the "./..." pattern)
    3. Skip directories the go tool ignores (testdata, vendor, hidden, _dirs)
    4. Select buildable source files (no _test.go, no hidden or _ files)

Design Notes:
    - Packages are returned in sorted path order and files in sorted name
      order, so repeated runs see the same input order.
    - Build constraints (//go:build lines, GOOS/GOARCH file suffixes) are not
      evaluated; every non-test .go file is part of its package.
    - Symlinked directories are not followed to avoid cycles.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from envdoc.errors import LoadError

GO_SOURCE_SUFFIX = ".go"
GO_TEST_SUFFIX = "_test.go"

# Directories the go tool never treats as part of a package pattern.
DEFAULT_IGNORE_DIRS: set[str] = {
    "testdata",
    "vendor",
}


@dataclass
class DiscoveredPackage:
    """
    A directory holding Go source files.

    Attributes:
        path: Absolute path to the package directory
        relative_path: Path relative to the discovery root ("." for the root)
        files: Buildable .go files, sorted by name
    """
    path: Path
    relative_path: Path
    files: list[Path] = field(default_factory=list)


@dataclass
class DiscoveryResult:
    """
    Result of a package discovery run.

    Attributes:
        root_path: The directory that was scanned
        packages: Packages found, sorted by path
        skipped_dirs: Directories that were skipped and why
    """
    root_path: Path
    packages: list[DiscoveredPackage] = field(default_factory=list)
    skipped_dirs: list[tuple[str, str]] = field(default_factory=list)  # (path, reason)

    @property
    def file_count(self) -> int:
        return sum(len(p.files) for p in self.packages)


def is_go_source(name: str) -> bool:
    """Check whether a file name is a buildable, non-test Go source file."""
    return (
        name.endswith(GO_SOURCE_SUFFIX)
        and not name.endswith(GO_TEST_SUFFIX)
        and not name.startswith((".", "_"))
    )


class PackageDiscovery:
    """
    Discovers Go packages below a root directory.

    Usage:
        discovery = PackageDiscovery("/path/to/module", recursive=True)
        result = discovery.discover()
        for package in result.packages:
            print(package.relative_path, len(package.files))

    Attributes:
        root_path: The directory to scan
        recursive: Whether to descend into sub-directories
    """

    def __init__(self, root_path: str | Path, recursive: bool = False):
        """
        Initialize the discovery.

        Args:
            root_path: Path to the package (or module) directory
            recursive: Also collect packages in sub-directories

        Raises:
            LoadError: If the path does not exist or is not a directory
        """
        self.root_path = Path(root_path).resolve()
        self.recursive = recursive

        if not self.root_path.exists():
            raise LoadError(f"Path does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise LoadError(f"Path is not a directory: {self.root_path}")

    def _should_ignore_dir(self, name: str) -> tuple[bool, str]:
        """
        Check whether a directory is excluded from package patterns.

        Args:
            name: The directory's base name

        Returns:
            Tuple of (should_ignore, reason)
        """
        if name in DEFAULT_IGNORE_DIRS:
            return True, f"Default ignore: {name}"
        if name.startswith("."):
            return True, f"Hidden directory: {name}"
        if name.startswith("_"):
            return True, f"Underscore directory: {name}"
        return False, ""

    def _package_at(self, directory: Path, filenames: list[str]) -> DiscoveredPackage:
        relative = directory.relative_to(self.root_path)
        files = sorted(directory / name for name in filenames if is_go_source(name))
        return DiscoveredPackage(path=directory, relative_path=relative, files=files)

    def discover(self) -> DiscoveryResult:
        """
        Perform package discovery.

        Returns:
            DiscoveryResult with every directory that has Go source files
        """
        result = DiscoveryResult(root_path=self.root_path)

        if not self.recursive:
            names = [p.name for p in self.root_path.iterdir() if p.is_file()]
            package = self._package_at(self.root_path, names)
            if package.files:
                result.packages.append(package)
            return result

        for dirpath, dirnames, filenames in os.walk(self.root_path):
            current_dir = Path(dirpath)

            # Filter in place so os.walk does not descend into ignored dirs
            kept = []
            for dirname in sorted(dirnames):
                should_ignore, reason = self._should_ignore_dir(dirname)
                if should_ignore:
                    relative = (current_dir / dirname).relative_to(self.root_path)
                    result.skipped_dirs.append((str(relative), reason))
                else:
                    kept.append(dirname)
            dirnames[:] = kept

            package = self._package_at(current_dir, filenames)
            if package.files:
                result.packages.append(package)

        result.packages.sort(key=lambda p: p.path)
        return result


def discover_packages(path: str | Path, recursive: bool = False) -> DiscoveryResult:
    """
    Convenience function to discover Go packages.

    Args:
        path: The package directory (or module root when recursive)
        recursive: Also collect packages in sub-directories

    Returns:
        DiscoveryResult containing the packages found

    Example:
        result = discover_packages("./internal/config")
        for package in result.packages:
            print(package)
    """
    return PackageDiscovery(root_path=path, recursive=recursive).discover()
