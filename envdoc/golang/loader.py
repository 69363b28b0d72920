"""
Go package loading.

Reads the files of the discovered packages, drops the ones build
constraints exclude for the target platform, parses the rest and bundles
each package's files with its comment index. This is the only place envdoc
reads Go sources.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from envdoc.discovery import DiscoveryResult, discover_packages
from envdoc.errors import LoadError
from envdoc.golang.ast import File
from envdoc.golang.build import BuildContext
from envdoc.golang.comments import CommentIndex
from envdoc.golang.parser import parse_file


@dataclass
class Package:
    """
    One parsed Go package.

    Attributes:
        name: Package name from the package clauses
        path: Directory the package was loaded from (None for in-memory packages)
        files: Parsed files in load order
        comments: Comment index over all files of the package
    """
    name: str
    path: Optional[Path] = None
    files: list[File] = field(default_factory=list)
    comments: CommentIndex = field(default_factory=CommentIndex)

    @classmethod
    def from_files(
        cls,
        files: list[File],
        name: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> "Package":
        """
        Build a package from already parsed files.

        Args:
            files: The package's files
            name: Package name (defaults to the first file's package clause)
            path: Directory of the package, if any

        Returns:
            A Package with its comment index built
        """
        if name is None:
            name = files[0].package if files else ""
        return cls(name=name, path=path, files=list(files), comments=CommentIndex.from_files(files))


def _read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise LoadError(f"Could not read {path}: {e}") from e


class PackageLoader:
    """
    Loads the Go packages at a path.

    Usage:
        loader = PackageLoader("/path/to/module", recursive=True)
        packages = loader.load()

        # What was left out, for reporting
        loader.discovery.skipped_dirs
        loader.excluded_files

    Attributes:
        path: A package directory, or a module root when recursive
        recursive: Also load packages from sub-directories
        context: Target platform and tags for build constraints
        discovery: Result of the last discovery run (None before load())
        excluded_files: Files dropped by build constraints in the last load()
    """

    def __init__(
        self,
        path: str | Path,
        recursive: bool = False,
        context: Optional[BuildContext] = None,
    ):
        self.path = path
        self.recursive = recursive
        self.context = context or BuildContext.from_environment()
        self.discovery: Optional[DiscoveryResult] = None
        self.excluded_files: list[Path] = []

    def load(self) -> list[Package]:
        """
        Discover, filter and parse the packages.

        Returns:
            Parsed packages in sorted path order; directories whose files are
            all excluded by build constraints are left out

        Raises:
            LoadError: If the path is missing, holds no Go files (after build
                constraints), or a file cannot be read or parsed (GoSyntaxError)
        """
        self.excluded_files = []
        self.discovery = discover_packages(self.path, recursive=self.recursive)
        root = self.discovery.root_path
        if not self.discovery.packages:
            raise LoadError(f"No Go files in {root}")

        packages = []
        for discovered in self.discovery.packages:
            files = []
            for file_path in discovered.files:
                source = self._read_buildable(file_path)
                if source is None:
                    self.excluded_files.append(file_path)
                    continue
                files.append(parse_file(source, filename=str(file_path)))
            if files:
                packages.append(Package.from_files(files, path=discovered.path))

        if not packages:
            raise LoadError(f"Build constraints exclude all Go files in {root}")
        return packages

    def _read_buildable(self, file_path: Path) -> Optional[bytes]:
        """Read a file, or return None if build constraints exclude it."""
        if not self.context.match_file_name(file_path.name):
            return None
        source = _read_source(file_path)
        try:
            if not self.context.match_source(source):
                return None
        except ValueError as e:
            raise LoadError(f"{file_path}: invalid //go:build line: {e}") from e
        return source


def load_packages(
    path: str | Path,
    recursive: bool = False,
    context: Optional[BuildContext] = None,
) -> list[Package]:
    """
    Load and parse the Go packages at path.

    Args:
        path: A package directory, or a module root when recursive
        recursive: Also load packages from sub-directories
        context: Build context (defaults to $GOOS/$GOARCH or the host)

    Returns:
        Parsed packages in sorted path order

    Raises:
        LoadError: If the path is missing, holds no buildable Go files, or a
            file cannot be read or parsed (GoSyntaxError)
    """
    return PackageLoader(path, recursive=recursive, context=context).load()
