"""
Go source loading for envdoc.

This package turns Go package directories into the small syntax model the
extractors consume: files, top-level declarations, struct fields with their
raw tags, and the comment groups attached to them.

Usage:
    from envdoc.golang import load_packages

    packages = load_packages("/path/to/go/module/config")
    for package in packages:
        print(package.name, len(package.files))
"""

from envdoc.golang.ast import (
    BasicLit,
    Comment,
    CommentGroup,
    Decl,
    Field,
    File,
    Position,
    TypeRef,
    TypeSpec,
)
from envdoc.golang.build import BuildContext
from envdoc.golang.comments import CommentIndex
from envdoc.golang.loader import Package, PackageLoader, load_packages
from envdoc.golang.parser import GoParser, parse_file
from envdoc.golang.tags import StructTag

__all__ = [
    "BasicLit",
    "BuildContext",
    "Comment",
    "CommentGroup",
    "CommentIndex",
    "Decl",
    "Field",
    "File",
    "GoParser",
    "Package",
    "PackageLoader",
    "Position",
    "StructTag",
    "TypeRef",
    "TypeSpec",
    "load_packages",
    "parse_file",
]
