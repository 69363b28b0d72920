"""
Declaration Collector

Finds every top-level struct type of a package. The result maps the type
name to its declaration node (used to look up the type's comments) and its
fields in declaration order.
"""

from dataclasses import dataclass, field
from typing import Iterable

from envdoc.golang.ast import Decl, Field, File


@dataclass
class Declaration:
    """
    A struct type found while collecting.

    Attributes:
        decl: The enclosing type declaration (a grouped `type ( ... )`
            declaration is shared by all of its specs)
        fields: The struct's fields in declaration order
    """
    decl: Decl
    fields: list[Field] = field(default_factory=list)


def collect_decls(files: Iterable[File]) -> dict[str, Declaration]:
    """
    Collect struct type declarations from parsed files.

    Files are visited in order and a type name seen again replaces the
    earlier entry. Non-struct types are ignored.

    Args:
        files: Parsed files of one package

    Returns:
        Mapping from type name to Declaration
    """
    decls: dict[str, Declaration] = {}
    for go_file in files:
        for decl in go_file.decls:
            if decl.kind != "type":
                continue
            for spec in decl.specs:
                if spec.type.kind != "struct":
                    continue
                decls.pop(spec.name, None)
                decls[spec.name] = Declaration(decl=decl, fields=list(spec.type.fields or []))
    return decls
