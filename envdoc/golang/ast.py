"""
Go Syntax Model

Plain dataclasses describing the parts of a Go source file that envdoc
cares about. The parser produces them from a tree-sitter syntax tree; the
collector and extractors only ever see these types, never tree-sitter nodes.

Only top-level declarations are modelled in detail. Type declarations keep
their specs, struct types keep their fields, and everything else is recorded
as a positioned node so comments can be attached to it.
"""

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Position:
    """
    A location in a source file.

    Attributes:
        filename: Name of the file as given to the parser
        offset: 0-based byte offset
        line: 1-based line number
        column: 1-based byte column
    """
    filename: str
    offset: int
    line: int
    column: int


@dataclass
class Comment:
    """A single // or /* */ comment, markers included."""
    text: str
    pos: Optional[Position] = None
    end: Optional[Position] = None


# "//[a-z0-9]+:[a-z0-9]" tool directives such as //go:generate or //nolint:lll
_DIRECTIVE_RE = re.compile(r"^[a-z0-9]+:[a-z0-9]")
_DIRECTIVE_PREFIXES = ("line ", "extern ", "export ")


def _is_directive(text: str) -> bool:
    return text.startswith(_DIRECTIVE_PREFIXES) or bool(_DIRECTIVE_RE.match(text))


@dataclass
class CommentGroup:
    """
    A run of adjacent comments with no blank line between them.

    Attributes:
        comments: The comments in source order
        trailing: True if the group starts after code on the same line
            (a line comment, never a doc comment)
    """
    comments: list[Comment]
    trailing: bool = False

    @property
    def pos(self) -> Optional[Position]:
        return self.comments[0].pos if self.comments else None

    @property
    def end(self) -> Optional[Position]:
        return self.comments[-1].end if self.comments else None

    def text(self) -> str:
        """
        Return the text of the group without comment markers.

        Trailing whitespace is removed from every line, leading blank lines
        are dropped and runs of blank lines collapse into one. Directive
        comments (//go:generate, //line ...) are skipped. A non-empty result
        always ends with a single newline.
        """
        lines: list[str] = []
        for comment in self.comments:
            text = comment.text
            if text.startswith("//"):
                text = text[2:]
                if text.startswith(" "):
                    text = text[1:]
                elif text and _is_directive(text):
                    continue
            elif text.startswith("/*"):
                text = text[2:-2]
            for line in text.split("\n"):
                lines.append(line.rstrip(" \t\r\n"))

        kept: list[str] = []
        for line in lines:
            if line or (kept and kept[-1]):
                kept.append(line)
        while kept and not kept[-1]:
            kept.pop()
        if not kept:
            return ""
        return "\n".join(kept) + "\n"


@dataclass
class BasicLit:
    """
    A string literal exactly as written, delimiters included.

    Attributes:
        kind: "raw" for `...` literals, "interpreted" for "..." literals
        value: The literal source text
    """
    kind: str
    value: str


@dataclass
class TypeRef:
    """
    A type expression.

    Attributes:
        kind: Syntactic kind ("ident", "pointer", "slice", "map", "qualified",
            "struct", ...)
        text: The type's source text, e.g. "string" or "*time.Duration"
        fields: Struct fields, only set when kind is "struct"
    """
    kind: str
    text: str
    fields: Optional[list["Field"]] = None

    @property
    def ident_name(self) -> Optional[str]:
        """The identifier for a plain named type, None for anything else."""
        return self.text if self.kind == "ident" else None


@dataclass
class Field:
    """
    One struct field declaration.

    A declaration such as `A, B string` is one Field with two names; an
    embedded field has no names.
    """
    names: list[str]
    type: TypeRef
    tag: Optional[BasicLit] = None
    doc: Optional[CommentGroup] = None
    pos: Optional[Position] = None


@dataclass
class TypeSpec:
    """A single `Name Type` or `Name = Type` spec inside a type declaration."""
    name: str
    type: TypeRef
    alias: bool = False


@dataclass
class Decl:
    """
    A top-level node of a source file.

    Attributes:
        kind: "package", "import", "type", "func", "method", "var", "const"
        pos: Position of the node's first token
        end: Position just past the node's last token
        specs: Type specs, only populated for "type" declarations
    """
    kind: str
    pos: Position
    end: Position
    specs: list[TypeSpec] = field(default_factory=list)


@dataclass
class File:
    """
    A parsed Go source file.

    Attributes:
        filename: Name the file was parsed under
        package: Package name from the package clause
        decls: All top-level nodes in source order
        comments: All comment groups in the file, in source order
    """
    filename: str
    package: str
    decls: list[Decl] = field(default_factory=list)
    comments: list[CommentGroup] = field(default_factory=list)
