"""
Go Source Parser

This module parses Go source files with tree-sitter and converts the syntax
tree into the envdoc syntax model (envdoc.golang.ast).

Design Notes:
    - tree-sitter is error tolerant, but envdoc is not: a tree containing
      ERROR or MISSING nodes raises GoSyntaxError instead of yielding a
      partial model.
    - Comments are tree-sitter "extras" and can appear anywhere in the tree,
      so they are collected in one pass and grouped purely by position, the
      same way the Go scanner groups them.
    - A field's doc comment is the non-trailing group that ends on the line
      immediately before the field, with no code after it on that line.

Limitations:
    - Only top-level type declarations are broken down into specs and fields;
      function bodies and var/const declarations are recorded as positioned
      nodes only.
    - Nested anonymous struct types are parsed, but their fields are not
      visited by the extractors.
"""

from functools import lru_cache
from typing import Optional, Union

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from envdoc.errors import GoSyntaxError
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

GO_LANGUAGE = Language(tree_sitter_go.language())

# tree-sitter node type -> TypeRef.kind
TYPE_KINDS: dict[str, str] = {
    "type_identifier": "ident",
    "pointer_type": "pointer",
    "slice_type": "slice",
    "array_type": "array",
    "implicit_length_array_type": "array",
    "map_type": "map",
    "channel_type": "chan",
    "function_type": "func",
    "qualified_type": "qualified",
    "generic_type": "generic",
    "struct_type": "struct",
    "interface_type": "interface",
    "parenthesized_type": "paren",
    "negated_type": "negated",
}

# tree-sitter node type -> Decl.kind for top-level nodes
DECL_KINDS: dict[str, str] = {
    "package_clause": "package",
    "import_declaration": "import",
    "type_declaration": "type",
    "function_declaration": "func",
    "method_declaration": "method",
    "var_declaration": "var",
    "const_declaration": "const",
}


@lru_cache(maxsize=1)
def _go_parser() -> Parser:
    return Parser(GO_LANGUAGE)


class GoParser:
    """
    Converts one Go source file into a File.

    Usage:
        parser = GoParser(source_bytes, "config.go")
        go_file = parser.parse()

    Attributes:
        source: The raw file contents
        filename: Name used in positions and error messages
    """

    def __init__(self, source: Union[str, bytes], filename: str = "<source>"):
        self.source = source.encode("utf-8") if isinstance(source, str) else source
        self.filename = filename
        self._groups: list[CommentGroup] = []
        self._doc_groups: dict[int, CommentGroup] = {}

    def parse(self) -> File:
        """
        Parse the source.

        Returns:
            The File model

        Raises:
            GoSyntaxError: If the source does not parse cleanly
        """
        tree = _go_parser().parse(self.source)
        root = tree.root_node
        if root.has_error:
            raise GoSyntaxError(self.filename, self._first_error_line(root))

        self._groups = self._group_comments(self._collect_comments(root))
        self._doc_groups = {
            group.end.line: group
            for group in self._groups
            if not group.trailing and not self._code_after(group)
        }

        go_file = File(filename=self.filename, package="", comments=self._groups)
        for child in root.named_children:
            if child.type == "comment":
                continue
            kind = DECL_KINDS.get(child.type, child.type)
            decl = Decl(kind=kind, pos=self._position(child), end=self._end_position(child))
            if kind == "package":
                go_file.package = self._package_name(child)
            elif kind == "type":
                decl.specs = self._type_specs(child)
            go_file.decls.append(decl)
        return go_file

    # === Positions and text ===

    def _position(self, node: Node) -> Position:
        row, column = node.start_point
        return Position(self.filename, node.start_byte, row + 1, column + 1)

    def _end_position(self, node: Node) -> Position:
        row, column = node.end_point
        return Position(self.filename, node.end_byte, row + 1, column + 1)

    def _text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _line_start(self, offset: int) -> int:
        return self.source.rfind(b"\n", 0, offset) + 1

    def _line_end(self, offset: int) -> int:
        end = self.source.find(b"\n", offset)
        return len(self.source) if end == -1 else end

    def _first_error_line(self, root: Node) -> Optional[int]:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
            stack.extend(reversed(node.children))
        return None

    # === Comments ===

    def _collect_comments(self, root: Node) -> list[Node]:
        comments = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "comment":
                comments.append(node)
                continue
            stack.extend(reversed(node.children))
        comments.sort(key=lambda n: n.start_byte)
        return comments

    def _code_before(self, node: Node, floor: int) -> bool:
        start = max(self._line_start(node.start_byte), floor)
        return bool(self.source[start:node.start_byte].strip())

    def _code_after(self, group: CommentGroup) -> bool:
        end = group.end.offset
        return bool(self.source[end:self._line_end(end)].strip())

    def _group_comments(self, nodes: list[Node]) -> list[CommentGroup]:
        """
        Group comments the way the Go scanner does.

        A comment joins the current group when it starts on the line where the
        group ends, or on the next line if the group is not a trailing group and
        the comment has no code before it. Anything else starts a new group.
        """
        groups: list[CommentGroup] = []
        current: Optional[CommentGroup] = None
        for node in nodes:
            pos = self._position(node)
            comment = Comment(text=self._text(node), pos=pos, end=self._end_position(node))

            floor = current.end.offset if current is not None else 0
            code_before = self._code_before(node, floor)

            if current is not None and not code_before:
                if pos.line == current.end.line:
                    current.comments.append(comment)
                    continue
                if pos.line == current.end.line + 1 and not current.trailing:
                    current.comments.append(comment)
                    continue

            current = CommentGroup(comments=[comment], trailing=code_before)
            groups.append(current)
        return groups

    # === Declarations ===

    def _package_name(self, node: Node) -> str:
        for child in node.named_children:
            if child.type == "package_identifier":
                return self._text(child)
        return ""

    def _type_specs(self, node: Node) -> list[TypeSpec]:
        specs = []
        for child in node.named_children:
            if child.type not in ("type_spec", "type_alias"):
                continue
            name_node = child.child_by_field_name("name")
            type_node = child.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            specs.append(
                TypeSpec(
                    name=self._text(name_node),
                    type=self._type_ref(type_node),
                    alias=child.type == "type_alias",
                )
            )
        return specs

    def _type_ref(self, node: Node) -> TypeRef:
        kind = TYPE_KINDS.get(node.type, node.type)
        ref = TypeRef(kind=kind, text=self._text(node))
        if kind == "struct":
            ref.fields = self._struct_fields(node)
        return ref

    def _struct_fields(self, node: Node) -> list[Field]:
        fields: list[Field] = []
        for body in node.named_children:
            if body.type != "field_declaration_list":
                continue
            for child in body.named_children:
                if child.type == "field_declaration":
                    fields.append(self._field(child, body.start_byte))
        return fields

    def _field(self, node: Node, body_start: int) -> Field:
        names = [self._text(n) for n in node.children_by_field_name("name")]
        type_node = node.child_by_field_name("type")
        type_ref = self._type_ref(type_node)

        # embedded *T parses as a bare type identifier after an anonymous "*"
        if not names and any(c.type == "*" for c in node.children):
            type_ref = TypeRef(kind="pointer", text="*" + type_ref.text)

        tag = None
        tag_node = node.child_by_field_name("tag")
        if tag_node is not None:
            kind = "raw" if tag_node.type == "raw_string_literal" else "interpreted"
            tag = BasicLit(kind=kind, value=self._text(tag_node))

        pos = self._position(node)
        doc = self._doc_groups.get(pos.line - 1)
        if doc is not None and doc.pos.offset < body_start:
            doc = None

        return Field(names=names, type=type_ref, tag=tag, doc=doc, pos=pos)


def parse_file(source: Union[str, bytes], filename: str = "<source>") -> File:
    """
    Parse Go source into a File.

    Args:
        source: File contents (str or UTF-8 bytes)
        filename: Name recorded in positions and error messages

    Returns:
        The parsed File

    Raises:
        GoSyntaxError: If the source contains syntax errors

    Example:
        go_file = parse_file('package config\\n\\ntype C struct{}\\n', "c.go")
        assert go_file.package == "config"
    """
    return GoParser(source, filename).parse()
