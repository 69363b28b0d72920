"""
Comment Index

Maps the position of each top-level declaration to the comment groups
associated with it. The extractor receives the index explicitly and never
reaches into a syntax tree for comments.

Association rules, applied to every comment group that sits between
top-level nodes (groups inside a declaration belong to that declaration's
fields and are not indexed here):

    1. A group starting on the line where the previous node ends belongs to
       the previous node (a trailing line comment).
    2. A group starting on the line right after the previous node, followed
       by a blank line, also belongs to the previous node.
    3. Any other group belongs to the next node.

Several groups may attach to one node, e.g. a license block separated by a
blank line from a doc comment both attach to the first declaration.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from envdoc.golang.ast import CommentGroup, Decl, File, Position


class CommentIndex:
    """
    Read-only index from declaration position to comment groups.

    Usage:
        index = CommentIndex.from_files(package_files)
        groups = index.comments_by_pos(decl.pos)

    An index can also be built directly from a mapping, which is handy in
    tests:
        index = CommentIndex({pos: [group]})
    """

    def __init__(self, groups: Optional[Mapping[Position, Sequence[CommentGroup]]] = None):
        self._groups = MappingProxyType(
            {pos: tuple(found) for pos, found in (groups or {}).items()}
        )

    @classmethod
    def from_files(cls, files: Iterable[File]) -> "CommentIndex":
        """
        Build an index covering every top-level declaration of the files.

        Args:
            files: Parsed files, typically all files of one package

        Returns:
            A CommentIndex
        """
        groups: dict[Position, list[CommentGroup]] = {}
        for go_file in files:
            for decl, group in _associate(go_file):
                groups.setdefault(decl.pos, []).append(group)
        return cls(groups)

    def comments_by_pos(self, pos: Position) -> list[CommentGroup]:
        """
        Return the comment groups attached to the node starting at pos.

        Args:
            pos: Position of a top-level declaration

        Returns:
            The attached groups in source order (empty if none)
        """
        return list(self._groups.get(pos, ()))


def _associate(go_file: File) -> list[tuple[Decl, CommentGroup]]:
    """Pair each top-level comment group of a file with its declaration."""
    nodes = sorted(go_file.decls, key=lambda d: d.pos.offset)
    pairs: list[tuple[Decl, CommentGroup]] = []

    for group in go_file.comments:
        start = group.pos.offset
        if any(n.pos.offset <= start < n.end.offset for n in nodes):
            continue

        prev_node = None
        next_node = None
        for node in nodes:
            if node.end.offset <= start:
                prev_node = node
            elif node.pos.offset >= group.end.offset:
                next_node = node
                break

        if prev_node is not None:
            if group.pos.line == prev_node.end.line:
                pairs.append((prev_node, group))
                continue
            blank_after = next_node is None or next_node.pos.line > group.end.line + 1
            if group.pos.line == prev_node.end.line + 1 and blank_after:
                pairs.append((prev_node, group))
                continue
        if next_node is not None:
            pairs.append((next_node, group))

    return pairs
