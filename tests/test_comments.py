"""
Tests for comment handling.

Tests CommentGroup.text() and the CommentIndex association of top-level
comment groups with declarations.
"""

import pytest

from envdoc.golang import Comment, CommentGroup, CommentIndex, Position, parse_file


def group(*texts: str) -> CommentGroup:
    return CommentGroup([Comment(text) for text in texts])


ASSOCIATION_SOURCE = '''// License header

// Package app is documented.
package app

// Config holds settings.
// Second line.
type Config struct {
	// Port doc
	Port int `envconfig:"PORT"`
} // end of Config

// Detached note.

// Other doc.
type Other struct{}
// Footer for Other.

var x = 1
'''


class TestCommentGroupText:
    """Tests for CommentGroup.text()."""

    @pytest.mark.parametrize("texts,expected", [
        (("// hello",), "hello\n"),
        (("//hello",), "hello\n"),
        (("// trailing spaces   ",), "trailing spaces\n"),
        (("// one", "// two"), "one\ntwo\n"),
        (("//TODO: uppercase is not a directive",), "TODO: uppercase is not a directive\n"),
    ])
    def test_line_comments(self, texts, expected):
        """Test marker removal and per-line trimming."""
        assert group(*texts).text() == expected

    @pytest.mark.parametrize("directive", [
        "//go:generate stringer -type=Level",
        "//nolint:lll",
        "//line config.go:10",
        "//export Handler",
    ])
    def test_directives_skipped(self, directive):
        """Test that tool directives are not part of the text."""
        assert group(directive, "// Real doc").text() == "Real doc\n"

    def test_directive_with_space_is_text(self):
        """Test that a space after // turns a directive into plain text."""
        assert group("// go:generate").text() == "go:generate\n"

    def test_blank_lines_collapse(self):
        """Test that runs of blank lines become one."""
        assert group("// a", "//", "//", "// b").text() == "a\n\nb\n"

    def test_leading_and_trailing_blank_lines_dropped(self):
        """Test that blank lines around the text are removed."""
        assert group("//", "// a", "//").text() == "a\n"

    def test_block_comment(self):
        """Test a multi-line /* */ comment."""
        assert group("/*\n  one\n  two\n*/").text() == "  one\n  two\n"

    def test_empty(self):
        """Test groups without any text."""
        assert group("//").text() == ""
        assert CommentGroup([]).text() == ""
        assert CommentGroup([]).pos is None


class TestCommentIndex:
    """Tests for the CommentIndex class."""

    @pytest.fixture
    def go_file(self):
        return parse_file(ASSOCIATION_SOURCE, "app.go")

    @pytest.fixture
    def index(self, go_file):
        return CommentIndex.from_files([go_file])

    def decl(self, go_file, kind, name=None):
        for decl in go_file.decls:
            if decl.kind != kind:
                continue
            if name is None or (decl.specs and decl.specs[0].name == name):
                return decl
        raise AssertionError(f"no {kind} {name}")

    def texts(self, index, decl):
        return [g.text() for g in index.comments_by_pos(decl.pos)]

    def test_groups_before_first_node(self, go_file, index):
        """Test that the header and package doc both attach to the package clause."""
        package = self.decl(go_file, "package")

        assert self.texts(index, package) == ["License header\n", "Package app is documented.\n"]

    def test_doc_comment_attaches_to_next(self, go_file, index):
        """Test that a group right above a declaration attaches to it."""
        config = self.decl(go_file, "type", "Config")

        texts = self.texts(index, config)
        assert texts[0] == "Config holds settings.\nSecond line.\n"

    def test_same_line_group_attaches_to_previous(self, go_file, index):
        """Test that a comment after the closing brace belongs to that declaration."""
        config = self.decl(go_file, "type", "Config")

        assert self.texts(index, config) == [
            "Config holds settings.\nSecond line.\n",
            "end of Config\n",
        ]

    def test_field_comments_not_indexed(self, go_file, index):
        """Test that comments inside a declaration are left to its fields."""
        all_texts = [t for decl in go_file.decls for t in self.texts(index, decl)]

        assert "Port doc\n" not in all_texts

    def test_detached_group_attaches_to_next(self, go_file, index):
        """Test that a group surrounded by blank lines goes to the next declaration."""
        other = self.decl(go_file, "type", "Other")

        texts = self.texts(index, other)
        assert texts[:2] == ["Detached note.\n", "Other doc.\n"]

    def test_next_line_group_followed_by_blank_attaches_to_previous(self, go_file, index):
        """Test that a footer directly below a declaration stays with it."""
        other = self.decl(go_file, "type", "Other")
        var = self.decl(go_file, "var")

        assert self.texts(index, other)[-1] == "Footer for Other.\n"
        assert self.texts(index, var) == []

    def test_unknown_position(self, index):
        """Test lookup of a position without comments."""
        assert index.comments_by_pos(Position("x.go", 0, 1, 1)) == []

    def test_returned_list_is_a_copy(self, go_file, index):
        """Test that callers cannot change the index."""
        package = self.decl(go_file, "package")

        index.comments_by_pos(package.pos).clear()

        assert len(index.comments_by_pos(package.pos)) == 2

    def test_from_mapping(self):
        """Test building an index directly."""
        pos = Position("a.go", 10, 3, 1)
        doc = group("// Doc")
        index = CommentIndex({pos: [doc]})

        assert index.comments_by_pos(pos) == [doc]

    def test_empty_index(self):
        """Test the default index."""
        assert CommentIndex().comments_by_pos(Position("a.go", 0, 1, 1)) == []

    def test_multiple_files(self):
        """Test that one index covers every file of a package."""
        first = parse_file("package app\n\n// A doc\ntype A struct{}\n", "a.go")
        second = parse_file("package app\n\n// B doc\ntype B struct{}\n", "b.go")
        index = CommentIndex.from_files([first, second])

        assert self.texts(index, self.decl(first, "type")) == ["A doc\n"]
        assert self.texts(index, self.decl(second, "type")) == ["B doc\n"]
