"""
envdoc Markdown Renderer

This module renders the aggregated configuration model as markdown.

Output Structure (per type, in byte-wise sorted type-name order):
    1. A heading with the type name
    2. The type's comment groups, line by line
    3. A left-aligned table: Name | Type | Required | Default | Comment
    4. One blank line

Formatting Rules:
    - Columns are padded to their widest cell, header included; width is
      the terminal display width, so CJK and other wide characters count
      as two columns
    - Required is rendered as "true" or "false"
    - A default is rendered as a double-quoted Go string; no default leaves
      the cell empty
    - "|" inside a cell is escaped so it cannot split the row

Rendering is deterministic: the same model always produces the same text.
"""

from dataclasses import dataclass
from typing import Optional, TextIO

from wcwidth import wcswidth, wcwidth

from envdoc.errors import RenderError
from envdoc.golang.literals import quote
from envdoc.schema import ConfigKey, ConfigType

TABLE_HEADER = ["Name", "Type", "Required", "Default", "Comment"]


@dataclass
class RenderOptions:
    """
    Configuration options for markdown rendering.

    Attributes:
        heading_level: Markdown heading level used for type names
        include_type_comments: Emit the comments attached to each type
        title: Optional document title, rendered as a level-1 heading
    """
    heading_level: int = 2
    include_type_comments: bool = True
    title: Optional[str] = None


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|")


def display_width(text: str) -> int:
    """Return the number of terminal columns text occupies."""
    width = wcswidth(text)
    if width < 0:
        # control characters take no space
        width = sum(max(wcwidth(char), 0) for char in text)
    return width


def format_table(header: list[str], rows: list[list[str]]) -> str:
    """
    Format a left-aligned markdown table.

    Args:
        header: Column titles
        rows: Cell values, one list per row

    Returns:
        The table, one line per row, each line ending in a newline

    Example:
        >>> print(format_table(["Name", "Type"], [["PORT", "int"]]), end="")
        | Name | Type |
        |:-----|:-----|
        | PORT | int  |
    """
    cells = [[_escape_cell(c) for c in row] for row in [header, *rows]]
    widths = [max(display_width(row[i]) for row in cells) for i in range(len(header))]

    def line(row: list[str]) -> str:
        padded = [
            cell + " " * (width - display_width(cell)) for cell, width in zip(row, widths)
        ]
        return "| " + " | ".join(padded) + " |\n"

    separator = "|" + "|".join(":" + "-" * (width + 1) for width in widths) + "|\n"
    return line(cells[0]) + separator + "".join(line(row) for row in cells[1:])


class MarkdownRenderer:
    """
    Renders a configuration model into markdown.

    Usage:
        renderer = MarkdownRenderer(configs)
        markdown = renderer.render()

        # With custom options
        renderer = MarkdownRenderer(configs, RenderOptions(title="Configuration"))
    """

    def __init__(
        self,
        configs: dict[str, ConfigType],
        options: Optional[RenderOptions] = None,
    ):
        """
        Initialize the renderer.

        Args:
            configs: Mapping from type name to ConfigType
            options: Rendering options (uses defaults if not provided)
        """
        self.configs = configs
        self.options = options or RenderOptions()
        self._sections: list[str] = []

    def render(self) -> str:
        """
        Generate the complete markdown document.

        Returns:
            The rendered markdown
        """
        self._sections = []

        if self.options.title:
            self._sections.append(f"# {self.options.title}\n\n")

        for name in sorted(self.configs):
            self._add_type_section(name, self.configs[name])

        return "".join(self._sections)

    def _add_type_section(self, name: str, config: ConfigType) -> None:
        """Add the heading, comments and key table of one type."""
        section = f"{'#' * self.options.heading_level} {name}\n\n"

        if self.options.include_type_comments:
            for group in config.comments:
                for line in group.text().split("\n"):
                    section += f"{line}\n"

        section += format_table(TABLE_HEADER, [self._row(key) for key in config.keys])
        section += "\n"
        self._sections.append(section)

    @staticmethod
    def _row(key: ConfigKey) -> list[str]:
        default = quote(key.default) if key.has_default() else ""
        return [
            key.name,
            key.type,
            "true" if key.required else "false",
            default,
            key.comment,
        ]


def render_markdown(
    configs: dict[str, ConfigType],
    options: Optional[RenderOptions] = None,
) -> str:
    """
    Convenience function to render markdown from a configuration model.

    Args:
        configs: Mapping from type name to ConfigType
        options: Optional rendering options

    Returns:
        Rendered markdown
    """
    return MarkdownRenderer(configs, options).render()


def write_markdown(
    sink: TextIO,
    configs: dict[str, ConfigType],
    options: Optional[RenderOptions] = None,
) -> None:
    """
    Render a configuration model and write it to a text sink.

    Args:
        sink: Any writable text stream (sys.stdout, an open file, StringIO)
        configs: Mapping from type name to ConfigType
        options: Optional rendering options

    Raises:
        RenderError: If writing to the sink fails
    """
    markdown = render_markdown(configs, options)
    try:
        sink.write(markdown)
        sink.flush()
    except (OSError, ValueError) as e:
        raise RenderError(f"failed to write markdown: {e}") from e
