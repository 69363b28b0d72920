"""
envdoc Exceptions

Every failure envdoc surfaces to its caller derives from EnvdocError, so the
CLI can tell a documented failure from a programming error.

Error taxonomy:
    - LoadError: a package path cannot be resolved, read, or parsed
    - ConfigError: the configuration file is missing, invalid, or mistyped
    - UnsupportedFieldTypeError: a tagged field's type is not a plain
      identifier and the extraction policy says to fail
    - RenderError: the markdown could not be written to its sink
"""

from typing import Optional


class EnvdocError(Exception):
    """Base class for all envdoc errors."""


class LoadError(EnvdocError):
    """A Go package could not be discovered, read, or parsed."""


class GoSyntaxError(LoadError):
    """
    A Go source file contains syntax errors.

    Attributes:
        filename: The file that failed to parse
        line: 1-based line of the first error (None if unknown)
    """

    def __init__(self, filename: str, line: Optional[int] = None):
        self.filename = filename
        self.line = line
        where = f"{filename}:{line}" if line is not None else filename
        super().__init__(f"syntax error in {where}")


class ConfigError(EnvdocError):
    """The configuration file could not be read or is invalid."""


class UnsupportedFieldTypeError(EnvdocError):
    """
    A configuration field's declared type is not a simple identifier.

    Attributes:
        type_name: The struct type that owns the field
        key: The configuration key declared on the field
        type_text: Source text of the field's type (e.g. "*string")
        location: "file:line" of the field, if known
    """

    def __init__(self, type_name: str, key: str, type_text: str, location: str = ""):
        self.type_name = type_name
        self.key = key
        self.type_text = type_text
        self.location = location
        prefix = f"{location}: " if location else ""
        super().__init__(
            f"{prefix}field {key} of {type_name} has unsupported type {type_text}"
        )


class RenderError(EnvdocError):
    """Markdown output could not be written."""
