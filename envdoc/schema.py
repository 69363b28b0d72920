"""
envdoc Configuration Schema

This module defines the documentable model the extractors produce and the
renderer consumes.

    ConfigType  - one struct type with at least one configuration-tagged field
    ConfigKey   - one tagged field of that struct

Model Invariants:
    1. A ConfigType only exists if at least one of its fields produced a key
    2. ConfigKey.name comes from the tag's key attribute, never from the Go
       field identifier
    3. Keys keep field declaration order; only type names are sorted, and
       only when rendering
"""

from dataclasses import dataclass, field

from envdoc.golang.ast import CommentGroup


@dataclass
class ConfigKey:
    """
    A single documented configuration key.

    Attributes:
        name: The environment variable name declared in the tag
        type: The field's Go type name (e.g. "string", "int")
        required: True only if the tag's required attribute is exactly "true"
        default: The tag's default attribute ("" means no default)
        comment: The field's doc comment on one line ("" means none)

    Example:
        >>> key = ConfigKey(
        ...     name="DATABASE_URL",
        ...     type="string",
        ...     required=True,
        ...     default="localhost:5432",
        ...     comment="Database URL for connection",
        ... )
    """
    name: str
    type: str
    required: bool = False
    default: str = ""
    comment: str = ""

    def has_default(self) -> bool:
        """Returns True if the key declares a default value."""
        return self.default != ""


@dataclass
class ConfigType:
    """
    A documented configuration struct.

    Attributes:
        keys: Configuration keys in field declaration order
        comments: Comment groups attached to the type's declaration
    """
    keys: list[ConfigKey] = field(default_factory=list)
    comments: list[CommentGroup] = field(default_factory=list)
