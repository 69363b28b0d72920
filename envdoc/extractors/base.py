"""
Base Extractor Interface

This module defines the abstract base class for configuration extractors and
the options that steer them. An extractor receives the struct declarations
collected from one package plus that package's comment index, and produces
the ConfigType model for every struct it recognizes.

Design Principles:
    1. One package at a time: extractors never see more than one package
    2. No I/O: everything needed is passed in, nothing is looked up globally
    3. Non-fatal problems become warnings, fatal ones become EnvdocErrors
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from envdoc.extractors.collector import Declaration
from envdoc.golang.comments import CommentIndex
from envdoc.schema import ConfigType


class UnsupportedTypePolicy(Enum):
    """
    What to do with a tagged field whose type is not a plain identifier
    (pointers, slices, maps, qualified names such as time.Duration, ...).
    """
    SKIP = "skip"              # Drop the field and record a warning
    STRINGIFY = "stringify"    # Use the type's source text, e.g. "*string"
    ERROR = "error"            # Raise UnsupportedFieldTypeError


@dataclass
class ExtractOptions:
    """
    Configuration options for tag extraction.

    Attributes:
        key_tag: Tag attribute holding the environment variable name
        required_tag: Tag attribute marking a key as required
        default_tag: Tag attribute holding the default value
        unsupported_types: Policy for fields with non-identifier types
    """
    key_tag: str = "envconfig"
    required_tag: str = "required"
    default_tag: str = "default"
    unsupported_types: UnsupportedTypePolicy = UnsupportedTypePolicy.SKIP


class BaseExtractor(ABC):
    """
    Abstract base class for configuration extractors.

    Subclasses must implement:
        - extract(): Turn collected declarations into ConfigTypes

    Attributes:
        name: Human-readable identifier used to prefix warnings
        options: Extraction options
    """

    name: str = "Base"

    def __init__(self, options: Optional[ExtractOptions] = None):
        """Initialize the extractor."""
        self.options = options or ExtractOptions()
        self._warnings: list[str] = []

    def add_warning(self, message: str) -> None:
        """
        Record a warning encountered during extraction.

        Warnings are non-fatal issues that should be reported but don't
        prevent extraction from continuing.

        Args:
            message: The warning message to record
        """
        self._warnings.append(f"[{self.name}] {message}")

    def get_warnings(self) -> list[str]:
        """Get all warnings recorded during extraction."""
        return self._warnings.copy()

    @abstractmethod
    def extract(
        self,
        decls: dict[str, Declaration],
        comments: CommentIndex,
    ) -> dict[str, ConfigType]:
        """
        Build the configuration model for one package.

        Args:
            decls: Struct declarations by type name (see collect_decls)
            comments: Comment index of the same package

        Returns:
            Mapping from type name to ConfigType; structs without any
            recognized field are absent
        """
        pass
