"""
envdoc Configuration File

Options can be kept in a TOML file and passed with --config. Every table and
every key is optional; missing values keep their defaults, and command-line
flags override whatever the file sets.

    [load]
    recursive = true
    tags = ["integration"]             # extra build tags, like go -tags

    [extract]
    key_tag = "envconfig"
    required_tag = "required"
    default_tag = "default"
    unsupported_types = "stringify"   # skip | stringify | error

    [render]
    heading_level = 2
    include_type_comments = true
    title = "Configuration"
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from envdoc.errors import ConfigError
from envdoc.extractors.base import ExtractOptions, UnsupportedTypePolicy
from envdoc.renderer import RenderOptions


@dataclass
class LoadOptions:
    """
    Options for package loading.

    Attributes:
        recursive: Load every package below the given directory
        tags: Extra build tags used when evaluating build constraints
    """
    recursive: bool = False
    tags: list[str] = field(default_factory=list)


@dataclass
class EnvdocConfig:
    """Complete envdoc configuration, grouped the way the TOML file is."""
    load: LoadOptions = field(default_factory=LoadOptions)
    extract: ExtractOptions = field(default_factory=ExtractOptions)
    render: RenderOptions = field(default_factory=RenderOptions)


# Accepted TOML value types per option; title may also be omitted entirely.
_VALUE_TYPES: dict[str, tuple[type, ...]] = {
    "recursive": (bool,),
    "tags": (list,),
    "key_tag": (str,),
    "required_tag": (str,),
    "default_tag": (str,),
    "unsupported_types": (str,),
    "heading_level": (int,),
    "include_type_comments": (bool,),
    "title": (str,),
}


def _convert(section: str, key: str, value: Any) -> Any:
    expected = _VALUE_TYPES[key]
    # bool is an int subclass; do not accept true for heading_level
    if isinstance(value, bool) and bool not in expected:
        raise ConfigError(f"[{section}] {key} must be {expected[0].__name__}, got bool")
    if not isinstance(value, expected):
        raise ConfigError(
            f"[{section}] {key} must be {expected[0].__name__}, got {type(value).__name__}"
        )

    if key == "unsupported_types":
        try:
            return UnsupportedTypePolicy(value)
        except ValueError:
            choices = ", ".join(p.value for p in UnsupportedTypePolicy)
            raise ConfigError(f"[{section}] {key} must be one of: {choices}") from None
    if key == "heading_level" and not 1 <= value <= 6:
        raise ConfigError(f"[{section}] {key} must be between 1 and 6")
    if key.endswith("_tag") and not value:
        raise ConfigError(f"[{section}] {key} must not be empty")
    if key == "tags" and not all(isinstance(tag, str) and tag for tag in value):
        raise ConfigError(f"[{section}] {key} must be a list of non-empty strings")
    return value


def _apply(section: str, target: Any, values: Any) -> Any:
    if not isinstance(values, dict):
        raise ConfigError(f"[{section}] must be a table")

    known = {f.name for f in fields(target)}
    updates = {}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown option [{section}] {key}")
        updates[key] = _convert(section, key, value)
    return replace(target, **updates)


def parse_config(data: dict[str, Any]) -> EnvdocConfig:
    """
    Build an EnvdocConfig from already parsed TOML data.

    Args:
        data: The TOML document as a dict

    Returns:
        The configuration

    Raises:
        ConfigError: On unknown tables or keys, or values of the wrong type
    """
    config = EnvdocConfig()
    for section, values in data.items():
        if section not in ("load", "extract", "render"):
            raise ConfigError(f"Unknown configuration table [{section}]")
        setattr(config, section, _apply(section, getattr(config, section), values))
    return config


def load_config(path: str | Path) -> EnvdocConfig:
    """
    Load configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        The configuration

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds
            invalid options
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    return parse_config(data)
