"""
Aggregator

Runs collection and extraction for each package and merges the results into
one model. Packages are merged in input order; when two packages declare the
same type name, the later package's ConfigType replaces the earlier one as a
whole (keys are never merged across packages).
"""

from typing import Iterable, Optional

from envdoc.extractors.base import ExtractOptions
from envdoc.extractors.collector import collect_decls
from envdoc.extractors.envconfig import EnvconfigExtractor
from envdoc.golang.loader import Package
from envdoc.schema import ConfigType


class ConfigAggregator:
    """
    Aggregates configuration types across packages.

    Usage:
        aggregator = ConfigAggregator()
        configs = aggregator.aggregate(load_packages("./config"))

        for warning in aggregator.get_warnings():
            print(warning)

    Attributes:
        options: Extraction options passed to every extractor
    """

    def __init__(self, options: Optional[ExtractOptions] = None):
        self.options = options or ExtractOptions()
        self._warnings: list[str] = []

    def get_warnings(self) -> list[str]:
        """Get all warnings recorded by the last aggregate() call."""
        return self._warnings.copy()

    def aggregate(self, packages: Iterable[Package]) -> dict[str, ConfigType]:
        """
        Extract and merge the configuration model of all packages.

        Args:
            packages: Parsed packages in the order they should be merged

        Returns:
            Mapping from type name to ConfigType

        Raises:
            UnsupportedFieldTypeError: Propagated from the extractor when the
                unsupported-type policy is ERROR
        """
        self._warnings = []
        configs: dict[str, ConfigType] = {}

        for package in packages:
            decls = collect_decls(package.files)
            extractor = EnvconfigExtractor(self.options)
            found = extractor.extract(decls, package.comments)
            self._warnings.extend(extractor.get_warnings())
            configs.update(found)

        return configs


def aggregate(
    packages: Iterable[Package],
    options: Optional[ExtractOptions] = None,
) -> dict[str, ConfigType]:
    """
    Convenience function to aggregate configuration types.

    Args:
        packages: Parsed packages in merge order
        options: Optional extraction options

    Returns:
        Mapping from type name to ConfigType

    Example:
        from envdoc.golang import load_packages
        from envdoc.extractors import aggregate

        configs = aggregate(load_packages("./internal/config"))
        print(sorted(configs))
    """
    return ConfigAggregator(options).aggregate(packages)
