"""
Configuration extractors.

This package turns parsed Go packages into the envdoc configuration model.

Pipeline:
    collect_decls()       - struct declarations of one package
    EnvconfigExtractor    - tagged fields -> ConfigKeys, per package
    ConfigAggregator      - runs both per package and merges the results

Usage:
    from envdoc.extractors import ConfigAggregator

    aggregator = ConfigAggregator()
    configs = aggregator.aggregate(packages)
"""

from envdoc.extractors.aggregator import ConfigAggregator, aggregate
from envdoc.extractors.base import BaseExtractor, ExtractOptions, UnsupportedTypePolicy
from envdoc.extractors.collector import Declaration, collect_decls
from envdoc.extractors.envconfig import EnvconfigExtractor

__all__ = [
    "BaseExtractor",
    "ConfigAggregator",
    "Declaration",
    "EnvconfigExtractor",
    "ExtractOptions",
    "UnsupportedTypePolicy",
    "aggregate",
    "collect_decls",
]
