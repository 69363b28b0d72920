"""
envdoc - Markdown documentation for Go envconfig structs.

Reads Go packages, finds struct types whose fields carry envconfig tags, and
renders every configuration key (name, type, required flag, default, doc
comment) as markdown tables.
"""

__version__ = "0.1.0"
