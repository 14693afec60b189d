"""Package module XSD schemas, docs and jars into distribution archives."""

__version__ = "0.1.0"
