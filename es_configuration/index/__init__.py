"""
Index module exports
"""

from .models import DocumentOptions, IndexOptions, ReindexAllOptions
from .schema import SchemaLoader, get_configuration_file
from .operations import IndexOperations
from .aliases import AliasOperations
from .feed import DocumentFeed, iterable_source

__all__ = [
    "DocumentOptions",
    "IndexOptions",
    "ReindexAllOptions",
    "SchemaLoader",
    "get_configuration_file",
    "IndexOperations",
    "AliasOperations",
    "DocumentFeed",
    "iterable_source",
]
