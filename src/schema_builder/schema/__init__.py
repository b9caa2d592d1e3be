"""
Schema tree utilities for schema_builder.

This package provides the tools the builder is made of:
- walker: recursive traversal of a schema tree
- classifier: structural predicates (object, additional properties, combinators)
- keywords: metadata keywords accepted by each factory
- schema_loader: load schema documents from paths and fsspec URIs
- dereference: inline every $ref of a schema document
"""

from .walker import walk_schema, iter_schema_nodes
from .classifier import (
    is_object_schema,
    has_additional_properties,
    has_combinators,
    is_simple_object_schema,
)
from .schema_loader import (
    load_schema,
    parse_schema_document,
    is_fsspec_uri,
    clear_cache,
    SchemaLoader,
    SchemaCache,
)
from .dereference import dereference

__all__ = [
    # Walker
    'walk_schema',
    'iter_schema_nodes',
    # Classifier
    'is_object_schema',
    'has_additional_properties',
    'has_combinators',
    'is_simple_object_schema',
    # Schema loader
    'load_schema',
    'parse_schema_document',
    'is_fsspec_uri',
    'clear_cache',
    'SchemaLoader',
    'SchemaCache',
    # Dereference
    'dereference',
]
