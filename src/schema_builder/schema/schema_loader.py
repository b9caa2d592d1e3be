"""
Schema document loader for local paths and fsspec URIs.

Loads the JSON (or YAML) documents that ``$ref`` pointers point at:
- Local paths (relative or absolute)
- fsspec URIs (file://, memory://, s3://, gs://, az://, https://)

Documents are cached in memory for a limited time so that a schema
referencing the same file many times only reads it once.

Example:
    >>> from schema_builder.schema import schema_loader
    >>>
    >>> schema = schema_loader.load_schema("schemas/invoice.json")
    >>> schema = schema_loader.load_schema("s3://bucket/schemas/invoice.yaml")
"""

import copy
import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Cache TTL in seconds (default: 5 minutes)
DEFAULT_CACHE_TTL = 300

FSSPEC_SCHEMES = ('s3://', 'gs://', 'gcs://', 'az://', 'abfs://',
                  'http://', 'https://', 'file://', 'memory://')


def is_fsspec_uri(ref: str) -> bool:
    """
    Check if reference is an fsspec URI (not a plain local path).

    Args:
        ref: Reference string to check

    Returns:
        True if it's an fsspec URI
    """
    return ref.startswith(FSSPEC_SCHEMES)


class SchemaCache:
    """In-memory cache for loaded schema documents with TTL."""

    def __init__(self, ttl: int = DEFAULT_CACHE_TTL):
        self.ttl = ttl
        self._cache: Dict[str, Tuple[Dict[str, Any], float]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get cached schema if not expired."""
        if key in self._cache:
            schema, timestamp = self._cache[key]
            if time.time() - timestamp < self.ttl:
                return schema
            else:
                del self._cache[key]
        return None

    def set(self, key: str, schema: Dict[str, Any]) -> None:
        """Cache a schema."""
        self._cache[key] = (schema, time.time())

    def clear(self) -> None:
        """Clear all cached schemas."""
        self._cache.clear()


class SchemaLoader:
    """Load schema documents from any fsspec-compatible storage backend."""

    def __init__(self, cache: Optional[SchemaCache] = None):
        self.cache = cache or SchemaCache()

    def load(self, uri: str) -> Dict[str, Any]:
        """
        Load a schema document.

        Callers get their own copy, so the dereferencer (or anyone else) can
        modify the result without corrupting the cache.

        Args:
            uri: Local path or fsspec-compatible URI

        Returns:
            Parsed schema document

        Raises:
            FileNotFoundError: If the document does not exist
            ValueError: If the document is not valid JSON/YAML or not an object
        """
        cached = self.cache.get(uri)
        if cached is not None:
            logger.debug(f"Schema cache hit: {uri}")
            return copy.deepcopy(cached)

        import fsspec

        if is_fsspec_uri(uri):
            protocol, fs_path = uri.split('://', 1)
            if protocol in ('http', 'https'):
                fs_path = uri
            fs = fsspec.filesystem(protocol)
        else:
            fs = fsspec.filesystem('file')
            fs_path = uri

        try:
            with fs.open(fs_path, 'r') as f:
                content = f.read()
        except FileNotFoundError:
            raise FileNotFoundError(f"Schema not found: {uri}")

        schema = parse_schema_document(content, uri)
        logger.debug(f"Loaded schema document: {uri}")

        self.cache.set(uri, schema)
        return copy.deepcopy(schema)


def parse_schema_document(content: str, uri: str = "<string>") -> Dict[str, Any]:
    """
    Parse a schema document, as YAML if ``uri`` ends with .yaml/.yml, else JSON.

    Raises:
        ValueError: If the content can't be parsed or is not a JSON object
    """
    if uri.endswith(('.yaml', '.yml')):
        import yaml
        try:
            schema = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in schema {uri}: {e}")
    else:
        try:
            schema = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in schema {uri}: {e}")

    if not isinstance(schema, dict):
        raise ValueError(
            f"Schema {uri} must be an object, got {type(schema).__name__}"
        )
    return schema


# Global loader instance (with shared cache)
_cache = SchemaCache()
_loader: Optional[SchemaLoader] = None


def _get_loader() -> SchemaLoader:
    """Get or create global loader."""
    global _loader
    if _loader is None:
        _loader = SchemaLoader(cache=_cache)
    return _loader


def load_schema(uri: str) -> Dict[str, Any]:
    """
    Load a schema document through the shared cached loader.

    Examples:
        >>> load_schema("schemas/base.json")
        >>> load_schema("memory://schemas/base.json")
        >>> load_schema("https://example.com/schemas/base.json")
    """
    return _get_loader().load(uri)


def clear_cache() -> None:
    """Clear the global schema cache."""
    _cache.clear()
