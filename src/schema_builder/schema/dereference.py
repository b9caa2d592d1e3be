"""
Inline every ``$ref`` of a JSON Schema document.

SchemaBuilder only works on self-contained trees. This module produces one
from a document that still points at other places:

- Local JSON pointers: ``#/definitions/address``
- Other documents: ``address.json``, ``../common.yaml#/definitions/id``,
  ``https://example.com/schemas/id.json``

External documents are read through ``schema_loader.load_schema`` (or any
callable passed as ``loader``) and relative references are resolved against
the document that contains them. Sibling keywords of a ``$ref`` are ignored,
as in draft-07. References that lead back to themselves can't be inlined
into a finite tree and raise ``DereferenceError``.

Example:
    >>> import asyncio
    >>> from schema_builder.schema.dereference import dereference
    >>> schema = {
    ...     "definitions": {"id": {"type": "integer"}},
    ...     "type": "object",
    ...     "properties": {"id": {"$ref": "#/definitions/id"}},
    ... }
    >>> asyncio.run(dereference(schema))["properties"]["id"]
    {'type': 'integer'}
"""

import asyncio
import copy
import logging
import os
import posixpath
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import unquote

from ..exceptions import DereferenceError
from .schema_loader import is_fsspec_uri, load_schema

logger = logging.getLogger(__name__)

Loader = Callable[[str], Dict[str, Any]]

# Keywords whose values are data, not schemas
DATA_KEYWORDS = frozenset({"enum", "const", "default", "example", "examples"})


async def dereference(
    schema: Union[Dict[str, Any], str],
    base_uri: Optional[str] = None,
    loader: Optional[Loader] = None,
) -> Dict[str, Any]:
    """
    Return a copy of ``schema`` with every ``$ref`` replaced by its target.

    Args:
        schema: Schema document, or the location of one (path or fsspec URI)
        base_uri: Location used to resolve relative references of an
            in-memory document. Defaults to the current directory.
        loader: Callable reading a document from a location. Blocking;
            runs in the default executor.

    Returns:
        The fully inlined schema

    Raises:
        DereferenceError: If a reference can't be resolved or is cyclic
        FileNotFoundError: If a referenced document does not exist
    """
    resolver = _Dereferencer(loader or load_schema)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, resolver.run, schema, base_uri)


class _Dereferencer:
    """Holds the documents read so far during one dereference run."""

    def __init__(self, loader: Loader):
        self.loader = loader
        self.documents: Dict[str, Dict[str, Any]] = {}

    def run(self, schema: Union[Dict[str, Any], str], base_uri: Optional[str]) -> Dict[str, Any]:
        if isinstance(schema, str):
            base_uri = schema
            root = self._document(schema)
        else:
            root = schema
            self.documents[base_uri or ""] = root
        return self._resolve(root, base_uri or "", [])

    def _document(self, uri: str) -> Dict[str, Any]:
        if uri not in self.documents:
            logger.debug(f"Fetching referenced schema document: {uri}")
            self.documents[uri] = self.loader(uri)
        return self.documents[uri]

    def _resolve(self, node: Any, doc_uri: str, stack: List[Tuple[str, str]]) -> Any:
        if isinstance(node, list):
            return [self._resolve(item, doc_uri, stack) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            target_uri, fragment = self._split(ref, doc_uri)
            key = (target_uri, fragment)
            if key in stack:
                raise DereferenceError(ref, "cyclic reference can't be inlined")
            document = self._document(target_uri)
            target = _resolve_pointer(document, fragment, ref)
            logger.debug(f"Resolved $ref {ref!r} in {doc_uri or '<root>'}")
            return self._resolve(copy.deepcopy(target), target_uri, stack + [key])

        result = {}
        for keyword, value in node.items():
            if keyword in DATA_KEYWORDS:
                result[keyword] = copy.deepcopy(value)
            else:
                result[keyword] = self._resolve(value, doc_uri, stack)
        return result

    def _split(self, ref: str, doc_uri: str) -> Tuple[str, str]:
        location, _, fragment = ref.partition("#")
        if not location:
            return doc_uri, fragment
        return _join(doc_uri, location), fragment


def _join(base: str, location: str) -> str:
    """Resolve ``location`` relative to the document at ``base``."""
    if is_fsspec_uri(location) or os.path.isabs(location) or not base:
        return location
    if is_fsspec_uri(base):
        scheme, path = base.split("://", 1)
        return f"{scheme}://{posixpath.normpath(posixpath.join(posixpath.dirname(path), location))}"
    return os.path.normpath(os.path.join(os.path.dirname(base), location))


def _resolve_pointer(document: Any, fragment: str, ref: str) -> Any:
    """
    Resolve a JSON pointer fragment (without the leading '#') in ``document``.

    Raises:
        DereferenceError: If the pointer does not lead anywhere
    """
    target = document
    for part in unquote(fragment).split("/"):
        if part == "":
            continue
        part = part.replace("~1", "/").replace("~0", "~")
        if isinstance(target, dict) and part in target:
            target = target[part]
        elif isinstance(target, list) and part.isdigit() and int(part) < len(target):
            target = target[int(part)]
        else:
            raise DereferenceError(ref, f"'{part}' not found")
    return target
