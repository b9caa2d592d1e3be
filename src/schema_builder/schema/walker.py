"""
Recursive traversal of a JSON Schema tree.

Visits a schema node and every structural child, in this order:
properties values, oneOf / allOf / anyOf branches, items, not, and
additionalProperties when it is itself a schema.

Example:
    >>> from schema_builder.schema.walker import walk_schema
    >>> seen = []
    >>> walk_schema({"properties": {"a": {"type": "string"}}}, lambda s: seen.append(s))
    >>> len(seen)
    2
"""

from typing import Any, Callable, Dict, List, Union

SchemaNode = Dict[str, Any]
Action = Callable[[SchemaNode], None]


def walk_schema(
    schema: Union[SchemaNode, List[SchemaNode]],
    action: Action,
) -> Union[SchemaNode, List[SchemaNode]]:
    """
    Apply ``action`` to every schema node reachable from ``schema``.

    The action is applied to a node before its children, so it may mutate
    the node (e.g. drop ``required``) as long as it keeps the structural
    keywords in place. Non-dict values (booleans, None) are skipped.

    Args:
        schema: A schema node or a list of schema nodes
        action: Callable invoked once per visited node

    Returns:
        The schema passed in.
    """
    if isinstance(schema, list):
        for item in schema:
            walk_schema(item, action)
        return schema

    if not isinstance(schema, dict):
        return schema

    action(schema)

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for child in list(properties.values()):
            walk_schema(child, action)

    for keyword in ("oneOf", "allOf", "anyOf"):
        branches = schema.get(keyword)
        if isinstance(branches, list):
            walk_schema(branches, action)

    # items may be a single schema or a list (tuple validation)
    if "items" in schema:
        walk_schema(schema["items"], action)

    if "not" in schema:
        walk_schema(schema["not"], action)

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        walk_schema(additional, action)

    return schema


def iter_schema_nodes(schema: SchemaNode, pointer: str = ""):
    """
    Yield ``(json_pointer, node)`` pairs in walk order.

    Same traversal as :func:`walk_schema`, but tracking where each node
    lives so that errors can point at it.
    """
    if not isinstance(schema, dict):
        return

    yield pointer, schema

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for name, child in properties.items():
            yield from iter_schema_nodes(child, f"{pointer}/properties/{_escape(name)}")

    for keyword in ("oneOf", "allOf", "anyOf"):
        branches = schema.get(keyword)
        if isinstance(branches, list):
            for idx, branch in enumerate(branches):
                yield from iter_schema_nodes(branch, f"{pointer}/{keyword}/{idx}")

    items = schema.get("items")
    if isinstance(items, list):
        for idx, item in enumerate(items):
            yield from iter_schema_nodes(item, f"{pointer}/items/{idx}")
    elif isinstance(items, dict):
        yield from iter_schema_nodes(items, f"{pointer}/items")

    if "not" in schema:
        yield from iter_schema_nodes(schema["not"], f"{pointer}/not")

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        yield from iter_schema_nodes(additional, f"{pointer}/additionalProperties")


def _escape(token: str) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")
