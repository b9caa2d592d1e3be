"""
Tests for the schema tree walker.

Traversal order: node, properties, oneOf, allOf, anyOf, items, not,
additionalProperties (when it is a schema).
"""

import pytest

from schema_builder.schema.walker import walk_schema, iter_schema_nodes


def _tag(name, **extra):
    schema = {"description": name}
    schema.update(extra)
    return schema


class TestWalkSchema:
    """Test walk_schema visiting order and coverage."""

    def test_visits_every_structural_child_in_order(self):
        """Every kind of child is visited, in the documented order."""
        schema = _tag(
            "root",
            properties={"p1": _tag("p1"), "p2": _tag("p2")},
            oneOf=[_tag("one")],
            allOf=[_tag("all")],
            anyOf=[_tag("any")],
            items=_tag("items"),
            additionalProperties=_tag("additional"),
        )
        schema["not"] = _tag("not")
        seen = []
        walk_schema(schema, lambda s: seen.append(s["description"]))
        assert seen == ["root", "p1", "p2", "one", "all", "any", "items", "not", "additional"]

    def test_nested_children_are_visited_depth_first(self):
        schema = _tag("root", properties={
            "a": _tag("a", properties={"b": _tag("b")}),
            "c": _tag("c"),
        })
        seen = []
        walk_schema(schema, lambda s: seen.append(s["description"]))
        assert seen == ["root", "a", "b", "c"]

    def test_boolean_additional_properties_is_not_visited(self):
        schema = _tag("root", additionalProperties=True)
        seen = []
        walk_schema(schema, lambda s: seen.append(s["description"]))
        assert seen == ["root"]

    def test_tuple_items_are_visited(self):
        schema = _tag("root", items=[_tag("first"), _tag("second")])
        seen = []
        walk_schema(schema, lambda s: seen.append(s["description"]))
        assert seen == ["root", "first", "second"]

    def test_list_input(self):
        seen = []
        walk_schema([_tag("a"), _tag("b")], lambda s: seen.append(s["description"]))
        assert seen == ["a", "b"]

    def test_non_dict_is_ignored(self):
        seen = []
        walk_schema(True, seen.append)
        assert seen == []

    def test_action_can_mutate_nodes(self):
        """Dropping required on the way down still reaches the children."""
        schema = {
            "required": ["a"],
            "properties": {"a": {"required": ["b"], "properties": {"b": {}}}},
        }
        walk_schema(schema, lambda s: s.pop("required", None))
        assert "required" not in schema
        assert "required" not in schema["properties"]["a"]

    def test_returns_schema(self):
        schema = {"type": "string"}
        assert walk_schema(schema, lambda s: None) is schema


class TestIterSchemaNodes:
    """Test JSON pointers produced by iter_schema_nodes."""

    def test_pointers(self):
        schema = {
            "properties": {"a/b": {"items": {"type": "string"}}},
            "anyOf": [{}, {"not": {}}],
            "additionalProperties": {"type": "integer"},
        }
        pointers = [pointer for pointer, _ in iter_schema_nodes(schema)]
        assert pointers == [
            "",
            "/properties/a~1b",
            "/properties/a~1b/items",
            "/anyOf/0",
            "/anyOf/1",
            "/anyOf/1/not",
            "/additionalProperties",
        ]

    def test_same_nodes_as_walk_schema(self):
        schema = {
            "properties": {"x": {"oneOf": [{"type": "string"}, {"type": "array", "items": {}}]}},
            "allOf": [{"properties": {"y": {}}}],
        }
        walked = []
        walk_schema(schema, walked.append)
        iterated = [node for _, node in iter_schema_nodes(schema)]
        assert [id(n) for n in walked] == [id(n) for n in iterated]
