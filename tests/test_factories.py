"""
Tests for SchemaBuilder construction: factories, combinators and the
no-$ref rule for wrapped documents.
"""

import pytest

from schema_builder import SchemaBuilder, SchemaBuilderError, SchemaReferenceError


class TestPrimitiveFactories:
    """Test the primitive schema factories."""

    def test_object_schema_disables_additional_properties(self):
        builder = SchemaBuilder.object_schema()
        assert builder.schema == {"type": "object", "additionalProperties": False}

    def test_object_schema_metadata(self):
        builder = SchemaBuilder.object_schema({"title": "User", "description": "A user"})
        assert builder.schema["title"] == "User"
        assert builder.schema["description"] == "A user"

    def test_empty_schema_alias(self):
        assert SchemaBuilder.empty_schema().schema == SchemaBuilder.object_schema().schema

    def test_object_metadata_cannot_enable_additional_properties(self):
        """additionalProperties is not a metadata keyword: use add_additional_properties."""
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder.object_schema({"additionalProperties": True})

    @pytest.mark.parametrize("factory,expected_type", [
        (SchemaBuilder.string_schema, "string"),
        (SchemaBuilder.number_schema, "number"),
        (SchemaBuilder.integer_schema, "integer"),
        (SchemaBuilder.boolean_schema, "boolean"),
    ])
    def test_scalar_types(self, factory, expected_type):
        assert factory().schema == {"type": expected_type}

    def test_string_metadata(self):
        builder = SchemaBuilder.string_schema({"minLength": 1, "format": "email"})
        assert builder.schema == {"minLength": 1, "format": "email", "type": "string"}

    def test_number_metadata(self):
        builder = SchemaBuilder.number_schema({"minimum": 0, "exclusiveMaximum": 10})
        assert builder.schema["minimum"] == 0
        assert builder.schema["exclusiveMaximum"] == 10

    def test_metadata_outside_keyword_set_is_rejected(self):
        with pytest.raises(SchemaBuilderError) as exc_info:
            SchemaBuilder.string_schema({"minimum": 1})
        assert "minimum" in str(exc_info.value)

    def test_metadata_cannot_override_type(self):
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder.integer_schema({"type": "string"})

    def test_metadata_must_be_dict(self):
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder.boolean_schema(["description"])

    def test_metadata_is_copied(self):
        metadata = {"description": "shared"}
        builder = SchemaBuilder.string_schema(metadata)
        assert "type" not in metadata
        builder.schema["description"] = "changed"
        assert metadata["description"] == "shared"

    def test_enum_schema(self):
        builder = SchemaBuilder.enum_schema(["red", "green"], {"description": "color"})
        assert builder.schema == {"description": "color", "type": "string", "enum": ["red", "green"]}

    def test_enum_schema_rejects_plain_string(self):
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder.enum_schema("red")

    def test_array_schema(self):
        builder = SchemaBuilder.array_schema(SchemaBuilder.integer_schema(), {"minItems": 1})
        assert builder.schema == {"minItems": 1, "type": "array", "items": {"type": "integer"}}

    def test_array_schema_requires_builder(self):
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder.array_schema({"type": "integer"})


class TestCombinators:
    """Test oneOf / allOf / anyOf / not constructors."""

    def test_one_of(self):
        builder = SchemaBuilder.one_of(SchemaBuilder.string_schema(), SchemaBuilder.integer_schema())
        assert builder.schema == {"oneOf": [{"type": "string"}, {"type": "integer"}]}

    def test_all_of(self):
        builder = SchemaBuilder.all_of(
            SchemaBuilder.object_schema().add_string("a"),
            SchemaBuilder.object_schema().add_string("b"),
        )
        assert len(builder.schema["allOf"]) == 2
        assert builder.has_combinators

    def test_any_of(self):
        builder = SchemaBuilder.any_of(SchemaBuilder.string_schema(), SchemaBuilder.boolean_schema())
        assert builder.schema == {"anyOf": [{"type": "string"}, {"type": "boolean"}]}

    def test_not(self):
        builder = SchemaBuilder.not_(SchemaBuilder.string_schema())
        assert builder.schema == {"not": {"type": "string"}}

    def test_combinator_is_not_an_object(self):
        builder = SchemaBuilder.one_of(SchemaBuilder.object_schema(), SchemaBuilder.object_schema())
        with pytest.raises(SchemaBuilderError):
            builder.add_string("a")


class TestWrappingDocuments:
    """Test SchemaBuilder(document) and the no-$ref rule."""

    def test_wrap_inline_document(self):
        document = {"type": "object", "properties": {"a": {"type": "string"}}}
        builder = SchemaBuilder(document)
        assert builder.schema is document

    def test_non_dict_document(self):
        with pytest.raises(SchemaBuilderError):
            SchemaBuilder("not a schema")

    def test_ref_at_root(self):
        with pytest.raises(SchemaReferenceError) as exc_info:
            SchemaBuilder({"$ref": "#/definitions/a"})
        assert exc_info.value.pointer == ""
        assert exc_info.value.ref == "#/definitions/a"
        assert "at '#'" in str(exc_info.value)

    def test_ref_location_is_reported_as_fragment(self):
        with pytest.raises(SchemaReferenceError) as exc_info:
            SchemaBuilder({"properties": {"a/b": {"$ref": "x.json"}}})
        assert exc_info.value.pointer == "/properties/a~1b"
        assert "at '#/properties/a~1b'" in str(exc_info.value)

    @pytest.mark.parametrize("document,pointer", [
        ({"properties": {"a": {"$ref": "x.json"}}}, "/properties/a"),
        ({"oneOf": [{}, {"$ref": "x.json"}]}, "/oneOf/1"),
        ({"allOf": [{"$ref": "x.json"}]}, "/allOf/0"),
        ({"anyOf": [{"$ref": "x.json"}]}, "/anyOf/0"),
        ({"type": "array", "items": {"$ref": "x.json"}}, "/items"),
        ({"not": {"$ref": "x.json"}}, "/not"),
        ({"type": "object", "additionalProperties": {"$ref": "x.json"}}, "/additionalProperties"),
        ({"properties": {"a": {"items": {"anyOf": [{"$ref": "x.json"}]}}}}, "/properties/a/items/anyOf/0"),
    ])
    def test_ref_anywhere_fails(self, document, pointer):
        """A reference marker fails construction wherever it appears."""
        with pytest.raises(SchemaReferenceError) as exc_info:
            SchemaBuilder(document)
        assert exc_info.value.pointer == pointer

    def test_reference_error_is_a_builder_error(self):
        with pytest.raises(SchemaBuilderError, match="dereferenced_schema"):
            SchemaBuilder({"items": {"$ref": "#"}})
