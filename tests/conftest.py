"""
Pytest configuration and shared fixtures for schema_builder tests.
"""

import pytest
import sys
from pathlib import Path

# Ensure src directory is in path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from schema_builder import SchemaBuilder
from schema_builder.config import ENV_MAPPING
from schema_builder.schema import schema_loader


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Validation options must not leak in from the developer's environment."""
    for env_var in ENV_MAPPING:
        monkeypatch.delenv(env_var, raising=False)
    yield
    schema_loader.clear_cache()


@pytest.fixture
def user_schema():
    """Simple object schema: id/name required, age optional."""
    return (
        SchemaBuilder.object_schema({"title": "User"})
        .add_string("id")
        .add_string("name")
        .add_optional_integer("age")
    )


@pytest.fixture
def open_schema():
    """Object schema accepting any additional property."""
    return (
        SchemaBuilder.object_schema()
        .add_string("id")
        .add_optional_string("label")
        .add_additional_properties()
    )


@pytest.fixture
def typed_open_schema():
    """Object schema whose additional properties must be integers."""
    return (
        SchemaBuilder.object_schema()
        .add_string("id")
        .add_additional_properties(SchemaBuilder.integer_schema())
    )
