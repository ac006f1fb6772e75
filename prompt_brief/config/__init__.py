"""Configuration: settings, logging, schema registry and model prompts."""

from .logging import configure_logging
from .schema import DEFAULT_SCHEMA, FieldDefinition, SchemaRegistry
from .settings import Settings, get_settings

__all__ = [
    "DEFAULT_SCHEMA",
    "FieldDefinition",
    "SchemaRegistry",
    "Settings",
    "configure_logging",
    "get_settings",
]
