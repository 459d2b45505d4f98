"""Exceptions raised by weaviate_skills.

Errors coming from the Weaviate and OpenAI SDKs are not wrapped; they
propagate to the caller unchanged.
"""


class WeaviateSkillsError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(WeaviateSkillsError, ValueError):
    """Missing or invalid configuration."""


class CollectionNotFoundError(WeaviateSkillsError, ValueError):
    """Operation targeted a collection that does not exist."""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        super().__init__(f"Collection {collection_name} does not exist")


class SchemaError(WeaviateSkillsError, ValueError):
    """Invalid collection or property definition."""


class FilterError(WeaviateSkillsError, ValueError):
    """Malformed filter expression."""
