"""Unit tests for WeaviateClient collection management."""

from unittest.mock import patch
import pytest

from weaviate_skills.exceptions import CollectionNotFoundError
from weaviate_skills.vectorstore.schema import CollectionSpec, PropertySpec


class TestCreateCollection:
    """Tests for create_collection."""

    def test_create_collection_with_bare_name_uses_chunk_schema(self, weaviate_client):
        """Test that a bare name creates the standard text chunk schema."""
        weaviate_client.client.collections.exists.return_value = False

        weaviate_client.create_collection("Chunks")

        kwargs = weaviate_client.client.collections.create.call_args.kwargs
        assert kwargs["name"] == "Chunks"
        assert [p.name for p in kwargs["properties"]] == [
            "text",
            "document_id",
            "chunk_index",
            "chunk_size",
        ]
        assert "generative_config" not in kwargs
        assert "reranker_config" not in kwargs

    def test_create_collection_is_idempotent(self, weaviate_client):
        """Test that an existing collection is left untouched."""
        weaviate_client.client.collections.exists.return_value = True

        weaviate_client.create_collection("Chunks")

        weaviate_client.client.collections.create.assert_not_called()

    def test_create_collection_passes_generative_and_reranker_config(
        self, weaviate_client
    ):
        """Test that generative and reranker modules are configured when requested."""
        weaviate_client.client.collections.exists.return_value = False
        spec = CollectionSpec(
            name="Articles",
            properties=[PropertySpec("title", "text")],
            generative="openai",
            reranker="cohere",
            description="News articles",
        )

        with patch(
            "weaviate_skills.vectorstore.client.build_generative_config"
        ) as mock_generative, patch(
            "weaviate_skills.vectorstore.client.build_reranker_config"
        ) as mock_reranker:
            weaviate_client.create_collection(spec)

        kwargs = weaviate_client.client.collections.create.call_args.kwargs
        assert kwargs["generative_config"] == mock_generative.return_value
        assert kwargs["reranker_config"] == mock_reranker.return_value
        assert kwargs["description"] == "News articles"


class TestCollectionQueries:
    """Tests for listing, inspecting, mutating and deleting collections."""

    def test_list_collections_returns_sorted_names(self, weaviate_client):
        """Test that collection names are returned sorted."""
        weaviate_client.client.collections.list_all.return_value = {
            "Zebra": object(),
            "Articles": object(),
        }

        assert weaviate_client.list_collections() == ["Articles", "Zebra"]
        weaviate_client.client.collections.list_all.assert_called_once_with(simple=True)

    def test_get_collection_config_returns_dict(self, weaviate_client, collection):
        """Test that the collection config is returned as a dict."""
        collection.config.get.return_value.to_dict.return_value = {"class": "Articles"}

        assert weaviate_client.get_collection_config("Articles") == {"class": "Articles"}

    def test_get_collection_config_missing_collection(self, weaviate_client):
        """Test that a missing collection raises CollectionNotFoundError."""
        weaviate_client.client.collections.exists.return_value = False

        with pytest.raises(CollectionNotFoundError, match="Collection Missing does not exist"):
            weaviate_client.get_collection_config("Missing")

    def test_add_property(self, weaviate_client, collection):
        """Test that add_property mutates the collection schema."""
        weaviate_client.add_property("Articles", PropertySpec("year", "int"))

        collection.config.add_property.assert_called_once()
        added = collection.config.add_property.call_args.args[0]
        assert added.name == "year"

    def test_delete_collection_only_when_present(self, weaviate_client):
        """Test that deleting a missing collection is a no-op."""
        weaviate_client.client.collections.exists.return_value = False

        weaviate_client.delete_collection("Missing")

        weaviate_client.client.collections.delete.assert_not_called()

    def test_delete_collection(self, weaviate_client):
        """Test deleting an existing collection."""
        weaviate_client.client.collections.exists.return_value = True

        weaviate_client.delete_collection("Articles")

        weaviate_client.client.collections.delete.assert_called_once_with("Articles")

    def test_delete_all_collections(self, weaviate_client):
        """Test deleting every collection."""
        weaviate_client.delete_all_collections()

        weaviate_client.client.collections.delete_all.assert_called_once()

    def test_get_collection_count(self, weaviate_client, collection):
        """Test counting objects through aggregation."""
        collection.aggregate.over_all.return_value.total_count = 42

        assert weaviate_client.get_collection_count("Articles") == 42
        collection.aggregate.over_all.assert_called_once_with(total_count=True, filters=None)

    def test_get_collection_count_missing_collection(self, weaviate_client):
        """Test that counting a missing collection returns 0."""
        weaviate_client.client.collections.exists.return_value = False

        assert weaviate_client.get_collection_count("Missing") == 0
