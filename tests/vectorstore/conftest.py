"""Fixtures for WeaviateClient unit tests."""

from unittest.mock import MagicMock, patch
import pytest

from weaviate_skills.vectorstore.client import WeaviateClient


@pytest.fixture
def weaviate_client():
    """Create a WeaviateClient with mocked internal client."""
    with patch("weaviate_skills.vectorstore.client.weaviate.connect_to_local"):
        client = WeaviateClient()
        client.client = MagicMock()
        return client


@pytest.fixture
def collection(weaviate_client):
    """Mock collection returned for any existing collection name."""
    collection = MagicMock()
    weaviate_client.client.collections.exists.return_value = True
    weaviate_client.client.collections.get.return_value = collection
    return collection
