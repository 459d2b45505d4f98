"""Fixtures shared by retriever tests."""

from unittest.mock import Mock
import pytest

# cohere resolves ``cohere.Client`` lazily; load it eagerly so that its import
# does not run while tests patch ``os.getenv``.
import cohere.client  # noqa: F401


@pytest.fixture
def mock_weaviate_client():
    """Create mock WeaviateClient."""
    return Mock()


@pytest.fixture
def sample_results():
    """Sample result dicts as returned by WeaviateClient searches."""
    return [
        {
            "properties": {"text": "First chunk", "document_id": "doc-1", "chunk_index": 0},
            "metadata": {"uuid": "uuid-1", "distance": 0.15},
        },
        {
            "properties": {"text": "Second chunk", "document_id": "doc-1", "chunk_index": 1},
            "metadata": {"uuid": "uuid-2", "distance": 0.25},
        },
        {
            "properties": {"text": "Third chunk", "document_id": "doc-2", "chunk_index": 0},
            "metadata": {"uuid": "uuid-3", "distance": 0.30},
        },
    ]
