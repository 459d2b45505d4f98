"""Unit tests for HybridRetriever."""

import pytest

from weaviate_skills.rag.retrievers.hybrid import HybridRetriever


class TestHybridRetriever:
    """Unit tests for HybridRetriever."""

    def test_retrieve_passes_alpha(self, mock_weaviate_client, sample_results):
        """Test that hybrid search receives the configured alpha."""
        mock_weaviate_client.hybrid_search.return_value = sample_results
        retriever = HybridRetriever(
            client=mock_weaviate_client, collection_name="Chunks", alpha=0.25
        )

        documents = retriever.retrieve("query", limit=3)

        mock_weaviate_client.hybrid_search.assert_called_once_with(
            collection_name="Chunks", query="query", limit=3, alpha=0.25, filters=None
        )
        assert len(documents) == 3

    def test_default_alpha(self, mock_weaviate_client):
        retriever = HybridRetriever(client=mock_weaviate_client, collection_name="Chunks")
        assert retriever.alpha == 0.5

    @pytest.mark.parametrize("alpha", [-0.1, 1.5])
    def test_invalid_alpha(self, mock_weaviate_client, alpha):
        """Test that alpha outside [0, 1] is rejected."""
        with pytest.raises(ValueError, match="alpha must be between 0 and 1"):
            HybridRetriever(client=mock_weaviate_client, collection_name="Chunks", alpha=alpha)
