"""Unit tests for RerankRetriever."""

from unittest.mock import Mock, MagicMock
import pytest

from weaviate_skills.rag.retrievers.rerank import RerankRetriever, RERANK_MODEL


class TestRerankRetriever:
    """Unit tests for RerankRetriever using dependency injection."""

    @pytest.fixture
    def mock_cohere_client(self):
        return Mock()

    @pytest.fixture
    def retriever(self, mock_weaviate_client, mock_cohere_client):
        """Create RerankRetriever with mocked clients."""
        retriever = RerankRetriever(
            client=mock_weaviate_client,
            collection_name="Chunks",
            cohere_api_key="test-api-key",
        )
        # Replace the real Cohere client with our mock
        retriever.cohere_client = mock_cohere_client
        return retriever

    @pytest.fixture
    def mock_rerank_response(self):
        """Cohere response reordering the third and first candidates."""
        first = MagicMock(index=2, relevance_score=0.95)
        second = MagicMock(index=0, relevance_score=0.80)
        response = MagicMock()
        response.results = [first, second]
        return response

    def test_retrieve_reranks_candidates(
        self, retriever, mock_weaviate_client, mock_cohere_client, sample_results, mock_rerank_response
    ):
        """Test that 2x candidates are fetched and reordered by Cohere."""
        mock_weaviate_client.semantic_search.return_value = sample_results
        mock_cohere_client.rerank.return_value = mock_rerank_response

        documents = retriever.retrieve("query", limit=2)

        mock_weaviate_client.semantic_search.assert_called_once_with(
            collection_name="Chunks", query="query", limit=4, filters=None
        )
        mock_cohere_client.rerank.assert_called_once_with(
            model=RERANK_MODEL,
            query="query",
            documents=["First chunk", "Second chunk", "Third chunk"],
            top_n=2,
        )
        assert [d.page_content for d in documents] == ["Third chunk", "First chunk"]
        assert documents[0].metadata["rerank_score"] == 0.95
        assert documents[0].metadata["uuid"] == "uuid-3"

    def test_retrieve_no_candidates(self, retriever, mock_weaviate_client, mock_cohere_client):
        """Test that Cohere is not called when nothing was found."""
        mock_weaviate_client.semantic_search.return_value = []

        assert retriever.retrieve("query", limit=2) == []
        mock_cohere_client.rerank.assert_not_called()

    def test_rerank_score_does_not_leak_into_results(
        self, retriever, mock_weaviate_client, mock_cohere_client, sample_results, mock_rerank_response
    ):
        """Test that the search results are not mutated."""
        mock_weaviate_client.semantic_search.return_value = sample_results
        mock_cohere_client.rerank.return_value = mock_rerank_response

        retriever.retrieve("query", limit=2)

        assert "rerank_score" not in sample_results[2]["metadata"]
