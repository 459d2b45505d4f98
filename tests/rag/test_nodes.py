"""Tests for the retrieval and model graph nodes."""

from unittest.mock import Mock, patch

from weaviate_skills.config import Settings
from weaviate_skills.rag.nodes import model_node, retrieval_node
from weaviate_skills.rag.retrievers.base import Document


class TestRetrievalNode:

    @patch("weaviate_skills.rag.nodes.make_retriever")
    @patch("weaviate_skills.rag.nodes.get_weaviate_client")
    def test_retrieval_node(self, mock_get_client, mock_make_retriever):
        """Test that the node builds a retriever from the state and retrieves."""
        documents = [Document(page_content="chunk")]
        mock_make_retriever.return_value.retrieve.return_value = documents
        state = {
            "query": "What is RAG?",
            "collection": "Chunks",
            "retrieval_strategy": "hybrid",
            "topk": 4,
            "filters": {"property": "year", "operator": "equal", "value": 2024},
        }

        result = retrieval_node(state)

        mock_make_retriever.assert_called_once_with(
            client=mock_get_client.return_value,
            collection_name="Chunks",
            strategy="hybrid",
            filters=state["filters"],
        )
        mock_make_retriever.return_value.retrieve.assert_called_once_with(
            query="What is RAG?", limit=4
        )
        assert result == {"documents": documents}


class TestModelNode:

    @patch("weaviate_skills.rag.nodes.AnswerGenerator")
    @patch("weaviate_skills.rag.nodes.load_settings")
    def test_model_node(self, mock_load_settings, mock_generator_cls):
        """Test that the node generates an answer with configured settings."""
        mock_load_settings.return_value = Settings(
            openai_api_key="sk-test", generation_model="test-model", max_tokens=128
        )
        mock_generator_cls.return_value.generate.return_value = "An answer"
        documents = [Document(page_content="chunk")]
        state = {
            "query": "What is RAG?",
            "collection": "Chunks",
            "retrieval_strategy": "semantic",
            "topk": 5,
            "documents": documents,
            "images": ["diagram.png"],
        }

        result = model_node(state)

        mock_generator_cls.assert_called_once_with(
            model="test-model", api_key="sk-test", max_tokens=128
        )
        mock_generator_cls.return_value.generate.assert_called_once_with(
            question="What is RAG?", documents=documents, images=["diagram.png"]
        )
        assert result == {"answer": "An answer"}

    @patch("weaviate_skills.rag.nodes.AnswerGenerator")
    @patch("weaviate_skills.rag.nodes.load_settings", Mock(return_value=Settings()))
    def test_model_node_without_documents(self, mock_generator_cls):
        model_node({"query": "q", "collection": "C", "retrieval_strategy": "semantic", "topk": 1})

        mock_generator_cls.return_value.generate.assert_called_once_with(
            question="q", documents=[], images=()
        )
