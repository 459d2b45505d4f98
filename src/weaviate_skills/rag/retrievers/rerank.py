"""Rerank retriever using Cohere reranking API."""

import logging
from typing import Any, Dict, List

import cohere

from ...vectorstore.client import WeaviateClient
from .base import TEXT_PROPERTY, Document, result_to_document

logger = logging.getLogger(__name__)

RERANK_MODEL = "rerank-english-v3.0"


class RerankRetriever:
    """
    Retriever that uses semantic search followed by Cohere reranking.

    This retriever first retrieves 2x the requested limit using semantic search,
    then uses Cohere's rerank API to reorder and select the top results.
    """

    def __init__(
        self,
        client: WeaviateClient,
        collection_name: str,
        cohere_api_key: str,
        filters: Any = None,
        text_property: str = TEXT_PROPERTY,
        model: str = RERANK_MODEL,
    ):
        """
        Initialize rerank retriever with injected dependencies.

        Args:
            client: WeaviateClient instance for performing searches
            collection_name: Name of the collection to search in
            cohere_api_key: API key for Cohere reranking service
            filters: Optional filter expression applied to the candidate search
            text_property: Property holding the document text
            model: Cohere rerank model
        """
        self.client = client
        self.collection_name = collection_name
        self.filters = filters
        self.text_property = text_property
        self.model = model
        self.cohere_client = cohere.Client(api_key=cohere_api_key)

    def retrieve(self, query: str, limit: int) -> List[Document]:
        """
        Retrieve documents using semantic search followed by Cohere reranking.

        This method coordinates the retrieval pipeline:
        1. Get initial candidates via semantic search (2x limit)
        2. Rerank candidates using Cohere
        3. Convert reranked results to Document objects

        Args:
            query: The search query text
            limit: Maximum number of documents to return

        Returns:
            List of Document objects ranked by Cohere reranking scores
        """
        semantic_results = self._get_semantic_candidates(query, limit)

        if not semantic_results:
            logger.warning("No documents found for semantic search, returning empty list")
            return []

        rerank_response = self._rerank_with_cohere(query, semantic_results, limit)

        documents = self._build_documents(rerank_response, semantic_results)

        logger.info(
            f"Returning {len(documents)} reranked documents for query: {query[:50]}..."
        )

        return documents

    def _get_semantic_candidates(self, query: str, limit: int) -> List[Dict[str, Any]]:
        """Retrieve 2x limit candidate documents using semantic search."""
        initial_limit = 2 * limit
        semantic_results = self.client.semantic_search(
            collection_name=self.collection_name,
            query=query,
            limit=initial_limit,
            filters=self.filters,
        )

        logger.info(
            f"Retrieved {len(semantic_results)} candidates from {self.collection_name} "
            f"for reranking (requested {initial_limit})"
        )

        return semantic_results

    def _rerank_with_cohere(
        self, query: str, semantic_results: List[Dict[str, Any]], limit: int
    ) -> cohere.RerankResponse:
        """
        Rerank semantic search results using Cohere API.

        Args:
            query: The search query text
            semantic_results: Results from semantic search
            limit: Number of top results to return from reranking

        Returns:
            Cohere rerank response object
        """
        doc_texts = [
            result["properties"].get(self.text_property, "") for result in semantic_results
        ]

        logger.info(f"Reranking {len(doc_texts)} documents using Cohere {self.model}")

        rerank_response = self.cohere_client.rerank(
            model=self.model,
            query=query,
            documents=doc_texts,
            top_n=limit,
        )

        logger.info(f"Reranking complete, received {len(rerank_response.results)} results")

        return rerank_response

    def _build_documents(
        self, rerank_response: cohere.RerankResponse, semantic_results: List[Dict[str, Any]]
    ) -> List[Document]:
        """Convert reranked results to Documents carrying their rerank score."""
        documents = []

        for result in rerank_response.results:
            # Cohere reports positions into the submitted document list
            doc = result_to_document(semantic_results[result.index], self.text_property)
            doc.metadata["rerank_score"] = result.relevance_score
            documents.append(doc)

        return documents
