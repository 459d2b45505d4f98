"""Hybrid retriever using Weaviate's combined vector and BM25 search."""

import logging
from typing import Any, List

from ...vectorstore.client import WeaviateClient
from .base import TEXT_PROPERTY, Document, results_to_documents

logger = logging.getLogger(__name__)


class HybridRetriever:
    """
    Retriever that uses Weaviate's hybrid search.

    Hybrid search combines vector similarity search with BM25 keyword search.
    alpha weights the two: 0 is pure keyword, 1 is pure vector, and the
    default 0.5 balances them.
    """

    def __init__(
        self,
        client: WeaviateClient,
        collection_name: str,
        alpha: float = 0.5,
        filters: Any = None,
        text_property: str = TEXT_PROPERTY,
    ):
        """
        Initialize hybrid retriever with injected dependencies.

        Args:
            client: WeaviateClient instance for performing searches
            collection_name: Name of the collection to search in
            alpha: Vector search weight between 0 and 1
            filters: Optional filter expression applied to every query
            text_property: Property holding the document text
        """
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be between 0 and 1, got {alpha}")

        self.client = client
        self.collection_name = collection_name
        self.alpha = alpha
        self.filters = filters
        self.text_property = text_property

    def retrieve(self, query: str, limit: int) -> List[Document]:
        """
        Retrieve documents using hybrid search (vector + BM25).

        Args:
            query: The search query text
            limit: Maximum number of documents to return

        Returns:
            List of Document objects ranked by hybrid search score

        Raises:
            CollectionNotFoundError: If collection does not exist
        """
        results = self.client.hybrid_search(
            collection_name=self.collection_name,
            query=query,
            limit=limit,
            alpha=self.alpha,
            filters=self.filters,
        )

        documents = results_to_documents(results, self.text_property)

        logger.info(
            f"Retrieved {len(documents)} documents from {self.collection_name} "
            f"using hybrid search for query: {query[:50]}..."
        )

        return documents
