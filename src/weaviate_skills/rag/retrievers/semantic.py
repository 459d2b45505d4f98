"""Semantic retriever using vector similarity search."""

import logging
from typing import Any, List

from ...vectorstore.client import WeaviateClient
from .base import TEXT_PROPERTY, Document, results_to_documents

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """
    Retriever that uses semantic vector similarity search.

    This retriever delegates to WeaviateClient's semantic_search method
    to find documents based on vector similarity.
    """

    def __init__(
        self,
        client: WeaviateClient,
        collection_name: str,
        filters: Any = None,
        text_property: str = TEXT_PROPERTY,
    ):
        """
        Initialize semantic retriever with injected dependencies.

        Args:
            client: WeaviateClient instance for performing searches
            collection_name: Name of the collection to search in
            filters: Optional filter expression applied to every query
            text_property: Property holding the document text
        """
        self.client = client
        self.collection_name = collection_name
        self.filters = filters
        self.text_property = text_property

    def retrieve(self, query: str, limit: int) -> List[Document]:
        """
        Retrieve documents using semantic vector similarity search.

        Args:
            query: The search query text
            limit: Maximum number of documents to return

        Returns:
            List of Document objects ranked by semantic similarity
        """
        results = self.client.semantic_search(
            collection_name=self.collection_name,
            query=query,
            limit=limit,
            filters=self.filters,
        )

        documents = results_to_documents(results, self.text_property)

        logger.info(
            f"Retrieved {len(documents)} documents from {self.collection_name} "
            f"for query: {query[:50]}..."
        )

        return documents
