"""Keyword retriever using Weaviate's BM25 search."""

import logging
from typing import Any, List, Optional

from ...vectorstore.client import WeaviateClient
from .base import TEXT_PROPERTY, Document, results_to_documents

logger = logging.getLogger(__name__)


class KeywordRetriever:
    """Retriever that ranks documents by BM25 keyword relevance."""

    def __init__(
        self,
        client: WeaviateClient,
        collection_name: str,
        filters: Any = None,
        text_property: str = TEXT_PROPERTY,
        query_properties: Optional[List[str]] = None,
    ):
        self.client = client
        self.collection_name = collection_name
        self.filters = filters
        self.text_property = text_property
        self.query_properties = query_properties

    def retrieve(self, query: str, limit: int) -> List[Document]:
        results = self.client.keyword_search(
            collection_name=self.collection_name,
            query=query,
            limit=limit,
            query_properties=self.query_properties,
            filters=self.filters,
        )

        documents = results_to_documents(results, self.text_property)

        logger.info(
            f"Retrieved {len(documents)} documents from {self.collection_name} "
            f"using BM25 for query: {query[:50]}..."
        )

        return documents
