"""Factory for creating retriever instances based on strategy."""

import logging
import os
from typing import Any, Literal

from ...config import DEFAULT_GENERATION_MODEL
from ...vectorstore.client import WeaviateClient
from .base import Retriever
from .semantic import SemanticRetriever
from .keyword import KeywordRetriever
from .hybrid import HybridRetriever
from .rerank import RerankRetriever
from .multiquery import MultiQueryRetriever

logger = logging.getLogger(__name__)

RetrieverStrategy = Literal["semantic", "keyword", "hybrid", "rerank", "multiquery"]

STRATEGIES = ("semantic", "keyword", "hybrid", "rerank", "multiquery")


def make_retriever(
    client: WeaviateClient,
    collection_name: str,
    strategy: RetrieverStrategy,
    filters: Any = None,
) -> Retriever:
    """
    Factory function to create retriever instances based on strategy.

    Uses a shared WeaviateClient instance to avoid creating multiple
    connections. API keys for the rerank and multiquery strategies are read
    from COHERE_API_KEY and OPENAI_API_KEY; the query expansion model from
    OPENAI_MODEL.

    Args:
        client: Shared WeaviateClient instance for database connection
        collection_name: Name of the Weaviate collection to search
        strategy: The retrieval strategy to use
        filters: Optional filter expression applied by the retriever

    Returns:
        A retriever instance implementing the Retriever protocol

    Raises:
        ValueError: If strategy is not supported or its API key is missing
    """

    if strategy == "semantic":
        logger.info(f"Creating SemanticRetriever for collection: {collection_name}")
        return SemanticRetriever(client=client, collection_name=collection_name, filters=filters)

    elif strategy == "keyword":
        logger.info(f"Creating KeywordRetriever for collection: {collection_name}")
        return KeywordRetriever(client=client, collection_name=collection_name, filters=filters)

    elif strategy == "hybrid":
        logger.info(f"Creating HybridRetriever for collection: {collection_name}")
        return HybridRetriever(client=client, collection_name=collection_name, filters=filters)

    elif strategy == "rerank":
        logger.info(f"Creating RerankRetriever for collection: {collection_name}")
        cohere_api_key = os.getenv("COHERE_API_KEY")
        if not cohere_api_key:
            raise ValueError(
                "COHERE_API_KEY environment variable is required for rerank strategy"
            )
        return RerankRetriever(
            client=client,
            collection_name=collection_name,
            cohere_api_key=cohere_api_key,
            filters=filters,
        )

    elif strategy == "multiquery":
        logger.info(f"Creating MultiQueryRetriever for collection: {collection_name}")
        openai_api_key = os.getenv("OPENAI_API_KEY")
        if not openai_api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is required for multiquery strategy"
            )
        return MultiQueryRetriever(
            client=client,
            collection_name=collection_name,
            openai_api_key=openai_api_key,
            model=os.getenv("OPENAI_MODEL") or DEFAULT_GENERATION_MODEL,
            filters=filters,
        )

    else:
        raise ValueError(
            f"Unknown retrieval strategy: {strategy}. "
            f"Supported strategies: {', '.join(STRATEGIES)}"
        )
