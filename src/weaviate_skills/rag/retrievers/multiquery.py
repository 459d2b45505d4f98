"""Multi-query retriever using LLM query expansion and reciprocal rank fusion."""

import logging
import re
from typing import Any, List, Dict
from collections import defaultdict

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage

from ...config import DEFAULT_GENERATION_MODEL
from ...vectorstore.client import WeaviateClient
from .base import TEXT_PROPERTY, Document, results_to_documents

logger = logging.getLogger(__name__)

QUERY_EXPANSION_PROMPT = """You are a helpful assistant for a retrieval system. Generate {num_variants} alternative search queries that would help find the same information as the original query. These variations will expand our search area to improve retrieval results.

Return only the queries, one per line, without numbering or explanations.

Original query: {query}"""


class MultiQueryRetriever:
    """
    Retriever that expands queries using LLM and fuses results with RRF.

    This retriever implements a multi-query approach:
    1. Generate alternative query phrasings using an LLM
    2. Retrieve documents for the original query and every variant
    3. Apply Reciprocal Rank Fusion (RRF) to combine results
    4. Return top-k documents by fused score
    """

    def __init__(
        self,
        client: WeaviateClient,
        collection_name: str,
        openai_api_key: str,
        model: str = DEFAULT_GENERATION_MODEL,
        num_variants: int = 3,
        filters: Any = None,
        text_property: str = TEXT_PROPERTY,
    ):
        """
        Initialize multi-query retriever with injected dependencies.

        Args:
            client: WeaviateClient instance for performing searches
            collection_name: Name of the collection to search in
            openai_api_key: API key for OpenAI LLM service
            model: Chat model generating the query variants
            num_variants: Number of alternative queries to generate
            filters: Optional filter expression applied to every search
            text_property: Property holding the document text
        """
        self.client = client
        self.collection_name = collection_name
        self.filters = filters
        self.text_property = text_property
        self.model = model
        self.llm = ChatOpenAI(model=model, api_key=openai_api_key)
        self.num_variants = num_variants
        self.rrf_k = 60  # Standard RRF constant

    def retrieve(self, query: str, limit: int) -> List[Document]:
        """
        Retrieve documents using multi-query expansion and RRF fusion.

        Args:
            query: The search query text
            limit: Maximum number of documents to return

        Returns:
            List of Document objects ranked by RRF fusion score
        """
        variant_queries = self._generate_query_variants(query)
        all_queries = [query] + variant_queries

        logger.info(
            f"Expanded query into {len(all_queries)} variants for multi-query retrieval"
        )

        query_results = self._retrieve_for_queries(all_queries, limit)

        fused_results = self._fuse_results_rrf(query_results, limit)

        documents = results_to_documents(fused_results, self.text_property)

        logger.info(
            f"Returning {len(documents)} fused documents for query: {query[:50]}..."
        )

        return documents

    def _generate_query_variants(self, query: str) -> List[str]:
        """
        Generate alternative query phrasings using LLM.

        Args:
            query: Original search query

        Returns:
            List of at most self.num_variants alternative query strings
        """
        prompt = QUERY_EXPANSION_PROMPT.format(num_variants=self.num_variants, query=query)

        logger.info(f"Generating {self.num_variants} query variants using {self.model}")

        response = self.llm.invoke([HumanMessage(content=prompt)])
        variants_text = response.content.strip()

        variants = []
        for line in variants_text.split("\n"):
            line = line.strip()
            if not line:
                continue

            # Strip common numbering patterns: "1. ", "- "
            line = re.sub(r"^\d+\.\s*", "", line)
            line = re.sub(r"^-\s*", "", line)

            if line:
                variants.append(line)

        variants = variants[: self.num_variants]

        if len(variants) < self.num_variants:
            logger.warning(
                f"Generated only {len(variants)} variants instead of {self.num_variants}"
            )

        logger.info(f"Generated variants: {variants}")

        return variants

    def _retrieve_for_queries(
        self, queries: List[str], limit: int
    ) -> List[List[Dict[str, Any]]]:
        """
        Retrieve documents for each query variant, in query order.

        Retrieves 2x the requested limit for each query to provide more
        candidates for the fusion algorithm.
        """
        retrieval_limit = 2 * limit
        query_results = []

        for query_text in queries:
            results = self.client.semantic_search(
                collection_name=self.collection_name,
                query=query_text,
                limit=retrieval_limit,
                filters=self.filters,
            )
            query_results.append(results)

            logger.info(
                f"Retrieved {len(results)} results for variant query: {query_text[:50]}..."
            )

        return query_results

    def _fuse_results_rrf(
        self, query_results: List[List[Dict[str, Any]]], limit: int
    ) -> List[Dict[str, Any]]:
        """
        Fuse results from multiple queries using Reciprocal Rank Fusion.

        RRF formula: score = sum(1 / (k + rank)) over the queries where the
        document appears, with 0-indexed rank and k = 60.

        Args:
            query_results: One result list per query
            limit: Number of top results to return

        Returns:
            List of results (dicts) sorted by RRF score, limited to top-k
        """
        rrf_scores = defaultdict(float)
        uuid_to_result = {}

        for results in query_results:
            for rank, result in enumerate(results):
                uuid = result["metadata"]["uuid"]
                rrf_scores[uuid] += 1.0 / (self.rrf_k + rank)

                # Keep the first occurrence
                if uuid not in uuid_to_result:
                    uuid_to_result[uuid] = result

        logger.info(f"Calculated RRF scores for {len(rrf_scores)} unique documents")

        sorted_uuids = sorted(rrf_scores.items(), key=lambda x: x[1], reverse=True)[
            :limit
        ]

        fused_results = []
        for uuid, score in sorted_uuids:
            original = uuid_to_result[uuid]
            metadata = original["metadata"].copy()
            metadata["rrf_score"] = score
            fused_results.append({"properties": original["properties"], "metadata": metadata})

        logger.info(f"RRF fusion complete, returning top {len(fused_results)} results")

        return fused_results
