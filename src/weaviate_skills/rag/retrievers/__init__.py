"""Retrieval strategies for document search."""

from .base import Document, Retriever
from .factory import make_retriever
from .semantic import SemanticRetriever
from .keyword import KeywordRetriever
from .hybrid import HybridRetriever
from .rerank import RerankRetriever
from .multiquery import MultiQueryRetriever

__all__ = [
    "Document",
    "Retriever",
    "make_retriever",
    "SemanticRetriever",
    "KeywordRetriever",
    "HybridRetriever",
    "RerankRetriever",
    "MultiQueryRetriever",
]
