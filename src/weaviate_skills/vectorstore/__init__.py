"""Weaviate vectorstore client and utilities."""

from .client import WeaviateClient, close_weaviate_client, get_weaviate_client
from .filters import build_filter, parse_filter_json
from .models import BatchResult, Chunk, ChunkMetadata, Record
from .schema import CollectionSpec, PropertySpec

__all__ = [
    "WeaviateClient",
    "get_weaviate_client",
    "close_weaviate_client",
    "build_filter",
    "parse_filter_json",
    "BatchResult",
    "Chunk",
    "ChunkMetadata",
    "Record",
    "CollectionSpec",
    "PropertySpec",
]
