"""Connect to Weaviate, manage collections, ingest records and run search/RAG queries."""

__version__ = "0.1.0"
