"""Record loading, chunking and the ingestion pipeline."""
