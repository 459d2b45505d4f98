"""Ingestion pipeline loading records, optionally chunking them, and storing them in Weaviate."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..vectorstore.client import WeaviateClient
from ..vectorstore.models import BatchResult, Record
from ..vectorstore.schema import CollectionSpec
from .chunking import ChunkingStrategy
from .loader import load_records

logger = logging.getLogger(__name__)


class DataIngestionPipeline:
    """Pipeline for loading data files and storing their records in the vectorstore."""

    def __init__(self, vectorstore_client: WeaviateClient):
        """Initialize with vectorstore client."""
        self.vectorstore_client = vectorstore_client

    def ingest_records(
        self,
        collection_name: str,
        records: List[Record],
        spec: Optional[CollectionSpec] = None,
        batch_size: Optional[int] = None,
        requests_per_minute: Optional[int] = None,
    ) -> BatchResult:
        """Create the collection if needed and batch insert records.

        Args:
            collection_name: Target collection
            records: Records to insert
            spec: Schema used when the collection has to be created; the
                standard text chunk schema when None
            batch_size: Fixed batch size passed to the batcher
            requests_per_minute: Rate limit passed to the batcher

        Returns:
            BatchResult with inserted count and failed objects
        """
        if spec is not None and spec.name != collection_name:
            raise ValueError(
                f"Schema name {spec.name} does not match collection {collection_name}"
            )

        self.vectorstore_client.create_collection(spec or collection_name)

        result = self.vectorstore_client.batch_insert(
            collection_name,
            records,
            batch_size=batch_size,
            requests_per_minute=requests_per_minute,
        )

        logger.info(
            f"Collection '{collection_name}': {result.inserted} inserted, "
            f"{len(result.failed)} failed"
        )
        return result

    def ingest_file(
        self,
        collection_name: str,
        path: Union[str, Path],
        text_field: Optional[str] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        vector_field: Optional[str] = None,
        id_field: Optional[str] = None,
        spec: Optional[CollectionSpec] = None,
        batch_size: Optional[int] = None,
        requests_per_minute: Optional[int] = None,
    ) -> BatchResult:
        """Load a data file and ingest it.

        With a chunking strategy, the ``text_field`` of every record is split
        into chunks and the chunks are stored instead of the records.

        Returns:
            BatchResult with inserted count and failed objects
        """
        records = load_records(path, vector_field=vector_field, id_field=id_field)

        if chunking_strategy is not None:
            if not text_field:
                raise ValueError("text_field is required when chunking")
            records = self._chunk_records(records, text_field, chunking_strategy)

        return self.ingest_records(
            collection_name,
            records,
            spec=spec,
            batch_size=batch_size,
            requests_per_minute=requests_per_minute,
        )

    def _chunk_records(
        self,
        records: List[Record],
        text_field: str,
        chunking_strategy: ChunkingStrategy,
    ) -> List[Record]:
        """Split each record's text into chunk records."""
        chunk_records = []

        for index, record in enumerate(records):
            text = record.properties.get(text_field)
            document_id = record.uuid or str(index)

            if not text:
                logger.warning(f"Record {document_id} has no '{text_field}', skipping")
                continue

            # Other fields are copied onto every chunk
            extra = {k: v for k, v in record.properties.items() if k != text_field}

            chunks = chunking_strategy.chunk_document(str(text), document_id)
            for chunk in chunks:
                chunk_record = chunk.to_record()
                chunk_record.properties = {**extra, **chunk_record.properties}
                chunk_records.append(chunk_record)

            logger.debug(f"Document {document_id}: {len(chunks)} chunks")

        logger.info(f"Split {len(records)} records into {len(chunk_records)} chunks")
        return chunk_records

    def get_collection_statistics(self, collection_names: List[str]) -> Dict[str, int]:
        """Get current statistics for collections."""
        stats = {}
        for collection_name in collection_names:
            count = self.vectorstore_client.get_collection_count(collection_name)
            stats[collection_name] = count
        return stats

    def cleanup_collections(self, collection_names: List[str]) -> None:
        """Delete specified collections (useful for testing/cleanup)."""
        for collection_name in collection_names:
            self.vectorstore_client.delete_collection(collection_name)
