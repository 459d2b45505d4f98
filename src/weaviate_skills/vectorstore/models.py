"""Record and result types passed to and from the Weaviate client."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


@dataclass
class Record:
    """An object to insert: properties plus optional vector and identifier."""

    properties: Dict[str, Any]
    vector: Optional[Sequence[float]] = None
    uuid: Optional[str] = None


@dataclass
class ChunkMetadata:
    """Metadata for a text chunk."""
    document_id: str
    chunk_index: int
    chunk_size: int


@dataclass
class Chunk:
    """A text chunk with associated metadata."""
    text: str
    metadata: ChunkMetadata

    def to_record(self) -> Record:
        return Record(
            properties={
                "text": self.text,
                "document_id": self.metadata.document_id,
                "chunk_index": self.metadata.chunk_index,
                "chunk_size": self.metadata.chunk_size,
            }
        )


@dataclass
class BatchResult:
    """
    Outcome of a batch insert.

    Attributes:
        inserted: Number of objects the server accepted
        failed: Rejected objects kept for manual reinspection, each a dict
            with "message", "properties" and "uuid" keys
    """

    inserted: int = 0
    failed: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
