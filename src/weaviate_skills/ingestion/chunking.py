from abc import ABC, abstractmethod
from typing import List

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..vectorstore.models import Chunk, ChunkMetadata


class ChunkingStrategy(ABC):
    """Abstract base class for text chunking strategies."""

    @abstractmethod
    def chunk_document(self, document: str, document_id: str) -> List[Chunk]:
        """Chunk a document and return list of chunks with metadata."""


class RecursiveTextSplitterStrategy(ChunkingStrategy):
    """Chunking strategy using LangChain's RecursiveCharacterTextSplitter."""

    def __init__(self, chunk_size: int, chunk_overlap: int):
        """Initialize with chunk size and overlap parameters."""
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
        )

    def chunk_document(self, document: str, document_id: str) -> List[Chunk]:
        """Chunk document using RecursiveCharacterTextSplitter."""
        text_chunks = self.splitter.split_text(document)

        chunks = []
        for chunk_index, text in enumerate(text_chunks):
            metadata = ChunkMetadata(
                document_id=document_id,
                chunk_index=chunk_index,
                chunk_size=len(text),
            )
            chunks.append(Chunk(text=text, metadata=metadata))

        return chunks
