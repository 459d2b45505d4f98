"""Tests for text chunking strategies."""

import pytest

from weaviate_skills.ingestion.chunking import RecursiveTextSplitterStrategy
from weaviate_skills.vectorstore.models import Chunk


class TestRecursiveTextSplitterStrategy:
    """Tests for RecursiveTextSplitterStrategy."""

    @pytest.fixture
    def document(self):
        return " ".join(f"Sentence number {i} talks about vector search." for i in range(20))

    def test_chunks_respect_size(self, document):
        """Test that no chunk exceeds the configured size."""
        strategy = RecursiveTextSplitterStrategy(chunk_size=100, chunk_overlap=20)

        chunks = strategy.chunk_document(document, document_id="doc-1")

        assert len(chunks) > 1
        assert all(isinstance(chunk, Chunk) for chunk in chunks)
        assert all(len(chunk.text) <= 100 for chunk in chunks)

    def test_chunk_metadata(self, document):
        """Test that metadata records document, position and size."""
        strategy = RecursiveTextSplitterStrategy(chunk_size=100, chunk_overlap=20)

        chunks = strategy.chunk_document(document, document_id="doc-1")

        assert [c.metadata.chunk_index for c in chunks] == list(range(len(chunks)))
        assert all(c.metadata.document_id == "doc-1" for c in chunks)
        assert all(c.metadata.chunk_size == len(c.text) for c in chunks)

    def test_short_document_is_single_chunk(self):
        """Test that a short document yields one chunk."""
        strategy = RecursiveTextSplitterStrategy(chunk_size=500, chunk_overlap=50)

        chunks = strategy.chunk_document("Short text.", document_id="doc-2")

        assert len(chunks) == 1
        assert chunks[0].text == "Short text."

    def test_overlap_must_be_smaller_than_size(self):
        """Test that invalid overlap is rejected."""
        with pytest.raises(ValueError, match="chunk_overlap"):
            RecursiveTextSplitterStrategy(chunk_size=100, chunk_overlap=100)
