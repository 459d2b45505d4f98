"""Base types and protocols for retrieval strategies."""

from dataclasses import dataclass, field
from typing import Protocol, List, Dict, Any

TEXT_PROPERTY = "text"


@dataclass
class Document:
    """
    Document structure mimicking LangChain's Document.

    Attributes:
        page_content: The text content of the document
        metadata: Additional metadata about the document
    """

    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class Retriever(Protocol):
    """Protocol defining the interface for all retriever implementations."""

    def retrieve(self, query: str, limit: int) -> List[Document]:
        """
        Retrieve documents relevant to the query.

        Args:
            query: The search query text
            limit: Maximum number of documents to return

        Returns:
            List of Document objects ranked by relevance
        """
        ...


def result_to_document(
    result: Dict[str, Any], text_property: str = TEXT_PROPERTY
) -> Document:
    """Convert a Weaviate result dict to a Document.

    The text property becomes the page content; the remaining properties
    are merged into the result metadata.
    """
    properties = result["properties"]
    metadata = result["metadata"].copy()
    metadata.update({k: v for k, v in properties.items() if k != text_property})
    return Document(page_content=properties.get(text_property, ""), metadata=metadata)


def results_to_documents(
    results: List[Dict[str, Any]], text_property: str = TEXT_PROPERTY
) -> List[Document]:
    return [result_to_document(result, text_property) for result in results]
