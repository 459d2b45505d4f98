"""Conversion of Weaviate response objects into plain result dicts."""

from typing import Any, Dict, Optional


def object_to_result(
    obj: Any,
    score_field: Optional[str] = None,
    score_key: Optional[str] = None,
    include_vector: bool = False,
) -> Dict[str, Any]:
    """
    Convert a Weaviate object to a result dictionary.

    Args:
        obj: Object from a Weaviate query response
        score_field: Metadata attribute to read (e.g. "distance", "score")
        score_key: Key to store it under in the result metadata
        include_vector: Whether to copy the object's vectors

    Returns:
        Dictionary with "properties" and "metadata" keys
    """
    metadata: Dict[str, Any] = {"uuid": str(obj.uuid)}
    if score_field:
        metadata[score_key or score_field] = (
            getattr(obj.metadata, score_field, None) if obj.metadata else None
        )

    result = {"properties": dict(obj.properties), "metadata": metadata}
    if include_vector:
        result["vector"] = obj.vector
    return result
