"""Collection schema definitions and Weaviate config builders."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from weaviate.classes.config import Configure, DataType, Property

from ..exceptions import SchemaError

DATA_TYPES: Dict[str, DataType] = {
    "text": DataType.TEXT,
    "text[]": DataType.TEXT_ARRAY,
    "int": DataType.INT,
    "int[]": DataType.INT_ARRAY,
    "number": DataType.NUMBER,
    "number[]": DataType.NUMBER_ARRAY,
    "boolean": DataType.BOOL,
    "boolean[]": DataType.BOOL_ARRAY,
    "date": DataType.DATE,
    "date[]": DataType.DATE_ARRAY,
    "uuid": DataType.UUID,
    "uuid[]": DataType.UUID_ARRAY,
    "blob": DataType.BLOB,
    "geo": DataType.GEO_COORDINATES,
}

DATA_TYPE_ALIASES = {
    "string": "text",
    "string[]": "text[]",
    "float": "number",
    "float[]": "number[]",
    "bool": "boolean",
    "bool[]": "boolean[]",
}

VECTORIZERS = (
    "none",
    "text2vec-openai",
    "text2vec-cohere",
    "text2vec-transformers",
    "multi2vec-clip",
)
GENERATIVE_MODULES = ("openai", "cohere")
RERANKER_MODULES = ("cohere", "transformers")


@dataclass
class PropertySpec:
    """A single property of a collection."""

    name: str
    data_type: str
    description: Optional[str] = None
    vectorize: bool = True
    index_searchable: Optional[bool] = None
    index_filterable: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertySpec":
        try:
            return cls(
                name=data["name"],
                data_type=data.get("data_type") or data["type"],
                description=data.get("description"),
                vectorize=data.get("vectorize", True),
                index_searchable=data.get("index_searchable"),
                index_filterable=data.get("index_filterable"),
            )
        except KeyError as e:
            raise SchemaError(f"Property definition missing field: {e}")


@dataclass
class CollectionSpec:
    """
    Full definition of a collection.

    Attributes:
        name: Collection name
        properties: Property definitions
        vectorizer: Vectorizer module name, or "none" for self-provided vectors
        vectorizer_model: Optional model for the vectorizer module
        generative: Optional generative module name
        generative_model: Optional model for the generative module
        reranker: Optional reranker module name
        reranker_model: Optional model for the reranker module
        description: Optional collection description
        image_fields: Blob properties vectorized by multi2vec-clip
    """

    name: str
    properties: List[PropertySpec] = field(default_factory=list)
    vectorizer: str = "text2vec-openai"
    vectorizer_model: Optional[str] = None
    generative: Optional[str] = None
    generative_model: Optional[str] = None
    reranker: Optional[str] = None
    reranker_model: Optional[str] = None
    description: Optional[str] = None
    image_fields: Sequence[str] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CollectionSpec":
        """Build a spec from a parsed JSON schema file."""
        if "name" not in data:
            raise SchemaError("Collection definition requires a 'name'")

        return cls(
            name=data["name"],
            properties=[PropertySpec.from_dict(p) for p in data.get("properties", [])],
            vectorizer=data.get("vectorizer", "text2vec-openai"),
            vectorizer_model=data.get("vectorizer_model"),
            generative=data.get("generative"),
            generative_model=data.get("generative_model"),
            reranker=data.get("reranker"),
            reranker_model=data.get("reranker_model"),
            description=data.get("description"),
            image_fields=tuple(data.get("image_fields", ())),
        )

    def text_fields(self) -> List[str]:
        return [
            p.name
            for p in self.properties
            if resolve_data_type(p.data_type) == DataType.TEXT and p.vectorize
        ]


def default_chunk_spec(name: str) -> CollectionSpec:
    """Standard schema for text chunk collections."""
    return CollectionSpec(
        name=name,
        properties=[
            PropertySpec("text", "text", "The chunk content"),
            PropertySpec("document_id", "text", "Source document identifier", vectorize=False),
            PropertySpec("chunk_index", "int", "Position of chunk within document"),
            PropertySpec("chunk_size", "int", "Character count of this chunk"),
        ],
        vectorizer="text2vec-openai",
    )


def resolve_data_type(name: str) -> DataType:
    key = DATA_TYPE_ALIASES.get(name.lower(), name.lower())
    if key not in DATA_TYPES:
        raise SchemaError(
            f"Unknown data type: {name}. Supported types: {', '.join(DATA_TYPES)}"
        )
    return DATA_TYPES[key]


def build_property(spec: PropertySpec) -> Property:
    """Convert a PropertySpec into a Weaviate Property."""
    kwargs: Dict[str, Any] = {
        "name": spec.name,
        "data_type": resolve_data_type(spec.data_type),
        "skip_vectorization": not spec.vectorize,
    }
    if spec.description:
        kwargs["description"] = spec.description
    if spec.index_searchable is not None:
        kwargs["index_searchable"] = spec.index_searchable
    if spec.index_filterable is not None:
        kwargs["index_filterable"] = spec.index_filterable
    return Property(**kwargs)


def build_vectorizer_config(spec: CollectionSpec):
    """Map a vectorizer name to its Weaviate module config."""
    vectorizer = spec.vectorizer or "none"

    if vectorizer == "none":
        return Configure.Vectorizer.none()
    if vectorizer == "text2vec-openai":
        if spec.vectorizer_model:
            return Configure.Vectorizer.text2vec_openai(model=spec.vectorizer_model)
        return Configure.Vectorizer.text2vec_openai()
    if vectorizer == "text2vec-cohere":
        if spec.vectorizer_model:
            return Configure.Vectorizer.text2vec_cohere(model=spec.vectorizer_model)
        return Configure.Vectorizer.text2vec_cohere()
    if vectorizer == "text2vec-transformers":
        return Configure.Vectorizer.text2vec_transformers()
    if vectorizer == "multi2vec-clip":
        if not spec.image_fields:
            raise SchemaError("multi2vec-clip requires at least one image field")
        return Configure.Vectorizer.multi2vec_clip(
            image_fields=list(spec.image_fields),
            text_fields=spec.text_fields() or None,
        )

    raise SchemaError(
        f"Unknown vectorizer: {vectorizer}. Supported vectorizers: {', '.join(VECTORIZERS)}"
    )


def build_generative_config(spec: CollectionSpec):
    """Generative module config, or None when the collection has none."""
    if not spec.generative:
        return None
    if spec.generative == "openai":
        if spec.generative_model:
            return Configure.Generative.openai(model=spec.generative_model)
        return Configure.Generative.openai()
    if spec.generative == "cohere":
        if spec.generative_model:
            return Configure.Generative.cohere(model=spec.generative_model)
        return Configure.Generative.cohere()

    raise SchemaError(
        f"Unknown generative module: {spec.generative}. "
        f"Supported modules: {', '.join(GENERATIVE_MODULES)}"
    )


def build_reranker_config(spec: CollectionSpec):
    """Reranker module config, or None when the collection has none."""
    if not spec.reranker:
        return None
    if spec.reranker == "cohere":
        if spec.reranker_model:
            return Configure.Reranker.cohere(model=spec.reranker_model)
        return Configure.Reranker.cohere()
    if spec.reranker == "transformers":
        return Configure.Reranker.transformers()

    raise SchemaError(
        f"Unknown reranker: {spec.reranker}. Supported rerankers: {', '.join(RERANKER_MODULES)}"
    )
