"""Weaviate client wrapper for connection, collection management, ingestion and search."""

import logging
from functools import cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import weaviate
from weaviate.classes.aggregate import GroupByAggregate
from weaviate.classes.init import AdditionalConfig, Auth, Timeout
from weaviate.classes.query import MetadataQuery, Rerank

from ..config import (
    DEFAULT_GRPC_PORT,
    DEFAULT_WEAVIATE_URL,
    Settings,
    is_local_url,
    load_settings,
    parse_weaviate_url,
)
from ..exceptions import CollectionNotFoundError
from ..images import encode_image
from .filters import build_filter
from .models import BatchResult, Chunk, Record
from .results import object_to_result
from .schema import (
    CollectionSpec,
    PropertySpec,
    build_generative_config,
    build_property,
    build_reranker_config,
    build_vectorizer_config,
    default_chunk_spec,
)

logger = logging.getLogger(__name__)

# (init, query, insert) timeouts in seconds
DEFAULT_TIMEOUT = (30, 60, 120)


class WeaviateClient:
    """Wrapper around the Weaviate client with our workflow operations."""

    def __init__(
        self,
        url: str = DEFAULT_WEAVIATE_URL,
        api_key: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        grpc_port: int = DEFAULT_GRPC_PORT,
        timeout: Tuple[int, int, int] = DEFAULT_TIMEOUT,
    ):
        """
        Open a connection to a Weaviate instance.

        Local hosts use ``connect_to_local``. Remote hosts use
        ``connect_to_weaviate_cloud`` when an API key is given, otherwise
        ``connect_to_custom``.

        Args:
            url: Database URL, e.g. http://localhost:8080
            api_key: Weaviate API key
            headers: Extra headers, typically vectorizer provider keys
            grpc_port: gRPC port for local and custom connections
            timeout: (init, query, insert) timeouts in seconds
        """
        self.url = url
        self.api_key = api_key
        self.headers = headers or {}
        self.grpc_port = grpc_port

        init_timeout, query_timeout, insert_timeout = timeout
        additional_config = AdditionalConfig(
            timeout=Timeout(init=init_timeout, query=query_timeout, insert=insert_timeout)
        )
        auth = Auth.api_key(api_key) if api_key else None

        parsed = parse_weaviate_url(url)
        host = parsed.hostname or "localhost"
        secure = parsed.scheme == "https"
        port = parsed.port or (443 if secure else 8080)

        if is_local_url(url):
            logger.info(f"Connecting to local Weaviate at {host}:{port}")
            self.client = weaviate.connect_to_local(
                host=host,
                port=port,
                grpc_port=grpc_port,
                headers=self.headers,
                additional_config=additional_config,
                auth_credentials=auth,
            )
        elif auth is not None:
            logger.info(f"Connecting to Weaviate Cloud at {url}")
            self.client = weaviate.connect_to_weaviate_cloud(
                cluster_url=url,
                auth_credentials=auth,
                headers=self.headers,
                additional_config=additional_config,
            )
        else:
            logger.info(f"Connecting to Weaviate at {url}")
            self.client = weaviate.connect_to_custom(
                http_host=host,
                http_port=port,
                http_secure=secure,
                grpc_host=host,
                grpc_port=grpc_port,
                grpc_secure=secure,
                headers=self.headers,
                additional_config=additional_config,
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeaviateClient":
        """Create a client from loaded settings."""
        return cls(
            url=settings.weaviate_url,
            api_key=settings.weaviate_api_key,
            headers=settings.vectorizer_headers(),
            grpc_port=settings.weaviate_grpc_port,
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the Weaviate client connection."""
        self.client.close()

    def is_ready(self) -> bool:
        """Check whether the database is ready to serve requests."""
        return self.client.is_ready()

    def get_server_info(self) -> Dict[str, Any]:
        """Server version, hostname and enabled modules."""
        meta = self.client.get_meta()
        return {
            "version": meta.get("version"),
            "hostname": meta.get("hostname"),
            "modules": sorted(meta.get("modules", {}).keys()),
        }

    # Collection management

    def _get_collection(self, collection_name: str):
        if not self.collection_exists(collection_name):
            raise CollectionNotFoundError(collection_name)
        return self.client.collections.get(collection_name)

    def list_collections(self) -> List[str]:
        """Names of all collections in the database."""
        return sorted(self.client.collections.list_all(simple=True).keys())

    def collection_exists(self, collection_name: str) -> bool:
        """Check if collection exists."""
        return self.client.collections.exists(collection_name)

    def get_collection_config(self, collection_name: str) -> Dict[str, Any]:
        """Full collection configuration as a dict."""
        collection = self._get_collection(collection_name)
        return collection.config.get().to_dict()

    def create_collection(self, spec: Union[CollectionSpec, str]) -> None:
        """
        Create a collection unless it already exists.

        Args:
            spec: Collection definition, or a bare name for the standard
                text chunk schema
        """
        if isinstance(spec, str):
            spec = default_chunk_spec(spec)

        if self.collection_exists(spec.name):
            logger.info(f"Collection {spec.name} already exists")
            return

        kwargs: Dict[str, Any] = {
            "name": spec.name,
            "vectorizer_config": build_vectorizer_config(spec),
            "properties": [build_property(p) for p in spec.properties],
        }
        if spec.description:
            kwargs["description"] = spec.description

        generative_config = build_generative_config(spec)
        if generative_config is not None:
            kwargs["generative_config"] = generative_config

        reranker_config = build_reranker_config(spec)
        if reranker_config is not None:
            kwargs["reranker_config"] = reranker_config

        self.client.collections.create(**kwargs)
        logger.info(f"Created collection: {spec.name} (vectorizer: {spec.vectorizer})")

    def add_property(self, collection_name: str, prop: PropertySpec) -> None:
        """Add a property to an existing collection."""
        collection = self._get_collection(collection_name)
        collection.config.add_property(build_property(prop))
        logger.info(f"Added property {prop.name} to {collection_name}")

    def delete_collection(self, collection_name: str) -> None:
        """Delete a collection."""
        if self.collection_exists(collection_name):
            self.client.collections.delete(collection_name)
            logger.info(f"Deleted collection: {collection_name}")

    def delete_all_collections(self) -> None:
        """Delete every collection in the database."""
        self.client.collections.delete_all()
        logger.warning("Deleted all collections")

    def get_collection_count(self, collection_name: str, filters: Any = None) -> int:
        """Get the number of objects in a collection."""
        if not self.collection_exists(collection_name):
            return 0

        collection = self.client.collections.get(collection_name)
        return collection.aggregate.over_all(
            total_count=True, filters=build_filter(filters)
        ).total_count

    # Ingestion

    def insert_object(
        self,
        collection_name: str,
        properties: Dict[str, Any],
        vector: Optional[Sequence[float]] = None,
        uuid: Optional[str] = None,
    ) -> str:
        """Insert a single object and return its UUID."""
        collection = self._get_collection(collection_name)
        object_id = collection.data.insert(
            properties=properties,
            vector=list(vector) if vector is not None else None,
            uuid=uuid,
        )
        logger.info(f"Inserted object {object_id} into {collection_name}")
        return str(object_id)

    def insert_image(
        self,
        collection_name: str,
        image_path: Union[str, Path],
        properties: Optional[Dict[str, Any]] = None,
        image_property: str = "image",
    ) -> str:
        """Insert an image file into a blob property."""
        properties = dict(properties or {})
        properties[image_property] = encode_image(image_path)
        return self.insert_object(collection_name, properties)

    def update_object(
        self,
        collection_name: str,
        uuid: str,
        properties: Optional[Dict[str, Any]] = None,
        vector: Optional[Sequence[float]] = None,
    ) -> None:
        """Merge new property values (and optionally a vector) into an object."""
        collection = self._get_collection(collection_name)
        collection.data.update(
            uuid=uuid,
            properties=properties,
            vector=list(vector) if vector is not None else None,
        )
        logger.info(f"Updated object {uuid} in {collection_name}")

    def replace_object(
        self,
        collection_name: str,
        uuid: str,
        properties: Dict[str, Any],
        vector: Optional[Sequence[float]] = None,
    ) -> None:
        """Replace an object's properties entirely."""
        collection = self._get_collection(collection_name)
        collection.data.replace(
            uuid=uuid,
            properties=properties,
            vector=list(vector) if vector is not None else None,
        )
        logger.info(f"Replaced object {uuid} in {collection_name}")

    def delete_object(self, collection_name: str, uuid: str) -> bool:
        """Delete an object by UUID. Returns False if it did not exist."""
        collection = self._get_collection(collection_name)
        deleted = collection.data.delete_by_id(uuid)
        if deleted:
            logger.info(f"Deleted object {uuid} from {collection_name}")
        else:
            logger.warning(f"Object {uuid} not found in {collection_name}")
        return deleted

    def delete_objects(
        self, collection_name: str, filters: Any, dry_run: bool = False
    ) -> Dict[str, int]:
        """
        Delete all objects matching a filter.

        Args:
            collection_name: Name of the collection
            filters: Filter expression selecting the objects
            dry_run: Only count the matches

        Returns:
            Dictionary with "matches", "successful" and "failed" counts
        """
        where = build_filter(filters)
        if where is None:
            raise ValueError("delete_objects requires a filter")

        collection = self._get_collection(collection_name)
        response = collection.data.delete_many(where=where, dry_run=dry_run)
        stats = {
            "matches": response.matches,
            "successful": response.successful,
            "failed": response.failed,
        }
        logger.info(f"Delete in {collection_name} (dry_run={dry_run}): {stats}")
        return stats

    def object_exists(self, collection_name: str, uuid: str) -> bool:
        collection = self._get_collection(collection_name)
        return collection.data.exists(uuid)

    def batch_insert(
        self,
        collection_name: str,
        records: Iterable[Record],
        batch_size: Optional[int] = None,
        requests_per_minute: Optional[int] = None,
    ) -> BatchResult:
        """
        Batch insert records, collecting failures instead of raising.

        Uses dynamic batching unless a fixed batch size or a request rate
        limit is given.

        Args:
            collection_name: Name of the collection
            records: Records to insert
            batch_size: Fixed number of objects per request
            requests_per_minute: Rate limit for vectorizer-bound imports

        Returns:
            BatchResult with inserted count and failed objects
        """
        records = list(records)
        if not records:
            logger.warning("No records to insert")
            return BatchResult()

        collection = self._get_collection(collection_name)

        if requests_per_minute:
            batcher = collection.batch.rate_limit(requests_per_minute=requests_per_minute)
        elif batch_size:
            batcher = collection.batch.fixed_size(batch_size=batch_size)
        else:
            batcher = collection.batch.dynamic()

        with batcher as batch:
            for record in records:
                batch.add_object(
                    properties=record.properties,
                    vector=list(record.vector) if record.vector is not None else None,
                    uuid=record.uuid,
                )

        failed = [
            {
                "message": error.message,
                "properties": error.object_.properties,
                "uuid": str(error.object_.uuid) if error.object_.uuid else None,
            }
            for error in collection.batch.failed_objects
        ]

        result = BatchResult(inserted=len(records) - len(failed), failed=failed)
        logger.info(f"Inserted {result.inserted} objects into {collection_name}")
        if failed:
            logger.error(
                f"{len(failed)} objects failed to insert into {collection_name}. "
                f"First error: {failed[0]['message']}"
            )
        return result

    def batch_insert_chunks(self, collection_name: str, chunks: List[Chunk]) -> BatchResult:
        """Batch insert chunks into specified collection."""
        return self.batch_insert(collection_name, [chunk.to_record() for chunk in chunks])

    # Search

    def semantic_search(
        self,
        collection_name: str,
        query: str,
        limit: int,
        filters: Any = None,
        rerank_property: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Perform semantic search on a collection using vector similarity.

        Args:
            collection_name: Name of the collection to search
            query: Query text to search for
            limit: Maximum number of results to return
            filters: Optional filter expression
            rerank_property: Property to rerank on with the collection's
                reranker module

        Returns:
            List of dictionaries containing properties and metadata from Weaviate

        Raises:
            CollectionNotFoundError: If collection does not exist
        """
        collection = self._get_collection(collection_name)

        kwargs: Dict[str, Any] = {}
        if rerank_property:
            kwargs["rerank"] = Rerank(prop=rerank_property, query=query)

        response = collection.query.near_text(
            query=query,
            limit=limit,
            filters=build_filter(filters),
            return_metadata=MetadataQuery(distance=True),
            **kwargs,
        )

        results = []
        for obj in response.objects:
            result = object_to_result(obj, "distance")
            if rerank_property:
                result["metadata"]["rerank_score"] = (
                    obj.metadata.rerank_score if obj.metadata else None
                )
            results.append(result)

        logger.info(f"Found {len(results)} results for query in {collection_name}")
        return results

    def vector_search(
        self,
        collection_name: str,
        vector: Sequence[float],
        limit: int,
        filters: Any = None,
    ) -> List[Dict[str, Any]]:
        """Search by a precomputed query vector."""
        collection = self._get_collection(collection_name)

        response = collection.query.near_vector(
            near_vector=list(vector),
            limit=limit,
            filters=build_filter(filters),
            return_metadata=MetadataQuery(distance=True),
        )

        results = [object_to_result(obj, "distance") for obj in response.objects]
        logger.info(f"Found {len(results)} results for vector query in {collection_name}")
        return results

    def image_search(
        self,
        collection_name: str,
        image_path: Union[str, Path],
        limit: int,
        filters: Any = None,
    ) -> List[Dict[str, Any]]:
        """Search a multimodal collection with an image file."""
        collection = self._get_collection(collection_name)

        response = collection.query.near_image(
            near_image=encode_image(image_path),
            limit=limit,
            filters=build_filter(filters),
            return_metadata=MetadataQuery(distance=True),
        )

        results = [object_to_result(obj, "distance") for obj in response.objects]
        logger.info(f"Found {len(results)} results for image query in {collection_name}")
        return results

    def keyword_search(
        self,
        collection_name: str,
        query: str,
        limit: int,
        query_properties: Optional[List[str]] = None,
        filters: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Perform BM25 keyword search on a collection.

        Args:
            collection_name: Name of the collection to search
            query: Keywords to search for
            limit: Maximum number of results to return
            query_properties: Properties to search, all text properties if None
            filters: Optional filter expression

        Returns:
            List of result dictionaries with bm25_score metadata
        """
        collection = self._get_collection(collection_name)

        response = collection.query.bm25(
            query=query,
            query_properties=query_properties,
            limit=limit,
            filters=build_filter(filters),
            return_metadata=MetadataQuery(score=True),
        )

        results = [object_to_result(obj, "score", "bm25_score") for obj in response.objects]
        logger.info(f"Found {len(results)} keyword results in {collection_name}")
        return results

    def hybrid_search(
        self,
        collection_name: str,
        query: str,
        limit: int,
        alpha: float = 0.5,
        filters: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Perform hybrid search combining vector similarity and BM25.

        Args:
            collection_name: Name of the collection to search
            query: Query text to search for
            limit: Maximum number of results to return
            alpha: Weight of the vector search, 0 is pure BM25 and 1 pure vector
            filters: Optional filter expression

        Returns:
            List of result dictionaries with hybrid_score metadata

        Raises:
            CollectionNotFoundError: If collection does not exist
        """
        collection = self._get_collection(collection_name)

        response = collection.query.hybrid(
            query=query,
            limit=limit,
            alpha=alpha,
            filters=build_filter(filters),
            return_metadata=MetadataQuery(score=True),
        )

        results = [object_to_result(obj, "score", "hybrid_score") for obj in response.objects]
        logger.info(f"Found {len(results)} hybrid results in {collection_name}")
        return results

    def fetch_by_id(
        self, collection_name: str, uuid: str, include_vector: bool = False
    ) -> Optional[Dict[str, Any]]:
        """Fetch one object by UUID, or None if it does not exist."""
        collection = self._get_collection(collection_name)
        obj = collection.query.fetch_object_by_id(uuid, include_vector=include_vector)
        if obj is None:
            return None
        return object_to_result(obj, include_vector=include_vector)

    def fetch_all(
        self,
        collection_name: str,
        limit: Optional[int] = None,
        include_vector: bool = False,
    ) -> Iterator[Dict[str, Any]]:
        """
        Iterate over every object in a collection.

        Pages through the collection with the client's cursor-based
        iterator, so memory use does not grow with collection size.

        Args:
            collection_name: Name of the collection
            limit: Stop after this many objects
            include_vector: Whether to return vectors

        Yields:
            Result dictionaries
        """
        collection = self._get_collection(collection_name)

        for count, obj in enumerate(collection.iterator(include_vector=include_vector)):
            if limit is not None and count >= limit:
                break
            yield object_to_result(obj, include_vector=include_vector)

    def aggregate(
        self,
        collection_name: str,
        group_by: Optional[str] = None,
        filters: Any = None,
    ) -> Dict[str, Any]:
        """
        Count objects, optionally grouped by a property.

        Returns:
            {"total_count": n} or, when grouping,
            {"groups": [{"value": v, "total_count": n}, ...]}
        """
        collection = self._get_collection(collection_name)
        where = build_filter(filters)

        if group_by is None:
            response = collection.aggregate.over_all(total_count=True, filters=where)
            return {"total_count": response.total_count}

        response = collection.aggregate.over_all(
            group_by=GroupByAggregate(prop=group_by), total_count=True, filters=where
        )
        groups = [
            {"value": group.grouped_by.value, "total_count": group.total_count}
            for group in response.groups
        ]
        return {"groups": groups}

    def generative_search(
        self,
        collection_name: str,
        query: str,
        limit: int,
        single_prompt: Optional[str] = None,
        grouped_task: Optional[str] = None,
        filters: Any = None,
    ) -> Dict[str, Any]:
        """
        Retrieve with near text and generate with the collection's generative module.

        Args:
            collection_name: Name of the collection
            query: Query text
            limit: Number of objects to retrieve
            single_prompt: Prompt run once per object, e.g. "Summarize {text}"
            grouped_task: Task run once over all retrieved objects
            filters: Optional filter expression

        Returns:
            {"generated": grouped output or None, "objects": results}, each
            result carrying its per-object "generated" text
        """
        if not single_prompt and not grouped_task:
            raise ValueError("generative_search requires single_prompt or grouped_task")

        collection = self._get_collection(collection_name)

        response = collection.generate.near_text(
            query=query,
            limit=limit,
            filters=build_filter(filters),
            single_prompt=single_prompt,
            grouped_task=grouped_task,
            return_metadata=MetadataQuery(distance=True),
        )

        objects = []
        for obj in response.objects:
            result = object_to_result(obj, "distance")
            result["generated"] = obj.generated
            objects.append(result)

        logger.info(f"Generated output over {len(objects)} objects from {collection_name}")
        return {"generated": response.generated, "objects": objects}


@cache
def get_weaviate_client() -> WeaviateClient:
    """
    Get or create a singleton WeaviateClient instance.

    Uses functools.cache to ensure only one client is created per process.
    Loads environment variables through load_settings.

    Returns:
        Singleton WeaviateClient instance
    """
    settings = load_settings()

    logger.info("Creating singleton WeaviateClient instance")
    return WeaviateClient.from_settings(settings)


def close_weaviate_client() -> None:
    """Close the singleton client, if one was created, and forget it."""
    if get_weaviate_client.cache_info().currsize:
        get_weaviate_client().close()
        get_weaviate_client.cache_clear()
        logger.info("Closed singleton WeaviateClient instance")
