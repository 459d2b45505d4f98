"""Command line entry point for the connect, manage, ingest and query workflow."""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

import openai
from cohere.core import ApiError as CohereApiError
from weaviate.exceptions import WeaviateBaseError

from .config import Settings, load_settings
from .exceptions import WeaviateSkillsError
from .generation.answer_generator import AnswerGenerator
from .ingestion.chunking import RecursiveTextSplitterStrategy
from .ingestion.pipeline import DataIngestionPipeline
from .rag.retrievers.factory import STRATEGIES, make_retriever
from .vectorstore.client import WeaviateClient
from .vectorstore.filters import parse_filter_json
from .vectorstore.schema import CollectionSpec

logger = logging.getLogger(__name__)

SEARCH_MODES = ("semantic", "keyword", "hybrid", "vector", "image")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _load_spec(path: str) -> CollectionSpec:
    with open(path, "r", encoding="utf-8") as f:
        return CollectionSpec.from_dict(json.load(f))


def cmd_check(client: WeaviateClient, args: argparse.Namespace) -> int:
    if not client.is_ready():
        logger.error(f"Weaviate at {client.url} is not ready")
        return 1

    info = client.get_server_info()
    logger.info(f"✓ Weaviate {info['version']} is ready at {client.url}")
    _print_json(info)
    return 0


def cmd_collections(client: WeaviateClient, args: argparse.Namespace) -> int:
    action = args.action

    if action == "list":
        _print_json(client.list_collections())

    elif action == "show":
        _print_json(client.get_collection_config(args.name))

    elif action == "create":
        if args.schema:
            spec = _load_spec(args.schema)
        elif args.name:
            spec = args.name
        else:
            logger.error("create requires a collection name or --schema")
            return 1
        client.create_collection(spec)

    elif action == "delete":
        if args.all:
            if not args.yes:
                logger.error("Refusing to delete all collections without --yes")
                return 1
            client.delete_all_collections()
        elif args.name:
            client.delete_collection(args.name)
        else:
            logger.error("delete requires a collection name or --all")
            return 1

    return 0


def cmd_ingest(client: WeaviateClient, args: argparse.Namespace) -> int:
    pipeline = DataIngestionPipeline(vectorstore_client=client)

    chunking_strategy = None
    if args.chunk_size:
        chunking_strategy = RecursiveTextSplitterStrategy(
            chunk_size=args.chunk_size, chunk_overlap=args.chunk_overlap
        )

    result = pipeline.ingest_file(
        args.collection,
        args.file,
        text_field=args.text_field,
        chunking_strategy=chunking_strategy,
        vector_field=args.vector_field,
        id_field=args.id_field,
        spec=_load_spec(args.schema) if args.schema else None,
        batch_size=args.batch_size,
        requests_per_minute=args.requests_per_minute,
    )

    logger.info(f"✓ {result.inserted} objects inserted into {args.collection}")

    if result.failed:
        logger.error(f"{len(result.failed)} objects failed")
        if args.failed_out:
            with open(args.failed_out, "w", encoding="utf-8") as f:
                json.dump(result.failed, f, indent=2, default=str)
            logger.info(f"Failed objects written to {args.failed_out}")
        return 1

    return 0


def cmd_count(client: WeaviateClient, args: argparse.Namespace) -> int:
    filters = parse_filter_json(args.where)
    _print_json(client.aggregate(args.collection, group_by=args.group_by, filters=filters))
    return 0


def cmd_search(client: WeaviateClient, args: argparse.Namespace) -> int:
    filters = parse_filter_json(args.where)
    common = {"collection_name": args.collection, "limit": args.limit, "filters": filters}

    if args.mode == "semantic":
        results = client.semantic_search(query=args.query, **common)
    elif args.mode == "keyword":
        results = client.keyword_search(query=args.query, **common)
    elif args.mode == "hybrid":
        results = client.hybrid_search(query=args.query, alpha=args.alpha, **common)
    elif args.mode == "vector":
        results = client.vector_search(vector=json.loads(args.query), **common)
    else:
        results = client.image_search(image_path=args.query, **common)

    _print_json(results)
    return 0


def cmd_get(client: WeaviateClient, args: argparse.Namespace) -> int:
    result = client.fetch_by_id(args.collection, args.uuid, include_vector=args.include_vector)
    if result is None:
        logger.error(f"Object {args.uuid} not found in {args.collection}")
        return 1
    _print_json(result)
    return 0


def cmd_delete(client: WeaviateClient, args: argparse.Namespace) -> int:
    if args.uuid:
        return 0 if client.delete_object(args.collection, args.uuid) else 1

    if not args.where:
        logger.error("delete requires an object UUID or --where")
        return 1

    stats = client.delete_objects(
        args.collection, parse_filter_json(args.where), dry_run=args.dry_run
    )
    _print_json(stats)
    return 0 if stats["failed"] == 0 else 1


def cmd_ask(
    client: WeaviateClient, args: argparse.Namespace, settings: Settings
) -> int:
    filters = parse_filter_json(args.where)

    if args.grouped_task:
        # Generation runs inside Weaviate with the collection's generative module
        response = client.generative_search(
            collection_name=args.collection,
            query=args.question,
            limit=args.limit,
            grouped_task=args.grouped_task,
            filters=filters,
        )
        print(response["generated"])
        return 0

    retriever = make_retriever(
        client=client,
        collection_name=args.collection,
        strategy=args.strategy,
        filters=filters,
    )
    documents = retriever.retrieve(query=args.question, limit=args.limit)

    generator = AnswerGenerator(
        model=args.model or settings.generation_model,
        api_key=settings.openai_api_key,
        max_tokens=settings.max_tokens,
    )
    answer = generator.generate(args.question, documents, images=args.image or ())
    print(answer)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weaviate-skills",
        description="Connect to Weaviate, manage collections, ingest data and query it",
    )
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Check that the database is ready")

    collections = subparsers.add_parser("collections", help="Manage collections")
    collections.add_argument("action", choices=["list", "show", "create", "delete"])
    collections.add_argument("name", nargs="?", help="Collection name")
    collections.add_argument("--schema", type=str, help="JSON collection definition")
    collections.add_argument("--all", action="store_true", help="Delete every collection")
    collections.add_argument("--yes", action="store_true", help="Confirm --all")

    ingest = subparsers.add_parser("ingest", help="Ingest a JSON, JSONL or CSV file")
    ingest.add_argument("collection")
    ingest.add_argument("file")
    ingest.add_argument("--schema", type=str, help="JSON definition used if the collection is created")
    ingest.add_argument("--text-field", type=str, help="Field to chunk")
    ingest.add_argument("--chunk-size", type=int, help="Split text-field into chunks of this size")
    ingest.add_argument("--chunk-overlap", type=int, default=0, help="Chunk overlap (default: 0)")
    ingest.add_argument("--vector-field", type=str, help="Field holding precomputed vectors")
    ingest.add_argument("--id-field", type=str, help="Field holding object UUIDs")
    ingest.add_argument("--batch-size", type=int, help="Fixed batch size")
    ingest.add_argument("--requests-per-minute", type=int, help="Batch rate limit")
    ingest.add_argument("--failed-out", type=str, help="Write failed objects to this JSON file")

    count = subparsers.add_parser("count", help="Count objects in a collection")
    count.add_argument("collection")
    count.add_argument("--group-by", type=str, help="Property to group counts by")
    count.add_argument("--where", type=str, help="JSON filter expression")

    search = subparsers.add_parser("search", help="Search a collection")
    search.add_argument("collection")
    search.add_argument("query", help="Query text, JSON vector, or image path")
    search.add_argument("--mode", choices=SEARCH_MODES, default="semantic")
    search.add_argument("--alpha", type=float, default=0.5, help="Hybrid vector weight (default: 0.5)")
    search.add_argument("--limit", type=int, default=5)
    search.add_argument("--where", type=str, help="JSON filter expression")

    get = subparsers.add_parser("get", help="Fetch an object by UUID")
    get.add_argument("collection")
    get.add_argument("uuid")
    get.add_argument("--include-vector", action="store_true")

    delete = subparsers.add_parser("delete", help="Delete objects by UUID or filter")
    delete.add_argument("collection")
    delete.add_argument("uuid", nargs="?")
    delete.add_argument("--where", type=str, help="JSON filter expression")
    delete.add_argument("--dry-run", action="store_true")

    ask = subparsers.add_parser("ask", help="Answer a question from a collection")
    ask.add_argument("collection")
    ask.add_argument("question")
    ask.add_argument("--strategy", choices=STRATEGIES, default="semantic")
    ask.add_argument("--limit", type=int, default=5)
    ask.add_argument("--where", type=str, help="JSON filter expression")
    ask.add_argument("--image", action="append", help="Image to include (repeatable)")
    ask.add_argument("--model", type=str, help="Override the generation model")
    ask.add_argument(
        "--grouped-task",
        type=str,
        help="Generate inside Weaviate with this task instead of calling OpenAI",
    )

    return parser


COMMANDS = {
    "check": cmd_check,
    "collections": cmd_collections,
    "ingest": cmd_ingest,
    "count": cmd_count,
    "search": cmd_search,
    "get": cmd_get,
    "delete": cmd_delete,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except WeaviateSkillsError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        with WeaviateClient.from_settings(settings) as client:
            if args.command == "ask":
                return cmd_ask(client, args, settings)
            return COMMANDS[args.command](client, args)

    except (ValueError, OSError) as e:
        logger.error(str(e))
        return 1
    except WeaviateBaseError as e:
        logger.error(f"Weaviate error: {e}")
        return 1
    except openai.OpenAIError as e:
        logger.error(f"OpenAI error: {e}")
        return 1
    except CohereApiError as e:
        logger.error(f"Cohere error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
