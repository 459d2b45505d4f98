from ..config import load_settings
from ..generation.answer_generator import AnswerGenerator
from ..vectorstore.client import get_weaviate_client
from .agent_state import AgentState
from .retrievers import make_retriever


def retrieval_node(state: AgentState) -> dict:
    """
    Retrieval node that creates a retriever and fetches documents.

    Uses a singleton WeaviateClient instance and the factory to create
    the appropriate retriever based on the strategy specified in the state.

    Args:
        state: Agent state containing collection, strategy, query, topk and filters

    Returns:
        Dictionary with documents key containing retrieved documents
    """
    client = get_weaviate_client()

    retriever = make_retriever(
        client=client,
        collection_name=state["collection"],
        strategy=state["retrieval_strategy"],
        filters=state.get("filters"),
    )

    documents = retriever.retrieve(query=state["query"], limit=state["topk"])

    return {"documents": documents}


def model_node(state: AgentState) -> dict:
    """
    Model node that generates an answer based on retrieved documents.

    Args:
        state: Agent state containing query, retrieved documents and optional images

    Returns:
        Dictionary with answer key containing the generated text
    """
    settings = load_settings()
    generator = AnswerGenerator(
        model=settings.generation_model,
        api_key=settings.openai_api_key,
        max_tokens=settings.max_tokens,
    )

    answer = generator.generate(
        question=state["query"],
        documents=state.get("documents", []),
        images=state.get("images") or (),
    )

    return {"answer": answer}
