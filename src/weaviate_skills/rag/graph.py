from functools import cache
from typing import Any, Dict, Optional, Sequence

from langgraph.graph import StateGraph, START, END
from langgraph.graph.state import CompiledStateGraph

from ..vectorstore.client import close_weaviate_client
from .agent_state import AgentState
from .nodes import retrieval_node, model_node


@cache
def get_graph() -> CompiledStateGraph:
    graph = StateGraph(AgentState)
    graph.add_node("retrieval_node", retrieval_node)
    graph.add_node("model_node", model_node)

    graph.add_edge(START, "retrieval_node")
    graph.add_edge("retrieval_node", "model_node")
    graph.add_edge("model_node", END)

    return graph.compile()


def answer_question(
    query: str,
    collection: str,
    strategy: str = "semantic",
    topk: int = 5,
    filters: Any = None,
    images: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Run retrieval followed by answer generation.

    The shared database connection opened by the retrieval step is closed
    before returning, also when a step raises.

    Returns:
        Final state with "answer" and the "documents" it was grounded on
    """
    state: Dict[str, Any] = {
        "query": query,
        "collection": collection,
        "retrieval_strategy": strategy,
        "topk": topk,
    }
    if filters is not None:
        state["filters"] = filters
    if images:
        state["images"] = list(images)

    try:
        return get_graph().invoke(state)
    finally:
        close_weaviate_client()
