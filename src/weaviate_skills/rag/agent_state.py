from typing import Any, List
from typing_extensions import TypedDict, NotRequired, Literal


class AgentState(TypedDict):
    query: str
    collection: str
    retrieval_strategy: Literal["semantic", "keyword", "hybrid", "rerank", "multiquery"]
    topk: int
    filters: NotRequired[Any]
    images: NotRequired[List[str]]
    documents: NotRequired[List[Any]]
    answer: NotRequired[str]
