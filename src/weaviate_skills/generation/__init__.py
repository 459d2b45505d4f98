"""LLM answer generation over retrieved documents."""

from .answer_generator import AnswerGenerator

__all__ = ["AnswerGenerator"]
