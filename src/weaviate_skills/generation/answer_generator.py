"""Answer generation with OpenAI chat completions."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openai import OpenAI

from ..config import DEFAULT_GENERATION_MODEL, DEFAULT_MAX_TOKENS
from ..images import image_data_uri

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the provided context. "
    "Use only the information from the context to answer the question. "
    "If the context doesn't contain enough information, say so."
)

USER_PROMPT = """Context:
{context}

Question: {question}

Answer:"""


class AnswerGenerator:
    """Generates grounded answers from retrieved documents using an LLM."""

    def __init__(
        self,
        model: str = DEFAULT_GENERATION_MODEL,
        api_key: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        """Initialize generator with model.

        Args:
            model: OpenAI chat model
            api_key: OpenAI API key (optional, will use env var if not provided)
            max_tokens: Completion token budget
            system_prompt: Instructions sent as the system message
        """
        self.model = model
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self.client = OpenAI(api_key=api_key)

    def build_messages(
        self,
        question: str,
        documents: Sequence[Any],
        images: Sequence[Union[str, Path]] = (),
    ) -> List[Dict[str, Any]]:
        """Build the chat messages for a question.

        Args:
            question: User question
            documents: Retrieved documents (objects with ``page_content``)
            images: Image files inlined as base64 data URIs

        Returns:
            List of role-tagged message dicts
        """
        context = "\n\n".join(doc.page_content for doc in documents)
        text = USER_PROMPT.format(context=context, question=question)

        if images:
            content: Any = [{"type": "text", "text": text}]
            for image in images:
                content.append(
                    {"type": "image_url", "image_url": {"url": image_data_uri(image)}}
                )
        else:
            content = text

        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": content},
        ]

    def generate(
        self,
        question: str,
        documents: Sequence[Any],
        images: Sequence[Union[str, Path]] = (),
    ) -> str:
        """Generate an answer to the question from the documents.

        Returns:
            Generated answer text

        Raises:
            ValueError: If the model returns an empty answer
            openai.OpenAIError: If the API call fails
        """
        messages = self.build_messages(question, documents, images)

        logger.info(
            f"Generating answer with {self.model} from {len(documents)} documents"
            + (f" and {len(images)} images" if images else "")
        )

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_completion_tokens=self.max_tokens,
        )

        answer = (response.choices[0].message.content or "").strip()
        if not answer:
            raise ValueError(f"Model {self.model} returned an empty answer")

        return answer
