"""Near-text retrieval, context assembly and the chat call."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .models import QUESTION_FIELDS, Answer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .chat import ChatClient
    from .models import QuestionRecord, WhereFilter
    from .vector_store import WeaviateClient

logger = config.get_logger(__name__)

DOCUMENT_TEMPLATE = """
      Document {index}
      Title: {question}
      {answer}
"""


def render_context(results: Sequence[QuestionRecord]) -> str:
    """Render search hits as numbered documents separated by a blank line.

    Returns:
        The context string; empty when there are no hits.
    """
    return "\n\n".join(
        DOCUMENT_TEMPLATE.format(
            index=index, question=record.question, answer=record.answer
        )
        for index, record in enumerate(results, start=1)
    )


class RetrievalDriver:
    """Retrieves related questions and asks the chat model about them."""

    def __init__(
        self,
        vector_store: WeaviateClient,
        chat_client: ChatClient,
        class_name: str = "Question",
    ) -> None:
        self.vector_store = vector_store
        self.chat_client = chat_client
        self.class_name = class_name

    def retrieve(
        self,
        concepts: Sequence[str],
        where: WhereFilter | None = None,
        limit: int | None = None,
    ) -> list[QuestionRecord]:
        """Run the similarity query with the fixed field projection.

        Returns:
            Hits in store order.
        """
        return self.vector_store.search(
            self.class_name,
            QUESTION_FIELDS,
            concepts,
            where=where,
            limit=limit,
        )

    def answer(
        self,
        concepts: Sequence[str],
        prompt: str,
        where: WhereFilter | None = None,
        limit: int | None = None,
    ) -> Answer:
        """Retrieve, build the context and send it with ``prompt``.

        The chat model is called even when nothing was retrieved.

        Returns:
            The hits, the rendered context and the model's reply.
        """
        logger.info("Processing query: %s", list(concepts))
        results = self.retrieve(concepts, where=where, limit=limit)
        if not results:
            logger.warning(
                "No documents matched %s; sending empty context", list(concepts)
            )

        context = render_context(results)
        message = self.chat_client.complete(context, prompt)
        return Answer(
            concepts=list(concepts),
            prompt=prompt,
            results=results,
            context=context,
            message=message,
        )
