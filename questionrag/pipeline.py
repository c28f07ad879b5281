"""Mode selection and orchestration of setup, ingestion and querying."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .chat import ChatClient
from .config import config
from .dataset import DatasetLoader
from .ingestion import IngestionDriver
from .retrieval import RetrievalDriver
from .vector_store import WeaviateClient, build_question_class

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from .models import Answer, IngestionReport, WhereFilter

logger = config.get_logger(__name__)

DEFAULT_CONCEPTS = ("2 legs",)
DEFAULT_PROMPT = "list all animals"


class Mode(Enum):
    """What a pipeline run does.

    ``RUN`` is an alias of ``QUERY`` and is the CLI default. ``ALL`` runs
    setup, ingestion and the query in order.
    """

    SETUP = "setup"
    INGEST = "ingest"
    QUERY = "query"
    RUN = "run"
    ALL = "all"

    @property
    def steps(self) -> tuple[Mode, ...]:
        if self is Mode.ALL:
            return (Mode.SETUP, Mode.INGEST, Mode.QUERY)
        if self is Mode.RUN:
            return (Mode.QUERY,)
        return (self,)


@dataclass
class RunResult:
    """Outputs collected during ``QuestionPipeline.execute``."""

    schema: dict | None = None
    ingestion: IngestionReport | None = None
    answer: Answer | None = None


class QuestionPipeline:
    """Main pipeline orchestrating Setup -> Ingest -> Query."""

    def __init__(  # noqa: PLR0913
        self,
        vector_store: WeaviateClient,
        chat_client: ChatClient,
        loader: DatasetLoader | None = None,
        *,
        class_name: str | None = None,
        batch_size: int | None = None,
        legacy_batch_trigger: bool | None = None,
    ) -> None:
        """Initialize the pipeline with its collaborators.

        Args:
            vector_store: Weaviate client.
            chat_client: Chat completion client.
            loader: Dataset loader. If None, a default loader is used.
            class_name: Class to create, fill and search. If None, uses
                config.QUESTION_CLASS.
            batch_size: Objects per batch. If None, uses config.BATCH_SIZE.
            legacy_batch_trigger: Flush only once ``batch_size + 1`` objects
                are queued.
                If None, uses config.BATCH_LEGACY_TRIGGER.
        """
        if class_name is None:
            class_name = config.QUESTION_CLASS
        if batch_size is None:
            batch_size = config.BATCH_SIZE
        if legacy_batch_trigger is None:
            legacy_batch_trigger = config.BATCH_LEGACY_TRIGGER

        self.vector_store = vector_store
        self.chat_client = chat_client
        self.loader = loader or DatasetLoader(timeout=config.REQUEST_TIMEOUT)
        self.class_name = class_name
        self.batch_size = batch_size
        self.legacy_batch_trigger = legacy_batch_trigger
        self.retrieval_driver = RetrievalDriver(
            vector_store, chat_client, class_name=class_name
        )

    @property
    def ingestion_driver(self) -> IngestionDriver:
        """Driver for the configured batch size, validated on each use."""
        return IngestionDriver(
            self.vector_store,
            class_name=self.class_name,
            batch_size=self.batch_size,
            legacy_trigger=self.legacy_batch_trigger,
        )

    @classmethod
    def from_config(cls, **kwargs: object) -> QuestionPipeline:
        """Build a pipeline whose clients are configured from the environment.

        Returns:
            A pipeline with fresh Weaviate and chat clients.
        """
        return cls(
            WeaviateClient(config.vector_store_settings()),
            ChatClient(config.chat_settings()),
            **kwargs,
        )

    def setup(self) -> dict:
        """Create the question class in the vector store."""  # noqa: DOC201
        class_definition = build_question_class(
            self.class_name, config.VECTORIZER, config.GENERATIVE_MODULE
        )
        return self.vector_store.create_schema(class_definition)

    def ingest(self, source: str | Path | None = None) -> IngestionReport:
        """Load a dataset and send it to the vector store.

        Returns:
            Counts of flushes, objects sent and objects rejected.

        Raises:
            ValueError: If the configured batch size is less than 1.
        """
        driver = self.ingestion_driver
        if source is None:
            source = config.DATASET_SOURCE
        logger.info("Starting ingestion from: %s", source)
        records = self.loader.load(source)
        return driver.ingest(records)

    def query(
        self,
        concepts: Sequence[str] = DEFAULT_CONCEPTS,
        prompt: str = DEFAULT_PROMPT,
        where: WhereFilter | None = None,
        limit: int | None = None,
    ) -> Answer:
        """Retrieve related questions and ask the chat model about them."""  # noqa: DOC201
        return self.retrieval_driver.answer(concepts, prompt, where=where, limit=limit)

    def execute(  # noqa: PLR0913
        self,
        mode: Mode,
        *,
        source: str | Path | None = None,
        concepts: Sequence[str] = DEFAULT_CONCEPTS,
        prompt: str = DEFAULT_PROMPT,
        where: WhereFilter | None = None,
        limit: int | None = None,
    ) -> RunResult:
        """Run every step of ``mode`` in order, stopping at the first error.

        Returns:
            Whatever each step produced.
        """
        result = RunResult()
        for step in mode.steps:
            logger.info("Running step: %s", step.value)
            if step is Mode.SETUP:
                result.schema = self.setup()
            elif step is Mode.INGEST:
                result.ingestion = self.ingest(source)
            elif step is Mode.QUERY:
                result.answer = self.query(concepts, prompt, where=where, limit=limit)
        return result

    def close(self) -> None:
        self.vector_store.close()
