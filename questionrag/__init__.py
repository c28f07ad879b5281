"""QuestionRAG - near-text retrieval over a question dataset with chat answers."""

from .chat import ChatClient
from .dataset import DatasetLoader
from .errors import (
    ConfigurationError,
    NetworkError,
    ParseError,
    QuestionRagError,
    UpstreamError,
)
from .ingestion import BatchQueue, IngestionDriver
from .models import (
    Answer,
    ChatMessage,
    IngestionReport,
    ObjectResult,
    QuestionRecord,
    VectorStoreObject,
    WhereFilter,
)
from .pipeline import Mode, QuestionPipeline
from .retrieval import RetrievalDriver, render_context
from .vector_store import WeaviateClient, build_question_class

__all__ = [
    "Answer",
    "BatchQueue",
    "ChatClient",
    "ChatMessage",
    "ConfigurationError",
    "DatasetLoader",
    "IngestionDriver",
    "IngestionReport",
    "Mode",
    "NetworkError",
    "ObjectResult",
    "ParseError",
    "QuestionPipeline",
    "QuestionRagError",
    "QuestionRecord",
    "RetrievalDriver",
    "UpstreamError",
    "VectorStoreObject",
    "WeaviateClient",
    "WhereFilter",
    "build_question_class",
    "render_context",
]
