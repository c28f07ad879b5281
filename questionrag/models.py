"""Data models for the question RAG workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import ParseError

QUESTION_FIELDS = ("question", "answer", "category")


def _require_strings(
    record: object, keys: dict[str, str], where: str
) -> dict[str, str]:
    if not isinstance(record, dict):
        msg = f"{where}: expected an object, got {type(record).__name__}"
        raise ParseError(msg)

    values: dict[str, str] = {}
    for key, target in keys.items():
        value = record.get(key)
        if not isinstance(value, str):
            msg = f"{where}: field '{key}' missing or not a string"
            raise ParseError(msg)
        values[target] = value
    return values


@dataclass(frozen=True)
class QuestionRecord:
    """A single question/answer pair with its category."""

    question: str
    answer: str
    category: str

    @classmethod
    def from_source(cls, record: object, index: int | None = None) -> QuestionRecord:
        """Build a record from a dataset entry with capitalised keys.

        Raises:
            ParseError: If a field is missing or is not a string.
        """
        where = "record" if index is None else f"record {index}"
        values = _require_strings(
            record,
            {"Question": "question", "Answer": "answer", "Category": "category"},
            where,
        )
        return cls(**values)

    @classmethod
    def from_properties(
        cls, properties: object, index: int | None = None
    ) -> QuestionRecord:
        """Build a record from vector-store properties with lowercase keys.

        Raises:
            ParseError: If a field is missing or is not a string.
        """
        where = "search hit" if index is None else f"search hit {index}"
        values = _require_strings(
            properties, {name: name for name in QUESTION_FIELDS}, where
        )
        return cls(**values)

    def to_properties(self) -> dict[str, str]:
        return {
            "question": self.question,
            "answer": self.answer,
            "category": self.category,
        }


@dataclass(frozen=True)
class VectorStoreObject:
    """An object queued for batch ingestion."""

    class_name: str
    properties: dict[str, Any]

    @classmethod
    def from_record(cls, record: QuestionRecord, class_name: str) -> VectorStoreObject:
        return cls(class_name=class_name, properties=record.to_properties())

    def to_payload(self) -> dict[str, Any]:
        return {"class": self.class_name, "properties": dict(self.properties)}


@dataclass
class ObjectResult:
    """Outcome of a single object within a batch insert."""

    id: str | None
    class_name: str | None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class WhereFilter:
    """Equality filter on a text property."""

    path: tuple[str, ...]
    value_text: str
    operator: str = "Equal"

    @classmethod
    def equal(cls, prop: str, value: str) -> WhereFilter:
        return cls(path=(prop,), value_text=value)


@dataclass(frozen=True)
class ChatMessage:
    """A role-tagged message returned by the chat endpoint."""

    role: str
    content: str


@dataclass
class IngestionReport:
    """Summary of an ingestion run."""

    flushes: int = 0
    objects_sent: int = 0
    failed_objects: int = 0


@dataclass
class Answer:
    """Result of a retrieval-and-prompt run."""

    concepts: list[str]
    prompt: str
    results: list[QuestionRecord]
    context: str
    message: ChatMessage
