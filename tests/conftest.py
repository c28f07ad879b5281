"""Test configuration and fixtures for QuestionRAG tests.

This module provides reusable test fixtures organized by functionality:
- Constants and test data
- Mock HTTP and chat API responses
- Client settings and client fixtures
- Sample records and search hits
- Pipeline factories
"""

import json
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import Mock, create_autospec, patch

import httpx
import pytest

from questionrag import (
    ChatClient,
    ChatMessage,
    DatasetLoader,
    ObjectResult,
    QuestionPipeline,
    QuestionRecord,
    WeaviateClient,
)
from questionrag.config import ChatSettings, VectorStoreSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent
TEST_DATA_DIR = PROJECT_ROOT / "tests" / "data"


class TestConstants:
    """Centralized test constants shared across the test suite."""

    TEST_API_KEY = "test-key"
    TEST_WEAVIATE_KEY = "weaviate-key"
    TEST_WEAVIATE_HOST = "example.weaviate.network"
    TEST_CHAT_MODEL = "gpt-3.5-turbo"
    TEST_USER_AGENT = "QuestionRAG/test"


def create_mock_http_response(
    json_body: object = None,
    status_code: int = 200,
    text: str | None = None,
) -> Mock:
    """Create a mock ``requests.Response``.

    Args:
        json_body: Value returned by ``response.json()``.
        status_code: HTTP status code.
        text: Raw body; defaults to the JSON encoding of ``json_body``.

    Returns:
        Mock object with the attributes the clients read.
    """
    if text is None:
        text = "" if json_body is None else json.dumps(json_body)
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.content = text.encode("utf-8")
    response.json.return_value = json_body
    return response


def create_mock_chat_response(content: str | None, role: str = "assistant") -> Mock:
    """Create a mock OpenAI chat completion response.

    Returns:
        Mock object representing an OpenAI chat completion response.
    """
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(role=role, content=content))]
    return mock_response


def create_httpx_response(status_code: int) -> httpx.Response:
    """Create an ``httpx.Response`` suitable for OpenAI SDK exceptions."""  # noqa: DOC201
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return httpx.Response(status_code, request=request, json={"error": "boom"})


def graphql_body(hits: list[dict], class_name: str = "Question") -> dict:
    """Wrap search hits the way the GraphQL endpoint does."""  # noqa: DOC201
    return {"data": {"Get": {class_name: hits}}}


@pytest.fixture
def vector_store_settings():
    return VectorStoreSettings(
        url=TestConstants.TEST_WEAVIATE_HOST,
        api_key=TestConstants.TEST_WEAVIATE_KEY,
        openai_api_key=TestConstants.TEST_API_KEY,
        headers={"User-Agent": TestConstants.TEST_USER_AGENT},
    )


@pytest.fixture
def chat_settings():
    return ChatSettings(
        api_key=TestConstants.TEST_API_KEY,
        model=TestConstants.TEST_CHAT_MODEL,
    )


@pytest.fixture
def weaviate_client(vector_store_settings):
    """WeaviateClient with a real session; patch ``session.post`` per test."""
    client = WeaviateClient(vector_store_settings)
    yield client
    client.close()


@pytest.fixture
def session_post_factory(weaviate_client):
    """Factory for patching the client's ``session.post`` with canned responses."""

    @contextmanager
    def _mock_post(json_body=None, status_code=200, side_effect=None):  # noqa: ANN202
        with patch.object(weaviate_client.session, "post") as mock_post:
            if side_effect is not None:
                mock_post.side_effect = side_effect
            else:
                mock_post.return_value = create_mock_http_response(
                    json_body, status_code
                )
            yield mock_post

    return _mock_post


@pytest.fixture
def chat_client(chat_settings):
    return ChatClient(chat_settings)


@pytest.fixture
def chat_completion_mock_factory():
    """Factory mock fixture for ChatClient's client.chat.completions.create."""

    @contextmanager
    def _mock_chat(  # noqa: ANN202
        chat_client, content: str | None = "Test response", side_effect=None
    ):
        with patch.object(chat_client.client.chat.completions, "create") as mock_create:
            if side_effect is not None:
                mock_create.side_effect = side_effect
                mock_create.return_value = None
            else:
                mock_create.side_effect = None
                mock_create.return_value = create_mock_chat_response(content)
            yield mock_create

    return _mock_chat


@pytest.fixture
def sample_records():
    return [
        QuestionRecord(
            question="It's the only living mammal in the order Proboseidea",
            answer="Elephant",
            category="ANIMALS",
        ),
        QuestionRecord(
            question="Heaviest of all poisonous snakes is this North American rattlesnake",
            answer="the diamondback rattler",
            category="ANIMALS",
        ),
        QuestionRecord(
            question="A metal that is ductile can be pulled into this while cold",
            answer="wire",
            category="SCIENCE",
        ),
    ]


@pytest.fixture
def records_factory():
    """Factory creating ``count`` numbered records."""

    def _create_records(count: int, category: str = "TEST") -> list[QuestionRecord]:
        return [
            QuestionRecord(question=f"Q{i}", answer=f"A{i}", category=category)
            for i in range(count)
        ]

    return _create_records


@pytest.fixture(scope="session")
def small_dataset_path():
    """Path to the three-record test dataset."""
    return TEST_DATA_DIR / "questions_small.json"


@pytest.fixture
def mock_vector_store():
    """Autospecced WeaviateClient that accepts every object."""
    store = create_autospec(WeaviateClient, instance=True)
    store.batch_insert.side_effect = lambda objects: [
        ObjectResult(id=str(i), class_name=obj.class_name)
        for i, obj in enumerate(objects)
    ]
    store.search.return_value = []
    store.create_schema.side_effect = lambda definition: definition
    return store


@pytest.fixture
def mock_chat_client():
    client = create_autospec(ChatClient, instance=True)
    client.complete.return_value = ChatMessage(role="assistant", content="Test answer")
    return client


@pytest.fixture
def pipeline_factory(mock_vector_store, mock_chat_client):
    """Factory for QuestionPipeline instances wired to mocked clients."""

    def _create_pipeline(**kwargs) -> QuestionPipeline:  # noqa: ANN003
        kwargs.setdefault("class_name", "Question")
        kwargs.setdefault("batch_size", 100)
        kwargs.setdefault("legacy_batch_trigger", False)
        return QuestionPipeline(
            mock_vector_store,
            mock_chat_client,
            DatasetLoader(),
            **kwargs,
        )

    return _create_pipeline


@pytest.fixture
def http_response_factory():
    """Factory fixture exposing ``create_mock_http_response``."""
    return create_mock_http_response


@pytest.fixture
def httpx_response_factory():
    """Factory fixture exposing ``create_httpx_response``."""
    return create_httpx_response


@pytest.fixture
def graphql_body_factory():
    """Factory fixture exposing ``graphql_body``."""
    return graphql_body
