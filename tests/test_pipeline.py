"""Tests for QuestionPipeline and Mode dispatch."""

from unittest.mock import patch

import pytest

from questionrag import (
    ChatClient,
    ConfigurationError,
    Mode,
    QuestionPipeline,
    WeaviateClient,
    WhereFilter,
)
from questionrag.config import BUNDLED_DATASET_PATH, ChatSettings, VectorStoreSettings
from questionrag.pipeline import DEFAULT_CONCEPTS, DEFAULT_PROMPT


@pytest.mark.parametrize(
    ("mode", "expected_steps"),
    [
        (Mode.SETUP, (Mode.SETUP,)),
        (Mode.INGEST, (Mode.INGEST,)),
        (Mode.QUERY, (Mode.QUERY,)),
        (Mode.RUN, (Mode.QUERY,)),
        (Mode.ALL, (Mode.SETUP, Mode.INGEST, Mode.QUERY)),
    ],
)
def test_mode_steps(mode, expected_steps):
    assert mode.steps == expected_steps


def test_setup_creates_question_class(pipeline_factory, mock_vector_store):
    pipeline = pipeline_factory(class_name="Trivia")

    result = pipeline.setup()

    definition = mock_vector_store.create_schema.call_args.args[0]
    assert definition["class"] == "Trivia"
    assert definition["vectorizer"] == "text2vec-openai"
    assert result == definition


def test_ingest_small_dataset(pipeline_factory, mock_vector_store, small_dataset_path):
    pipeline = pipeline_factory(batch_size=2)

    report = pipeline.ingest(small_dataset_path)

    sizes = [len(c.args[0]) for c in mock_vector_store.batch_insert.call_args_list]
    assert sizes == [2, 1]
    assert report.objects_sent == 3  # noqa: PLR2004
    assert report.flushes == 2  # noqa: PLR2004


def test_ingest_defaults_to_configured_source(pipeline_factory, mock_vector_store):
    pipeline = pipeline_factory()

    with patch(
        "questionrag.pipeline.config.DATASET_SOURCE", str(BUNDLED_DATASET_PATH)
    ):
        report = pipeline.ingest()

    assert report.objects_sent == 10  # noqa: PLR2004
    assert mock_vector_store.batch_insert.call_count == 1


def test_query_uses_defaults(pipeline_factory, mock_vector_store, mock_chat_client):
    pipeline = pipeline_factory()

    answer = pipeline.query()

    assert mock_vector_store.search.call_args.args[2] == DEFAULT_CONCEPTS
    assert mock_chat_client.complete.call_args.args[1] == DEFAULT_PROMPT
    assert answer.message.content == "Test answer"


def test_execute_run_only_queries(pipeline_factory, mock_vector_store):
    result = pipeline_factory().execute(Mode.RUN, concepts=["cute"], prompt="p")

    mock_vector_store.create_schema.assert_not_called()
    mock_vector_store.batch_insert.assert_not_called()
    assert result.schema is None
    assert result.ingestion is None
    assert result.answer is not None


def test_execute_all_runs_steps_in_order(
    pipeline_factory, mock_vector_store, small_dataset_path
):
    where = WhereFilter.equal("category", "ANIMALS")

    result = pipeline_factory().execute(
        Mode.ALL, source=small_dataset_path, concepts=["cute"], where=where, limit=2
    )

    method_names = [name for name, _, _ in mock_vector_store.method_calls]
    assert method_names == ["create_schema", "batch_insert", "search"]
    assert mock_vector_store.search.call_args.kwargs == {"where": where, "limit": 2}
    assert result.schema["class"] == "Question"
    assert result.ingestion.objects_sent == 3  # noqa: PLR2004


@pytest.mark.parametrize("mode", [Mode.SETUP, Mode.QUERY, Mode.RUN])
def test_invalid_batch_size_only_affects_ingestion(pipeline_factory, mode):
    pipeline = pipeline_factory(batch_size=0)

    pipeline.execute(mode)

    with pytest.raises(ValueError, match="batch_size must be at least 1"):
        pipeline.ingest()


def test_execute_stops_at_first_error(pipeline_factory, mock_vector_store):
    mock_vector_store.create_schema.side_effect = ConfigurationError("bad key")

    with pytest.raises(ConfigurationError):
        pipeline_factory().execute(Mode.ALL)

    mock_vector_store.batch_insert.assert_not_called()
    mock_vector_store.search.assert_not_called()


def test_close_closes_vector_store(pipeline_factory, mock_vector_store):
    pipeline_factory().close()

    mock_vector_store.close.assert_called_once()


def test_from_config_builds_clients():
    with (
        patch(
            "questionrag.pipeline.config.vector_store_settings",
            return_value=VectorStoreSettings(url="host", api_key="w"),
        ),
        patch(
            "questionrag.pipeline.config.chat_settings",
            return_value=ChatSettings(api_key="o"),
        ),
    ):
        pipeline = QuestionPipeline.from_config(batch_size=7)

    assert isinstance(pipeline.vector_store, WeaviateClient)
    assert isinstance(pipeline.chat_client, ChatClient)
    assert pipeline.vector_store.base_url == "https://host"
    assert pipeline.ingestion_driver.batch_size == 7  # noqa: PLR2004
    pipeline.close()
