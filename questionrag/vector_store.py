"""Weaviate REST/GraphQL client for schema setup, batch ingestion and search."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import requests

from .config import config
from .errors import ConfigurationError, NetworkError, ParseError, UpstreamError
from .models import ObjectResult, QuestionRecord, VectorStoreObject, WhereFilter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .config import VectorStoreSettings

logger = config.get_logger(__name__)

AUTH_FAILURE_CODES = {401, 403}


def build_question_class(
    class_name: str = "Question",
    vectorizer: str = "text2vec-openai",
    generative_module: str | None = "generative-openai",
) -> dict[str, Any]:
    """Return the class definition used for question objects.

    With ``vectorizer`` set to ``"none"`` every object must carry its own
    vector; any ``text2vec-*`` module lets Weaviate embed the text itself.
    """
    module_config: dict[str, Any] = {}
    if vectorizer != "none":
        module_config[vectorizer] = {}
    if generative_module:
        module_config[generative_module] = {}
    return {
        "class": class_name,
        "vectorizer": vectorizer,
        "moduleConfig": module_config,
    }


def _graphql_value(value: Any) -> str:
    """Render a Python value as a GraphQL literal."""
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_graphql_value(item) for item in value) + "]"
    # JSON string escaping is valid GraphQL string escaping
    return json.dumps(value)


def build_near_text_query(
    class_name: str,
    fields: Sequence[str],
    concepts: Sequence[str],
    where: WhereFilter | None = None,
    limit: int | None = None,
) -> str:
    """Build a ``Get`` query with a ``nearText`` argument.

    Returns:
        GraphQL query text.
    """
    arguments = [f"nearText: {{concepts: {_graphql_value(list(concepts))}}}"]
    if where is not None:
        arguments.append(
            "where: {"
            f"path: {_graphql_value(list(where.path))}, "
            f"operator: {where.operator}, "
            f"valueText: {_graphql_value(where.value_text)}"
            "}"
        )
    if limit is not None:
        arguments.append(f"limit: {int(limit)}")

    return (
        "{ Get { "
        f"{class_name}({', '.join(arguments)}) "
        f"{{ {' '.join(fields)} }}"
        " } }"
    )


class WeaviateClient:
    """Authenticated client for a remote Weaviate instance."""

    def __init__(
        self,
        settings: VectorStoreSettings,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client and its HTTP session.

        Args:
            settings: Host, credentials and timeout for the instance.
            session: Optional preconfigured session. A new one is created
                when omitted.
        """
        self.settings = settings
        url = settings.url.rstrip("/")
        if url and not url.startswith(("http://", "https://")):
            url = f"https://{url}"
        self.base_url = url
        self.timeout = settings.timeout

        self.session = session or requests.Session()
        self.session.headers.update(settings.headers)
        self.session.headers["Content-Type"] = "application/json"
        if settings.api_key:
            self.session.headers["Authorization"] = f"Bearer {settings.api_key}"
        if settings.openai_api_key:
            self.session.headers["X-OpenAI-Api-Key"] = settings.openai_api_key

    def __enter__(self) -> WeaviateClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _post(self, path: str, payload: Any) -> Any:
        """POST a JSON payload and return the decoded response body.

        Raises:
            NetworkError: If the host cannot be reached, the call timed out or
                the request failed in transport.
            ConfigurationError: If the URL is unusable or the credentials are
                rejected.
            UpstreamError: For any other non-success response.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.exception("Cannot reach Weaviate at %s", url)
            msg = f"Cannot reach {url}: {exc}"
            raise NetworkError(msg) from exc
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidURL,
        ) as exc:
            msg = f"Invalid Weaviate URL '{url}'; check WEAVIATE_URL"
            raise ConfigurationError(msg) from exc
        except requests.RequestException as exc:
            logger.exception("Request to Weaviate at %s failed", url)
            msg = f"Request to {url} failed: {exc}"
            raise NetworkError(msg) from exc

        if response.status_code in AUTH_FAILURE_CODES:
            msg = f"Weaviate rejected credentials (HTTP {response.status_code})"
            raise ConfigurationError(msg)
        if not response.ok:
            msg = f"HTTP {response.status_code} calling {url}: {response.text}"
            raise UpstreamError(
                msg, status_code=response.status_code, body=response.text
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            msg = f"Invalid JSON from {url}"
            raise ParseError(msg) from exc

    def create_schema(self, class_definition: dict[str, Any]) -> dict[str, Any]:
        """Create a class in the schema.

        Fails with ``UpstreamError`` when the class already exists.

        Returns:
            The class definition as stored by Weaviate.
        """
        logger.info("Creating class %s", class_definition.get("class"))
        result = self._post("/v1/schema", class_definition)
        logger.info("Schema response: %s", result)
        return result

    def batch_insert(self, objects: Sequence[VectorStoreObject]) -> list[ObjectResult]:
        """Insert objects in one batch request.

        Args:
            objects: Objects to send. An empty sequence is accepted and sends
                nothing.

        Returns:
            One result per object, in response order.
        """
        if not objects:
            logger.debug("Empty batch, nothing to send")
            return []

        payload = {"objects": [obj.to_payload() for obj in objects]}
        body = self._post("/v1/batch/objects", payload)
        if not isinstance(body, list):
            msg = "Batch response is not a list"
            raise ParseError(msg)

        results = [self._parse_object_result(item) for item in body]
        failed = [result for result in results if not result.ok]
        for result in failed:
            logger.warning(
                "Object %s failed: %s", result.id, "; ".join(result.errors)
            )
        logger.info(
            "Batch of %d objects sent: %d succeeded, %d failed",
            len(objects),
            len(results) - len(failed),
            len(failed),
        )
        return results

    @staticmethod
    def _parse_object_result(item: Any) -> ObjectResult:
        if not isinstance(item, dict):
            msg = "Batch response item is not an object"
            raise ParseError(msg)
        errors_block = (item.get("result") or {}).get("errors") or {}
        messages = [
            str(error.get("message", error))
            for error in errors_block.get("error", [])
            if isinstance(error, dict)
        ]
        return ObjectResult(
            id=item.get("id"), class_name=item.get("class"), errors=messages
        )

    def search(
        self,
        class_name: str,
        fields: Sequence[str],
        concepts: Sequence[str],
        where: WhereFilter | None = None,
        limit: int | None = None,
    ) -> list[QuestionRecord]:
        """Run a near-text similarity query.

        Args:
            class_name: Class to search.
            fields: Properties to return for each hit.
            concepts: Free-text phrases the store embeds and searches for.
            where: Optional equality filter.
            limit: Optional maximum number of hits.

        Returns:
            Hits in the order returned by the store.

        Raises:
            UpstreamError: If the query returns GraphQL errors.
            ParseError: If the response does not contain the class.
        """
        query = build_near_text_query(class_name, fields, concepts, where, limit)
        logger.debug("GraphQL query: %s", query)
        body = self._post("/v1/graphql", {"query": query})

        if not isinstance(body, dict):
            msg = "GraphQL response is not an object"
            raise ParseError(msg)
        if body.get("errors"):
            messages = "; ".join(
                str(error.get("message", error)) for error in body["errors"]
            )
            msg = f"GraphQL query failed: {messages}"
            raise UpstreamError(msg, body=json.dumps(body["errors"]))

        hits = ((body.get("data") or {}).get("Get") or {}).get(class_name)
        if not isinstance(hits, list):
            msg = f"GraphQL response has no results for class '{class_name}'"
            raise ParseError(msg)

        results = [
            QuestionRecord.from_properties(hit, index)
            for index, hit in enumerate(hits)
        ]
        logger.info(
            "Near-text query %s returned %d results", list(concepts), len(results)
        )
        return results
