"""Loading of question/answer datasets from files or URLs."""

from __future__ import annotations

import json
from pathlib import Path

import requests

from .config import config
from .errors import NetworkError, ParseError, UpstreamError
from .models import QuestionRecord

logger = config.get_logger(__name__)

QUICKSTART_DATASET_URL = (
    "https://raw.githubusercontent.com/weaviate-tutorials/quickstart/main/"
    "data/jeopardy_tiny.json"
)


class DatasetLoader:
    """Loads JSON arrays of ``{Question, Answer, Category}`` records."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    @staticmethod
    def is_url(source: str | Path) -> bool:
        return isinstance(source, str) and source.startswith(("http://", "https://"))

    @staticmethod
    def parse_records(payload: object) -> list[QuestionRecord]:
        """Validate a decoded payload and convert it to records.

        Returns:
            Records in source order.

        Raises:
            ParseError: If the payload is not an array of well-formed records.
        """
        if not isinstance(payload, list):
            msg = f"Dataset must be a JSON array, got {type(payload).__name__}"
            raise ParseError(msg)
        return [
            QuestionRecord.from_source(item, index)
            for index, item in enumerate(payload)
        ]

    def load_file(self, file_path: Path) -> list[QuestionRecord]:
        """Load records from a local JSON file.

        Returns:
            Records in file order.
        """
        try:
            with file_path.open(encoding="utf-8") as file:
                payload = json.load(file)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.exception("Error parsing dataset %s", file_path)
            msg = f"{file_path} is not valid JSON: {exc}"
            raise ParseError(msg) from exc

        records = self.parse_records(payload)
        logger.info("Loaded %d records from %s", len(records), file_path)
        return records

    def load_url(self, url: str) -> list[QuestionRecord]:
        """Fetch and load records from a URL.

        Returns:
            Records in payload order.
        """
        try:
            response = requests.get(url, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.exception("Error fetching dataset %s", url)
            msg = f"Cannot reach {url}: {exc}"
            raise NetworkError(msg) from exc
        except requests.RequestException as exc:
            logger.exception("Error fetching dataset %s", url)
            msg = f"Request for {url} failed: {exc}"
            raise NetworkError(msg) from exc

        if not response.ok:
            msg = f"HTTP {response.status_code} fetching {url}"
            raise UpstreamError(
                msg, status_code=response.status_code, body=response.text
            )

        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"{url} did not return valid JSON"
            raise ParseError(msg) from exc

        records = self.parse_records(payload)
        logger.info("Loaded %d records from %s", len(records), url)
        return records

    def load(self, source: str | Path) -> list[QuestionRecord]:
        """Load records from a local path or an ``http(s)`` URL.

        Args:
            source: File path or URL.

        Returns:
            All records, eagerly.
        """
        if self.is_url(source):
            return self.load_url(str(source))
        return self.load_file(Path(source))
