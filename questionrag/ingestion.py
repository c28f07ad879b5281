"""Batch ingestion of question records into the vector store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .models import IngestionReport, VectorStoreObject

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import QuestionRecord
    from .vector_store import WeaviateClient

logger = config.get_logger(__name__)


class BatchQueue:
    """Pending objects plus the counter that triggers a flush."""

    def __init__(self) -> None:
        self.objects: list[VectorStoreObject] = []
        self.counter = 0

    def __len__(self) -> int:
        return len(self.objects)

    def append(self, obj: VectorStoreObject) -> int:
        """Queue an object and return the counter value before the increment."""
        self.objects.append(obj)
        previous = self.counter
        self.counter += 1
        return previous

    def drain(self) -> list[VectorStoreObject]:
        """Return the queued objects and reset the queue."""
        objects = self.objects
        self.objects = []
        self.counter = 0
        return objects


class IngestionDriver:
    """Pages question records through ``WeaviateClient.batch_insert``."""

    def __init__(
        self,
        vector_store: WeaviateClient,
        class_name: str = "Question",
        batch_size: int = 100,
        *,
        legacy_trigger: bool = False,
    ) -> None:
        """Initialize the driver.

        Args:
            vector_store: Client that receives the batches.
            class_name: Class assigned to every object.
            batch_size: Objects per flush.
            legacy_trigger: Flush only once ``batch_size + 1`` objects are
                queued.

        Raises:
            ValueError: If ``batch_size`` is less than 1.
        """
        if batch_size < 1:
            msg = f"batch_size must be at least 1, got {batch_size}"
            raise ValueError(msg)
        self.vector_store = vector_store
        self.class_name = class_name
        self.batch_size = batch_size
        self.legacy_trigger = legacy_trigger

    def _should_flush(self, previous: int, current: int) -> bool:
        if self.legacy_trigger:
            return previous == self.batch_size
        return current == self.batch_size

    def _flush(self, queue: BatchQueue, report: IngestionReport) -> None:
        objects = queue.drain()
        results = self.vector_store.batch_insert(objects)
        report.flushes += 1
        report.objects_sent += len(objects)
        report.failed_objects += sum(1 for result in results if not result.ok)
        logger.info("Flush %d: %d objects", report.flushes, len(objects))

    def ingest(self, records: Iterable[QuestionRecord]) -> IngestionReport:
        """Send every record, flushing whenever the batch is full.

        A final flush always runs after the records are exhausted, even when
        the queue is empty. Any flush error aborts the run.

        Returns:
            Counts of flushes, objects sent and objects rejected by the store.
        """
        queue = BatchQueue()
        report = IngestionReport()

        for record in records:
            obj = VectorStoreObject.from_record(record, self.class_name)
            previous = queue.append(obj)
            if self._should_flush(previous, queue.counter):
                self._flush(queue, report)

        self._flush(queue, report)

        logger.info(
            "Ingestion completed: %d objects in %d flushes, %d failed",
            report.objects_sent,
            report.flushes,
            report.failed_objects,
        )
        return report
