"""
Session Core - Application State and Transitions.

One VisionSession holds everything the UI shows: the image selection and
its preview handles, the last completed result set, the model selection and
the pending user notices. State is only changed through the transition
methods below and every collection is replaced wholesale.
"""

import threading
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core import aggregation_core, report_core
from core.entities import AggregatedRow, ModelSelectionState, RawImage, UploadResult
from core.model_core import ModelRegistry
from core.upload_core import (
    BatchInProgressError,
    BatchResult,
    NothingSelectedError,
    UploadOrchestrator,
)
from logging_config import get_logger

logger = get_logger(__name__)

NOT_AN_IMAGE_NOTICE = "Skipped {filename}: only image files can be uploaded."


@dataclass
class BatchOutcome:
    """
    Result of a run_batch trigger.

    status is "completed", "busy" (another batch is running, nothing done)
    or "empty" (no images selected, nothing sent).
    """

    status: str
    successes: list[UploadResult] = field(default_factory=list)
    failure_count: int = 0


class VisionSession:
    def __init__(
        self,
        inference_client,
        preview_store,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = report_core.DEFAULT_TIMESTAMP_FORMAT,
    ):
        self._client = inference_client
        self._previews = preview_store
        self._clock = clock
        self._timestamp_format = timestamp_format

        self._notices: deque[str] = deque()
        self._notice_lock = threading.Lock()
        self._state_lock = threading.Lock()

        self.images: list[RawImage] = []
        self.preview_tokens: list[str] = []
        self.results: list[UploadResult] = []

        self._orchestrator = UploadOrchestrator(
            clock=clock, timestamp_format=timestamp_format, notify=self.notify
        )
        self._registry = ModelRegistry(
            fetch_models=inference_client.fetch_models,
            send_selection=inference_client.set_model,
            notify=self.notify,
        )

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------

    def notify(self, message: str) -> None:
        with self._notice_lock:
            self._notices.append(message)

    def drain_notices(self) -> list[str]:
        """Returns pending notices in emission order and clears them."""
        with self._notice_lock:
            notices = list(self._notices)
            self._notices.clear()
        return notices

    # ------------------------------------------------------------------
    # Image selection
    # ------------------------------------------------------------------

    def select_images(self, images: Sequence[RawImage]) -> list[str]:
        """
        Replaces the selection with ``images``.

        Non-image files are dropped with a notice. Preview handles of the
        previous selection are released before new ones are acquired.

        Returns:
            Preview tokens, one per accepted image
        """
        accepted = []
        for image in images:
            if image.content_type.startswith("image/"):
                accepted.append(image)
            else:
                logger.warning(f"Rejected non-image upload {image.filename} ({image.content_type})")
                self.notify(NOT_AN_IMAGE_NOTICE.format(filename=image.filename))

        with self._state_lock:
            tokens = self._previews.replace(self.preview_tokens, accepted)
            self.images = accepted
            self.preview_tokens = tokens
        logger.info(f"Selection replaced: {len(accepted)} image(s).")
        return list(tokens)

    def preview(self, token: str):
        """Returns the preview for ``token`` or None once it has been released."""
        return self._previews.get(token)

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._orchestrator.busy

    def _replace_results(self, batch: BatchResult) -> None:
        with self._state_lock:
            self.results = list(batch.successes)

    def run_batch(self) -> BatchOutcome:
        """Uploads the current selection and replaces the result set on completion."""
        images = list(self.images)
        try:
            batch = self._orchestrator.run(
                images, self._client.predict, on_complete=self._replace_results
            )
        except NothingSelectedError:
            return BatchOutcome(status="empty")
        except BatchInProgressError:
            return BatchOutcome(status="busy")
        return BatchOutcome(
            status="completed",
            successes=batch.successes,
            failure_count=batch.failure_count,
        )

    # ------------------------------------------------------------------
    # Summary and reports
    # ------------------------------------------------------------------

    def summary_rows(self) -> list[AggregatedRow]:
        with self._state_lock:
            results = list(self.results)
        return aggregation_core.aggregate(results)

    def build_report(self) -> report_core.ReportDocument:
        """
        Builds the report payload for the current result set.

        Raises:
            NoResultsError: if no results are available (a notice is queued)
        """
        generated_at = report_core.format_timestamp(self._clock(), self._timestamp_format)
        try:
            return report_core.to_document(self.summary_rows(), generated_at)
        except report_core.NoResultsError as e:
            self.notify(str(e))
            raise

    def structured_view(self) -> list[dict[str, Any]]:
        return report_core.to_structured_view(self.summary_rows())

    # ------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------

    @property
    def models(self) -> ModelSelectionState:
        return self._registry.state

    def load_models(self) -> ModelSelectionState:
        return self._registry.load_available()

    def set_model(self, model_id: str) -> bool:
        return self._registry.select(model_id)
