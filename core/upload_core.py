"""
Upload Core - Batch Upload Orchestration.

Submits a batch of images to the inference service strictly one at a time,
stamps every successful response with its receipt time and collects the
results. A failed image is reported and skipped; it never aborts the batch.
"""

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.entities import Detection, RawImage, UploadResult
from core.report_core import DEFAULT_TIMESTAMP_FORMAT, format_timestamp
from logging_config import get_logger

logger = get_logger(__name__)

UPLOAD_FAILED_NOTICE = "Failed to upload and process an image."
NOTHING_SELECTED_NOTICE = "Please select at least one image."

SubmitFunc = Callable[[RawImage], dict[str, Any]]


class NothingSelectedError(ValueError):
    """Raised when a batch is started without any selected images."""


class BatchInProgressError(RuntimeError):
    """Raised when a batch is triggered while another one is still running."""


@dataclass
class BatchResult:
    successes: list[UploadResult] = field(default_factory=list)
    failure_count: int = 0


def parse_upload_response(payload: Any, timestamp: str) -> UploadResult:
    """
    Builds an UploadResult from a /predict response body.

    Raises:
        ValueError: if the body has no usable ``detections`` list
    """
    if not isinstance(payload, dict):
        raise ValueError("Prediction response is not an object")
    raw_detections = payload.get("detections")
    if not isinstance(raw_detections, list):
        raise ValueError("Prediction response has no detections list")

    try:
        detections = [Detection.from_dict(d) for d in raw_detections]
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ValueError(f"Malformed detection in response: {e}") from e

    extra = {k: v for k, v in payload.items() if k not in ("detections", "timestamp")}
    return UploadResult(detections=detections, timestamp=timestamp, extra=extra)


class UploadOrchestrator:
    """
    Runs upload batches against the inference service.

    Only one batch can be in flight; the busy flag is held from the first
    submission until the completion callback has returned.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        notify: Callable[[str], None] | None = None,
    ):
        self._clock = clock
        self._timestamp_format = timestamp_format
        self._notify = notify or (lambda message: None)
        self._busy_lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy_lock.locked()

    def run(
        self,
        images: Sequence[RawImage],
        submit: SubmitFunc,
        on_complete: Callable[[BatchResult], None] | None = None,
    ) -> BatchResult:
        """
        Submits every image in order and collects the successes.

        Args:
            images: Current selection, in display order
            submit: Sends one image and returns the decoded response body
            on_complete: Called with the finished batch while still busy

        Returns:
            BatchResult with successes in input order and the failure count

        Raises:
            NothingSelectedError: if ``images`` is empty (nothing is sent)
            BatchInProgressError: if another batch is still running
        """
        if not images:
            self._notify(NOTHING_SELECTED_NOTICE)
            raise NothingSelectedError(NOTHING_SELECTED_NOTICE)

        if not self._busy_lock.acquire(blocking=False):
            logger.info("Upload batch already in progress, ignoring trigger.")
            raise BatchInProgressError("An upload batch is already running.")

        try:
            batch = BatchResult()
            logger.info(f"Starting upload batch of {len(images)} image(s).")

            for position, image in enumerate(images, start=1):
                try:
                    payload = submit(image)
                    timestamp = format_timestamp(self._clock(), self._timestamp_format)
                    batch.successes.append(parse_upload_response(payload, timestamp))
                    logger.debug(f"Image {position}/{len(images)} ({image.filename}) processed.")
                except Exception as e:
                    batch.failure_count += 1
                    logger.error(
                        f"Error uploading file {image.filename}: {e}", exc_info=True
                    )
                    self._notify(UPLOAD_FAILED_NOTICE)

            logger.info(
                f"Upload batch finished: {len(batch.successes)} succeeded, "
                f"{batch.failure_count} failed."
            )
            if on_complete is not None:
                on_complete(batch)
            return batch
        finally:
            self._busy_lock.release()
