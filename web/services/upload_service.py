"""
Upload Service - Web Layer Service for Image Selection and Upload Batches.

Thin wrapper over core.session_core for web-specific concerns.
"""

from typing import Any

from core.entities import RawImage
from core.session_core import VisionSession


def files_to_raw_images(files) -> list[RawImage]:
    """
    Convert uploaded werkzeug FileStorage objects to RawImage records.

    Entries without a filename (empty file inputs) are skipped.
    """
    images = []
    for storage in files:
        if not storage or not storage.filename:
            continue
        images.append(
            RawImage(
                filename=storage.filename,
                content=storage.read(),
                content_type=storage.mimetype or "application/octet-stream",
            )
        )
    return images


def select_images(session: VisionSession, files) -> list[str]:
    """
    Replace the current selection with the uploaded files.

    Delegates to core.session_core.
    """
    return session.select_images(files_to_raw_images(files))


def get_preview(session: VisionSession, token: str):
    """Look up a preview handle of the current selection."""
    return session.preview(token)


def run_batch(session: VisionSession) -> dict[str, Any]:
    """
    Upload the current selection.

    Delegates to core.session_core.
    """
    outcome = session.run_batch()
    return {
        "status": outcome.status,
        "processed": len(outcome.successes),
        "failed": outcome.failure_count,
    }
