"""
In-memory preview handles for the current image selection.

Each selected image gets a token addressing a small PNG thumbnail. Handles
are released explicitly whenever the selection is replaced.
"""

import io
import threading
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from core.entities import RawImage
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Preview:
    content: bytes
    mimetype: str


def make_thumbnail(image: RawImage, size: int = 128) -> Preview:
    """
    Renders a PNG thumbnail that fits within ``size`` x ``size``.

    Falls back to the original bytes when Pillow cannot decode the image.
    """
    try:
        with Image.open(io.BytesIO(image.content)) as img:
            img.thumbnail((size, size))
            if img.mode not in ("RGB", "RGBA", "L"):
                img = img.convert("RGB")
            buf = io.BytesIO()
            img.save(buf, format="PNG")
            return Preview(content=buf.getvalue(), mimetype="image/png")
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not build thumbnail for {image.filename}: {e}")
        return Preview(content=image.content, mimetype=image.content_type)


class PreviewStore:
    def __init__(self, size: int = 128):
        self._size = size
        self._handles: dict[str, Preview] = {}
        self._lock = threading.Lock()

    def acquire(self, image: RawImage) -> str:
        """Creates a preview handle and returns its token."""
        preview = make_thumbnail(image, self._size)
        token = uuid.uuid4().hex
        with self._lock:
            self._handles[token] = preview
        return token

    def release(self, token: str) -> None:
        with self._lock:
            self._handles.pop(token, None)

    def replace(self, old_tokens: Sequence[str], images: Sequence[RawImage]) -> list[str]:
        """Releases every handle in ``old_tokens`` and acquires one per image."""
        for token in old_tokens:
            self.release(token)
        return [self.acquire(image) for image in images]

    def get(self, token: str) -> Preview | None:
        with self._lock:
            return self._handles.get(token)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)
