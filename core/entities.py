"""
Entities - Shared Data Records.

Plain records passed between the upload, aggregation, report and model
modules. Fields the inference service sends beyond the ones named here are
kept untouched in ``extra``.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RawImage:
    """
    One selected image as received from the browser.

    Attributes:
        filename: Original client-side filename.
        content: Raw file bytes.
        content_type: MIME type reported by the client.
    """

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass
class Detection:
    """
    One classified object returned by the inference service.

    Only ``label`` (the service's ``class`` field) is used by the core.
    Confidence, geometry and whatever else the service sends stay in ``extra``.
    """

    label: str
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Detection":
        label = payload["class"]
        if not isinstance(label, str) or not label:
            raise ValueError(f"Detection class must be a non-empty string, got {label!r}")
        extra = {k: v for k, v in payload.items() if k != "class"}
        return cls(label=label, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        return {"class": self.label, **self.extra}


@dataclass
class UploadResult:
    """
    Response for one successfully processed image.

    Attributes:
        detections: Detections in the order the service returned them.
        timestamp: Client-side capture time of the response.
        extra: Remaining server fields, passed through unexamined.
    """

    detections: list[Detection]
    timestamp: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "detections": [d.to_dict() for d in self.detections],
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AggregatedRow:
    """One summary line covering every detection of a single class."""

    id: int
    type: str
    count: int
    timestamps: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "count": self.count,
            "timestamps": self.timestamps,
        }


@dataclass(frozen=True)
class Model:
    id: str
    label: str


@dataclass
class ModelSelectionState:
    available: list[Model] = field(default_factory=list)
    current: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": [{"id": m.id, "label": m.label} for m in self.available],
            "current": self.current,
        }
