"""
Aggregation Core - Detection Summary Logic.

Turns the per-image results of one batch into class-level summary rows.
Pure functions only; safe to call repeatedly on the same input.
"""

from collections.abc import Iterable, Sequence

from core.entities import AggregatedRow, UploadResult

TIMESTAMP_SEPARATOR = ", "


def aggregate(results: Sequence[UploadResult]) -> list[AggregatedRow]:
    """
    Groups detections by class label.

    Rows come out in first-appearance order: results in batch order, then
    detections within a result in their given order. Every contributing
    detection adds its result's timestamp, so duplicates are kept.

    Args:
        results: Successful upload results of one batch

    Returns:
        Summary rows with 1-based ids
    """
    buckets: dict[str, list[str]] = {}

    for result in results:
        for detection in result.detections:
            buckets.setdefault(detection.label, []).append(result.timestamp)

    return [
        AggregatedRow(
            id=index,
            type=label,
            count=len(timestamps),
            timestamps=TIMESTAMP_SEPARATOR.join(timestamps),
        )
        for index, (label, timestamps) in enumerate(buckets.items(), start=1)
    ]


def total_count(rows: Iterable[AggregatedRow]) -> int:
    """Sum of counts over all rows."""
    return sum(row.count for row in rows)
