"""Tests for detection aggregation into summary rows."""

from core.aggregation_core import aggregate, total_count
from core.entities import Detection, UploadResult


def _result(timestamp, *labels, **extra):
    return UploadResult(
        detections=[Detection(label=label, extra={"confidence": 0.9}) for label in labels],
        timestamp=timestamp,
        extra=extra,
    )


def test_empty_results_give_no_rows():
    assert aggregate([]) == []


def test_scenario_boxes_and_bottle():
    results = [_result("t1", "box"), _result("t2", "box", "bottle")]

    rows = aggregate(results)

    assert [row.to_dict() for row in rows] == [
        {"id": 1, "type": "box", "count": 2, "timestamps": "t1, t2"},
        {"id": 2, "type": "bottle", "count": 1, "timestamps": "t2"},
    ]
    assert total_count(rows) == 3


def test_rows_follow_first_appearance_order():
    results = [
        _result("t1", "carton", "box"),
        _result("t2", "bottle", "carton"),
        _result("t3", "box", "crate"),
    ]

    rows = aggregate(results)

    assert [row.type for row in rows] == ["carton", "box", "bottle", "crate"]
    assert [row.id for row in rows] == [1, 2, 3, 4]


def test_duplicate_timestamps_are_kept():
    rows = aggregate([_result("t1", "box", "box", "box")])

    assert len(rows) == 1
    assert rows[0].count == 3
    assert rows[0].timestamps == "t1, t1, t1"


def test_result_without_detections_contributes_nothing():
    rows = aggregate([_result("t1"), _result("t2", "box"), _result("t3")])

    assert [row.to_dict() for row in rows] == [
        {"id": 1, "type": "box", "count": 1, "timestamps": "t2"},
    ]


def test_total_matches_detection_count():
    results = [
        _result("t1", "a", "b", "a"),
        _result("t2"),
        _result("t3", "c", "a", "b", "b"),
    ]

    rows = aggregate(results)

    assert total_count(rows) == sum(len(r.detections) for r in results)


def test_aggregate_is_repeatable_and_does_not_mutate_input():
    results = [_result("t1", "box"), _result("t2", "bottle", "box")]
    before = [r.to_dict() for r in results]

    first = aggregate(results)
    second = aggregate(results)

    assert first == second
    assert [r.to_dict() for r in results] == before


def test_total_count_of_no_rows_is_zero():
    assert total_count([]) == 0
