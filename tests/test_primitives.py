from __future__ import annotations

import pandas as pd
import pytest

from bla_dashboard.features.primitives import (
    NULL_KEY,
    UNDEFINED_KEY,
    avg_by,
    chunk,
    group_by,
    max_by,
    min_by,
    sort_by,
    sum_by,
    unique,
)


def _records() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "bla_id": ["B2", "B1", "B2", None, "B1"],
            "count": ["5", 3, 2.5, "x", 10],
        },
        dtype=object,
    )


def test_group_by_preserves_first_occurrence_order_and_partitions() -> None:
    records = _records()

    groups = group_by(records, "bla_id")

    assert list(groups) == ["B2", "B1", NULL_KEY]
    assert [len(group) for group in groups.values()] == [2, 2, 1]
    rebuilt = pd.concat(groups.values()).sort_index()
    pd.testing.assert_frame_equal(rebuilt, records)


def test_group_by_uses_string_forms_of_keys() -> None:
    records = pd.DataFrame({"size": [7, "7", 7.0, 2]}, dtype=object)

    groups = group_by(records, "size")

    assert list(groups) == ["7", "2"]
    assert len(groups["7"]) == 3


def test_group_by_missing_column_yields_undefined_key() -> None:
    groups = group_by(_records(), "ac_no")

    assert list(groups) == [UNDEFINED_KEY]
    assert len(groups[UNDEFINED_KEY]) == 5


def test_group_by_accepts_callable_accessor() -> None:
    groups = group_by(_records(), lambda frame: frame["bla_id"].fillna("none").str.lower())

    assert list(groups) == ["b2", "b1", "none"]


def test_numeric_aggregates_coerce_values() -> None:
    records = _records()

    assert sum_by(records, "count") == pytest.approx(20.5)
    assert avg_by(records, "count") == pytest.approx(sum_by(records, "count") / len(records))
    assert max_by(records, "count") == 10.0
    assert min_by(records, "count") == 0.0


def test_aggregates_on_empty_records_are_zero() -> None:
    empty = pd.DataFrame({"count": []})

    assert sum_by(empty, "count") == 0.0
    assert avg_by(empty, "count") == 0.0
    assert max_by(empty, "count") == 0.0
    assert min_by(empty, "count") == 0.0


def test_sort_by_desc_is_reverse_of_asc_without_ties() -> None:
    records = pd.DataFrame({"value": [3, 1, 4, 10, 5]})

    ascending = sort_by(records, "value", "asc")["value"].tolist()
    descending = sort_by(records, "value", "desc")["value"].tolist()

    assert ascending == [1, 3, 4, 5, 10]
    assert descending == list(reversed(ascending))


def test_sort_by_is_stable_for_ties() -> None:
    records = pd.DataFrame({"name": ["a", "b", "c", "d"], "value": [1, 2, 1, 2]})

    assert sort_by(records, "value", "desc")["name"].tolist() == ["b", "d", "a", "c"]
    assert sort_by(records, "value")["name"].tolist() == ["a", "c", "b", "d"]


def test_sort_by_rejects_unknown_order() -> None:
    with pytest.raises(ValueError, match="sort order"):
        sort_by(_records(), "count", "sideways")  # type: ignore[arg-type]


def test_sort_by_returns_new_frame() -> None:
    records = pd.DataFrame({"value": [2, 1]})

    sorted_records = sort_by(records, "value")

    assert sorted_records is not records
    assert records["value"].tolist() == [2, 1]


def test_unique_keeps_first_occurrence_order() -> None:
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_chunk_frames_and_sequences() -> None:
    frame = pd.DataFrame({"value": range(5)})

    frame_chunks = chunk(frame, 2)
    list_chunks = chunk([1, 2, 3, 4, 5], 3)

    assert [len(part) for part in frame_chunks] == [2, 2, 1]
    assert list_chunks == [[1, 2, 3], [4, 5]]
    with pytest.raises(ValueError):
        chunk([1, 2], 0)
