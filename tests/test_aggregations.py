import pandas as pd

from rides.aggregations import (
    NumericSummary,
    StatusCounts,
    count_by_value,
    hour_histogram,
    numeric_summary,
    rating_histogram,
    status_counts,
    time_series,
    top_n,
)


def _col(name, values):
    return pd.DataFrame({name: values})


def test_count_by_value():
    assert count_by_value(_col("x", ["A", "A", "B"]), "x") == {"A": 2, "B": 1}


def test_count_by_value_keeps_first_seen_order():
    counts = count_by_value(_col("x", ["B", "A", "A", "C", "B"]), "x")
    assert list(counts) == ["B", "A", "C"]


def test_blank_values_are_unknown_or_skipped():
    frame = _col("x", ["A", "", "  ", "A"])
    assert count_by_value(frame, "x") == {"A": 2, "Unknown": 2}
    assert count_by_value(frame, "x", label_missing=False) == {"A": 2}


def test_count_by_value_on_empty_frame():
    assert count_by_value(_col("x", []), "x") == {}


def test_top_n_ties_keep_first_seen_order():
    assert top_n({"A": 3, "B": 3, "C": 1}, 2) == [("A", 3), ("B", 3)]
    assert top_n({"B": 3, "A": 3, "C": 1}, 2) == [("B", 3), ("A", 3)]
    assert top_n({"C": 1, "A": 5}, 10) == [("A", 5), ("C", 1)]


def test_time_series_is_sorted_and_skips_invalid_dates():
    frame = _col("Date", ["2023-02-01", "2023-01-01", "pending", "2023-01-01"])
    assert time_series(frame, "Date") == [("2023-01-01", 2), ("2023-02-01", 1)]


def test_numeric_summary_coerces_to_zero():
    summary = numeric_summary(_col("v", ["10", "abc", "", " 20"]), "v")
    assert summary == NumericSummary(total=30.0, mean=7.5, count=4)


def test_numeric_summary_can_skip_missing():
    summary = numeric_summary(_col("v", ["10", "abc", "", "20"]), "v", skip_missing=True)
    assert summary == NumericSummary(total=30.0, mean=15.0, count=2)


def test_numeric_summary_over_no_rows_is_zero():
    summary = numeric_summary(_col("v", []), "v")
    assert summary.mean == 0
    assert summary.total == 0
    assert numeric_summary(_col("v", ["1"]), None).mean == 0


def test_hour_histogram_skips_unparseable_times():
    frame = _col("Booking Time", ["12:29:38", "garbage", "", "2024-03-23 08:05:00", "7:15 PM"])
    buckets = hour_histogram(frame, "Booking Time")
    assert len(buckets) == 24
    assert sum(buckets) == 3
    assert buckets[12] == 1
    assert buckets[8] == 1
    assert buckets[19] == 1


def test_hour_histogram_only_unparseable():
    assert hour_histogram(_col("t", ["garbage"]), "t") == [0] * 24


def test_rating_histogram_skips_zero_ratings():
    frame = _col("r", ["4.6", "4.4", "0", "", "abc", "3.5", "0.4"])
    assert rating_histogram(frame, "r") == {4: 2, 5: 1}


def test_rating_histogram_can_count_zero():
    frame = _col("r", ["4.6", "0", "0.4", ""])
    assert rating_histogram(frame, "r", include_zero=True) == {0: 2, 5: 1}


def test_rating_histogram_is_ordered_by_rating():
    frame = _col("r", ["5", "3", "4", "3"])
    assert list(rating_histogram(frame, "r")) == [3, 4, 5]


def test_status_counts():
    frame = _col("Booking Status", ["Completed", "Cancelled", "Completed"])
    assert status_counts(frame, "Booking Status") == StatusCounts(total=3, completed=2, cancelled=1)


def test_status_counts_variants(rides_frame):
    counts = status_counts(rides_frame, "Booking Status")
    assert counts == StatusCounts(total=6, completed=4, cancelled=2)


def test_aggregations_do_not_mutate_input(rides_frame):
    before = rides_frame.copy()
    count_by_value(rides_frame, "Pickup Location")
    numeric_summary(rides_frame, "Booking Value")
    rating_histogram(rides_frame, "Driver Ratings")
    pd.testing.assert_frame_equal(rides_frame, before)
