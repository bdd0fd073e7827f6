import pytest

from top_k import RankedResult, group_top_k, top_k
from trend_velocity import velocity_records

REQUESTS = [
    {"date": "2000-10-10", "uri": "/index.html", "requests": 5, "bytes": 1000},
    {"date": "2000-10-10", "uri": "/about.html", "requests": 9, "bytes": 200},
    {"date": "2000-10-11", "uri": "/index.html", "requests": 2, "bytes": 400},
    {"date": "2000-10-10", "uri": "/logo.png", "requests": 5, "bytes": 9000},
    {"date": "2000-10-10", "uri": "/faq.html", "requests": 1, "bytes": 50},
]


def test_descending_and_truncated():
    result = top_k(REQUESTS, "requests", 3)
    assert [r["uri"] for r in result] == ["/about.html", "/index.html", "/logo.png"]


def test_ties_keep_input_order():
    items = [("a", 1), ("b", 2), ("c", 1), ("d", 2), ("e", 1)]
    assert top_k(items, lambda item: item[1], 5) == [("b", 2), ("d", 2), ("a", 1), ("c", 1), ("e", 1)]


def test_length_is_min_of_n_and_input():
    assert len(top_k(REQUESTS, "bytes", 100)) == len(REQUESTS)
    assert top_k(REQUESTS, "bytes", 0) == []
    assert top_k([], "bytes", 3) == []


def test_input_not_mutated():
    snapshot = list(REQUESTS)
    top_k(REQUESTS, "bytes", 2)
    assert REQUESTS == snapshot


def test_none_scores_are_not_ranked():
    items = [{"score": None}, {"score": 1.0}]
    assert top_k(items, "score", 5) == [{"score": 1.0}]


def test_negative_n_rejected():
    with pytest.raises(ValueError):
        top_k(REQUESTS, "bytes", -1)
    with pytest.raises(ValueError):
        group_top_k(REQUESTS, "date", "bytes", -1)


def test_group_top_k_by_selected_field():
    by_bytes = group_top_k(REQUESTS, "date", "bytes", 2)
    assert [g.group_key for g in by_bytes] == ["2000-10-10", "2000-10-11"]
    assert [r["uri"] for r in by_bytes[0].items] == ["/logo.png", "/index.html"]
    assert by_bytes[1] == RankedResult("2000-10-11", (REQUESTS[2],))

    by_count = group_top_k(REQUESTS, "date", "requests", 2)
    assert [r["uri"] for r in by_count[0].items] == ["/about.html", "/index.html"]


def test_attribute_keys_for_records():
    records = velocity_records("cloud", [("2013-01", 0.1), ("2013-02", 0.4)])
    records += velocity_records("phone", [("2013-02", 0.7)])
    ranked = group_top_k(records, "period", "combined_velocity", 1)
    assert [(g.group_key, g.items[0].word) for g in ranked] == [("2013-01", "cloud"), ("2013-02", "phone")]
