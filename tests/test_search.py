from cms_admin.services.search import filter_records


RECORDS = [
    {"id": 1, "name": "Apple", "stock": 12},
    {"id": 2, "name": "Banana", "tags": ["apple"], "meta": {"note": "apple pie"}},
    {"id": 3, "name": "Pineapple", "origin": "Costa Rica"},
]


def test_blank_query_returns_input_unchanged():
    for q in ("", "   ", None):
        out = filter_records(RECORDS, q)
        assert out is RECORDS


def test_case_insensitive_substring_keeps_order():
    out = filter_records([{"name": "Apple"}, {"name": "Banana"}], "app")
    assert out == [{"name": "Apple"}]

    assert [r["id"] for r in filter_records(RECORDS, "APP")] == [1, 3]


def test_non_string_values_never_match():
    assert filter_records(RECORDS, "12") == []
    # Banana only mentions apple inside a list and a nested object
    assert [r["id"] for r in filter_records(RECORDS, "apple pie")] == []


def test_any_string_field_can_match():
    assert [r["id"] for r in filter_records(RECORDS, "rica")] == [3]
