import time

import pytest

from appscout.models import APPLE_APP_STORE, GOOGLE_PLAY, CombinedRecord, SourceRecord
from appscout import reconciler as rc


def google(title, term="fitness", **fields):
    return SourceRecord.from_raw(GOOGLE_PLAY, {"title": title, **fields}, term)


def apple(title, term="fitness", **fields):
    return SourceRecord.from_raw(APPLE_APP_STORE, {"title": title, **fields}, term)


def by_title(apps):
    return {app.title: app for app in apps}


# same_app / identity_key
def test_same_app_exact_title():
    assert rc.same_app(google("Foo"), apple("Foo"))

def test_same_app_case_and_whitespace_are_different_apps():
    assert not rc.same_app(google("Foo"), apple("foo"))
    assert not rc.same_app(google("Foo"), apple("Foo "))

def test_same_app_against_combined_record():
    combined = rc.populate(CombinedRecord(), apple("Bar"))
    assert rc.same_app(google("Bar"), combined)
    assert not rc.same_app(google("Baz"), combined)

def test_missing_title_becomes_empty_identity():
    record = SourceRecord.from_raw(GOOGLE_PLAY, {"appId": "com.x"}, "x")
    assert rc.identity_key(record) == ""
    assert rc.same_app(record, google(""))


# store_of
def test_store_of_uses_explicit_tag():
    # an Apple record carrying a Google-style "summary" is still Apple
    record = apple("Foo", summary="short text")
    assert rc.store_of(record) == APPLE_APP_STORE

def test_store_of_unknown_tag():
    with pytest.raises(ValueError):
        rc.store_of(SourceRecord(source="windows_store", title="Foo", search_term="x"))


# populate
def test_populate_sets_provenance_and_fields():
    combined = rc.populate(CombinedRecord(), google("Foo", score=4.5))
    assert combined.title_google == "Foo"
    assert combined.title_apple is None
    assert combined.google["score"] == 4.5
    assert combined.google["searchTerm"] == "fitness"
    assert combined.apple == {}

def test_populate_replaces_whole_field_set():
    first = rc.populate(CombinedRecord(), google("Foo", score=4.5, installs="1,000+"))
    second = rc.populate(first, google("Foo", term="yoga", score=3.0))
    assert second.google["score"] == 3.0
    assert second.google["searchTerm"] == "yoga"
    assert "installs" not in second.google

def test_populate_does_not_touch_other_store():
    combined = rc.populate(CombinedRecord(), apple("Foo", price=0))
    combined = rc.populate(combined, google("Foo", score=4.0))
    assert combined.apple["price"] == 0
    assert combined.title_apple == "Foo"
    assert combined.title_google == "Foo"


# deduplicate
def test_deduplicate_distinct_titles_keeps_everything():
    records = [google(t) for t in ["A", "B", "C", "D"]]
    result = rc.deduplicate(records, source=GOOGLE_PLAY)
    assert result.input_count == 4
    assert result.output_count == 4
    assert result.removed == 0

def test_deduplicate_last_record_wins():
    records = [google("Foo", score=1), google("Foo", score=2), google("Foo", score=3)]
    result = rc.deduplicate(records)
    assert result.output_count == 1
    assert result.records["Foo"].google["score"] == 3

def test_deduplicate_reports_counts():
    result = rc.deduplicate([google("Foo"), google("Bar"), google("Foo")], source=GOOGLE_PLAY)
    assert result.input_count == 3
    assert result.output_count == 2
    assert result.removed == 1
    assert list(result.records) == ["Foo", "Bar"]

def test_deduplicate_empty_titles_collapse():
    result = rc.deduplicate([google(""), google(None), google("")])
    assert result.output_count == 1
    assert "" in result.records

def test_deduplicate_never_rejects_input():
    result = rc.deduplicate([google("Foo"), apple("Foo"), google("")], source=GOOGLE_PLAY)
    assert result.input_count == 3
    assert result.output_count == 2

def test_deduplicate_empty_input():
    result = rc.deduplicate([], source=APPLE_APP_STORE)
    assert result.records == {}
    assert result.input_count == 0


# fold_record
def test_fold_record_does_not_mutate_accumulator():
    acc = {}
    new = rc.fold_record(acc, google("Foo"))
    assert acc == {}
    assert "Foo" in new


# merge_sources
def test_merge_scenario_foo_bar_baz():
    google_records = [google("Foo"), google("Bar"), google("Foo")]
    apple_records = [apple("Bar"), apple("Baz")]

    apps = by_title(rc.merge_sources(google_records, apple_records))

    assert set(apps) == {"Foo", "Bar", "Baz"}
    assert apps["Foo"].both_app_stores is False
    assert apps["Bar"].both_app_stores is True
    assert apps["Baz"].both_app_stores is False

    dedup = rc.deduplicate(google_records, source=GOOGLE_PLAY)
    assert (dedup.input_count, dedup.output_count, dedup.removed) == (3, 2, 1)

def test_merge_order_does_not_change_flags():
    google_records = [google("Foo"), google("Bar")]
    apple_records = [apple("Bar"), apple("Baz"), apple("Foo ")]

    forward = by_title(rc.merge_sources(google_records, apple_records))
    backward = by_title(rc.merge_sources(apple_records, google_records))

    assert set(forward) == set(backward)
    for title in forward:
        assert forward[title].both_app_stores == backward[title].both_app_stores

def test_merge_both_flag_matches_provenance():
    apps = rc.merge_sources([google("A"), google("B")], [apple("B"), apple("C")])
    for app in apps:
        expected = app.title_google is not None and app.title_apple is not None
        assert app.both_app_stores is expected

def test_merge_keeps_both_field_sets():
    apps = by_title(rc.merge_sources([google("Bar", score=4.1)], [apple("Bar", price=1.99)]))
    bar = apps["Bar"]
    assert bar.google["score"] == 4.1
    assert bar.apple["price"] == 1.99

def test_merge_empty_inputs():
    assert rc.merge_sources([], []) == []

def test_merge_empty_title_in_both_stores_counts_as_both():
    apps = rc.merge_sources([google("")], [apple("")])
    assert len(apps) == 1
    assert apps[0].both_app_stores is True

def test_count_in_both():
    apps = rc.merge_sources([google("A"), google("B")], [apple("B")])
    assert rc.count_in_both(apps) == 1

def test_merge_matches_step_by_step_fold():
    records = [google("Foo", score=1), apple("Bar"), google("Bar"), google("Foo", score=2), apple("Baz")]
    acc = {}
    for record in records:
        acc = rc.fold_record(acc, record)
    assert rc.merge_sources(records) == rc.finalize(acc)

def test_merge_large_input_stays_fast():
    # 80 terms x 250 hits x 2 stores, half of the titles repeated
    google_records = [google(f"App {i % 10000}") for i in range(20000)]
    apple_records = [apple(f"App {i % 10000 + 5000}") for i in range(20000)]

    started = time.perf_counter()
    apps = rc.merge_sources(google_records, apple_records)
    elapsed = time.perf_counter() - started

    assert len(apps) == 15000
    assert rc.count_in_both(apps) == 5000
    assert elapsed < 5
