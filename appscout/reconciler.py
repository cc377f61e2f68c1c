"""
Reconciler: turns two raw store result lists into one list of apps.

Steps:
    1. Deduplicate each store on its own (one record per title, used for reporting).
    2. Fold the raw results of both stores into one mapping keyed by title.
    3. Finalize: flag every app that showed up in both stores.

Identity rule: two records are the same app when their titles are exactly equal.
No case folding, no whitespace trimming. "Spotify" and "spotify " are two apps.

Everything in here is pure and in-memory: no I/O, no printing.
"""

from dataclasses import replace
from itertools import chain
from typing import Iterable, Optional, Union

from appscout.models import (
    GOOGLE_PLAY,
    STORES,
    CombinedRecord,
    DedupResult,
    SourceRecord,
)


# ============================================================
# PART 1: Identity
# ============================================================

def identity_key(record: Union[SourceRecord, CombinedRecord]) -> str:
    """The title, exactly as the store sent it."""
    return record.title


def same_app(a: Union[SourceRecord, CombinedRecord],
             b: Union[SourceRecord, CombinedRecord]) -> bool:
    """True when both records denote the same app. Never raises."""
    return identity_key(a) == identity_key(b)


def store_of(record: SourceRecord) -> str:
    """Which store a record came from, as tagged by the scraper."""
    if record.source not in STORES:
        raise ValueError(f"Unknown store: {record.source!r}")
    return record.source


# ============================================================
# PART 2: Field population
# ============================================================

def populate(combined: CombinedRecord, record: SourceRecord) -> CombinedRecord:
    """
    Copy a store record into a combined record.

    The store's whole field set is replaced (last write wins), it is never merged
    field-by-field with an earlier hit for the same title. The other store's
    data is left alone.
    """
    store = store_of(record)
    if store == GOOGLE_PLAY:
        return replace(combined, title_google=record.title, google=dict(record.fields))
    return replace(combined, title_apple=record.title, apple=dict(record.fields))


# ============================================================
# PART 3: Per-store deduplication
# ============================================================

def deduplicate(records: Iterable[SourceRecord], source: Optional[str] = None) -> DedupResult:
    """
    Collapse one store's results to one record per title.

    Args:
        records: SourceRecords from a single store, in processing order.
        source:  Store label for the report. Records are never rejected.

    Returns:
        DedupResult with the title -> CombinedRecord mapping (first-seen order)
        and the input count, so callers can report how many duplicates went away.
    """
    mapping = {}
    input_count = 0
    for record in records:
        input_count += 1
        _fold_into(mapping, record)

    return DedupResult(source=source, records=mapping, input_count=input_count)


# ============================================================
# PART 4: Cross-store merge
# ============================================================

def _fold_into(mapping: dict, record: SourceRecord) -> None:
    """Find-or-create the record's app in a mapping the caller owns, then populate it."""
    key = identity_key(record)
    mapping[key] = populate(mapping.get(key, CombinedRecord()), record)


def fold_record(acc: dict, record: SourceRecord) -> dict:
    """One fold step: return a new mapping with the record merged in."""
    merged = dict(acc)
    _fold_into(merged, record)
    return merged


def finalize(mapping: dict) -> list[CombinedRecord]:
    """Set bothAppStores on every app. Done once, after all records are folded."""
    return [
        replace(app, both_app_stores=app.title_google is not None and app.title_apple is not None)
        for app in mapping.values()
    ]


def merge_sources(*streams: Iterable[SourceRecord]) -> list[CombinedRecord]:
    """
    Merge the raw results of all stores into one list of apps.

    Streams are concatenated in the order given (Google first, then Apple, by
    convention). Within a store the last record with a title wins; across stores
    the order doesn't matter.
    """
    # Same result as reduce(fold_record, ...), without copying the mapping per record
    mapping = {}
    for record in chain.from_iterable(streams):
        _fold_into(mapping, record)
    return finalize(mapping)


def count_in_both(apps: Iterable[CombinedRecord]) -> int:
    return sum(1 for app in apps if app.both_app_stores)
