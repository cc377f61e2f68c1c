"""
Data models: the structure of our data.
Every app, no matter which store it comes from, gets wrapped into these shapes.
"""

from dataclasses import dataclass, field
from typing import Optional

GOOGLE_PLAY = "google_play"
APPLE_APP_STORE = "apple_app_store"

STORES = (GOOGLE_PLAY, APPLE_APP_STORE)

STORE_TITLES = {
    GOOGLE_PLAY: "Google Play Store",
    APPLE_APP_STORE: "Apple App Store",
}

# Column suffix in the exported table, e.g. "score" -> "scoreGoogle"
STORE_SUFFIX = {
    GOOGLE_PLAY: "Google",
    APPLE_APP_STORE: "Apple",
}


@dataclass(frozen=True)
class SourceRecord:
    """A single app as returned by one store for one search term."""
    source: str                 # "google_play" or "apple_app_store"
    title: str                  # identity key, "" if the store sent none
    search_term: str
    fields: dict = field(default_factory=dict)   # everything the store returned, untouched

    @classmethod
    def from_raw(cls, source: str, raw: dict, search_term: str) -> "SourceRecord":
        fields = dict(raw)
        fields["searchTerm"] = search_term
        title = raw.get("title")
        return cls(
            source=source,
            title="" if title is None else str(title),
            search_term=search_term,
            fields=fields,
        )


@dataclass(frozen=True)
class CombinedRecord:
    """One app, merged from either or both stores."""
    title_google: Optional[str] = None
    title_apple: Optional[str] = None
    google: dict = field(default_factory=dict)
    apple: dict = field(default_factory=dict)
    both_app_stores: Optional[bool] = None   # only known once the merge is finished

    @property
    def title(self) -> str:
        if self.title_google is not None:
            return self.title_google
        return self.title_apple if self.title_apple is not None else ""

    def to_row(self) -> dict:
        """Flatten into a single dict for the CSV export."""
        row = {}
        if self.title_google is not None:
            row["titleGoogle"] = self.title_google
        if self.title_apple is not None:
            row["titleApple"] = self.title_apple
        for key, value in self.google.items():
            row[f"{key}{STORE_SUFFIX[GOOGLE_PLAY]}"] = value
        for key, value in self.apple.items():
            row[f"{key}{STORE_SUFFIX[APPLE_APP_STORE]}"] = value
        if self.both_app_stores is not None:
            row["bothAppStores"] = self.both_app_stores
        return row


@dataclass
class DedupResult:
    """Outcome of collapsing one store's results to one record per title."""
    source: Optional[str]
    records: dict               # title -> CombinedRecord
    input_count: int

    @property
    def output_count(self) -> int:
        return len(self.records)

    @property
    def removed(self) -> int:
        return self.input_count - self.output_count


@dataclass
class FetchFailure:
    """A (store, search term) request that could not be completed."""
    source: str
    term: str
    error: str


@dataclass
class ScrapeResult:
    """Everything one store returned for all search terms."""
    source: str
    records: list = field(default_factory=list)     # SourceRecords, in search term order
    failures: list = field(default_factory=list)    # FetchFailures
