"""
Pipeline: one full run from search terms to CSV.

Steps:
    1. Search both stores for every term
    2. Report what was found per store
    3. Deduplicate each store (for the duplicate report)
    4. Merge both stores into one list of apps, keyed by title
    5. Export to CSV
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from appscout.config import EXPORT_NAME, MAX_WORKERS, OUTPUT_DIR, SEARCH_LIMIT
from appscout.exporter import csv_path, save_to_csv
from appscout.models import APPLE_APP_STORE, GOOGLE_PLAY, STORE_TITLES
from appscout.reconciler import count_in_both, deduplicate, merge_sources
from appscout.scraper import scrape_all


@dataclass
class PipelineReport:
    """What happened during a run. Printed by the CLI, shown by the dashboard."""
    terms: list
    found: dict = field(default_factory=dict)        # store -> number of raw records
    remaining: dict = field(default_factory=dict)    # store -> distinct titles
    failures: list = field(default_factory=list)
    apps: list = field(default_factory=list)         # finalized CombinedRecords
    rows_written: int = 0
    csv_path: Optional[str] = None

    @property
    def total_found(self) -> int:
        return sum(self.found.values())

    @property
    def in_both_stores(self) -> int:
        return count_in_both(self.apps)

    def removed(self, store: str) -> int:
        return self.found.get(store, 0) - self.remaining.get(store, 0)


def run_pipeline(terms: list[str],
                 export_name: str = EXPORT_NAME,
                 output_dir: str = OUTPUT_DIR,
                 count: int = SEARCH_LIMIT,
                 max_workers: int = MAX_WORKERS,
                 progress_callback: Optional[Callable[[int, int, str], None]] = None) -> PipelineReport:
    """
    Main entry point.

    Args:
        terms:             Search terms (already cleaned, see appscout.terms).
        export_name:       CSV file name without extension.
        progress_callback: optional function(current_step, total_steps, message)
    """
    report = PipelineReport(terms=list(terms))
    total_steps = 4

    def step(n: int, message: str):
        print(f"\n{message}")
        if progress_callback:
            progress_callback(n, total_steps, message)

    # Step 1: Scrape
    step(1, "Scraping the app stores...")
    results = scrape_all(report.terms, count=count, max_workers=max_workers)
    google = results[GOOGLE_PLAY].records
    apple = results[APPLE_APP_STORE].records
    report.failures = results[GOOGLE_PLAY].failures + results[APPLE_APP_STORE].failures
    report.found = {GOOGLE_PLAY: len(google), APPLE_APP_STORE: len(apple)}

    print(f"\nFound apps in total: {report.total_found}")
    for store in (GOOGLE_PLAY, APPLE_APP_STORE):
        print(f"{STORE_TITLES[store]}: {report.found[store]} apps")

    # Step 2: Duplicates per store (reporting only, the merge below starts from the raw lists)
    step(2, "Removing duplicates...")
    for store, records in ((GOOGLE_PLAY, google), (APPLE_APP_STORE, apple)):
        dedup = deduplicate(records, source=store)
        report.remaining[store] = dedup.output_count
        print(f"Removed {dedup.removed} duplicates from {STORE_TITLES[store]}: "
              f"{dedup.output_count} apps remaining")

    # Step 3: Merge both stores
    step(3, "Combining both stores...")
    report.apps = merge_sources(google, apple)
    print(f"{len(report.apps)} unique apps, {report.in_both_stores} in both stores")

    # Step 4: Export
    step(4, "Saving to CSV...")
    report.rows_written = save_to_csv([app.to_row() for app in report.apps], export_name, output_dir)
    report.csv_path = csv_path(export_name, output_dir)

    if report.failures:
        print(f"\nWarning: {len(report.failures)} search(es) failed and were skipped:")
        for failure in report.failures:
            print(f"  {STORE_TITLES[failure.source]} / '{failure.term}': {failure.error}")

    return report
