"""
App search scraper: fetches app metadata for search terms from both stores.
Google Play goes through google-play-scraper, Apple through the public iTunes Search API.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

import requests
from google_play_scraper import search as gplay_search

from appscout.config import (
    MAX_WORKERS,
    REQUEST_TIMEOUT,
    SEARCH_LIMIT,
    STORE_COUNTRY,
    STORE_LANGUAGE,
)
from appscout.models import (
    APPLE_APP_STORE,
    GOOGLE_PLAY,
    STORE_TITLES,
    FetchFailure,
    ScrapeResult,
    SourceRecord,
)

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
ITUNES_MAX_LIMIT = 200   # the Search API refuses anything above this


def search_google_play(term: str, count: int = SEARCH_LIMIT) -> list[dict]:
    """
    Search the Google Play Store.

    Returns the raw dicts from google-play-scraper (title, appId, score, developer, ...).
    """
    return gplay_search(term, n_hits=count, lang=STORE_LANGUAGE, country=STORE_COUNTRY)


def search_apple_app_store(term: str, count: int = SEARCH_LIMIT) -> list[dict]:
    """
    Search the Apple App Store using the public iTunes Search API.

    Note:
        Apple caps a single search at 200 results, so counts above that are clipped.
    """
    response = requests.get(
        ITUNES_SEARCH_URL,
        params={
            "term": term,
            "entity": "software",
            "country": STORE_COUNTRY,
            "lang": STORE_LANGUAGE,
            "limit": min(count, ITUNES_MAX_LIMIT),
        },
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    data = response.json()
    return [_clean_apple_app(raw) for raw in data.get("results", [])]


def _clean_apple_app(raw: dict) -> dict:
    """Rename the iTunes fields to the shorter names the rest of the tool uses."""
    price = raw.get("price")
    return {
        "id": raw.get("trackId"),
        "appId": raw.get("bundleId"),
        "title": raw.get("trackName"),
        "url": raw.get("trackViewUrl"),
        "description": raw.get("description"),
        "icon": raw.get("artworkUrl512") or raw.get("artworkUrl100") or raw.get("artworkUrl60"),
        "genres": raw.get("genres"),
        "genreIds": raw.get("genreIds"),
        "primaryGenre": raw.get("primaryGenreName"),
        "primaryGenreId": raw.get("primaryGenreId"),
        "contentRating": raw.get("contentAdvisoryRating"),
        "languages": raw.get("languageCodesISO2A"),
        "size": raw.get("fileSizeBytes"),
        "requiredOsVersion": raw.get("minimumOsVersion"),
        "released": raw.get("releaseDate"),
        "updated": raw.get("currentVersionReleaseDate") or raw.get("releaseDate"),
        "releaseNotes": raw.get("releaseNotes"),
        "version": raw.get("version"),
        "price": price,
        "currency": raw.get("currency"),
        "free": price == 0,
        "developerId": raw.get("artistId"),
        "developer": raw.get("artistName"),
        "developerUrl": raw.get("artistViewUrl"),
        "developerWebsite": raw.get("sellerUrl"),
        "score": raw.get("averageUserRating"),
        "reviews": raw.get("userRatingCount"),
        "currentVersionScore": raw.get("averageUserRatingForCurrentVersion"),
        "currentVersionReviews": raw.get("userRatingCountForCurrentVersion"),
        "screenshots": raw.get("screenshotUrls"),
        "ipadScreenshots": raw.get("ipadScreenshotUrls"),
        "appletvScreenshots": raw.get("appletvScreenshotUrls"),
        "supportedDevices": raw.get("supportedDevices"),
    }


SEARCHERS: dict[str, Callable[[str, int], list[dict]]] = {
    GOOGLE_PLAY: search_google_play,
    APPLE_APP_STORE: search_apple_app_store,
}


def _search_term(source: str, term: str, count: int) -> tuple[list[SourceRecord], FetchFailure | None]:
    """
    One (store, term) request. A failure here only loses this term's results.
    It is reported back, never raised, so the other terms still get merged.
    """
    try:
        raw_apps = SEARCHERS[source](term, count)
    except requests.RequestException as e:
        print(f"  Error searching {STORE_TITLES[source]} for '{term}': {e}")
        return [], FetchFailure(source=source, term=term, error=str(e))
    except Exception as e:
        # google-play-scraper raises its own exception types (and plain ones on bad HTML)
        print(f"  Error searching {STORE_TITLES[source]} for '{term}': {e!r}")
        return [], FetchFailure(source=source, term=term, error=repr(e))

    records = [SourceRecord.from_raw(source, raw, term) for raw in raw_apps]
    return records, None


def scrape_store(source: str, terms: Iterable[str], count: int = SEARCH_LIMIT,
                 max_workers: int = MAX_WORKERS) -> ScrapeResult:
    """
    Search one store for every term, in parallel.

    Results are concatenated in search term order, no matter which request
    finished first, so repeated runs process records in the same order.
    """
    if source not in SEARCHERS:
        raise ValueError(f"Unknown store: {source!r}")
    terms = list(terms)
    if any(not term or not term.strip() for term in terms):
        raise ValueError("Search terms must not be empty")

    result = ScrapeResult(source=source)
    if not terms:
        return result

    print(f"Searching the {STORE_TITLES[source]} for {len(terms)} term(s)...")
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(terms)))) as pool:
        # map() yields in submission order
        outcomes = list(pool.map(lambda term: _search_term(source, term, count), terms))

    for term, (records, failure) in zip(terms, outcomes):
        if failure is not None:
            result.failures.append(failure)
            continue
        print(f"  {term}: {len(records)} apps")
        result.records.extend(records)

    print(f"Done. {STORE_TITLES[source]}: {len(result.records)} apps "
          f"({len(result.failures)} failed search(es))")
    return result


def scrape_all(terms: Iterable[str], count: int = SEARCH_LIMIT,
               max_workers: int = MAX_WORKERS) -> dict[str, ScrapeResult]:
    """Search both stores. Google Play first, then Apple."""
    terms = list(terms)
    return {
        GOOGLE_PLAY: scrape_store(GOOGLE_PLAY, terms, count, max_workers),
        APPLE_APP_STORE: scrape_store(APPLE_APP_STORE, terms, count, max_workers),
    }


# Manual check against the live stores: python -m appscout.scraper
if __name__ == "__main__":
    print("=" * 60)
    print("TESTING: store search")
    print("=" * 60)
    results = scrape_all(["meditation"], count=20)
    for store, res in results.items():
        print(f"\n{STORE_TITLES[store]}: {len(res.records)} apps")
        if res.records:
            sample = res.records[0]
            print(f"  Sample: {sample.title} (searched: {sample.search_term})")
