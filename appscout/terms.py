"""
Search terms: where they come from before scraping starts.
Terms can be read from a text file (one per line) and typed in comma-separated.
"""

import os
import re
from typing import Iterable, Optional


def read_terms_from_file(path: str) -> Optional[list[str]]:
    """
    Read search terms from a text file, one term per line.

    Works with Windows, old Mac and Unix line endings alike.
    Returns None if the file doesn't exist or contains no terms.
    """
    print(f'Searching for file "{path}"...')

    if not os.path.isfile(path):
        print("File not found.\n")
        return None

    with open(path, encoding="utf-8-sig") as f:
        content = f.read()

    terms = collect_terms(content.splitlines())
    if not terms:
        print("File is empty.\n")
        return None

    print(f"File found! Imported {len(terms)} search term(s): {', '.join(terms)}\n")
    return terms


def split_input_terms(text: str) -> list[str]:
    """Split user input like "fitness, yoga ,meditation" into separate terms."""
    return [term for term in re.split(r"\s*,\s*", text.strip()) if term != ""]


def collect_terms(*groups: Iterable[str]) -> list[str]:
    """
    Combine term lists into one: whitespace stripped, empties dropped,
    duplicates removed (first occurrence wins, order kept).
    """
    seen = set()
    terms = []
    for group in groups:
        for term in group:
            term = term.strip()
            if term and term not in seen:
                seen.add(term)
                terms.append(term)
    return terms
