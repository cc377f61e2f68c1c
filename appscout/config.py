"""
Settings for App Scout.
Everything can be overridden in a .env file next to where the tool is run.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Store search settings
SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "250"))   # max apps per store per search term
STORE_COUNTRY = os.getenv("STORE_COUNTRY", "us")
STORE_LANGUAGE = os.getenv("STORE_LANGUAGE", "en")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# Search terms are scraped in parallel, one request per term
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "8"))

# Input / output: both relative to the working directory, like input.txt and scrapedData/ of a manual run
INPUT_FILE = os.getenv("INPUT_FILE", "input.txt")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "scrapedData")
EXPORT_NAME = os.getenv("EXPORT_NAME", "Scraped Apps")
