"""Constants and configuration for the PostgreSQL release notes processor."""

BASE_URL = "https://www.postgresql.org"
RELEASE_INDEX_URL = f"{BASE_URL}/docs/release/"
DOCS_BASE_URL = f"{BASE_URL}/docs"
NVD_API_URL = "https://services.nvd.nist.gov/rest/json/cves/2.0"

# Document store
CACHE_DIR = "raw-latest"
INDEX_KEY = "index"
DOCUMENT_SUFFIX = ".html"

# Output artifacts
OUTPUT_DIR = "data"
RELEASES_FILE = "release_notes.json"
SUMMARY_FILE = "release_notes_formatted.json"
VERSION_DATES_FILE = "version_dates.json"
MARKDOWN_FILE = "summary.md"
CVE_LIST_FILE = "cves.txt"

# Release notes page markup
VERSION_HEADING_SELECTOR = "#release-notes h2"
RELEASE_DATE_LABEL = "Release date:"
CHANGE_ITEM_SELECTOR = ".itemizedlist ul li.listitem"
VERSION_LIST_SELECTOR = "details.release-notes-list li a"
# Paragraph-link marker appended to headings and list items
DECORATIVE_ANCHOR_TEXT = "§"

# Version used for link rewriting when an item carries none
DEFAULT_MAJOR_VERSION = "0"

CATEGORIES = ("security", "features", "performance", "bugs")

# Ordered, first match wins. Anything unmatched is a bug fix.
CATEGORY_KEYWORDS = (
    ("security", ("cve",)),
    (
        "performance",
        (
            "performance",
            "speed",
            "faster",
            "optimization",
            "improve",
            "reduce",
            "enhance",
            "boost",
            "accelerate",
            "better",
            "efficient",
        ),
    ),
    (
        "features",
        (
            "new feature",
            "added",
            "introduced",
            "now supports",
            "new option",
            "new parameter",
            "new setting",
            "new command",
            "new function",
            "new syntax",
            "new capability",
            "new behavior",
            "new flag",
            "new directive",
            "new method",
            "new property",
            "new api",
            "new interface",
            "new class",
            "new module",
            "new package",
            "new library",
            "new framework",
            "new tool",
            "new utility",
            "new plugin",
            "new extension",
            "new integration",
            "new support",
            "new compatibility",
            "new standard",
            "new protocol",
            "new format",
            "new language",
            "new technology",
            "new system",
            "new service",
            "new application",
            "new enhancement",
            "new improvement",
            "new addition",
            "new change",
            "new update",
            "new upgrade",
            "new version",
        ),
    ),
)
FALLBACK_CATEGORY = "bugs"
# Categories only tested for major (x.0) releases
MAJOR_RELEASE_ONLY_CATEGORIES = frozenset({"performance", "features"})

SIGNIFICANCE_KEYWORDS = ("significant", "major")

# A parenthesized group containing any of these is not an attribution
CONTRIBUTOR_EXCLUSION_MARKERS = ("http", "www.", "CVE-")

# A group whose preceding text matches one of these captions a bare URL,
# e.g. "https://example.com/foo (readme)"
CONTRIBUTOR_EXCLUSION_PREFIXES = (r"(?:https?://|www\.)\S*\s*$",)

# Link targets starting with a scheme ("https:", "mailto:") or "#" are left alone
ABSOLUTE_TARGET_PATTERN = r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|#)"

# HTTP client configuration
SCRAPE_DELAY = 1.0  # seconds between release page fetches
RATE_LIMIT_DELAY = 1.0  # minimum seconds between any two requests
NVD_REQUEST_DELAY = 10.0  # seconds before each NVD query (no API key)
NVD_REQUEST_DELAY_WITH_KEY = 1.0
NVD_API_KEY_ENV = "NVD_API_KEY"
REQUEST_TIMEOUT = 30  # seconds
MAX_RETRIES = 3
RETRY_BACKOFF_BASE = 2  # exponential backoff: 1s, 2s, 4s

USER_AGENT = (
    "PG-Release-Notes-Processor/1.0 "
    "(https://github.com/pg-release-notes; release-research)"
)
