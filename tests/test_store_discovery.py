"""Tests for the document store and release discovery."""

import pg_release_notes.discovery as discovery_module
from pg_release_notes.constants import RELEASE_INDEX_URL
from pg_release_notes.discovery import extract_versions, release_url, scrape_all, scrape_version

INDEX_HTML = """<html><body>
<details class="release-notes-list"><summary>16</summary><ul>
  <li><a href="/docs/release/16.1/">16.1</a></li>
  <li><a href="/docs/release/16.0/">16.0</a></li>
</ul></details>
<details class="release-notes-list"><summary>15</summary><ul>
  <li><a href="/docs/release/15.5/">15.5</a></li>
  <li><a href="/docs/release/15.5/">15.5</a></li>
</ul></details>
<ul><li><a href="/about/">About</a></li></ul>
</body></html>"""


class FakeFetcher:
    def __init__(self, pages):
        self.pages = pages
        self.fetched = []

    def fetch(self, url):
        self.fetched.append(url)
        return self.pages.get(url)


class TestDocumentStore:
    def test_put_get(self, store):
        assert store.get("16.1") is None
        store.put("16.1", "<html>16.1</html>")
        assert store.get("16.1") == "<html>16.1</html>"
        assert "16.1" in store
        assert "16.2" not in store

    def test_keys_are_lexical(self, store):
        for key in ("9.6", "16.1", "index", "10.0"):
            store.put(key, key)
        assert store.keys() == ["10.0", "16.1", "9.6", "index"]
        assert store.release_keys() == ["10.0", "16.1", "9.6"]

    def test_missing_directory(self, store):
        assert not store.exists()
        assert store.keys() == []


def test_extract_versions_in_page_order():
    assert extract_versions(INDEX_HTML) == ["16.1", "16.0", "15.5"]


def test_scrape_version(store):
    fetcher = FakeFetcher({release_url("16.1"): "<html>16.1</html>"})
    assert scrape_version(fetcher, store, "16.1")
    assert not scrape_version(fetcher, store, "16.2")
    assert store.release_keys() == ["16.1"]


def test_scrape_all_caches_index_and_versions(store, monkeypatch):
    monkeypatch.setattr(discovery_module.time, "sleep", lambda _: None)
    fetcher = FakeFetcher(
        {
            RELEASE_INDEX_URL: INDEX_HTML,
            release_url("16.1"): "<html>16.1</html>",
            release_url("15.5"): "<html>15.5</html>",
        }
    )
    store.put("16.0", "<html>cached 16.0</html>")

    cached = scrape_all(fetcher, store)

    assert cached == ["16.1", "16.0", "15.5"]
    assert store.get("index") == INDEX_HTML
    assert store.get("16.0") == "<html>cached 16.0</html>"
    assert release_url("16.0") not in fetcher.fetched


def test_scrape_all_skips_failed_versions(store, monkeypatch):
    monkeypatch.setattr(discovery_module.time, "sleep", lambda _: None)
    fetcher = FakeFetcher({RELEASE_INDEX_URL: INDEX_HTML, release_url("16.0"): "<html>16.0</html>"})

    cached = scrape_all(fetcher, store, refresh=True)

    assert cached == ["16.0"]
    assert store.release_keys() == ["16.0"]


def test_scrape_all_without_index(store):
    assert scrape_all(FakeFetcher({}), store) == []
