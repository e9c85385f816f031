"""Shared fixtures: release notes page markup and a populated document store."""

from __future__ import annotations

import pytest

from pg_release_notes.store import DocumentStore


def build_release_page(version: str, release_date: str | None, items: list[str]) -> str:
    """Markup shaped like a postgresql.org release notes page."""
    list_items = "\n".join(f'<li class="listitem"><p>{item}</p></li>' for item in items)
    date_paragraph = (
        f"<p><strong>Release date:</strong> {release_date}</p>" if release_date is not None else ""
    )
    return f"""<html><body>
<div id="release-notes">
  <div class="sect1" id="RELEASE-{version.replace('.', '-')}">
    <div class="titlepage"><div><div>
      <h2 class="title">E.1. Release {version} <a href="#RELEASE-{version.replace('.', '-')}">§</a></h2>
    </div></div></div>
    {date_paragraph}
    <div class="sect2">
      <div class="itemizedlist">
        <ul class="itemizedlist" style="list-style-type: disc;">
{list_items}
        </ul>
      </div>
    </div>
  </div>
</div>
</body></html>"""


@pytest.fixture
def release_page():
    return build_release_page


@pytest.fixture
def store(tmp_path):
    return DocumentStore(tmp_path / "raw-latest")


@pytest.fixture
def populated_store(store):
    store.put(
        "16.0",
        build_release_page(
            "16.0",
            "2023-09-14",
            [
                "Allow parallelization of FULL and internal right OUTER hash joins for better performance (Melanie Plageman, Thomas Munro)",
                "Add new function <code>pg_input_is_valid</code> to check input validity (Tom Lane)",
                "Fix incorrect results from window functions (David Rowley)",
            ],
        ),
    )
    store.put(
        "16.1",
        build_release_page(
            "16.1",
            "2023-11-09",
            [
                "Fix handling of unknown-type arguments in DISTINCT \"any\" aggregate functions (Tom Lane)"
                "</p><p>This error led to a text-type value being interpreted as an unknown-type value. (CVE-2023-5868)",
                "Fix crash in parser (Carol)",
                "Add new option to make this faster (Dave)",
            ],
        ),
    )
    store.put("index", "<html><body>release index</body></html>")
    return store
