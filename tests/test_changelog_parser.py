from __future__ import annotations

from changecast.ingest.categorize import categorize_item
from changecast.ingest.parser import (
    get_latest_version,
    parse_changelog,
    parse_version_header,
    summarize_recent,
)
from changecast.types import ChangelogItem, ChangelogVersion


def test_end_to_end_sample(sample_changelog: str) -> None:
    versions = parse_changelog(sample_changelog)
    assert [v.version for v in versions] == ["1.0.0", "0.9.0"]
    assert versions[0].date == "2024-01-01"
    assert versions[1].date == ""
    assert versions[0].items[0].type == "feature"
    assert versions[0].items[1].type == "fix"
    assert versions[1].items[0].type == "removal"
    assert get_latest_version(versions) == "1.0.0"


def test_spec_style_single_string() -> None:
    md = "## 1.0.0 - 2024-01-01\n- Added new feature X\n- Fixed bug Y\n\n## 0.9.0\n- Removed legacy flag"
    versions = parse_changelog(md)
    assert len(versions) == 2
    assert versions[0].items[0].content == "Added new feature X"


def test_header_boundaries() -> None:
    assert parse_version_header("## 1.2.3 - initial release") == ("1.2.3", "initial release")
    assert parse_version_header("## [2.0.0-beta.1]") == ("2.0.0-beta.1", "")
    assert parse_version_header("## 3.1.0 – 2025-02-03") == ("3.1.0", "2025-02-03")
    assert parse_version_header("### not a version") is None
    assert parse_version_header("## Unreleased") is None
    assert parse_version_header("##1.2.3") is None


def test_items_before_first_header_are_ignored() -> None:
    md = "- stray bullet\n## 1.0.0\n- kept\nSome prose\n  - nested bullet\n* star bullet"
    versions = parse_changelog(md)
    assert len(versions) == 1
    assert [i.content for i in versions[0].items] == ["kept", "star bullet"]


def test_item_content_is_trimmed_but_markdown_kept() -> None:
    versions = parse_changelog("## 1.0.0\n-   Added `--flag` to **CLI**   ")
    assert versions[0].items[0].content == "Added `--flag` to **CLI**"


def test_duplicate_headers_are_kept() -> None:
    versions = parse_changelog("## 1.0.0\n- a\n## 1.0.0\n- b")
    assert [v.version for v in versions] == ["1.0.0", "1.0.0"]


def test_malformed_input_degrades_gracefully() -> None:
    assert parse_changelog("") == []
    assert parse_changelog("just some text\n\n# Title\n- bullet") == []
    assert get_latest_version([]) == "Unknown"


def test_parse_is_pure(sample_changelog: str) -> None:
    first = [v.to_dict() for v in parse_changelog(sample_changelog)]
    second = [v.to_dict() for v in parse_changelog(sample_changelog)]
    assert first == second


def test_categorize_examples() -> None:
    assert categorize_item("Fixed a crash on startup") == "fix"
    assert categorize_item("Added support for MCP servers") == "feature"
    assert categorize_item("Removed support for legacy config") == "breaking"
    assert categorize_item("Deprecated the --legacy flag") == "removal"
    assert categorize_item("Refactored internals") == "other"
    assert categorize_item("BREAKING: config moved") == "breaking"
    assert categorize_item("Tool X no longer prompts") == "removal"
    assert categorize_item("Resolved issue with paste") == "fix"


def test_item_type_is_derived_from_content() -> None:
    item = ChangelogItem(content="Fixed a crash")
    assert item.type == "fix"
    assert item.to_dict() == {"type": "fix", "content": "Fixed a crash"}


def test_summarize_recent_uses_first_three_versions() -> None:
    versions = [
        ChangelogVersion("4.0.0", items=[ChangelogItem("a"), ChangelogItem("b")]),
        ChangelogVersion("3.0.0", items=[ChangelogItem("c")]),
        ChangelogVersion("2.0.0"),
        ChangelogVersion("1.0.0", items=[ChangelogItem("old")]),
    ]
    assert summarize_recent(versions) == "## 4.0.0\n- a\n- b\n\n## 3.0.0\n- c\n\n## 2.0.0\n"


def test_header_digits_are_ascii_only() -> None:
    assert parse_version_header("## ١.٢.٣") is None
    assert parse_changelog("## ١.٢.٣\n- Added x") == []
