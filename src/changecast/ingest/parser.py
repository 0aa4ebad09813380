"""Line-oriented markdown changelog parser.

The parser recognises two kinds of lines:

* version headers such as ``## 1.2.3``, ``## [2.0.0-beta.1]`` or
  ``## 1.0.0 - 2024-01-01`` which open a new :class:`ChangelogVersion`;
* bullets starting with ``"- "`` or ``"* "`` which append a
  :class:`ChangelogItem` to the open version.

Everything else (prose, sub-headings, blank lines, bullets before the first
version) is ignored. Output order is document order; versions are never
sorted or de-duplicated.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from changecast.ingest.categorize import categorize_item
from changecast.types import ChangelogItem, ChangelogVersion

__all__ = [
    "VERSION_HEADER_RE",
    "UNKNOWN_VERSION",
    "parse_changelog",
    "parse_version_header",
    "categorize_item",
    "get_latest_version",
    "summarize_recent",
]

VERSION_HEADER_RE = re.compile(
    r"^##\s+\[?(?P<version>\d+\.\d+\.\d+(?:-[a-zA-Z0-9.]+)?)\]?(?:\s*[-–]\s*(?P<date>.+))?",
    re.ASCII,
)

UNKNOWN_VERSION = "Unknown"

_ITEM_MARKERS = ("- ", "* ")


def parse_version_header(line: str) -> tuple[str, str] | None:
    """Return ``(version, date)`` if ``line`` is a version header.

    Args:
        line: A single line of markdown.

    Returns:
        Tuple of the captured version and trimmed trailing segment (empty
        string when absent), or ``None`` if the line is not a header.
    """

    m = VERSION_HEADER_RE.match(line)
    if not m:
        return None
    return m.group("version"), (m.group("date") or "").strip()


def parse_changelog(markdown: str) -> list[ChangelogVersion]:
    """Parse markdown into version records.

    Never raises on malformed input; unrecognised content is skipped.

    Args:
        markdown: Full changelog document.

    Returns:
        Versions in document order (newest first for a conventional log).
    """

    versions: list[ChangelogVersion] = []
    current: ChangelogVersion | None = None

    for line in markdown.split("\n"):
        header = parse_version_header(line)
        if header is not None:
            if current is not None:
                versions.append(current)
            current = ChangelogVersion(version=header[0], date=header[1])
            continue
        if current is not None and line.startswith(_ITEM_MARKERS):
            current.items.append(ChangelogItem(content=line[2:].strip()))

    if current is not None:
        versions.append(current)
    return versions


def get_latest_version(versions: Sequence[ChangelogVersion]) -> str:
    """Return the first version's string, or ``"Unknown"`` when empty.

    "Latest" means first in document order; no semver comparison is made.
    """

    if not versions or not versions[0].version:
        return UNKNOWN_VERSION
    return versions[0].version


def summarize_recent(versions: Sequence[ChangelogVersion], count: int = 3) -> str:
    """Render the ``count`` most recent versions as a compact markdown digest.

    Each version becomes ``"## {version}"`` followed by one ``"- {content}"``
    line per item; versions are separated by a blank line. This text is both
    the analysis prompt body and the analysis cache key input.
    """

    blocks = []
    for v in versions[:count]:
        bullets = "\n".join(f"- {item.content}" for item in v.items)
        blocks.append(f"## {v.version}\n{bullets}")
    return "\n\n".join(blocks)
