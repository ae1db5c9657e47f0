"""Regex and rule-based extraction patterns for catalogue documents.

This module contains the deterministic pieces of the document pipeline:
- Section location (the "IMAGES:" block of a lecture handout)
- Entry segmentation (numbered entries with dash-bullet notes)
- Year parsing (B.C./A.D. years, ranges and century expressions)

Nothing here keeps state between calls; the same text always produces the
same result.
"""

import re
from dataclasses import dataclass, field
from typing import Optional


# ---------------------------------------------------------------------------
# Section Location
# ---------------------------------------------------------------------------

IMAGES_MARKER = "IMAGES:"

# A heading line: uppercase first letter, then only uppercase letters,
# spaces, hyphens, parentheses or ampersands, ending in a colon.
_HEADING_RE = re.compile(r'\n[A-Z][A-Z \-()&]*:')


def extract_images_block(text: Optional[str]) -> Optional[str]:
    """Return the text between "IMAGES:" and the next all-caps heading.

    Returns None when the marker is absent. Without a following heading the
    block runs to the end of the document.
    """
    if not text:
        return None
    idx = text.find(IMAGES_MARKER)
    if idx == -1:
        return None

    rest = text[idx + len(IMAGES_MARKER):]
    match = _HEADING_RE.search(rest)
    block = rest[:match.start()] if match else rest
    return block.strip()


# ---------------------------------------------------------------------------
# Entry Segmentation
# ---------------------------------------------------------------------------

_NUMBERED_RE = re.compile(r'^\d+\.?\s*(.+)$')
_NOTE_RE = re.compile(r'^\s*[-–—]\s*(.+)$')


@dataclass
class ParsedEntry:
    main_line: str
    notes: list[str] = field(default_factory=list)


def segment_entries(block: str) -> list[ParsedEntry]:
    """Split an IMAGES block into numbered entries with their bullet notes.

    Notes that appear before the first numbered line are dropped, as are
    lines that are neither numbered nor bulleted.
    """
    entries: list[ParsedEntry] = []
    current: Optional[ParsedEntry] = None

    for raw in block.splitlines():
        line = raw.strip()
        if not line:
            continue

        numbered = _NUMBERED_RE.match(line)
        if numbered:
            current = ParsedEntry(main_line=numbered.group(1))
            entries.append(current)
            continue

        note = _NOTE_RE.match(raw)
        if note and current is not None:
            current.notes.append(note.group(1).strip())

    return entries


# ---------------------------------------------------------------------------
# Year Parsing
# ---------------------------------------------------------------------------

# Era tokens must stand alone so "made" or "lead" never read as A.D.
# BCE/CE are accepted as B.C./A.D.
_BC_TOKEN = r'B\.?C\.?(?:E\.?)?'
_AD_TOKEN = r'A\.?D\.?|C\.?E\.?'
_ERA = r'(?<![A-Za-z])(' + _BC_TOKEN + r'|' + _AD_TOKEN + r')(?![A-Za-z])'
_BC_RE = re.compile(r'(?<![A-Za-z])(?:' + _BC_TOKEN + r')(?![A-Za-z])', re.IGNORECASE)
_AD_RE = re.compile(r'(?<![A-Za-z])(?:' + _AD_TOKEN + r')(?![A-Za-z])', re.IGNORECASE)

# "1200-1150 B.C.", "c.450–440 BC"; the era may sit up to 10 chars after
_RANGE_RE = re.compile(
    r'(?<!\d)(\d{2,4})\s*[-–—]\s*(\d{2,4})(?!\d)'
    r'(?:.{0,10}?' + _ERA + r')?',
    re.IGNORECASE,
)

# "c.530 B.C."; ordinals like "16th" are centuries, not years
_SINGLE_RE = re.compile(
    r'(?<!\d)(\d{2,4})(?!\d|st|nd|rd|th).{0,10}?' + _ERA,
    re.IGNORECASE,
)

# "16th c. B.C.", "1st c. A.D."
_CENTURY_RE = re.compile(
    r'(?<!\d)(\d{1,2})(?:st|nd|rd|th)\s*c\.?\s*' + _ERA,
    re.IGNORECASE,
)

_PAREN_RE = re.compile(r'\(([^)]+)\)')


def _is_bc(era: str) -> bool:
    return era.replace(".", "").upper() in ("BC", "BCE")


def _signed(value: int, era: Optional[str]) -> int:
    return -value if era and _is_bc(era) else value


def _implied_era(text: str) -> Optional[str]:
    """Era mentioned anywhere in the text; B.C. wins when both appear."""
    if _BC_RE.search(text):
        return "BC"
    if _AD_RE.search(text):
        return "AD"
    return None


def parse_year_core(text: Optional[str]) -> Optional[int]:
    """Parse a single representative year from one candidate string.

    Rules, first match wins:
    1. Range "a-b" with an era after it or anywhere in the text -> midpoint
    2. Single 2-4 digit year followed by an explicit era
    3. Century "Nth c. ERA" -> N*100 - 50
    Negative results are B.C.
    """
    s = text or ""

    match = _RANGE_RE.search(s)
    if match:
        a, b = int(match.group(1)), int(match.group(2))
        era = match.group(3) or _implied_era(s)
        # Round half up, matching the printed catalogue convention
        mid = (a + b + 1) // 2
        return _signed(mid, era)

    match = _SINGLE_RE.search(s)
    if match:
        return _signed(int(match.group(1)), match.group(2))

    match = _CENTURY_RE.search(s)
    if match:
        century = int(match.group(1))
        return _signed(century * 100 - 50, match.group(2))

    return None


def parse_year(text: Optional[str]) -> Optional[int]:
    """Extract a year from free text, preferring parenthesised dates.

    Each "(...)" group is tried left to right; the first one that yields a
    year wins. Only if none does is the whole string parsed.
    """
    if not text:
        return None
    for inner in _PAREN_RE.findall(text):
        year = parse_year_core(inner)
        if year is not None:
            return year
    return parse_year_core(text)
