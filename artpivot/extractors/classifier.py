"""Heuristic artist/title classification for catalogue entries.

A numbered entry's main line looks like ``"Exekias, Amphora, c.540 B.C."`` or
``"Temple of Hera, Paestum, 550 B.C."``. Which comma segment is the artist
and which the title is decided from keyword tables in
``config/classifier.yaml``.

Known limitation: titles that themselves contain commas are split at the
first comma, so "Impression, Sunrise" loses its second half.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "classifier.yaml"

ANONYMOUS_ARTIST = "anonymous"

_CONJUNCTION_RE = re.compile(r'\band\b|&', re.IGNORECASE)
_PARENTHETICAL_RE = re.compile(r'\([^)]+\)')


def load_classifier_config(config_path: Path | None = None) -> dict[str, list[str]]:
    """Load the keyword tables from the YAML file."""
    path = config_path or CONFIG_PATH
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass
class Attribution:
    artist: str
    title: str
    rule: str


class FieldClassifier:
    """Split a comma-separated entry line into artist and title.

    Rules, first match wins:
    1. anonymous  - first segment is "anonymous"/"anon"/"unknown"
    2. named      - first segment has "and", "&" or a parenthetical (dates)
    3. object     - first segment names an object or building
    4. material   - second segment names a medium or a place
    5. default    - first segment is the artist, second the title
    """

    def __init__(self, tables: dict[str, list[str]]):
        self.anonymous_names = {n.lower() for n in tables.get("anonymous_names", [])}
        self.object_hints = [h.lower() for h in tables.get("object_hints", [])]
        self.material_hints = [h.lower() for h in tables.get("material_hints", [])]

    @classmethod
    def from_yaml(cls, config_path: Path | None = None) -> FieldClassifier:
        return cls(load_classifier_config(config_path))

    @staticmethod
    def split_segments(main_line: str) -> list[str]:
        return [p.strip() for p in main_line.split(",") if p.strip()]

    def classify(self, main_line: str) -> Attribution:
        parts = self.split_segments(main_line)
        candidate = parts[0] if parts else ""
        second = parts[1] if len(parts) > 1 else ""
        lower = candidate.lower()

        if lower in self.anonymous_names:
            return Attribution(ANONYMOUS_ARTIST, second, "anonymous")

        if _CONJUNCTION_RE.search(candidate) or _PARENTHETICAL_RE.search(candidate):
            return Attribution(candidate, second, "named")

        if self._contains_any(lower, self.object_hints):
            return Attribution(ANONYMOUS_ARTIST, candidate, "object")

        if self._contains_any(second.lower(), self.material_hints):
            return Attribution(ANONYMOUS_ARTIST, candidate, "material")

        return Attribution(candidate, second, "default")

    @staticmethod
    def _contains_any(text: str, hints: list[str]) -> bool:
        return any(h in text for h in hints)


_default: Optional[FieldClassifier] = None


def get_default_classifier() -> FieldClassifier:
    global _default
    if _default is None:
        _default = FieldClassifier.from_yaml()
        logger.debug("Loaded classifier tables from %s", CONFIG_PATH)
    return _default
