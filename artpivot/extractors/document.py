"""Catalogue extraction from free-text documents.

This module orchestrates the extraction pipeline:
1. Locate the "IMAGES:" block
2. Segment it into numbered entries
3. Classify artist/title and parse the year of each entry
4. Only if that yields nothing, fall back to the LLM (llm_fallback.py)

Successful runs are recorded in the extraction history; failures are not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from artpivot.extractors.classifier import FieldClassifier, get_default_classifier
from artpivot.extractors.llm_fallback import LLMExtractor
from artpivot.extractors.patterns import (
    ParsedEntry,
    extract_images_block,
    parse_year,
    segment_entries,
)
from artpivot.validation.schemas import AIConfig, ArtworkSuggestion

logger = logging.getLogger(__name__)

SOURCE_LOCAL = "local"
SOURCE_AI = "ai"


class MissingCredentialError(ValueError):
    """The document needs the LLM fallback but no API key was supplied."""


@dataclass
class ExtractionResult:
    source: str
    artworks: list[dict[str, Any]]
    periods: list[dict[str, Any]] = field(default_factory=list)


def entry_to_suggestion(
    entry: ParsedEntry, classifier: FieldClassifier,
) -> Optional[ArtworkSuggestion]:
    """Convert one parsed entry, or return None if title or artist is empty."""
    attribution = classifier.classify(entry.main_line)
    if not attribution.title or not attribution.artist:
        return None
    year = parse_year(entry.main_line)
    return ArtworkSuggestion(
        title=attribution.title,
        artist=attribution.artist,
        year=year if year is not None else 0,
        description=" ".join(entry.notes),
    )


def extract_local(text: str, classifier: FieldClassifier | None = None) -> list[ArtworkSuggestion]:
    """Run the rule-based pipeline. Returns an empty list when nothing usable is found."""
    classifier = classifier or get_default_classifier()
    block = extract_images_block(text)
    if not block:
        return []

    suggestions = []
    for entry in segment_entries(block):
        suggestion = entry_to_suggestion(entry, classifier)
        if suggestion is None:
            logger.debug("Skipping entry without title or artist: %r", entry.main_line)
            continue
        suggestions.append(suggestion)
    return suggestions


class DocumentExtractor:
    """Rules first, LLM second.

    ``record_history`` is called with the source filename after every
    successful run. It is best-effort: an exception from it is logged and
    never changes the result.
    """

    def __init__(
        self,
        classifier: FieldClassifier | None = None,
        record_history: Callable[[Optional[str]], Any] | None = None,
        llm_factory: Callable[[AIConfig], LLMExtractor] = LLMExtractor,
    ):
        self.classifier = classifier or get_default_classifier()
        self.record_history = record_history
        self.llm_factory = llm_factory

    def extract(
        self,
        text: str,
        ai_config: AIConfig | None = None,
        filename: Optional[str] = None,
    ) -> ExtractionResult:
        """Extract artwork suggestions from document text.

        Raises:
            MissingCredentialError: the local pipeline found nothing and no
                API key is configured.
            LLMExtractionError: the fallback call failed.
        """
        local = extract_local(text, self.classifier)
        if local:
            logger.info("Local pipeline extracted %d artworks from %s", len(local), filename or "text")
            result = ExtractionResult(
                source=SOURCE_LOCAL,
                artworks=[s.model_dump(by_alias=True) for s in local],
            )
            self._record(filename)
            return result

        if ai_config is None or not ai_config.api_key:
            raise MissingCredentialError("apiKey is required for AI fallback extraction")

        artworks = self.llm_factory(ai_config).extract(text)
        result = ExtractionResult(source=SOURCE_AI, artworks=artworks)
        self._record(filename)
        return result

    def _record(self, filename: Optional[str]) -> None:
        if self.record_history is None:
            return
        try:
            self.record_history(filename)
        except Exception as e:
            logger.warning("History write failed for %r: %s", filename, e)
