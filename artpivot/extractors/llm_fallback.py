"""LLM fallback extractor.

Used only when the rule-based pipeline finds no usable IMAGES entries. Sends
the whole document to an OpenAI-compatible chat-completions endpoint and
accepts the ``artworks`` array of its JSON reply as-is.

One call per document: the client is built with ``max_retries=0`` and a
fixed timeout, and any transport or API error is raised to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from artpivot.settings import get_settings
from artpivot.validation.schemas import AIConfig

logger = logging.getLogger(__name__)


class LLMExtractionError(RuntimeError):
    """The remote model could not be reached or returned an error."""


SYSTEM_PROMPT = """You are an information extraction assistant. Extract artworks \
only from the "IMAGES:" section of the document and output exactly this JSON, \
with no other text and no "periods" key:
{
  "artworks": [
    {
      "title": string,
      "artist": string,
      "year": number,
      "imageUrl": string,
      "description": string
    }
  ]
}
Rules:
- Only parse the numbered entries of the "IMAGES:" section; ignore every other section.
- Years: B.C. is negative, A.D. is positive. For a range use the midpoint. \
"1st c. A.D." is 50 and "16th c. B.C." is -1550 (century * 100 - 50). \
A leading "c." means approximately; use the number as given.
- imageUrl is an empty string when the document has no link.
- description is a short summary of the bullet notes under the entry.
- Skip any artwork whose title or artist is missing."""


def build_messages(text: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Document content (UTF-8 text):\n\n{text}"},
    ]


def parse_artworks(content: Optional[str]) -> list[Any]:
    """Pull the ``artworks`` array out of the model's reply.

    Malformed JSON, a non-object reply, or a missing/non-list ``artworks``
    all yield an empty list.
    """
    try:
        parsed = json.loads(content or "{}")
    except json.JSONDecodeError:
        logger.warning("LLM reply was not valid JSON (%d chars)", len(content or ""))
        return []
    if not isinstance(parsed, dict):
        return []
    artworks = parsed.get("artworks")
    return artworks if isinstance(artworks, list) else []


class LLMExtractor:
    """Extract artworks from a document with a single chat-completions call."""

    def __init__(self, config: AIConfig, client: Any = None):
        if not config.api_key:
            raise ValueError("LLMExtractor needs an API key")
        settings = get_settings()
        self.model = config.model or settings.llm_model
        self.base_url = (config.base_url or settings.llm_base_url).rstrip("/")
        self.client = client or OpenAI(
            api_key=config.api_key,
            base_url=self.base_url,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    def extract(self, text: str) -> list[Any]:
        logger.info("Calling %s at %s for fallback extraction", self.model, self.base_url)
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(text),
                temperature=0.2,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            logger.error("LLM extraction failed: %s", e)
            raise LLMExtractionError(str(e)) from e

        content = resp.choices[0].message.content if resp.choices else None
        artworks = parse_artworks(content)
        logger.info("LLM returned %d artworks", len(artworks))
        return artworks
