"""Pydantic v2 schemas for ArtPivot payloads.

These are the contract between the HTTP layer, the CLI, and the extraction
pipeline. Wire names are camelCase (``startYear``, ``imageUrl``,
``periodId``); Python code uses the snake_case attribute names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from artpivot.storage.models import DEFAULT_PERIOD_COLOR


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v or None


# ---------------------------------------------------------------------------
# Catalogue payloads
# ---------------------------------------------------------------------------

class ArtPeriodCreate(CamelModel):
    """A named art-historical era with a start/end year range."""

    name: str = Field(..., min_length=1)
    start_year: int
    end_year: int
    color: str = Field(default=DEFAULT_PERIOD_COLOR)
    description: str = ""
    image_url: str = ""


class ArtPeriodUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    color: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class ArtworkCreate(CamelModel):
    """A single catalogued piece, optionally attached to a period."""

    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    year: int
    image_url: str = ""
    description: str = ""
    period_id: Optional[str] = None

    @field_validator("period_id")
    @classmethod
    def blank_period_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class ArtworkUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    artist: Optional[str] = Field(None, min_length=1)
    year: Optional[int] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    period_id: Optional[str] = None

    @field_validator("period_id")
    @classmethod
    def blank_period_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class AIConfig(CamelModel):
    """Client-held settings for the LLM fallback.

    Missing ``model`` and ``base_url`` fall back to the application settings.
    """

    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None

    @field_validator("api_key", "model", "base_url")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class ExtractionRequest(CamelModel):
    text: str = Field(..., min_length=1, description="Plain text of the source document")
    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    filename: Optional[str] = None

    def ai_config(self) -> AIConfig:
        return AIConfig(api_key=self.api_key, model=self.model, base_url=self.base_url)


class ArtworkSuggestion(CamelModel):
    """An artwork-shaped record produced by the local extraction pipeline."""

    title: str
    artist: str
    year: int = 0
    image_url: str = ""
    description: str = ""


class ApiKeyCheck(CamelModel):
    api_key: str = Field(..., min_length=1)
