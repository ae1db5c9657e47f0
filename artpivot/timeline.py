"""Vertical timeline layout.

Maps signed years onto a 0-100 percent scale covering every period and
artwork in the catalogue, padded by 8% of the span on each side so nothing
sits flush against the ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

BUFFER_RATIO = 0.08


def format_year(year: int) -> str:
    """Display label for a signed year. There is no year 0, so 0 shows as 1 AD."""
    if year < 0:
        return f"{abs(year)} BC"
    if year == 0:
        return "1 AD"
    return f"{year} AD"


@dataclass(frozen=True)
class TimelineScale:
    min_year: int
    max_year: int

    @property
    def total_years(self) -> int:
        return self.max_year - self.min_year

    def year_to_percent(self, year: int) -> float:
        if self.total_years <= 0:
            return 0.0
        raw = (year - self.min_year) / self.total_years * 100
        return max(0.0, min(100.0, raw))


def build_scale(
    period_ranges: Iterable[tuple[int, int]],
    artwork_years: Iterable[int],
    buffer_ratio: float = BUFFER_RATIO,
) -> TimelineScale:
    years = [y for start, end in period_ranges for y in (start, end)]
    years.extend(artwork_years)
    if not years:
        return TimelineScale(0, 0)

    raw_min, raw_max = min(years), max(years)
    # Span is never negative, so +0.5 rounds half up
    buffer = int((raw_max - raw_min) * buffer_ratio + 0.5)
    return TimelineScale(raw_min - buffer, raw_max + buffer)


def layout(periods: list, artworks: list) -> dict:
    """Position ORM periods and artworks on a shared scale.

    Returns JSON-friendly dicts: periods get ``top``/``bottom`` percents,
    artworks get ``position``. Labels use format_year().
    """
    scale = build_scale(
        [(p.start_year, p.end_year) for p in periods],
        [a.year for a in artworks],
    )
    return {
        "minYear": scale.min_year,
        "maxYear": scale.max_year,
        "totalYears": scale.total_years,
        "periods": [
            {
                "id": p.id,
                "name": p.name,
                "color": p.color,
                "top": scale.year_to_percent(p.start_year),
                "bottom": scale.year_to_percent(p.end_year),
                "label": f"{format_year(p.start_year)} – {format_year(p.end_year)}",
            }
            for p in periods
        ],
        "artworks": [
            {
                "id": a.id,
                "title": a.title,
                "artist": a.artist,
                "periodId": a.period_id,
                "position": scale.year_to_percent(a.year),
                "label": format_year(a.year),
            }
            for a in artworks
        ],
    }
