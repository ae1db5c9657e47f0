"""Tests for the regex-based section, entry and year patterns.

Tests run against both synthetic strings and the sample handout fixture.
"""

import pytest

from artpivot.extractors.patterns import (
    ParsedEntry,
    extract_images_block,
    parse_year,
    parse_year_core,
    segment_entries,
)


# ---------------------------------------------------------------------------
# Section Location
# ---------------------------------------------------------------------------

class TestImagesBlock:

    def test_no_marker_returns_none(self):
        assert extract_images_block("READING:\nPollitt, ch. 2\n") is None

    def test_empty_text_returns_none(self):
        assert extract_images_block("") is None
        assert extract_images_block(None) is None

    def test_block_ends_at_next_heading(self):
        text = "IMAGES:\n1. Exekias, Amphora\nNOTES:\n1. not an image"
        assert extract_images_block(text) == "1. Exekias, Amphora"

    def test_block_runs_to_end_without_heading(self):
        text = "Intro\nIMAGES:\n1. Exekias, Amphora\n2. Polykleitos, Doryphoros\n"
        assert extract_images_block(text) == "1. Exekias, Amphora\n2. Polykleitos, Doryphoros"

    def test_heading_with_punctuation(self):
        text = "IMAGES:\n1. Exekias, Amphora\nTERMS & CONCEPTS (WEEK-THREE):\nkouros"
        assert extract_images_block(text) == "1. Exekias, Amphora"

    def test_mixed_case_line_is_not_a_heading(self):
        text = "IMAGES:\n1. Exekias, Amphora\nSee also:\n2. Polykleitos, Doryphoros"
        block = extract_images_block(text)
        assert "Polykleitos" in block

    def test_fixture_excludes_discussion_questions(self, handout_text):
        block = extract_images_block(handout_text)
        assert block.startswith("- stray note")
        assert "Egyptian" not in block
        assert block.endswith("10. Untitled")


# ---------------------------------------------------------------------------
# Entry Segmentation
# ---------------------------------------------------------------------------

class TestSegmentEntries:

    def test_numbered_lines_start_entries(self):
        entries = segment_entries("1. Exekias, Amphora\n2 Polykleitos, Doryphoros")
        assert [e.main_line for e in entries] == ["Exekias, Amphora", "Polykleitos, Doryphoros"]

    def test_notes_attach_to_open_entry(self):
        block = "1. Exekias, Amphora\n  - black-figure\n  – Vulci\n  — Vatican"
        entries = segment_entries(block)
        assert entries == [ParsedEntry("Exekias, Amphora", ["black-figure", "Vulci", "Vatican"])]

    def test_notes_before_first_entry_are_dropped(self):
        entries = segment_entries("- preamble\n1. Exekias, Amphora")
        assert len(entries) == 1
        assert entries[0].notes == []

    def test_blank_and_plain_lines_are_skipped(self):
        entries = segment_entries("\n\n1. Exekias, Amphora\nplain commentary\n\n2. Myron, Discobolus")
        assert len(entries) == 2
        assert entries[0].notes == []

    def test_fixture_entries_in_order(self, handout_text):
        entries = segment_entries(extract_images_block(handout_text))
        assert len(entries) == 10
        assert entries[0].main_line.startswith("Anonymous, Kouros statue")
        assert entries[0].notes == ["New York Kouros type", "Found in Attica"]
        assert entries[1].notes == ["Black-figure technique"]
        assert entries[-1].main_line == "Untitled"


# ---------------------------------------------------------------------------
# Year Parsing
# ---------------------------------------------------------------------------

class TestParseYearCore:

    @pytest.mark.parametrize("text, expected", [
        ("c.450 B.C.", -450),
        ("16th c. B.C.", -1550),
        ("1st c. A.D.", 50),
        ("1200-1150 B.C.", -1175),
        ("c.450-440 B.C.", -445),
        ("c.540–530 BC", -535),
        ("118—125 A.D.", 122),
        ("c. 1503 AD", 1503),
        ("2nd c. BC", -150),
    ])
    def test_examples(self, text, expected):
        assert parse_year_core(text) == expected

    def test_range_midpoint_rounds_half_up(self):
        assert parse_year_core("451-440 B.C.") == -446
        assert parse_year_core("1501-1504 A.D.") == 1503

    def test_range_uses_era_elsewhere_in_text(self):
        assert parse_year_core("B.C. dates: 480-470, late archaic") == -475

    def test_range_without_era_is_positive(self):
        assert parse_year_core("painted 1503-1506") == 1505

    def test_single_year_requires_era(self):
        assert parse_year_core("Mona Lisa, 1503") is None

    def test_era_must_be_a_separate_token(self):
        assert parse_year_core("made 1503 in oil, glad") is None

    def test_era_is_case_insensitive(self):
        assert parse_year_core("c.530 b.c.") == -530
        assert parse_year_core("79 ad") == 79

    @pytest.mark.parametrize("text, expected", [
        ("450-440 BCE", -445),
        ("c.450 BCE", -450),
        ("c.450 B.C.E.", -450),
        ("5th c. BCE", -450),
        ("118-125 CE", 122),
        ("c. 79 C.E.", 79),
        ("B.C.E. dates: 480-470, late archaic", -475),
    ])
    def test_common_era_notation(self, text, expected):
        assert parse_year_core(text) == expected

    def test_common_era_token_stands_alone(self):
        assert parse_year_core("made 450 in ceramic, glad") is None
        assert parse_year_core("painted 1503-1506, Florence") == 1505

    def test_no_year_returns_none(self):
        assert parse_year_core("Polykleitos, Doryphoros") is None
        assert parse_year_core("") is None
        assert parse_year_core(None) is None


class TestParseYear:

    def test_parenthetical_preferred(self):
        assert parse_year("Roman copy of a Greek original (c.450-440 B.C.)") == -445

    def test_parenthetical_beats_outer_year(self):
        assert parse_year("Augustus, 20 B.C. (1st c. A.D. copy)") == 50

    def test_first_parenthetical_with_year_wins(self):
        assert parse_year("Doryphoros (Roman copy) (c.440 B.C.) (found 1797 A.D.)") == -440

    def test_falls_back_to_whole_string(self):
        assert parse_year("Athena Parthenos (Roman copy), c.438 B.C.") == -438

    def test_no_year_anywhere(self):
        assert parse_year("Polykleitos, Doryphoros (Roman copy)") is None
        assert parse_year(None) is None
