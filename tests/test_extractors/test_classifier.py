"""Tests for the artist/title field classifier."""

import pytest

from artpivot.extractors.classifier import (
    ANONYMOUS_ARTIST,
    FieldClassifier,
    load_classifier_config,
)


class TestConfig:

    def test_yaml_tables_loaded(self):
        tables = load_classifier_config()
        assert "anonymous" in tables["anonymous_names"]
        assert "kouros" in tables["object_hints"]
        assert "thera" in tables["material_hints"]

    def test_custom_yaml(self, tmp_path):
        path = tmp_path / "classifier.yaml"
        path.write_text("anonymous_names: [ignoto]\nobject_hints: [vase]\nmaterial_hints: []\n")
        clf = FieldClassifier.from_yaml(path)
        assert clf.classify("Ignoto, Pietà").artist == ANONYMOUS_ARTIST
        assert clf.classify("Harvester Vase, steatite").title == "Harvester Vase"


class TestClassify:

    @pytest.mark.parametrize("name", ["Anonymous", "anon", "UNKNOWN"])
    def test_anonymous_names(self, classifier, name):
        result = classifier.classify(f"{name}, Kouros statue — marble, Greek, c.530 B.C.")
        assert result.artist == ANONYMOUS_ARTIST
        assert result.title == "Kouros statue — marble"
        assert result.rule == "anonymous"

    def test_anonymous_wins_over_object_hints(self, classifier):
        result = classifier.classify("Anonymous, Temple of Hera, Paestum")
        assert result.artist == ANONYMOUS_ARTIST
        assert result.title == "Temple of Hera"

    def test_two_artists_joined_by_and(self, classifier):
        result = classifier.classify("Euphronios and Euxitheos, Sarpedon Krater, terracotta")
        assert result.artist == "Euphronios and Euxitheos"
        assert result.title == "Sarpedon Krater"
        assert result.rule == "named"

    def test_ampersand(self, classifier):
        result = classifier.classify("Kritios & Nesiotes, Tyrannicides")
        assert result.artist == "Kritios & Nesiotes"

    def test_and_inside_a_word_is_not_a_conjunction(self, classifier):
        result = classifier.classify("Alexander Mosaic, Pompeii")
        assert result.rule == "default"

    def test_parenthetical_means_named_artist(self, classifier):
        result = classifier.classify("Phidias (c.480–430 B.C.), Athena Parthenos")
        assert result.artist == "Phidias (c.480–430 B.C.)"
        assert result.title == "Athena Parthenos"

    def test_object_hint_in_first_segment(self, classifier):
        result = classifier.classify("Palace of Knossos, Crete, 1700-1400 B.C.")
        assert result.artist == ANONYMOUS_ARTIST
        assert result.title == "Palace of Knossos"
        assert result.rule == "object"

    def test_object_hint_is_case_insensitive_substring(self, classifier):
        result = classifier.classify("Snake Goddess STATUETTE, faience")
        assert result.title == "Snake Goddess STATUETTE"

    def test_material_hint_in_second_segment(self, classifier):
        result = classifier.classify("Spring Fresco scene, Akrotiri")
        assert result.rule == "object"
        result = classifier.classify("Peplos Kore, marble, Athens")
        assert result.artist == ANONYMOUS_ARTIST
        assert result.title == "Peplos Kore"
        assert result.rule == "material"

    def test_default_artist_then_title(self, classifier):
        result = classifier.classify("Polykleitos, Doryphoros, Roman copy")
        assert result.artist == "Polykleitos"
        assert result.title == "Doryphoros"
        assert result.rule == "default"

    def test_single_segment_has_no_title(self, classifier):
        result = classifier.classify("Untitled")
        assert result.artist == "Untitled"
        assert result.title == ""

    def test_empty_segments_are_ignored(self, classifier):
        result = classifier.classify(" , Myron, , Discobolus")
        assert result.artist == "Myron"
        assert result.title == "Discobolus"

    def test_comma_in_title_splits_at_first_comma(self, classifier):
        result = classifier.classify("Claude Monet, Impression, Sunrise")
        assert result.title == "Impression"
