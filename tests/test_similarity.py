"""Tests for the text similarity heuristics."""

import pytest

from exercises.similarity import (
    calculate_string_similarity,
    find_transpositions,
    generate_grammatical_variants,
    is_grammatical_variation,
    is_grammatically_plausible,
    is_spelling_mistake,
    levenshtein_distance,
    normalize_text,
    tokenize,
    word_set_similarity,
)


class TestNormalizeText:
    """Tests for normalize_text and tokenize."""

    def test_lowercases_and_strips_punctuation(self):
        """Should lowercase, drop punctuation and trim."""
        assert normalize_text("  Hello, World!  ") == "hello world"

    def test_collapses_whitespace(self):
        """Should collapse runs of whitespace to a single space."""
        assert normalize_text("the   dog\tis\nhere") == "the dog is here"

    def test_tokenize_empty_text(self):
        """Should return no tokens for blank or punctuation-only text."""
        assert tokenize("") == []
        assert tokenize(" ?! ") == []

    def test_tokenize_sentence(self):
        """Should split normalized text into words."""
        assert tokenize("The dog, is running.") == ["the", "dog", "is", "running"]


class TestLevenshteinDistance:
    """Tests for levenshtein_distance and is_spelling_mistake."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("runing", "running", 1),
            ("flaw", "lawn", 2),
        ],
    )
    def test_distance(self, a, b, expected):
        """Should compute the classic edit distance."""
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        """Should not depend on argument order."""
        assert levenshtein_distance("recieve", "receive") == levenshtein_distance(
            "receive", "recieve"
        )

    def test_one_edit_is_spelling_mistake(self):
        """Should flag a single-letter slip."""
        assert is_spelling_mistake("runing", "running")

    def test_identical_is_not_spelling_mistake(self):
        """Should not flag an exact match, even with different case."""
        assert not is_spelling_mistake("Running", "running")

    def test_three_edits_is_not_spelling_mistake(self):
        """Should not flag answers more than two edits away."""
        assert not is_spelling_mistake("cat", "dogs")


class TestGrammaticalVariants:
    """Tests for plural and verb-form variant generation."""

    @pytest.mark.parametrize(
        "word, variant",
        [
            ("cat", "cats"),
            ("box", "boxes"),
            ("church", "churches"),
            ("city", "cities"),
            ("leaf", "leaves"),
            ("knife", "knives"),
            ("potato", "potatoes"),
            ("child", "children"),
            ("walk", "walked"),
            ("walk", "walking"),
            ("run", "running"),
            ("stop", "stopped"),
            ("bake", "baking"),
            ("bake", "baked"),
        ],
    )
    def test_generates_variant(self, word, variant):
        """Should include the expected inflected form."""
        assert variant in generate_grammatical_variants(word)

    def test_irregular_plural_reverse(self):
        """Should map an irregular plural back to its singular."""
        assert "mouse" in generate_grammatical_variants("mice")

    def test_excludes_word_itself(self):
        """Should never list the word as its own variant."""
        assert "cat" not in generate_grammatical_variants("cat")

    def test_variation_checked_both_ways(self):
        """Should recognize singular-for-plural and plural-for-singular."""
        assert is_grammatical_variation("walked", "walk")
        assert is_grammatical_variation("walk", "walked")
        assert is_grammatical_variation("children", "child")

    def test_unrelated_words_are_not_variations(self):
        """Should not treat unrelated words as inflections."""
        assert not is_grammatical_variation("cat", "dog")
        assert not is_grammatical_variation("cat", "cat")


class TestTranspositions:
    """Tests for find_transpositions."""

    def test_swapped_words(self):
        """Should report both positions of a swapped pair."""
        user = ["dog", "the", "is", "running"]
        correct = ["the", "dog", "is", "running"]
        assert find_transpositions(user, correct) == [0, 1]

    def test_correct_order_has_none(self):
        """Should report nothing for a matching sequence."""
        words = ["the", "dog", "is", "running"]
        assert find_transpositions(words, words) == []

    def test_foreign_words_are_not_transpositions(self):
        """Should skip words that are not in the target at all."""
        assert find_transpositions(["a", "cat", "is"], ["the", "dog", "is"]) == []


class TestWordOverlap:
    """Tests for word_set_similarity and calculate_string_similarity."""

    def test_empty_sets_are_identical(self):
        """Should treat two empty sets as fully similar."""
        assert word_set_similarity(set(), set()) == 1.0

    def test_intersection_over_union(self):
        """Should divide the shared words by all words."""
        assert word_set_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_string_similarity_ignores_case_and_punctuation(self):
        """Should score normalized-equal strings as identical."""
        assert calculate_string_similarity("The dog!", "the dog") == 1.0


class TestGrammaticalPlausibility:
    """Tests for is_grammatically_plausible."""

    @pytest.mark.parametrize(
        "sentence",
        [
            "She is happy",
            "The dog is running",
            "running the dog is",
            "Yesterday Maria walked home",
        ],
    )
    def test_plausible(self, sentence):
        """Should accept sentences with a subject and a verb."""
        assert is_grammatically_plausible(sentence)

    @pytest.mark.parametrize("sentence", ["", "dog the", "happy blue table"])
    def test_implausible(self, sentence):
        """Should reject sentences missing a subject or a verb."""
        assert not is_grammatically_plausible(sentence)
