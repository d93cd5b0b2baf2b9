"""Text similarity heuristics used for grading and diagnosis.

Everything here is intentionally shallow: normalization, edit distance,
rule-based plural/verb variants and word-set overlap. There is no real
morphological or syntactic parsing.
"""

import re
from types import MappingProxyType

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_CONSONANT_Y = re.compile(r"[bcdfghjklmnpqrstvwxz]y$")
_CONSONANT_O = re.compile(r"[bcdfghjklmnpqrstvwxz]o$")
_SIBILANT = re.compile(r"(?:[sxz]|[cs]h)$")
_F_ENDING = re.compile(r"fe?$")
_SHORT_CVC = re.compile(r"[a-z]?[^aeiou\W][aeiou][bdgmnprt]")

IRREGULAR_PLURALS = MappingProxyType(
    {
        "child": "children",
        "foot": "feet",
        "tooth": "teeth",
        "mouse": "mice",
        "man": "men",
        "woman": "women",
        "person": "people",
        "goose": "geese",
        "ox": "oxen",
        "matrix": "matrices",
        "index": "indices",
        "vertex": "vertices",
    }
)

VERB_SUFFIXES = ("ed", "ing", "s")

SUBJECT_PRONOUNS = frozenset({"i", "you", "he", "she", "it", "we", "they"})
DETERMINERS = frozenset(
    {"the", "a", "an", "my", "your", "his", "her", "its", "our", "their", "this", "that", "these", "those"}
)
AUXILIARY_VERBS = frozenset(
    {
        "am", "is", "are", "was", "were", "be", "been",
        "have", "has", "had", "do", "does", "did",
        "will", "would", "can", "could", "shall", "should", "may", "might", "must",
    }
)


def normalize_text(text: str) -> str:
    """Lowercase, trim, strip punctuation and collapse whitespace."""
    text = _PUNCTUATION.sub("", text.lower().strip())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text into words."""
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


def levenshtein_distance(a: str, b: str) -> int:
    """Classic dynamic-programming edit distance.

    Keeps only two rows of the matrix, so memory is O(len(b)).
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(previous[j - 1] + 1, current[j - 1] + 1, previous[j] + 1)
                )
        previous = current
    return previous[-1]


def is_spelling_mistake(user_text: str, correct_text: str, max_distance: int = 2) -> bool:
    """Check if two texts differ by a small, non-zero number of edits."""
    distance = levenshtein_distance(normalize_text(user_text), normalize_text(correct_text))
    return 0 < distance <= max_distance


def generate_plural_variants(word: str) -> set[str]:
    """Generate plural candidates for a singular word using English suffix rules."""
    variants = {word + "s"}

    if _SIBILANT.search(word):
        variants.add(word + "es")
    if _CONSONANT_Y.search(word):
        variants.add(word[:-1] + "ies")
    if _F_ENDING.search(word):
        variants.add(_F_ENDING.sub("", word) + "ves")
    if _CONSONANT_O.search(word):
        variants.add(word + "es")

    irregular = IRREGULAR_PLURALS.get(word)
    if irregular:
        variants.add(irregular)
    return variants


def generate_verb_variants(word: str) -> set[str]:
    """Generate regular verb-form candidates (-ed, -ing, -s)."""
    variants = {word + suffix for suffix in VERB_SUFFIXES}
    # Doubled final consonant: run -> running, stop -> stopped
    if _SHORT_CVC.fullmatch(word):
        variants.add(word + word[-1] + "ing")
        variants.add(word + word[-1] + "ed")
    # Silent e: bake -> baking, baked
    if word.endswith("e") and len(word) > 2:
        variants.add(word[:-1] + "ing")
        variants.add(word + "d")
    return variants


def generate_grammatical_variants(word: str) -> set[str]:
    """All plural and verb-form candidates for a word, excluding the word itself.

    Irregular plurals are matched in both directions, so a singular answer
    for a plural target is also recognized.
    """
    word = normalize_text(word)
    if not word:
        return set()

    variants = generate_plural_variants(word) | generate_verb_variants(word)
    for singular, plural in IRREGULAR_PLURALS.items():
        if plural == word:
            variants.add(singular)
    variants.discard(word)
    return variants


def is_grammatical_variation(user_text: str, correct_text: str) -> bool:
    """Check if the user's text is an inflected form of the correct text, or vice versa."""
    user = normalize_text(user_text)
    correct = normalize_text(correct_text)
    if not user or not correct or user == correct:
        return False
    return user in generate_grammatical_variants(correct) or correct in generate_grammatical_variants(user)


def find_transpositions(user_words: list[str], correct_words: list[str]) -> list[int]:
    """Positions where the user's word is out of place but belongs elsewhere.

    A position counts when the word differs from the target word at that
    index yet appears somewhere in the target sequence.
    """
    correct_set = set(correct_words)
    transpositions = []
    for i, word in enumerate(user_words):
        expected = correct_words[i] if i < len(correct_words) else None
        if word != expected and word in correct_set:
            transpositions.append(i)
    return transpositions


def word_set_similarity(words_a: set[str], words_b: set[str]) -> float:
    """Intersection over union of two word sets."""
    union = words_a | words_b
    if not union:
        return 1.0
    return len(words_a & words_b) / len(union)


def calculate_string_similarity(a: str, b: str) -> float:
    """Similarity between two strings on a 0-1 scale using normalized word overlap."""
    normalized_a = normalize_text(a)
    normalized_b = normalize_text(b)
    if normalized_a == normalized_b:
        return 1.0
    return word_set_similarity(set(tokenize(normalized_a)), set(tokenize(normalized_b)))


def _is_verb_like(word: str) -> bool:
    if word in AUXILIARY_VERBS:
        return True
    return len(word) > 4 and (word.endswith("ing") or word.endswith("ed"))


def is_grammatically_plausible(sentence: str) -> bool:
    """Rough check for a subject-like token and a verb-like token.

    A subject is a personal pronoun, a word following a determiner, or a
    capitalized word after the first position (a proper noun).
    """
    raw_words = [w for w in _PUNCTUATION.sub("", sentence).split() if w]
    words = [w.lower() for w in raw_words]
    if not words:
        return False

    has_subject = any(w in SUBJECT_PRONOUNS for w in words)
    if not has_subject:
        has_subject = any(
            words[i - 1] in DETERMINERS and words[i] not in AUXILIARY_VERBS
            for i in range(1, len(words))
        )
    if not has_subject:
        has_subject = any(w[:1].isupper() for w in raw_words[1:])

    has_verb = any(_is_verb_like(w) for w in words)
    return has_subject and has_verb
