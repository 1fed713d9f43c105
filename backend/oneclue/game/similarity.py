"""Fuzzy matching between a secret word and free text typed by players.

The score is the Sorensen-Dice coefficient over character bigrams, with
whitespace ignored. It is symmetric, 1.0 for identical strings and 0.0 for
strings that share no bigram.

A target word is compared through its alias set: the word itself, plus the
bare name and the bracketed part for words like ``"nunu (et willump)"``, or
the longer tokens of a compound word like ``"xin zhao"``.
"""

from __future__ import annotations

import re
from collections import Counter


_WS_RE = re.compile(r"\s+")
_PAREN_TAIL_RE = re.compile(r"\s*\(.*\)")
_PAREN_INNER_RE = re.compile(r"\(([^)]+)\)")


def _bigrams(text: str) -> Counter:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def compare(first: str, second: str) -> float:
    a = _WS_RE.sub("", first)
    b = _WS_RE.sub("", second)

    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    first_bigrams = _bigrams(a)
    second_bigrams = _bigrams(b)
    overlap = sum((first_bigrams & second_bigrams).values())
    return (2.0 * overlap) / (len(a) + len(b) - 2)


def build_aliases(target: str) -> list[str]:
    """Return the alias set of an already lower-cased target, base phrase first."""
    aliases = [target]

    if "(" in target:
        main = _PAREN_TAIL_RE.sub("", target).strip()
        match = _PAREN_INNER_RE.search(target)
        if match:
            aliases.append(main)
            aliases.append(match.group(1).strip())
    elif " " in target:
        aliases.extend(part for part in target.split() if len(part) > 2)

    unique: list[str] = []
    for alias in aliases:
        if alias and alias not in unique:
            unique.append(alias)
    return unique


def best_similarity(target: str, text: str) -> float:
    return max((compare(alias, text) for alias in build_aliases(target)), default=0.0)


def is_clue_too_similar(target: str, clue: str, max_similarity: float = 0.30) -> bool:
    """A clue must neither overlap an alias as a substring nor score above ``max_similarity``."""
    clue = clue.strip().lower()
    for alias in build_aliases(target.lower()):
        if clue in alias or alias in clue:
            return True
        if compare(alias, clue) > max_similarity:
            return True
    return False


def is_guess_correct(target: str, guess: str, min_similarity: float = 0.80) -> bool:
    return best_similarity(target.lower(), guess.strip().lower()) >= min_similarity
