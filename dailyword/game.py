# Core game logic: guess normalization, the accepted-word vocabulary, and marking.
# Implements canonical Wordle marking rules:
# - Two-pass algorithm: first mark exact-position letters 'correct', then scan
#   the still-unclaimed answer positions left to right for 'present' letters.
# - Each answer position is claimed at most once, so a repeated guess letter is
#   only 'present' as many times as the answer has spare copies of it.

from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional, Set
import logging

from .config import ANSWER_PATTERN, WORD_LENGTH
from .errors import InvalidInput
from .models import LetterMark

logger = logging.getLogger(__name__)


def normalize_guess(raw: str) -> str:
    """Uppercase and trim a submitted guess, rejecting bad shape or charset."""
    if not isinstance(raw, str):
        raise InvalidInput("Guess must be a string")
    guess = raw.strip().upper()
    if len(guess) != WORD_LENGTH or not ANSWER_PATTERN.fullmatch(guess):
        raise InvalidInput("Guess must be 5 characters (A-Z, 0-9, -)")
    return guess


def evaluate(guess: str, answer: str) -> List[LetterMark]:
    """Mark each letter of ``guess`` against ``answer``.

    Both inputs must already be normalized to five uppercase characters.
    """
    marks: List[Optional[LetterMark]] = [None] * WORD_LENGTH
    remaining: List[Optional[str]] = list(answer)

    # First pass: exact positions
    for i in range(WORD_LENGTH):
        if guess[i] == answer[i]:
            marks[i] = LetterMark(letter=guess[i], status="correct")
            remaining[i] = None

    # Second pass: first unclaimed matching position, left to right
    for i in range(WORD_LENGTH):
        if marks[i] is not None:
            continue
        ch = guess[i]
        try:
            idx = remaining.index(ch)
        except ValueError:
            marks[i] = LetterMark(letter=ch, status="absent")
            continue
        marks[i] = LetterMark(letter=ch, status="present")
        remaining[idx] = None

    return marks


def is_correct(guess: str, answer: str) -> bool:
    return guess == answer


class Vocabulary:
    """Set of accepted guesses: dictionary words plus every puzzle answer."""

    def __init__(self, words: Iterable[str] = (), enforce: bool = True):
        self._words: Set[str] = set(words)
        self.enforce = enforce

    @classmethod
    def load(cls, path: Path, answers: Iterable[str] = (), enforce: bool = True) -> "Vocabulary":
        words: Set[str] = set()
        if path.is_file():
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    w = line.strip().upper()
                    if len(w) == WORD_LENGTH and w.isascii() and w.isalpha():
                        words.add(w)
            logger.info("Loaded %d valid dictionary words", len(words))
        elif enforce:
            logger.warning("No word list at %s; only puzzle answers will be accepted as guesses", path)
        # Answers may be non-dictionary words or contain digits and hyphens.
        words.update(answers)
        return cls(words, enforce=enforce)

    def accepts(self, guess: str) -> bool:
        return not self.enforce or guess in self._words

    def __contains__(self, word: str) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)
