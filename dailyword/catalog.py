# Puzzle catalog: parses dated puzzle definitions into immutable records.
#
# Entry grammar (one per calendar day):
#   PUZZLE_<YYYYMMDD> = ANSWER|CLUE[|WIN_SOUND[,LOSE_SOUND]]
#
# Malformed entries are never fatal. They are collected as RejectedEntry
# values so startup can report them, and the catalog is built from the rest.

from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging

from .config import ANSWER_PATTERN, PUZZLE_KEY_PATTERN, WORD_LENGTH

logger = logging.getLogger(__name__)

# Rejection reasons
MISSING_DELIMITER = "missing_delimiter"
BAD_LENGTH = "bad_length"
BAD_CHARSET = "bad_charset"
INVALID_DATE = "invalid_date"


@dataclass(frozen=True)
class PuzzleRecord:
    id: str
    answer: str
    clue: str
    date: date
    alt_win_sound: Optional[str] = None
    alt_lose_sound: Optional[str] = None

    @property
    def date_str(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class RawEntry:
    """One unparsed definition: the YYYYMMDD id and its pipe-delimited payload."""

    puzzle_id: str
    payload: str

    @classmethod
    def from_env_item(cls, key: str, value: str) -> "RawEntry":
        m = PUZZLE_KEY_PATTERN.fullmatch(key)
        return cls(puzzle_id=m.group(1) if m else key, payload=value)


@dataclass(frozen=True)
class RejectedEntry:
    puzzle_id: str
    reason: str
    detail: str


def _split_sounds(spec: str) -> Tuple[Optional[str], Optional[str]]:
    parts = [s.strip() for s in spec.strip().split(",")]
    win = parts[0] if len(parts) > 0 and parts[0] else None
    lose = parts[1] if len(parts) > 1 and parts[1] else None
    return win, lose


def _parse_date(puzzle_id: str) -> Optional[date]:
    try:
        return datetime.strptime(puzzle_id, "%Y%m%d").date()
    except ValueError:
        return None


def parse_entry(entry: RawEntry) -> Union[PuzzleRecord, RejectedEntry]:
    """Parse one RawEntry into a PuzzleRecord, or explain why it was rejected."""
    pid = entry.puzzle_id
    value = entry.payload
    head, sep, rest = value.partition("|")
    if not sep:
        return RejectedEntry(pid, MISSING_DELIMITER, "missing pipe delimiter")

    answer = head.strip().upper()
    if len(answer) != WORD_LENGTH:
        return RejectedEntry(pid, BAD_LENGTH, f'answer "{answer}" is not {WORD_LENGTH} characters')
    if not ANSWER_PATTERN.fullmatch(answer):
        return RejectedEntry(pid, BAD_CHARSET, "answer contains invalid characters")

    day = _parse_date(pid)
    if day is None:
        return RejectedEntry(pid, INVALID_DATE, f'"{pid}" is not a calendar date')

    clue, sep, sound_spec = rest.partition("|")
    win, lose = _split_sounds(sound_spec) if sep else (None, None)
    return PuzzleRecord(
        id=pid,
        answer=answer,
        clue=clue.strip(),
        date=day,
        alt_win_sound=win,
        alt_lose_sound=lose,
    )


class PuzzleCatalog:
    """Date-ordered, read-only mapping of CalendarDate -> PuzzleRecord."""

    def __init__(self, records: Iterable[PuzzleRecord] = ()):
        by_date: Dict[date, PuzzleRecord] = {}
        for r in records:
            if r.date in by_date:
                logger.warning("Duplicate puzzle for %s: %s replaces %s", r.date_str, r.id, by_date[r.date].id)
            by_date[r.date] = r
        self._dates: List[date] = sorted(by_date)
        self._by_date = by_date
        self._by_id: Dict[str, PuzzleRecord] = {r.id: r for r in by_date.values()}

    @classmethod
    def load(cls, entries: Iterable[RawEntry]) -> Tuple["PuzzleCatalog", List[RejectedEntry]]:
        accepted: List[PuzzleRecord] = []
        rejected: List[RejectedEntry] = []
        for entry in entries:
            parsed = parse_entry(entry)
            if isinstance(parsed, RejectedEntry):
                rejected.append(parsed)
            else:
                accepted.append(parsed)
        catalog = cls(accepted)
        logger.info("Loaded %d puzzles (%d rejected)", catalog.total_count(), len(rejected))
        return catalog, rejected

    @classmethod
    def from_env_items(cls, items: Iterable[Tuple[str, str]]) -> Tuple["PuzzleCatalog", List[RejectedEntry]]:
        return cls.load(RawEntry.from_env_item(k, v) for k, v in sorted(items))

    def lookup_by_date(self, d: date) -> Optional[PuzzleRecord]:
        return self._by_date.get(d)

    def lookup_by_id(self, puzzle_id: str) -> Optional[PuzzleRecord]:
        return self._by_id.get(puzzle_id)

    def available_as_of(self, d: date) -> List[PuzzleRecord]:
        cut = bisect_right(self._dates, d)
        return [self._by_date[x] for x in self._dates[:cut]]

    def puzzle_number(self, d: date) -> int:
        """1-based rank of ``d`` among all puzzle dates, or 0 if no puzzle has that date."""
        if d not in self._by_date:
            return 0
        return bisect_right(self._dates, d)

    def total_count(self) -> int:
        return len(self._dates)

    def last_date(self) -> Optional[date]:
        return self._dates[-1] if self._dates else None

    def has_puzzles_after(self, d: date) -> bool:
        last = self.last_date()
        return last is not None and d < last

    def answers(self) -> List[str]:
        return [self._by_date[d].answer for d in self._dates]

    def __len__(self) -> int:
        return self.total_count()

    def __iter__(self):
        return (self._by_date[d] for d in self._dates)
