# PuzzleService: the per-process context handed to request handlers.
#
# Owns the catalog, clock, vocabulary and asset resolver. Built once at
# startup; the catalog and clock are read-only, the resolver cache only grows.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import logging

from .assets import AssetResolver, Found, ImageKey, NotFound, SoundKey
from .catalog import PuzzleCatalog, PuzzleRecord, RejectedEntry
from .clock import AvailabilityClock, isoformat_z
from .config import Settings
from .errors import AssetNotFound, InvalidInput, NotYetAvailable, PuzzleNotFound, UnknownWord
from .game import Vocabulary, evaluate, is_correct, normalize_guess
from .models import GuessResponse, PuzzleInfo, PuzzleListResponse, RevealResponse

logger = logging.getLogger(__name__)

NO_PUZZLES_MESSAGE = "No puzzles available yet. Check back soon!"


@dataclass
class PuzzleService:
    catalog: PuzzleCatalog
    clock: AvailabilityClock
    vocabulary: Vocabulary
    assets: AssetResolver
    rejected: List[RejectedEntry] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[AvailabilityClock] = None,
                      assets: Optional[AssetResolver] = None) -> "PuzzleService":
        catalog, rejected = PuzzleCatalog.from_env_items(settings.puzzle_entries)
        vocab = Vocabulary.load(settings.words_path, catalog.answers(), enforce=settings.enforce_word_list)
        return cls(
            catalog=catalog,
            clock=clock or AvailabilityClock(settings.timezone),
            vocabulary=vocab,
            assets=assets or AssetResolver(settings),
            rejected=rejected,
        )

    # -- helpers ---------------------------------------------------------

    def _info(self, p: PuzzleRecord) -> PuzzleInfo:
        return PuzzleInfo(
            puzzleNumber=self.catalog.puzzle_number(p.date),
            puzzleId=p.id,
            clue=p.clue,
            date=p.date_str,
            altWinSound=p.alt_win_sound,
            altLoseSound=p.alt_lose_sound,
        )

    def _next_puzzle_time(self) -> str:
        return isoformat_z(self.clock.next_rollover_instant())

    def _lookup(self, puzzle_id: Optional[str]) -> PuzzleRecord:
        puzzle = self.catalog.lookup_by_id(puzzle_id) if puzzle_id else None
        if puzzle is None:
            raise PuzzleNotFound()
        return puzzle

    def require_available(self, puzzle_id: Optional[str]) -> PuzzleRecord:
        puzzle = self._lookup(puzzle_id)
        if not self.clock.is_available(puzzle.date):
            raise NotYetAvailable()
        return puzzle

    # -- operations ------------------------------------------------------

    def today(self) -> dict:
        today = self.clock.current_date()
        available = self.catalog.available_as_of(today)
        total = self.catalog.total_count()

        if not available:
            return {
                "active": False,
                "message": NO_PUZZLES_MESSAGE,
                "nextPuzzleTime": self._next_puzzle_time(),
                "totalAvailable": 0,
                "totalPuzzles": total,
            }

        # Today's puzzle if there is one, otherwise the most recent.
        puzzle = self.catalog.lookup_by_date(today) or available[-1]
        has_more = self.catalog.has_puzzles_after(today)
        return {
            "active": True,
            **self._info(puzzle).model_dump(),
            "totalAvailable": len(available),
            "totalPuzzles": total,
            "nextPuzzleTime": self._next_puzzle_time() if has_more else None,
            "hasMorePuzzles": has_more,
        }

    def puzzle(self, puzzle_id: str) -> PuzzleInfo:
        return self._info(self.require_available(puzzle_id))

    def guess(self, puzzle_id: Optional[str], raw_guess: Optional[str]) -> GuessResponse:
        if not puzzle_id or not raw_guess:
            raise InvalidInput("Missing puzzleId or guess")
        guess = normalize_guess(raw_guess)
        if not self.vocabulary.accepts(guess):
            raise UnknownWord()
        puzzle = self.require_available(puzzle_id)
        return GuessResponse(result=evaluate(guess, puzzle.answer), correct=is_correct(guess, puzzle.answer))

    def list_puzzles(self) -> PuzzleListResponse:
        today = self.clock.current_date()
        has_more = self.catalog.has_puzzles_after(today)
        return PuzzleListResponse(
            puzzles=[self._info(p) for p in self.catalog.available_as_of(today)],
            totalPuzzles=self.catalog.total_count(),
            nextPuzzleTime=self._next_puzzle_time() if has_more else None,
            hasMorePuzzles=has_more,
        )

    def reveal(self, puzzle_id: Optional[str]) -> RevealResponse:
        return RevealResponse(answer=self._lookup(puzzle_id).answer)

    async def answer_image(self, puzzle_id: str) -> Found:
        puzzle = self.require_available(puzzle_id)
        res = await self.assets.resolve(ImageKey(puzzle.id))
        if isinstance(res, NotFound):
            raise AssetNotFound("No image available")
        return res

    async def sound(self, filename: str) -> Found:
        key = SoundKey.parse(filename)
        res = await self.assets.resolve(key)
        if isinstance(res, NotFound):
            raise AssetNotFound("Sound not found")
        return res

    def log_startup(self) -> None:
        for r in self.rejected:
            logger.warning("Rejected PUZZLE_%s (%s): %s", r.puzzle_id, r.reason, r.detail)
        today = self.clock.current_date()
        logger.info("Current %s date: %s", self.clock.tz.key, today.isoformat())
        logger.info("Available puzzles today: %d of %d",
                    len(self.catalog.available_as_of(today)), self.catalog.total_count())
        logger.info("Next puzzle at: %s", self._next_puzzle_time())
