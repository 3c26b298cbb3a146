# Pydantic models and data structures for API IO.

from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional, Literal

MarkStatus = Literal["correct", "present", "absent"]


class LetterMark(BaseModel):
    letter: str
    status: MarkStatus


class GuessRequest(BaseModel):
    # Shape checks happen in the service so a bad guess maps to 400 before any lookup.
    puzzleId: Optional[str] = Field(None, description="Date-based puzzle id (YYYYMMDD)")
    guess: Optional[str] = Field(None, description="5-character guess (A-Z, 0-9, -)")


class GuessResponse(BaseModel):
    result: List[LetterMark]
    correct: bool


class RevealRequest(BaseModel):
    puzzleId: Optional[str] = None


class RevealResponse(BaseModel):
    answer: str


class PuzzleInfo(BaseModel):
    puzzleNumber: int
    puzzleId: str
    clue: str
    date: str
    altWinSound: Optional[str] = None
    altLoseSound: Optional[str] = None


class PuzzleListResponse(BaseModel):
    puzzles: List[PuzzleInfo]
    totalPuzzles: int
    nextPuzzleTime: Optional[str] = None
    hasMorePuzzles: bool
