# Request-time error taxonomy. Each error maps 1:1 to an HTTP status with a short message.

from __future__ import annotations


class PuzzleError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(PuzzleError):
    status_code = 400
    message = "Invalid input"


class NotYetAvailable(PuzzleError):
    status_code = 403
    message = "This puzzle is not available yet"


class PuzzleNotFound(PuzzleError):
    status_code = 404
    message = "Puzzle not found"


class AssetNotFound(PuzzleError):
    status_code = 404
    message = "Not found"


class UnknownWord(PuzzleError):
    status_code = 422
    message = "Not in word list"
