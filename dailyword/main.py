# FastAPI server for the daily puzzle.
# Provides:
# - GET  /api/today: today's puzzle (no answer)
# - GET  /api/puzzle/{puzzle_id}: metadata for an available puzzle
# - POST /api/guess: mark a guess against a puzzle's answer
# - GET  /api/puzzles/list: every puzzle released so far
# - POST /api/reveal: reveal a puzzle's answer
# - GET  /api/answer-image/{puzzle_id}: answer image for a released puzzle
# - GET  /api/sounds/{filename}: win/lose/try sounds
#
# Direct access to public/images/answers and public/sounds is blocked so
# answers cannot be found by guessing file paths. Everything else under
# public/ is served as static files.
#
# Run: uvicorn dailyword.main:app --host 0.0.0.0 --port 3000

from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import PurePosixPath
from typing import Optional
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .assets import Found
from .config import MEDIA_CACHE_CONTROL, Settings, load_env
from .errors import PuzzleError
from .models import GuessRequest, PuzzleInfo, PuzzleListResponse, RevealRequest, RevealResponse, GuessResponse
from .service import PuzzleService

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Media directories under public/ that only the API may serve.
PRIVATE_PREFIXES = [("images", "answers"), ("sounds",)]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def is_private_path(path: str) -> bool:
    """True if a normalized static path points into a media directory."""
    parts = tuple(p.lower() for p in PurePosixPath(path.replace(os.sep, "/")).parts)
    return any(parts[:len(prefix)] == prefix for prefix in PRIVATE_PREFIXES)


class PublicFiles(StaticFiles):
    """Static files for the client, with media blocked and deep links sent to index.html."""

    async def get_response(self, path: str, scope):
        # path has already been through os.path.normpath, so "//" and ".." are collapsed
        if is_private_path(path):
            return JSONResponse(status_code=403, content={"error": "Access denied"})
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404 or PurePosixPath(path.replace(os.sep, "/")).parts[:1] == ("api",):
                raise
        return await super().get_response("index.html", scope)


def _media(found: Found) -> Response:
    return Response(
        content=found.data,
        media_type=found.content_type,
        headers={"Cache-Control": MEDIA_CACHE_CONTROL},
    )


def create_app(settings: Optional[Settings] = None, service: Optional[PuzzleService] = None) -> FastAPI:
    if settings is None:
        load_env()
        settings = Settings.from_env()
    configure_logging(settings.log_level)
    if service is None:
        service = PuzzleService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.log_startup()
        yield
        await service.assets.aclose()

    app = FastAPI(title="Daily Word Puzzle", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PuzzleError)
    async def puzzle_error_handler(request: Request, exc: PuzzleError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Never echo pydantic internals back to the client.
        return JSONResponse(status_code=400, content={"error": "Malformed request"})

    # Block direct static access to answer images and sounds
    @app.api_route("/images/answers", methods=ALL_METHODS, include_in_schema=False)
    @app.api_route("/images/answers/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
    @app.api_route("/sounds", methods=ALL_METHODS, include_in_schema=False)
    @app.api_route("/sounds/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
    def blocked_media(rest: str = ""):
        return JSONResponse(status_code=403, content={"error": "Access denied"})

    @app.get("/api/today")
    def api_today():
        return service.today()

    @app.get("/api/puzzle/{puzzle_id}", response_model=PuzzleInfo)
    def api_puzzle(puzzle_id: str):
        return service.puzzle(puzzle_id)

    @app.post("/api/guess", response_model=GuessResponse)
    def api_guess(req: GuessRequest):
        return service.guess(req.puzzleId, req.guess)

    @app.get("/api/puzzles/list", response_model=PuzzleListResponse)
    def api_puzzles_list():
        return service.list_puzzles()

    @app.post("/api/reveal", response_model=RevealResponse)
    def api_reveal(req: RevealRequest):
        return service.reveal(req.puzzleId)

    @app.api_route("/api/answer-image/{puzzle_id}", methods=["GET", "HEAD"])
    async def api_answer_image(puzzle_id: str):
        return _media(await service.answer_image(puzzle_id))

    @app.get("/api/sounds/{filename}")
    async def api_sound(filename: str):
        return _media(await service.sound(filename))

    # Serve the client (index.html, js, css) from public/
    if settings.public_dir.is_dir():
        app.mount("/", PublicFiles(directory=str(settings.public_dir), html=True), name="static")

    return app


app = create_app()
