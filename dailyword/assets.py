# Asset resolution for per-puzzle media (answer images, win/lose/try sounds).
#
# Lookup chain, stopping at the first hit:
#   1. in-memory cache (positive or negative entries)
#   2. local content root (public/images/answers, public/sounds)
#   3. remote mirror (private GitHub repo served by raw.githubusercontent.com)
# Every outcome is memoized for the life of the process, including misses.
# A missing asset uploaded later stays a 404 until restart or invalidate().

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

import httpx
from starlette.concurrency import run_in_threadpool

from .config import (
    IMAGE_EXTENSIONS,
    IMAGE_MIME_TYPES,
    MIRROR_BASE_URL,
    SOUND_FILENAME_PATTERN,
    Settings,
    mime_for_sound,
    mirror_headers,
)
from .errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageKey:
    puzzle_id: str


@dataclass(frozen=True)
class SoundKey:
    filename: str

    @classmethod
    def parse(cls, filename: str) -> "SoundKey":
        if not SOUND_FILENAME_PATTERN.fullmatch(filename or ""):
            raise InvalidInput("Invalid filename")
        return cls(filename)


AssetKey = Union[ImageKey, SoundKey]


@dataclass(frozen=True)
class Found:
    data: bytes
    content_type: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Miss:
    pass


@dataclass(frozen=True)
class TransportError:
    reason: str


NOT_FOUND = NotFound()
MISS = Miss()

Resolution = Union[Found, NotFound]
Attempt = Union[Found, Miss, TransportError]


@dataclass(frozen=True)
class Candidate:
    folder: str  # "answers" or "sounds"
    name: str
    content_type: str


def candidates_for(key: AssetKey) -> List[Candidate]:
    if isinstance(key, ImageKey):
        return [Candidate("answers", f"{key.puzzle_id}.{ext}", IMAGE_MIME_TYPES[ext]) for ext in IMAGE_EXTENSIONS]
    return [Candidate("sounds", key.filename, mime_for_sound(key.filename))]


def _read_if_exists(path: Path) -> Optional[bytes]:
    if not path.is_file():
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return None


class LocalStore:
    def __init__(self, answers_dir: Path, sounds_dir: Path):
        self.roots = {"answers": answers_dir, "sounds": sounds_dir}

    async def probe(self, candidate: Candidate) -> Attempt:
        path = self.roots[candidate.folder] / candidate.name
        data = await run_in_threadpool(_read_if_exists, path)
        if data is None:
            return MISS
        return Found(data, candidate.content_type)


class RemoteMirror:
    """Authenticated raw-file fetches from a GitHub repository."""

    def __init__(self, client: httpx.AsyncClient, repo: str, branch: str, headers: Dict[str, str]):
        self.client = client
        self.repo = repo
        self.branch = branch
        self.headers = headers

    def url_for(self, candidate: Candidate) -> str:
        return f"{MIRROR_BASE_URL}/{self.repo}/{self.branch}/{candidate.folder}/{candidate.name}"

    async def fetch(self, candidate: Candidate) -> Attempt:
        try:
            resp = await self.client.get(self.url_for(candidate), headers=self.headers)
        except httpx.HTTPError as e:
            # Timeouts land here too; the caller moves on to the next candidate.
            return TransportError(type(e).__name__)
        if not resp.is_success:
            return MISS
        return Found(resp.content, candidate.content_type)


class AssetResolver:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.local = LocalStore(settings.answers_dir, settings.sounds_dir)
        self.mirror: Optional[RemoteMirror] = None
        self._client: Optional[httpx.AsyncClient] = None
        if settings.mirror_enabled:
            self._client = client or httpx.AsyncClient(timeout=settings.mirror_timeout)
            self.mirror = RemoteMirror(
                self._client,
                repo=settings.assets_repo,
                branch=settings.assets_branch,
                headers=mirror_headers(settings),
            )
        self._cache: Dict[AssetKey, Resolution] = {}

    def invalidate(self, key: Optional[AssetKey] = None) -> None:
        """Forget one memoized result, or all of them when ``key`` is None."""
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)

    def _skip_local(self, key: AssetKey) -> bool:
        return isinstance(key, SoundKey) and self.settings.skip_local_sounds

    async def resolve(self, key: AssetKey) -> Resolution:
        hit = self._cache.get(key)
        if hit is not None:
            logger.debug("Asset cache hit for %s", key)
            return hit

        cands = candidates_for(key)
        result = await self._resolve_uncached(key, cands)
        # Same key always resolves to the same bytes, so a concurrent
        # duplicate write here is harmless.
        self._cache[key] = result
        return result

    async def _resolve_uncached(self, key: AssetKey, cands: List[Candidate]) -> Resolution:
        if not self._skip_local(key):
            for c in cands:
                attempt = await self.local.probe(c)
                if isinstance(attempt, Found):
                    logger.debug("Local hit for %s (%s)", key, c.name)
                    return attempt

        if self.mirror is not None:
            for c in cands:
                attempt = await self.mirror.fetch(c)
                if isinstance(attempt, Found):
                    logger.debug("Mirror hit for %s (%s)", key, c.name)
                    return attempt
                if isinstance(attempt, TransportError):
                    logger.debug("Mirror error for %s (%s): %s", key, c.name, attempt.reason)

        logger.debug("No asset for %s; caching miss", key)
        return NOT_FOUND

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
