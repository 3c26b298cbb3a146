# Configuration module for server-side constants and environment-driven settings.

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional
import os
import re

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parents[1]

# Static content root (index.html, js, and the blocked media directories).
DEFAULT_PUBLIC_DIR = ROOT_DIR / "public"

# Optional accepted-guess dictionary (one word per line).
DEFAULT_WORDS_PATH = ROOT_DIR / "data" / "valid-words.txt"

# Civil timezone that decides when the next puzzle unlocks.
DEFAULT_TIMEZONE = "America/New_York"

# Answers are exactly this long and drawn from this charset.
WORD_LENGTH = 5
ANSWER_PATTERN = re.compile(r"[A-Z0-9\-]+")

# Environment keys holding puzzle definitions, e.g. PUZZLE_20250101.
PUZZLE_KEY_PATTERN = re.compile(r"PUZZLE_(\d{8})", re.ASCII)

# Probe order for answer images whose extension is not known in advance.
IMAGE_EXTENSIONS = ("png", "jpg", "gif", "webp")
IMAGE_MIME_TYPES = {"png": "image/png", "jpg": "image/jpeg", "gif": "image/gif", "webp": "image/webp"}

# Only these sound filenames may be requested (no path separators, no dots in the stem).
SOUND_FILENAME_PATTERN = re.compile(r"[\w\-]+\.(mp3|wav|ogg)", re.IGNORECASE | re.ASCII)
SOUND_MIME_TYPES = {"mp3": "audio/mpeg", "wav": "audio/wav", "ogg": "audio/ogg"}

# Browsers may keep media for a day.
MEDIA_CACHE_CONTROL = "public, max-age=86400"

MIRROR_BASE_URL = "https://raw.githubusercontent.com"

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


def load_env(dotenv_path: Optional[str] = None) -> None:
    """Load a .env file into the process environment without overriding real variables."""
    load_dotenv(dotenv_path or os.getenv("DOTENV_PATH", ".env"), override=False)


@dataclass(frozen=True)
class Settings:
    timezone: str = DEFAULT_TIMEZONE
    public_dir: Path = DEFAULT_PUBLIC_DIR
    words_path: Path = DEFAULT_WORDS_PATH
    enforce_word_list: bool = True
    assets_token: Optional[str] = None
    assets_repo: Optional[str] = None
    assets_branch: str = "main"
    mirror_timeout: float = 10.0
    skip_local_sounds: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    # (key, raw value) pairs, e.g. ("PUZZLE_20250101", "CRANE|A bird")
    puzzle_entries: List[tuple] = field(default_factory=list)

    @property
    def answers_dir(self) -> Path:
        return self.public_dir / "images" / "answers"

    @property
    def sounds_dir(self) -> Path:
        return self.public_dir / "sounds"

    @property
    def mirror_enabled(self) -> bool:
        return bool(self.assets_token and self.assets_repo)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env: Mapping[str, str] = os.environ if environ is None else environ
        entries = sorted((k, v) for k, v in env.items() if PUZZLE_KEY_PATTERN.fullmatch(k))
        origins = [o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            timezone=env.get("PUZZLE_TIMEZONE", DEFAULT_TIMEZONE),
            public_dir=Path(env.get("PUBLIC_DIR", str(DEFAULT_PUBLIC_DIR))),
            words_path=Path(env.get("VALID_WORDS_PATH", str(DEFAULT_WORDS_PATH))),
            enforce_word_list=_flag(env.get("ENFORCE_WORD_LIST"), default=True),
            assets_token=env.get("GITHUB_ASSETS_TOKEN") or None,
            assets_repo=env.get("GITHUB_ASSETS_REPO") or None,
            assets_branch=env.get("GITHUB_ASSETS_BRANCH", "main"),
            mirror_timeout=float(env.get("MIRROR_TIMEOUT_SECONDS", "10")),
            skip_local_sounds=_flag(env.get("SKIP_LOCAL_SOUNDS")),
            cors_origins=origins or ["*"],
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            puzzle_entries=entries,
        )


def mime_for_sound(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower()
    return SOUND_MIME_TYPES.get(ext, "application/octet-stream")


def mirror_headers(settings: Settings) -> Dict[str, str]:
    return {"Authorization": f"token {settings.assets_token}"}
