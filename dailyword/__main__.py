# Entry point: python -m dailyword

import uvicorn

from .config import Settings, load_env


def main() -> None:
    load_env()
    settings = Settings.from_env()
    uvicorn.run("dailyword.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
