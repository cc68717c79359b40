"""Entry point for running the server via ``python -m tictactoe``."""

from __future__ import annotations

import uvicorn
from dotenv import load_dotenv

from tictactoe.settings import settings_from_env


def main() -> None:
    """Load ``.env`` (if present) and start the FastAPI app under uvicorn."""

    load_dotenv(override=False)
    settings = settings_from_env()
    uvicorn.run(
        "tictactoe.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
