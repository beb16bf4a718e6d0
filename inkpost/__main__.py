"""Run the API with uvicorn: `python -m inkpost` (listens on $HOST:$PORT, default 0.0.0.0:3000)."""

import uvicorn

from inkpost.config import settings


def main() -> None:
    uvicorn.run(
        "inkpost.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
