"""Run the API server: `python -m codeshelf`."""

import uvicorn

from codeshelf.config import settings


def main() -> None:
    uvicorn.run(
        "codeshelf.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
