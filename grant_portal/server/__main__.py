"""Run the API server with uvicorn: ``python -m grant_portal.server``."""

import uvicorn

from grant_portal.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "grant_portal.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
