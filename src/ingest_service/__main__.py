"""Entry point for running the ingest service."""

import logging
import uvicorn

from .config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main():
    """Run the ingest service."""
    settings = get_settings()
    settings.staging_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Starting ingest service on {settings.app_host}:{settings.app_port}")

    uvicorn.run(
        "ingest_service.api.app:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
