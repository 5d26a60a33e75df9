"""Main entry point - runs the swap API."""

import asyncio
import logging

import uvicorn

from swingswap.api.app import create_app
from swingswap.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure root logging once for the process."""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def serve():
    """Run the FastAPI server."""
    settings = get_settings()
    configure_logging(settings.debug)

    logger.info("Starting Swingswap...")
    logger.info(f"Environment: {settings.environment}")
    if not settings.has_evm_key:
        logger.warning("EVM_PRIVATE_KEY not set - EVM signing will fail")
    if not settings.has_sol_key:
        logger.warning("SOL_PRIVATE_KEY not set - Solana signing will fail")

    config = uvicorn.Config(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )
    server = uvicorn.Server(config)
    logger.info(f"Server running on {settings.api_host}:{settings.api_port}")
    await server.serve()


def main():
    """Main entry point."""
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")


if __name__ == "__main__":
    main()
