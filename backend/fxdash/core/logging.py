"""
Logging setup shared by the server entry point and the app factory.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # aiohttp/asyncpg are noisy at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
