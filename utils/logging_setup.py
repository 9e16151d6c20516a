import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = ("<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
              "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with a stderr sink and an optional rotating file."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level.upper(), rotation="1 day", retention="7 days", encoding="utf-8")
