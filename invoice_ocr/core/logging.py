import sys

from loguru import logger

from .config import settings


def setup_logging(level: str | None = None, serialize: bool | None = None):
    """
    Configure the process-wide loguru sink.

    Structured context passed as keyword arguments to ``logger.info(...)``
    lands in ``record["extra"]`` and is rendered after the message.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        serialize=settings.log_json if serialize is None else serialize,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level> {extra}"
        ),
        backtrace=False,
        diagnose=False,
    )
    logger.info("Logging configured", app=settings.app_name, env=settings.app_env)
    return logger
