import logging

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def configure_logging(log_level: str) -> None:
    """Configure root logging once at startup and keep client libraries at WARNING."""

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
