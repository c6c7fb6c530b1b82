import logging
import sys

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'

# Third-party loggers that are too chatty at the service level
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "redis", "httpx")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Send logs to stdout and return the package logger.

    The package logger follows ``level`` even when the root logger was
    configured earlier by uvicorn or pytest.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("uvicorn.error").propagate = True
    logging.getLogger("uvicorn.access").disabled = True

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger = logging.getLogger("shortlinks")
    app_logger.setLevel(resolved)
    return app_logger
