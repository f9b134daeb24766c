import logging
import os
from os import path
from typing import Optional

from ddexport.internal.logger import DDFormatter
from ddexport.internal.utils.formats import asbool


DEFAULT_FILE_SIZE_BYTES = 15 << 20  # 15 MB


def configure_ddexport_logger():
    # type: () -> None
    """Configures ddexport log levels and file paths.

    Customization is possible with the environment variables:
        ``DD_TRACE_DEBUG``, ``DD_TRACE_LOG_FILE_LEVEL``, and ``DD_TRACE_LOG_FILE``

    By default a stream handler using ``DDFormatter`` is attached to the ``ddexport`` logger
    and no logs are written to a file. ``DD_TRACE_LOG_STREAM_HANDLER=false`` removes the stream handler.

    When DD_TRACE_DEBUG has been enabled the ``ddexport`` logger is set to DEBUG, which
    also turns off rate limiting for all of its children.
    """
    ddexport_logger = logging.getLogger("ddexport")
    if asbool(os.getenv("DD_TRACE_LOG_STREAM_HANDLER", "true")):
        handler = logging.StreamHandler()
        handler.setFormatter(DDFormatter())
        ddexport_logger.addHandler(handler)

    _configure_ddexport_debug_logger(ddexport_logger)
    _configure_ddexport_file_logger(ddexport_logger)


def _configure_ddexport_debug_logger(logger):
    if asbool(os.getenv("DD_TRACE_DEBUG")):
        logger.setLevel(logging.DEBUG)


def _configure_ddexport_file_logger(logger):
    log_file_level = os.getenv("DD_TRACE_LOG_FILE_LEVEL", "DEBUG").upper()
    try:
        file_log_level_value = getattr(logging, log_file_level)
    except AttributeError:
        raise ValueError(
            "DD_TRACE_LOG_FILE_LEVEL is invalid. Log level must be CRITICAL/ERROR/WARNING/INFO/DEBUG.",
            log_file_level,
        )
    max_file_bytes = int(os.getenv("DD_TRACE_LOG_FILE_SIZE_BYTES", DEFAULT_FILE_SIZE_BYTES))
    log_path = os.getenv("DD_TRACE_LOG_FILE")
    _add_file_handler(logger=logger, log_path=log_path, log_level=file_log_level_value, max_file_bytes=max_file_bytes)


def _add_file_handler(
    logger: logging.Logger,
    log_path: Optional[str],
    log_level: int,
    max_file_bytes: int = DEFAULT_FILE_SIZE_BYTES,
):
    file_handler = None
    if log_path is not None:
        log_path = path.abspath(log_path)
        num_backup = 1
        from logging.handlers import RotatingFileHandler

        file_handler = RotatingFileHandler(filename=log_path, mode="a", maxBytes=max_file_bytes, backupCount=num_backup)
        log_format = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s:%(lineno)d] - %(message)s"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)
        logger.debug("ddexport logs will be routed to %s", log_path)
    return file_handler
