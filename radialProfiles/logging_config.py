"""
Logging for the radialProfiles package.

Every module logs through the ``"radialprofiles"`` logger, which writes to
stdout and does not propagate to the root logger. Loggers named
``"radialprofiles.<something>"`` forward to it. A configuration-driven run
can mirror the whole log into a file next to its output.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "radialprofiles"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a stdout handler to a logger that has none yet.

    Parameters
    ----------
    name : str, optional
        Name of the logger. Default is "radialprofiles".
    level : int, optional
        Logging level (e.g., logging.DEBUG, logging.INFO). Default is INFO.
    fmt : str, optional
        Custom format string. Defaults to ``LOG_FORMAT``.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt or LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get the package logger or one of its children.

    Children (``"radialprofiles.io"``, ...) get no handler of their own and
    reach stdout through the package logger.

    Parameters
    ----------
    name : str, optional
        Name of the logger. Default is "radialprofiles".

    Returns
    -------
    logging.Logger
        Logger instance.
    """
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return setup_logger(name)


def set_log_level(level: int, name: str = LOGGER_NAME) -> None:
    """
    Change the level of a logger and of all its handlers.

    Parameters
    ----------
    level : int
        New logging level (e.g., logging.DEBUG, logging.WARNING).
    name : str, optional
        Name of the logger to modify. Default is "radialprofiles".

    Examples
    --------
    >>> import logging
    >>> from radialProfiles.logging_config import set_log_level
    >>> set_log_level(logging.DEBUG)  # show every calibration iteration
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def add_file_handler(
    path: str, level: Optional[int] = None, name: str = LOGGER_NAME
) -> logging.FileHandler:
    """
    Mirror a logger into a file, overwriting it.

    Parameters
    ----------
    path : str
        Log file to write.
    level : int, optional
        Level of the file handler. Defaults to the logger's current level.
    name : str, optional
        Name of the logger. Default is "radialprofiles".

    Returns
    -------
    logging.FileHandler
        The new handler, to be passed to :func:`remove_handler` when done.
    """
    logger = logging.getLogger(name)
    handler = logging.FileHandler(path, mode="w")
    handler.setLevel(logger.level if level is None else level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    logger.addHandler(handler)
    return handler


def remove_handler(handler: logging.Handler, name: str = LOGGER_NAME) -> None:
    """Detach and close a handler added with :func:`add_file_handler`."""
    logging.getLogger(name).removeHandler(handler)
    handler.close()


_main_logger = setup_logger(LOGGER_NAME, level=logging.INFO)
