"""Module to handle console logging for CI pipelines."""

import logging


NOTICE = 25


class LevelPrefixFilter(logging.Filter):
    """A logging filter that tags each line with its severity."""

    # pylint: disable=too-few-public-methods

    prefixes = {
        logging.DEBUG: "debug: ",
        logging.INFO: "",
        NOTICE: "",
        logging.WARNING: "warning: ",
        logging.ERROR: "error: ",
        logging.CRITICAL: "error: ",
    }

    def filter(self, record):
        record.levelprefix = self.prefixes.get(record.levelno, "")
        return True


def setup_logging(verbose: bool = False):
    """Set up logging to stderr, leaving stdout for the version."""
    root_logger = logging.getLogger(__name__.rpartition(".")[0])
    root_logger.setLevel(logging.DEBUG if verbose else NOTICE)

    if root_logger.handlers:
        return

    logging.addLevelName(NOTICE, "NOTICE")

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(levelprefix)s%(message)s"))
    handler.addFilter(LevelPrefixFilter())

    # Set these handlers on the root logger of this module
    root_logger.addHandler(handler)


class LoggingMixin:
    """A mixin class for logging."""

    # pylint: disable=too-few-public-methods

    @property
    def logger(self) -> logging.Logger:
        """Create and return a logger for instance or class."""
        if not hasattr(self, "_logger") or not self._logger:
            self._logger = logging.getLogger(
                f"{self.__class__.__module__}.{self.__class__.__name__}"
            )
        return self._logger
