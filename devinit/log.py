"""Console logging for devinit runs."""

import logging
import sys

import click

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_LEVEL_STYLES = {
    logging.DEBUG: ("DEBUG", "bright_black"),
    logging.INFO: ("INFO", "cyan"),
    SUCCESS: ("SUCCESS", "green"),
    logging.WARNING: ("WARN", "yellow"),
    logging.ERROR: ("ERROR", "red"),
    logging.CRITICAL: ("ERROR", "red"),
}


class ColorFormatter(logging.Formatter):
    """Render records as ``[HH:MM:SS] [LEVEL] message``, colored by level."""

    def __init__(self, color: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        label, fg = _LEVEL_STYLES.get(record.levelno, (record.levelname, None))
        timestamp = self.formatTime(record, self.datefmt)
        line = f"[{timestamp}] [{label}] {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if self.color and fg:
            return click.style(line, fg=fg)
        return line


def log_success(logger: logging.Logger, message: str) -> None:
    logger.log(SUCCESS, message)


def setup_logging(debug: bool = False, color: bool | None = None) -> None:
    """Configure the ``devinit`` logger hierarchy.

    Safe to call more than once; the handler is replaced, not stacked.
    """
    logger = logging.getLogger("devinit")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if color is None:
        color = sys.stdout.isatty()

    for handler in list(logger.handlers):
        if getattr(handler, "_devinit", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter(color=color))
    handler._devinit = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


__all__ = ["SUCCESS", "ColorFormatter", "log_success", "setup_logging"]
