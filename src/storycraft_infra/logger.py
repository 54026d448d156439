import logging

from rich.logging import RichHandler


def setup_logger(
    name: str = "storycraft_infra", level: int = logging.WARNING
) -> logging.Logger:
    """Returns the named logger, attaching a RichHandler on first use."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = RichHandler(rich_tracebacks=True, markup=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


# WARNING by default; --verbose switches to DEBUG
logger = setup_logger()
