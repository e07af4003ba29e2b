from __future__ import annotations
import logging

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "multipart")


def setup_console_logging(level: int | str = logging.INFO) -> None:
    """
    Call once at app start (API or CLI). Logs go to stderr.
    Calling again only adjusts the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if root.handlers:
        # already configured (avoid duplicates)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
