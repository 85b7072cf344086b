"""Logging setup for the site intelligence service.

Call ``configure_logging()`` once at the app entry point. It is idempotent:
if the root logger already has handlers, it only adjusts the level.
"""

import logging


def configure_logging(level: str | int = logging.INFO) -> None:
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(handler)

    root.setLevel(level)
