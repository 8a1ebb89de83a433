"""Shared logging helpers for santapy."""

from __future__ import annotations

import logging
from typing import Final

# third-party loggers that report every request at INFO
NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Below DEBUG the HTTP libraries are held at WARNING so that ``santapy show``
    prints the assignment table and nothing else. Pass ``force=True`` to
    reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = logging.DEBUG if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
