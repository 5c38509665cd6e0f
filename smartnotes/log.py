"""
Logging setup for the command line. Library modules only create loggers;
handlers are installed here, on stderr so they don't mix with command output.
"""
from __future__ import annotations
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from . import config


def configure_logging(level: Optional[str] = None) -> None:
    level = level or config.log_level()
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    root = logging.getLogger("smartnotes")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.WARNING))
