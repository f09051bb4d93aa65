import logging
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_file: Optional[Path] = None, *, verbose: bool = False) -> int:
    """
    Set up root logging for a CLI run and return the chosen level.

    Without ``log_file`` records go to stderr. With it, they go to the file
    only, so command output stays clean.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger()
    root.setLevel(level)
    if log_file is None:
        logging.basicConfig(level=level, format=CONSOLE_FORMAT)
        return level

    log_file = Path(log_file).expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(handler)
    return level


__all__ = ["configure_logging"]
