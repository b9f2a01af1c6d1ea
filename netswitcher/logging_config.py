"""
Logging setup for NetSwitcher.

Modules ask for a logger with get_logger(__name__) at import time. Handlers
are attached once, by the entry point (CLI group or menu bar agent), after
the config store has been read and the debug setting is known:

- a log file (DEBUG and above, always), by default ~/Library/Logs/netswitcher.log
- stderr (INFO and above, DEBUG when debug is on)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from . import config


class NetSwitcherLogger:
    """Owns the root logger handlers for the process."""

    _initialized = False

    @classmethod
    def setup(cls, debug: bool = False, log_file: Optional[Path] = None, force_reinit: bool = False) -> None:
        """
        Attach the file and stderr handlers to the root logger.

        Args:
            debug: Lower the stderr threshold to DEBUG
            log_file: Log file path; defaults to config.LOG_FILE
            force_reinit: Replace handlers installed by an earlier call
        """
        if cls._initialized and not force_reinit:
            return

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)

        file_handler = cls._file_handler(Path(log_file) if log_file else config.LOG_FILE)
        if file_handler is not None:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        root_logger.addHandler(console_handler)

        cls._initialized = True
        logging.getLogger(__name__).debug(f"Logging to {file_handler.baseFilename if file_handler else 'stderr only'}")

    @staticmethod
    def _file_handler(path: Path) -> Optional[logging.FileHandler]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path)
        except OSError as e:
            # Still usable with stderr alone
            print(f"Warning: Could not open log file {path}: {e}", file=sys.stderr)
            return None
        handler.setLevel(logging.DEBUG)
        return handler


def setup_logging(debug: bool = False, log_file: Optional[Path] = None, force_reinit: bool = False) -> None:
    """Set up logging for the process. Wrapper for NetSwitcherLogger.setup()."""
    NetSwitcherLogger.setup(debug=debug, log_file=log_file, force_reinit=force_reinit)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Module logger; does not install handlers."""
    return logging.getLogger(name)
