import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

# Constants
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5
LOG_FILE_NAME = "mdcraft.log"

def setup_logging(log_dir: Optional[Path] = None, debug_mode: bool = False):
    """
    Configure the root logger with an optional rotating file handler and a console handler.

    The console handler writes to stderr so rendered output on stdout stays clean.
    """
    root_logger = logging.getLogger()

    # Set base level
    root_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    # Formatter
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Clean up existing handlers to avoid duplicates when called twice
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

        # 1. Rotating File Handler
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG) # Always capture detailed logs to file
        root_logger.addHandler(file_handler)

    # 2. Console Handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    root_logger.addHandler(console_handler)

    logging.debug(f"Logging initialized. Log file: {log_file}")

    # Python-Markdown logs extension loading at DEBUG
    logging.getLogger("MARKDOWN").setLevel(logging.WARNING)
