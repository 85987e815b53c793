# emoji_dictionary/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

LOG_FILE_NAME = 'emoji_dictionary.log'


class LoggerManager:
    """
    Configures application-wide logging.

    Two handlers are attached to the root logger:
    1. Console Handler: short lines on stderr, INFO and above by default.
    2. Rotating File Handler: detailed lines in a log file next to the project,
       DEBUG and above, rotated at 5 MB with five backups.
    """

    def __init__(self, log_file_name: str = LOG_FILE_NAME, log_level=logging.DEBUG,
                 console_level=logging.INFO, log_dir: Path | None = None):
        """
        Args:
            log_file_name: The name of the log file.
            log_level: The base logging level captured by the root logger.
            console_level: The minimum level echoed to the console.
            log_dir: Where the log file goes; defaults to the project root.
        """
        base_dir = log_dir if log_dir is not None else Path(__file__).resolve().parents[2]
        self.log_file_path = base_dir / log_file_name
        self.log_level = log_level
        self.console_level = console_level
        self.root_logger = logging.getLogger()

    def setup(self):
        """Attaches the handlers to the root logger, once."""
        # Calling setup twice must not duplicate every log line.
        if self.root_logger.hasHandlers():
            return

        self.root_logger.setLevel(self.log_level)
        self.root_logger.addHandler(self._create_console_handler())
        self.root_logger.addHandler(self._create_file_handler())

        logging.debug(f"Logging configured. Writing detailed logs to {self.log_file_path}")

    # --- Handler factories ---

    def _create_console_handler(self) -> logging.StreamHandler:
        """Creates a handler for logging messages to the console."""
        # Short lines for whoever is watching the terminal.
        handler = logging.StreamHandler()
        handler.setLevel(self.console_level)
        formatter = logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        """Creates a rotating file handler for persistent logging."""
        # Everything, with file and line, capped at 5 MB per file.
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        )
        handler.setFormatter(formatter)
        return handler

# --- Public Entry Point ---
# The only function the GUI and CLI call; library modules just use getLogger(__name__).

def setup_logging(console_level=logging.INFO, log_dir: Path | None = None):
    """Initializes and configures the application-wide logging system."""
    manager = LoggerManager(console_level=console_level, log_dir=log_dir)
    manager.setup()
