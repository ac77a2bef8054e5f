"""
Structured Logging System for the Inspection Intake service
Provides rotating file logs with immediate flush for real-time monitoring
"""
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler


class IntakeLogger:
    """Centralized logging with rotation and formatting"""

    def __init__(self, name="Inspection-Intake", log_dir="logs", log_level="INFO"):
        """
        Initialize logger with rotating file handlers

        Args:
            name: Logger name
            log_dir: Directory for log files
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

        # Clear any existing handlers
        self.logger.handlers.clear()

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        log_format = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # 1. Main rotating file handler (10MB per file, keep 5 files)
        main_handler = RotatingFileHandler(
            log_path / 'inspection_intake.log',
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        main_handler.setLevel(logging.DEBUG)
        main_handler.setFormatter(log_format)
        self.logger.addHandler(main_handler)

        # 2. Error-only log file (5MB per file, keep 3 files)
        error_handler = RotatingFileHandler(
            log_path / 'errors.log',
            maxBytes=5*1024*1024,
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(log_format)
        self.logger.addHandler(error_handler)

        # 3. Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(log_format)
        self.logger.addHandler(console_handler)

    def debug(self, message, component=""):
        """Log debug message"""
        self._log(logging.DEBUG, message, component)

    def info(self, message, component=""):
        """Log info message"""
        self._log(logging.INFO, message, component)

    def warning(self, message, component=""):
        """Log warning message"""
        self._log(logging.WARNING, message, component)

    def error(self, message, component="", exc_info=False):
        """Log error message"""
        self._log(logging.ERROR, message, component, exc_info=exc_info)

    def critical(self, message, component="", exc_info=False):
        """Log critical message"""
        self._log(logging.CRITICAL, message, component, exc_info=exc_info)

    def _log(self, level, message, component="", exc_info=False):
        """Internal logging method with component prefix"""
        if component:
            message = f"[{component}] {message}"

        self.logger.log(level, message, exc_info=exc_info)

        # Force immediate flush
        for handler in self.logger.handlers:
            handler.flush()

    def log_submission_start(self, store_name, item_type, has_photo):
        """Log a submission that passed validation"""
        self.info(
            f"Store '{store_name}' - {item_type} submission received (photo: {'yes' if has_photo else 'no'})",
            component="Submission"
        )

    def log_submission_rejected(self, reason):
        """Log a submission rejected by validation"""
        self.warning(f"Rejected submission: {reason}", component="Submission")

    def log_photo_stored(self, store_name, file_id, file_name):
        """Log a photo written to Drive"""
        self.info(
            f"Store '{store_name}' - Photo stored as '{file_name}' (file id {file_id})",
            component="Drive"
        )

    def log_row_appended(self, store_name, sheet_range, column_count):
        """Log a row appended to the inspection sheet"""
        self.info(
            f"Store '{store_name}' - Appended {column_count}-column row to {sheet_range}",
            component="Sheets"
        )

    def log_orphaned_upload(self, store_name, file_id, file_name, link):
        """Log a photo that is stored in Drive but has no sheet row"""
        self.error(
            f"ORPHANED UPLOAD - Store '{store_name}' - file '{file_name}' (id {file_id}, {link}) "
            f"has no inspection row; reconcile manually",
            component="Reconcile"
        )


# Global logger instance
_global_logger = None

def get_logger(log_level=None, log_dir=None):
    """Get or create global logger instance"""
    global _global_logger
    if _global_logger is None:
        from inspection_intake import config
        _global_logger = IntakeLogger(
            log_dir=log_dir or config.LOG_DIR,
            log_level=log_level or config.LOG_LEVEL,
        )
    return _global_logger
