"""Global logging and error handling utilities"""
import logging
import sys
import traceback

from constants import DEFAULT_LOG_LEVEL, LOG_FORMAT

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_error_reporter = None
_logger = logging.getLogger('Engine')


def configure_logging(level=DEFAULT_LOG_LEVEL):
    """Configure root logging the way the editor does on startup"""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)  # Output to console
        ]
    )


def set_error_reporter(reporter):
    """Set a callable(title, message) used to surface errors to the user"""
    global _error_reporter
    _error_reporter = reporter


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with optional user report in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to report (optional)
        title: Title for the report

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the full traceback
        - Hands user message or exception string to the error reporter
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    tb = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    _logger.error(f"{title}: {tb}")

    message = user_message if user_message else str(e)
    if _error_reporter:
        _error_reporter(title, message)
    else:
        _logger.error(f"ERROR REPORT (no reporter): {title} - {message}")

    # Re-raise so the caller can handle it appropriately
    raise e
