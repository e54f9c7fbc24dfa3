"""Console and debug-file logging helpers."""
import datetime
import os
import traceback
from . import config


def log(message: str) -> None:
    """Print a timestamped line to stdout."""
    print(f"[{datetime.datetime.now().isoformat(timespec='seconds')}] {message}")


def debug_log(message: str) -> None:
    """Write debug message to log file if debug mode is enabled."""
    if config.DEBUG_MODE:
        timestamp = datetime.datetime.now().isoformat(timespec='milliseconds')
        os.makedirs(os.path.dirname(config.DEBUG_LOG_PATH), exist_ok=True)
        with open(config.DEBUG_LOG_PATH, 'a') as f:
            f.write(f"[{timestamp}] {message}\n")


def log_error(context: str, error: BaseException) -> None:
    """Print an error with its traceback; also sent to the debug log."""
    log(f"Error in {context}: {error}")
    traceback.print_exc()
    debug_log(f"ERROR {context}: {error!r}")
