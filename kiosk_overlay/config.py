"""
Configuration module for the Kiosk Overlay API
Contains logger setup and environment variables
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# -------------------------
# Logger Setup
# -------------------------
def setup_logger(
    name: str = __name__, log_file: str = "kiosk_overlay.log"
) -> logging.Logger:
    """
    Set up and return a logger with both file and console handlers

    Args:
        name: Logger name (usually __name__)
        log_file: Path to log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid adding duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    file_handler = logging.FileHandler(log_file, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float for {name}: {raw!r}, using {default}"
        )
        return default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid integer for {name}: {raw!r}, using {default}"
        )
        return default


LOG_FILE = os.getenv("LOG_FILE", "kiosk_overlay.log")

# Create the main application logger
logger = setup_logger("kiosk_overlay", LOG_FILE)

# -------------------------
# Environment Variables
# -------------------------
GEMINI_KEY = os.getenv("GEMINI_KEY")
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")

# overlay generation service (falls back to the in-process generator when unset)
OVERLAY_SERVICE_URL = os.getenv("OVERLAY_SERVICE_URL")
OVERLAY_SERVICE_KEY = os.getenv("OVERLAY_SERVICE_KEY")
OVERLAY_TIMEOUT_SECONDS = _get_float("OVERLAY_TIMEOUT_SECONDS", 120.0)
OVERLAY_MAX_ATTEMPTS = _get_int("OVERLAY_MAX_ATTEMPTS", 1)
OVERLAY_RETRY_BACKOFF_SECONDS = _get_float("OVERLAY_RETRY_BACKOFF_SECONDS", 1.0)
OVERLAY_DEFAULT_COMMENT = os.getenv("OVERLAY_DEFAULT_COMMENT")

# supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")


# Log configuration status
logger.info("Configuration loaded successfully")
logger.debug(f"GEMINI_KEY configured: {bool(GEMINI_KEY)}")
logger.debug(f"GEMINI_IMAGE_MODEL: {GEMINI_IMAGE_MODEL}")
logger.debug(f"OVERLAY_SERVICE_URL configured: {bool(OVERLAY_SERVICE_URL)}")
logger.debug(f"OVERLAY_SERVICE_KEY configured: {bool(OVERLAY_SERVICE_KEY)}")
logger.debug(f"OVERLAY_MAX_ATTEMPTS: {OVERLAY_MAX_ATTEMPTS}")
logger.debug(f"SUPABASE_URL configured: {bool(SUPABASE_URL)}")
logger.debug(f"SUPABASE_KEY configured: {bool(SUPABASE_KEY)}")
logger.debug(f"SUPABASE_SERVICE_KEY configured: {bool(SUPABASE_SERVICE_KEY)}")
