import logging
import os
import sys


def configure_logging() -> None:
    """Send application logs to stdout at LOG_LEVEL (default INFO)."""
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(level)
    # Avoid duplicate lines when the server reloads the app
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
