"""
Logging configuration for the canceller.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "info") -> None:
    """Send diagnostic logging to stderr; the build log itself goes to stdout."""
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # the kubernetes client is chatty at debug level
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))
