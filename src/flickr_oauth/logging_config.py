"""Logging setup for applications using flickr_oauth."""
import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = 'flickr_oauth.log'


def setup_logging(log_dir: Optional[str] = None, level: int = logging.DEBUG) -> logging.Logger:
    """Log the package to the console and, if log_dir is given, to a file."""
    logger = logging.getLogger("flickr_oauth")
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME)))

    # Replace handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_dir:
        logger.info(f"Logging to {os.path.join(log_dir, LOG_FILE_NAME)}")
    return logger
