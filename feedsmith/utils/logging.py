"""Logging configuration for feedsmith."""

import logging
import os
from datetime import datetime
from pathlib import Path

import logfire

from feedsmith.utils.files import get_logs_path


def setup_local_logging(level: str = 'DEBUG', prefix: str = 'run') -> Path:
    """Set up local file-based logging.

    Creates a log file in .feedsmith/logs/ and configures the root logger
    to write to it. Console output stays with the rich console.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO'). Defaults to 'DEBUG'.
        prefix: Prefix of the log file name. Defaults to 'run'.

    Returns:
        Path: The path to the created log file.

    """
    logs_dir = get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = logs_dir / f'{prefix}_{timestamp}.log'

    if level.upper() == 'ALL':
        numeric_level = logging.NOTSET
    else:
        numeric_level = getattr(logging, level.upper(), logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Don't stack handlers when a run sets up logging twice
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename).parent == logs_dir:
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(numeric_level)
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    return log_file


def configure_logfire(service_name: str = 'feedsmith') -> bool:
    """Configure logfire when a LOGFIRE_TOKEN is present in the environment.

    Without a token logfire spans and events stay local and nothing is sent.

    Args:
        service_name: Service name reported to logfire. Defaults to 'feedsmith'.

    Returns:
        True if logfire was configured with a token.

    """
    token = os.getenv('LOGFIRE_TOKEN')
    if not token:
        logging.getLogger(__name__).info('LOGFIRE_TOKEN not set - skipping logfire setup')
        return False
    logfire.configure(token=token, service_name=service_name)
    return True
