"""Logging setup for CLI"""

import logging


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Send DEBUG-level logs of the whole client to a file.

    Args:
        log_file: Path to debug log file

    Returns:
        The configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(file_handler)

    return logger


def setup_logging(debug: bool, log_level: str, log_file: str) -> logging.Logger:
    """
    Configure logging for a CLI run

    Args:
        debug: Whether debug mode is enabled
        log_level: Level name used when debug mode is off
        log_file: Debug log file path

    Returns:
        The configured root logger
    """
    if debug:
        logger = setup_debug_logger(log_file)
        logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        return logger

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')
    return logging.getLogger()
