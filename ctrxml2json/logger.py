"""Logging configuration module for the XML to JSON converter."""
import os
import logging
from logging.handlers import RotatingFileHandler

from ctrxml2json import config


def _reset_handlers(logger):
    """Close and detach handlers left by an earlier setup call."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(logs_folder=None):
    """Set up logging with appropriate handlers and formatters.

    Args:
        logs_folder: Folder for the log files, defaults to config.LOGS_FOLDER

    Returns:
        dict: The 'app', 'error' and 'debug' loggers
    """
    logs_folder = logs_folder or config.LOGS_FOLDER
    os.makedirs(logs_folder, exist_ok=True)

    # Log file paths
    app_log_path = os.path.join(logs_folder, 'app.log')
    error_log_path = os.path.join(logs_folder, 'error.log')
    debug_log_path = os.path.join(logs_folder, 'debug.log')

    # Log formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s - %(message)s'
    )
    simple_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    for handler in list(root_logger.handlers):
        if getattr(handler, '_ctrxml2json', False):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler for important messages
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(simple_formatter)
    console_handler.setLevel(logging.INFO)
    console_handler._ctrxml2json = True
    root_logger.addHandler(console_handler)

    # 1. App Logger (INFO level)
    app_logger = logging.getLogger('app')
    _reset_handlers(app_logger)
    app_logger.setLevel(logging.INFO)
    app_handler = RotatingFileHandler(
        app_log_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
    )
    app_handler.setFormatter(simple_formatter)
    app_handler.setLevel(logging.INFO)
    app_logger.addHandler(app_handler)

    # 2. Error Logger (ERROR level)
    error_logger = logging.getLogger('error')
    _reset_handlers(error_logger)
    error_logger.setLevel(logging.ERROR)
    error_handler = RotatingFileHandler(
        error_log_path, maxBytes=2*1024*1024, backupCount=10, encoding='utf-8'
    )
    error_handler.setFormatter(detailed_formatter)
    error_handler.setLevel(logging.ERROR)
    error_logger.addHandler(error_handler)

    # 3. Debug Logger (DEBUG level)
    debug_logger = logging.getLogger('debug')
    _reset_handlers(debug_logger)
    debug_logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    debug_handler = RotatingFileHandler(
        debug_log_path, maxBytes=10*1024*1024, backupCount=3, encoding='utf-8'
    )
    debug_handler.setFormatter(detailed_formatter)
    debug_handler.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    debug_logger.addHandler(debug_handler)

    return {
        'app': app_logger,
        'error': error_logger,
        'debug': debug_logger
    }

