"""Input and system validation utilities for the XML to JSON converter."""
import os
import sys
import logging

from ctrxml2json import config

logger = logging.getLogger('error')


class InputPathError(Exception):
    """Raised when the path given on the command line cannot be used."""


def check_input_path(path):
    """Make sure the path to convert exists.

    Args:
        path: Directory or single file given by the user

    Returns:
        str: The absolute path

    Raises:
        InputPathError: If nothing exists at the path
    """
    if not os.path.exists(path):
        raise InputPathError(f"Directory or file does not exist: {path}")
    return os.path.abspath(path)


def check_system_requirements(path):
    """Check if system meets requirements to run the converter.

    Args:
        path: Directory or file that will be converted

    Returns:
        bool: True if system meets requirements, False otherwise
    """
    if sys.version_info < config.MIN_PYTHON_VERSION:
        required = ".".join(str(part) for part in config.MIN_PYTHON_VERSION)
        logger.critical(f"Python {required} or higher is required")
        return False

    # Output files are written next to the input files
    folder = path if os.path.isdir(path) else os.path.dirname(path)
    if not os.access(folder, os.R_OK | os.W_OK):
        logger.critical(f"Insufficient permissions for folder '{folder}'. Need read/write access.")
        return False

    return True
