"""File operation utilities for the XML to JSON converter."""
import os
import re
import time
import logging

from ctrxml2json import config

if os.name == 'posix':
    import fcntl
else:
    fcntl = None

# Get loggers
logger = logging.getLogger('debug')
error_logger = logging.getLogger('error')

INPUT_FILE_PATTERN = re.compile(config.INPUT_FILE_REGEX)


def is_input_file_name(file_name):
    """Check whether a file name has the NNNN-NNNNNN-NN.xml trial shape."""
    return INPUT_FILE_PATTERN.fullmatch(file_name) is not None


def find_input_files(directory):
    """List the trial XML files directly inside a directory.

    Args:
        directory: Folder to scan

    Returns:
        list: Full paths of matching regular files, sorted by name
    """
    matches = []
    for file in sorted(os.listdir(directory)):
        file_path = os.path.join(directory, file)
        if is_input_file_name(file) and os.path.isfile(file_path):
            matches.append(file_path)
        else:
            logger.debug(f"Ignoring non-matching entry: {file}")
    return matches


def output_path_for(input_path):
    """Return the sibling .json path for an input file."""
    base, _ = os.path.splitext(input_path)
    return base + config.OUTPUT_EXTENSION


def read_text(file_path, encoding=None):
    """Read a file as text; undecodable bytes become U+FFFD."""
    encoding = encoding or config.INPUT_ENCODING
    with open(file_path, 'r', encoding=encoding, errors='replace', newline='') as f:
        return f.read()


def write_locked(file_path, text):
    """Write text to a file while holding an exclusive lock on it.

    The file is opened without truncation, locked, and only then truncated
    and written, so a concurrent writer never interleaves with this one.

    Args:
        file_path: Destination path, overwritten if it exists
        text: Content to write, encoded as UTF-8

    Returns:
        int: Number of bytes written
    """
    data = text.encode('utf-8')
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT, 0o644)
    with os.fdopen(fd, 'wb') as f:
        if fcntl is not None:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        else:
            logger.debug(f"File locking unavailable, writing unlocked: {file_path}")
        try:
            f.truncate(0)
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        finally:
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    logger.debug(f"Wrote {len(data)} bytes to {file_path}")
    return len(data)


def wait_for_file_access(file_path, max_attempts=None, delay=None):
    """Wait for a file to be accessible with multiple retries.

    Args:
        file_path: Path to the file to check
        max_attempts: Maximum number of attempts to try accessing the file
        delay: Delay in seconds between attempts

    Returns:
        bool: True if file is accessible, False otherwise
    """
    max_attempts = max_attempts or config.FILE_ACCESS_MAX_ATTEMPTS
    delay = config.FILE_ACCESS_DELAY if delay is None else delay

    for attempt in range(max_attempts):
        if not os.path.exists(file_path):
            logger.debug(f"File does not exist yet (attempt {attempt+1}): {file_path}")
            time.sleep(delay)
            continue

        try:
            # Try to open the file to ensure it's not locked
            with open(file_path, 'rb') as f:
                f.read(1)
            return True
        except (PermissionError, OSError) as e:
            logger.debug(f"File not accessible yet (attempt {attempt+1}): {str(e)}")
            time.sleep(delay)

    error_logger.error(f"Cannot access file after {max_attempts} attempts: {file_path}")
    return False
