"""File processing logic for the XML to JSON converter."""
import os
import logging
import threading
from contextlib import contextmanager
from typing import Optional

from watchdog.events import FileSystemEventHandler

from ctrxml2json.models.schemas import (
    BatchSummary,
    ConversionOptions,
    ConversionResult,
    ConversionStatus,
    ParseErrorPolicy,
)
from ctrxml2json.handlers.xml_converter import XMLConversionError, convert_text
from ctrxml2json.utils.file_operations import (
    find_input_files,
    is_input_file_name,
    output_path_for,
    read_text,
    wait_for_file_access,
    write_locked,
)
from ctrxml2json.utils.sanitizer import sanitize_text

# Get loggers
app_logger = logging.getLogger('app')
error_logger = logging.getLogger('error')
debug_logger = logging.getLogger('debug')


def convert_file(file_path: str, options: Optional[ConversionOptions] = None) -> ConversionResult:
    """Convert one XML file into its sibling JSON file.

    Args:
        file_path: Path to the XML file
        options: Conversion options, defaults from config

    Returns:
        ConversionResult: CONVERTED, or FAILED with the error message. No
        output is written for a failed file.
    """
    options = options or ConversionOptions.from_config()
    output_path = output_path_for(file_path)
    file_name = os.path.basename(file_path)

    try:
        raw_text = read_text(file_path, options.input_encoding)
        debug_logger.debug(f"Read {len(raw_text)} characters from {file_name}")
        clean_text = sanitize_text(raw_text, options.ampersand_policy)
        json_text = convert_text(
            clean_text,
            ascii_only=options.ascii_only,
            source=file_name,
            escape_slashes=options.escape_slashes,
        )
        write_locked(output_path, json_text)
    except XMLConversionError as e:
        error_logger.error(f"Cannot convert {file_name}: {str(e)}")
        return ConversionResult(
            input_path=file_path, output_path=output_path,
            status=ConversionStatus.FAILED, error=str(e),
        )
    except OSError as e:
        error_logger.error(f"File error while converting {file_name}: {str(e)}")
        return ConversionResult(
            input_path=file_path, output_path=output_path,
            status=ConversionStatus.FAILED, error=f"{file_name}: {str(e)}",
        )

    app_logger.info(f"Converted {file_name} -> {os.path.basename(output_path)}")
    return ConversionResult(
        input_path=file_path, output_path=output_path, status=ConversionStatus.CONVERTED,
    )


def convert_directory(directory: str, options: Optional[ConversionOptions] = None) -> BatchSummary:
    """Convert every trial XML file in a directory.

    Args:
        directory: Folder holding NNNN-NNNNNN-NN.xml files
        options: Conversion options, defaults from config

    Returns:
        BatchSummary: One result per file attempted. With the ABORT policy
        the batch stops after the first failure.
    """
    options = options or ConversionOptions.from_config()
    summary = BatchSummary()

    input_files = find_input_files(directory)
    debug_logger.debug(f"Found {len(input_files)} trial files in {directory}")

    for file_path in input_files:
        result = convert_file(file_path, options)
        summary.results.append(result)
        if result.status == ConversionStatus.FAILED and options.on_parse_error == ParseErrorPolicy.ABORT:
            summary.aborted = True
            error_logger.error(f"Aborting batch after failure in {os.path.basename(file_path)}")
            break

    app_logger.info(
        f"Batch finished: {summary.converted} converted, {summary.failed} failed, "
        f"{len(input_files) - len(summary.results)} not attempted"
    )
    return summary


@contextmanager
def track_processing(handler, file_path):
    """Claim a file for processing and release it afterwards.

    Args:
        handler: The file handler instance
        file_path: Path to the file being processed

    Yields:
        bool: False when another thread already holds the file
    """
    with handler.processing_lock:
        claimed = file_path not in handler.processing_files
        if claimed:
            handler.processing_files.add(file_path)
    try:
        yield claimed
    finally:
        if claimed:
            with handler.processing_lock:
                handler.processing_files.discard(file_path)


class XMLFileHandler(FileSystemEventHandler):
    """Handler converting trial XML files as they appear in a watched folder."""

    def __init__(self, options: Optional[ConversionOptions] = None):
        super().__init__()
        self.options = options or ConversionOptions.from_config()
        self.processing_files = set()  # Track files being processed to avoid duplicates
        self.processing_lock = threading.Lock()

    def on_created(self, event):
        """Handle file creation events."""
        if event.is_directory:
            return
        self.process_file(os.path.abspath(event.src_path))

    def on_moved(self, event):
        """Handle files renamed or moved into the folder."""
        if event.is_directory:
            return
        self.process_file(os.path.abspath(event.dest_path))

    def process_file(self, file_path: str) -> Optional[ConversionResult]:
        """Convert a file if it is a trial XML file not already in progress.

        Args:
            file_path: Path reported by the observer

        Returns:
            ConversionResult, or None when the name does not match
        """
        if not is_input_file_name(os.path.basename(file_path)):
            return None

        output_path = output_path_for(file_path)

        with track_processing(self, file_path) as claimed:
            if not claimed:
                debug_logger.debug(f"Already processing {file_path}, skipping")
                return ConversionResult(
                    input_path=file_path, output_path=output_path,
                    status=ConversionStatus.SKIPPED, error="already in progress",
                )

            # Wait for file to be completely written and check access
            if not wait_for_file_access(file_path):
                return ConversionResult(
                    input_path=file_path, output_path=output_path,
                    status=ConversionStatus.SKIPPED, error="file not accessible",
                )
            return convert_file(file_path, self.options)
