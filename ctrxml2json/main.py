"""Main entry point for the XML to JSON converter."""
import os
import sys
import time
import signal
import logging
import argparse
import traceback

from pydantic import ValidationError
from watchdog.observers.polling import PollingObserver

from ctrxml2json import config
from ctrxml2json.logger import setup_logging
from ctrxml2json.handlers.file_handler import XMLFileHandler, convert_directory, convert_file
from ctrxml2json.models.schemas import AmpersandPolicy, ConversionOptions, ConversionStatus, ParseErrorPolicy
from ctrxml2json.utils.file_operations import find_input_files
from ctrxml2json.utils.validators import InputPathError, check_input_path, check_system_requirements

# Global variables for graceful shutdown
observer = None
running = True


def signal_handler(sig, frame):
    """Handle termination signals for graceful shutdown."""
    global running
    logging.getLogger('app').info(f"Received signal {sig}, shutting down gracefully...")
    running = False


def build_parser():
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="ctrxml2json",
        description="Convert NNNN-NNNNNN-NN.xml trial result files to JSON files alongside them.",
    )
    parser.add_argument("path", nargs="?", help="directory with XML files, or a single XML file")
    parser.add_argument(
        "--on-parse-error",
        choices=[policy.value for policy in ParseErrorPolicy],
        help=f"skip failing files or abort the batch (default: {config.ON_PARSE_ERROR})",
    )
    parser.add_argument(
        "--ampersands",
        choices=[policy.value for policy in AmpersandPolicy],
        help=f"ampersand escaping (default: {config.AMPERSAND_POLICY})",
    )
    parser.add_argument(
        "--unicode", action="store_true",
        help="write non-ASCII characters as UTF-8 instead of \\u escapes",
    )
    parser.add_argument(
        "--watch", action="store_true",
        help="keep running and convert files as they appear in the directory",
    )
    return parser


def process_existing_files(event_handler, directory):
    """Convert the trial files already present in the watched folder.

    Args:
        event_handler: The file handler to use for processing
        directory: Watched folder

    Returns:
        int: Number of files processed
    """
    count = 0
    for file_path in find_input_files(directory):
        logging.getLogger('app').info(f"Processing existing file at startup: {os.path.basename(file_path)}")
        event_handler.process_file(file_path)
        count += 1
    return count


def install_signal_handlers():
    """Route termination signals to signal_handler.

    Returns:
        dict: The handlers that were installed before, by signal number
    """
    signals = [signal.SIGINT, signal.SIGTERM]
    if hasattr(signal, 'SIGHUP'):  # Not available on Windows
        signals.append(signal.SIGHUP)
    previous = {}
    for sig in signals:
        previous[sig] = signal.getsignal(sig)
        signal.signal(sig, signal_handler)
    return previous


def start_observer(event_handler, directory):
    """Start a polling observer on the folder, non-recursive."""
    new_observer = PollingObserver()
    new_observer.schedule(event_handler, directory, recursive=False)
    new_observer.start()
    return new_observer


def run_watcher(directory, options):
    """Watch a folder and convert trial files until a termination signal arrives.

    Returns:
        int: Process exit code
    """
    global observer, running

    app_logger = logging.getLogger('app')
    error_logger = logging.getLogger('error')

    running = True
    previous_handlers = install_signal_handlers()
    event_handler = XMLFileHandler(options)

    try:
        observer = start_observer(event_handler, directory)
        app_logger.info(f"Watching folder: {directory}")

        processed_count = process_existing_files(event_handler, directory)
        if processed_count > 0:
            app_logger.info(f"Processed {processed_count} existing files at startup")

        while running:
            time.sleep(config.WATCH_POLL_INTERVAL)
            if not observer.is_alive():
                error_logger.critical("Observer has died unexpectedly. Restarting...")
                observer = start_observer(event_handler, directory)
    except KeyboardInterrupt:
        app_logger.info("Process terminated by user")
    except Exception as e:
        error_logger.critical(f"Unhandled exception: {str(e)}\n{traceback.format_exc()}")
        return 1
    finally:
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)
            observer = None
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)
        app_logger.info("Watcher shutdown complete")

    return 0


def main(argv=None):
    """Run the converter from the command line.

    Returns:
        int: 0 when every file converted, 1 on usage errors or any failure
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.path is None:
        parser.print_usage(sys.stderr)
        return 1

    try:
        path = check_input_path(args.path)
    except InputPathError as e:
        print(str(e), file=sys.stderr)
        return 1

    try:
        options = ConversionOptions.from_config(
            on_parse_error=args.on_parse_error,
            ampersand_policy=args.ampersands,
            ascii_only=False if args.unicode else None,
        )
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    loggers = setup_logging()
    app_logger = loggers['app']
    error_logger = loggers['error']
    loggers['debug'].debug(f"Options: {options.model_dump()}")

    if not check_system_requirements(path):
        error_logger.critical("System requirements check failed. Exiting.")
        return 1

    if os.path.isfile(path):
        if args.watch:
            print(f"--watch needs a directory, not a file: {args.path}", file=sys.stderr)
            return 1
        result = convert_file(path, options)
        return 0 if result.status == ConversionStatus.CONVERTED else 1

    if args.watch:
        return run_watcher(path, options)

    app_logger.info(f"Converting trial files in {path}")
    summary = convert_directory(path, options)
    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
