"""Configuration module for the XML to JSON converter."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Application settings
DEBUG = os.environ.get("DEBUG", "False").lower() in ["true", "1", "yes"]

# Folder paths
LOGS_FOLDER = os.environ.get("LOGS_FOLDER", "logs")

# Input selection
INPUT_FILE_REGEX = r"^[0-9]{4}-[0-9]{6}-[0-9]{2}\.xml$"
OUTPUT_EXTENSION = ".json"
INPUT_ENCODING = os.environ.get("INPUT_ENCODING", "utf-8")

# Conversion policies
ON_PARSE_ERROR = os.environ.get("ON_PARSE_ERROR", "skip")  # skip | abort
AMPERSAND_POLICY = os.environ.get("AMPERSAND_POLICY", "legacy")  # legacy | preserve-entities
JSON_ASCII_ONLY = os.environ.get("JSON_ASCII_ONLY", "True").lower() in ["true", "1", "yes"]
JSON_ESCAPE_SLASHES = os.environ.get("JSON_ESCAPE_SLASHES", "True").lower() in ["true", "1", "yes"]

# Watch mode
WATCH_POLL_INTERVAL = float(os.environ.get("WATCH_POLL_INTERVAL", "1"))

# System requirements
MIN_PYTHON_VERSION = (3, 8)

# Retry settings
FILE_ACCESS_MAX_ATTEMPTS = int(os.environ.get("FILE_ACCESS_MAX_ATTEMPTS", "10"))
FILE_ACCESS_DELAY = float(os.environ.get("FILE_ACCESS_DELAY", "1"))
